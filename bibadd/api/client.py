"""HTTP access for the lookup services."""

from __future__ import annotations

import logging
from typing import Protocol, TypeVar

import httpx
import msgspec

from bibadd import __version__
from bibadd.exceptions import BibaddError, ErrorKind

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TIMEOUT = 10.0
DEFAULT_USER_AGENT = f"bibadd/{__version__}"


class Client(Protocol):
    """Capability to fetch text and JSON documents by URL."""

    def get_text(self, url: str) -> str: ...

    def get_json(self, url: str, type: type[T]) -> T: ...


class HttpClient:
    """Client backed by ``httpx``.

    Args:
        timeout: Request timeout in seconds
        user_agent: Value of the User-Agent header
        transport: Optional transport, mostly for tests
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.BaseTransport | None = None,
    ):
        self.timeout = timeout
        self._client = httpx.Client(
            timeout=timeout,
            headers={"User-Agent": user_agent},
            follow_redirects=True,
            transport=transport,
        )

    def _get(self, url: str) -> httpx.Response:
        logger.debug("GET %s", url)
        try:
            response = self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise BibaddError.wrap(
                ErrorKind.IO,
                e,
                f"Request to {url} failed with status {e.response.status_code}",
            ) from e
        except httpx.RequestError as e:
            raise BibaddError.wrap(ErrorKind.IO, e, f"Request to {url} failed") from e
        return response

    def get_text(self, url: str) -> str:
        """Fetch the body of ``url`` as text.

        Raises:
            BibaddError: IO on transport or status failures, NO_VALUE when
                the body is empty
        """
        text = self._get(url).text
        if not text:
            raise BibaddError(ErrorKind.NO_VALUE, "Request returned an empty body")
        return text

    def get_json(self, url: str, type: type[T]) -> T:
        """Fetch ``url`` and decode the JSON body into ``type``.

        Raises:
            BibaddError: IO on transport or status failures, DESERIALIZE
                when the body does not match ``type``
        """
        content = self._get(url).content
        try:
            return msgspec.json.decode(content, type=type)
        except (msgspec.DecodeError, msgspec.ValidationError) as e:
            raise BibaddError.wrap(
                ErrorKind.DESERIALIZE, e, "Unexpected response format"
            ) from e

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
