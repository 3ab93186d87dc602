"""Lookups of services that answer directly in a bibliography format."""

from __future__ import annotations

import logging

from bibadd.core.bibtex import BibtexFormat, Format
from bibadd.core.collection import Collection, CollectionResolver
from bibadd.exceptions import BibaddError, ErrorKind

from .client import Client, HttpClient

logger = logging.getLogger(__name__)


def entries_by_url(
    url: str,
    fmt: type[Format] = BibtexFormat,
    client: Client | None = None,
) -> Collection | CollectionResolver:
    """Fetch ``url`` and parse the response with ``fmt``.

    Raises:
        BibaddError: NO_VALUE when the response is empty, or any error
            raised by the client or the format
    """
    if client is None:
        with HttpClient() as client:
            return entries_by_url(url, fmt, client)
    text = client.get_text(url)
    if not text.strip():
        raise BibaddError(ErrorKind.NO_VALUE, "Request did not find any results")
    logger.debug("Parsing response from %s as %s", url, fmt.name)
    return fmt.parse(text)
