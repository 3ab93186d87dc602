"""Crossref lookups by DOI and by title."""

from __future__ import annotations

import logging
import urllib.parse

import msgspec

from bibadd.core.bibtex import BibtexFormat
from bibadd.core.collection import Collection, CollectionResolver
from bibadd.exceptions import BibaddError, ErrorKind

from .client import Client, HttpClient
from .format_api import entries_by_url

logger = logging.getLogger(__name__)

CROSSREF_URL = "https://api.crossref.org/works"


class EntryStub(msgspec.Struct, frozen=True):
    """A search hit: a DOI and its title."""

    doi: str = msgspec.field(name="DOI")
    title: list[str] = msgspec.field(default_factory=list)

    @property
    def first_title(self) -> str:
        return self.title[0] if self.title else ""


class _Message(msgspec.Struct):
    items: list[EntryStub] = msgspec.field(default_factory=list)


class _QueryResult(msgspec.Struct):
    message: _Message


def doi_url(doi: str) -> str:
    return f"{CROSSREF_URL}/{doi}/transform/application/x-bibtex"


def title_query_url(title: str) -> str:
    return f"{CROSSREF_URL}?query.title={urllib.parse.quote(title)}&select=DOI,title"


def entries_by_doi(
    doi: str, client: Client | None = None
) -> Collection | CollectionResolver:
    """Fetch the BibTeX record Crossref holds for ``doi``."""
    logger.info("Searching for DOI '%s' using the Crossref API", doi)
    return entries_by_url(doi_url(doi), BibtexFormat, client)


def entry_stubs_by_title(title: str, client: Client | None = None) -> list[EntryStub]:
    """Search Crossref for works matching ``title``.

    Raises:
        BibaddError: NO_VALUE when nothing matches
    """
    if client is None:
        with HttpClient() as client:
            return entry_stubs_by_title(title, client)
    logger.info("Searching for title '%s' using the Crossref API", title)
    result = client.get_json(title_query_url(title), _QueryResult)
    if not result.message.items:
        raise BibaddError(
            ErrorKind.NO_VALUE, f"No entries found with a title of {title}"
        )
    return result.message.items
