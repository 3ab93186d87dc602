"""Lookup services returning bibliography entries.

Every service takes an optional ``client``. Without one a default
``HttpClient`` is used.
"""

from bibadd.api.client import Client, HttpClient
from bibadd.api.crossref import EntryStub, entries_by_doi, entry_stubs_by_title
from bibadd.api.format_api import entries_by_url
from bibadd.api.google_books import entries_by_isbn
from bibadd.api.ietf import entries_by_rfc

__all__ = [
    "Client",
    "EntryStub",
    "HttpClient",
    "entries_by_doi",
    "entries_by_isbn",
    "entries_by_rfc",
    "entries_by_url",
    "entry_stubs_by_title",
]
