"""Google Books lookup by ISBN."""

from __future__ import annotations

import logging

import msgspec

from bibadd.core.collection import Collection, CollectionResolver
from bibadd.core.fields import EntryKind, EntryType
from bibadd.core.resolver import FieldResolver
from bibadd.exceptions import BibaddError, ErrorKind

from .client import Client, HttpClient

logger = logging.getLogger(__name__)

GOOGLE_BOOKS_URL = "https://www.googleapis.com/books/v1/volumes?q=isbn:"

DATE_FORMAT_MESSAGE = (
    "Date format was different then expected - aborting to avoid invalid "
    "dates in entry"
)


class VolumeInfo(msgspec.Struct):
    title: str
    publisher: str = ""
    authors: list[str] = msgspec.field(default_factory=list)
    published_date: str = msgspec.field(default="", name="publishedDate")


class Item(msgspec.Struct):
    volume_info: VolumeInfo = msgspec.field(name="volumeInfo")


class Volumes(msgspec.Struct):
    items: list[Item] = msgspec.field(default_factory=list)


def isbn_url(isbn: str) -> str:
    return GOOGLE_BOOKS_URL + isbn.replace("-", "")


def book_resolver(isbn: str, info: VolumeInfo) -> FieldResolver:
    """Build a book resolver from volume information.

    Raises:
        BibaddError: DESERIALIZE when the published date does not start
            with a numeric year
    """
    resolver = FieldResolver(EntryKind.of(EntryType.BOOK))

    # Year-Month-Day, the day is rarely present
    date_parts = info.published_date.split("-")
    year = date_parts[0]
    if not year.isdigit():
        raise BibaddError(ErrorKind.DESERIALIZE, DATE_FORMAT_MESSAGE)
    resolver.set_year(year)

    if len(date_parts) > 1 and date_parts[1].isdigit():
        resolver.set_field("month", date_parts[1])

    resolver.set_title(info.title)

    authors = [author for author in info.authors if author]
    if authors:
        resolver.set_author(",".join(authors))

    if info.publisher:
        resolver.set_publisher(info.publisher)
    resolver.set_field("isbn", isbn)
    return resolver


def entries_by_isbn(
    isbn: str, client: Client | None = None
) -> Collection | CollectionResolver:
    """Look up a book by ISBN.

    Raises:
        BibaddError: NO_VALUE when no book matches, DESERIALIZE when the
            response cannot be turned into an entry
    """
    if client is None:
        with HttpClient() as client:
            return entries_by_isbn(isbn, client)
    isbn = isbn.replace("-", "")
    logger.info("Searching for ISBN '%s' using the Google Books API", isbn)

    volumes = client.get_json(isbn_url(isbn), Volumes)
    if not volumes.items:
        raise BibaddError(ErrorKind.NO_VALUE, "No books found!")

    resolver = book_resolver(isbn, volumes.items[0].volume_info)
    return Collection.try_resolve([resolver])
