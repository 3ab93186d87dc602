"""Entry kinds and the fields each kind requires."""

from __future__ import annotations

import re
from enum import Enum, unique

import msgspec


@unique
class EntryType(Enum):
    """Closed catalog of entry kinds plus the open ``OTHER`` catch-all."""

    ARTICLE = "article"
    BOOK = "book"
    BOOKLET = "booklet"
    BOOK_CHAPTER = "book_chapter"
    BOOK_PAGES = "book_pages"
    BOOK_SECTION = "book_section"
    IN_PROCEEDINGS = "in_proceedings"
    MANUAL = "manual"
    MASTER_THESIS = "master_thesis"
    PHD_THESIS = "phd_thesis"
    PROCEEDINGS = "proceedings"
    TECH_REPORT = "tech_report"
    UNPUBLISHED = "unpublished"
    OTHER = "other"


# Required fields per entry type, in the order they are asked for and written.
REQUIRED_FIELDS: dict[EntryType, tuple[str, ...]] = {
    EntryType.ARTICLE: ("author", "title", "journal", "year"),
    EntryType.BOOK: ("author", "title", "publisher", "year"),
    EntryType.BOOKLET: ("title",),
    EntryType.BOOK_CHAPTER: ("author", "title", "chapter", "publisher", "year"),
    EntryType.BOOK_PAGES: ("author", "title", "pages", "publisher", "year"),
    EntryType.BOOK_SECTION: ("author", "title", "book_title", "publisher", "year"),
    EntryType.IN_PROCEEDINGS: ("author", "title", "book_title", "year"),
    EntryType.MANUAL: ("title",),
    EntryType.MASTER_THESIS: ("author", "title", "school", "year"),
    EntryType.PHD_THESIS: ("author", "title", "school", "year"),
    EntryType.PROCEEDINGS: ("title", "year"),
    EntryType.TECH_REPORT: ("author", "title", "institution", "year"),
    EntryType.UNPUBLISHED: ("author", "title"),
    EntryType.OTHER: ("title",),
}

_SEPARATORS = re.compile(r"[\s_\-]+")

# Labels accepted on the command line that do not match an enum value once
# separators are removed.
_LABEL_ALIASES = {
    "mastersthesis": EntryType.MASTER_THESIS,
}


def required_fields(entry_type: EntryType) -> tuple[str, ...]:
    """Get the required field names for an entry type."""
    return REQUIRED_FIELDS[entry_type]


class EntryKind(msgspec.Struct, frozen=True):
    """The kind of an entry.

    Catalog kinds carry only their ``type``. ``OTHER`` kinds also keep the
    name they were declared with so it can be written back unchanged.
    """

    type: EntryType
    name: str | None = None

    @classmethod
    def of(cls, entry_type: EntryType) -> EntryKind:
        if entry_type is EntryType.OTHER:
            raise ValueError("Other kinds need a name, use EntryKind.other()")
        return cls(entry_type)

    @classmethod
    def other(cls, name: str) -> EntryKind:
        return cls(EntryType.OTHER, name)

    @classmethod
    def parse(cls, label: str) -> EntryKind:
        """Parse a human written label such as ``book chapter``.

        Unknown labels become ``Other`` kinds named after the label.
        """
        normalized = _SEPARATORS.sub("", label.strip().lower())
        for entry_type in EntryType:
            if entry_type is EntryType.OTHER:
                continue
            if entry_type.value.replace("_", "") == normalized:
                return cls(entry_type)
        if normalized in _LABEL_ALIASES:
            return cls(_LABEL_ALIASES[normalized])
        return cls.other(label.strip())

    @property
    def required_fields(self) -> tuple[str, ...]:
        return required_fields(self.type)

    @property
    def is_other(self) -> bool:
        return self.type is EntryType.OTHER

    def __str__(self) -> str:
        if self.is_other:
            return self.name or ""
        return self.type.value.replace("_", " ")
