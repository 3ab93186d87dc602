"""Incremental construction of entries.

A ``FieldResolver`` collects field values for one entry kind and only
produces an ``Entry`` once every required field has been supplied. A failed
``resolve`` hands the resolver back untouched so callers can keep adding
fields and try again.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator

from .fields import EntryKind
from .models import Entry, Field, lookup_field
from .quoted import QuotedValue

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")

DEFAULT_CITE_AUTHOR = "Unknown"
DEFAULT_CITE_YEAR = "year"


class RequiredField:
    """Handle for one required field taken from a resolver.

    The field name is given back to the resolver when the handle is
    released without a value having been inserted, for example when a
    prompt is cancelled. Use it as a context manager to release it
    deterministically.
    """

    def __init__(self, resolver: FieldResolver, key: str):
        self._resolver = resolver
        self._key = key
        self._done = False

    @property
    def key(self) -> str:
        return self._key

    def insert(self, value: QuotedValue | str) -> None:
        """Set the field on the resolver and disarm the handle."""
        if self._done:
            raise RuntimeError(f"Required field '{self._key}' was already handled")
        self._resolver.set_field(self._key, value)
        self._done = True

    def release(self) -> None:
        """Give the field back to the resolver if nothing was inserted."""
        if self._done:
            return
        self._done = True
        self._resolver._restore_required(self._key)

    def __enter__(self) -> RequiredField:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __del__(self):
        self.release()


class FieldResolver:
    """Accumulates fields until an entry of ``kind`` can be built."""

    def __init__(self, kind: EntryKind, cite: str | None = None):
        self.kind = kind
        self._cite = cite
        # Popped from the end so fields are asked for in catalog order.
        self._required: list[str] = list(reversed(kind.required_fields))
        self._fields: dict[str, QuotedValue] = {}

    def cite(self) -> str:
        """Preview the citation key the resolved entry will get.

        An explicit key wins. Otherwise the key is the author field with
        whitespace removed followed by the year.
        """
        if self._cite is not None:
            return self._cite
        author = self.get_field("author")
        year = self.get_field("year")
        author_part = (
            _WHITESPACE.sub("", str(author)) if author else DEFAULT_CITE_AUTHOR
        )
        year_part = str(year) if year else DEFAULT_CITE_YEAR
        return f"{author_part}{year_part}"

    @property
    def title(self) -> str:
        value = self.get_field("title")
        return str(value) if value is not None else "No title"

    def get_field(self, name: str) -> QuotedValue | None:
        return lookup_field(self._fields, name)

    def fields(self) -> Iterator[Field]:
        for name, value in self._fields.items():
            yield Field(name, value)

    def required_fields(self) -> Iterator[str]:
        """Iterate the names of the required fields still missing."""
        return reversed(self._required)

    def set_field(self, name: str, value: QuotedValue | str) -> None:
        """Set a field, lowercasing its name. The last write wins."""
        name = name.lower()
        if isinstance(value, str):
            value = QuotedValue.new(value)
        if name in self._required:
            self._required.remove(name)
        self._fields[name] = value

    def set_author(self, value: QuotedValue | str) -> None:
        self.set_field("author", value)

    def set_book_title(self, value: QuotedValue | str) -> None:
        self.set_field("book_title", value)

    def set_chapter(self, value: QuotedValue | str) -> None:
        self.set_field("chapter", value)

    def set_institution(self, value: QuotedValue | str) -> None:
        self.set_field("institution", value)

    def set_journal(self, value: QuotedValue | str) -> None:
        self.set_field("journal", value)

    def set_pages(self, value: QuotedValue | str) -> None:
        self.set_field("pages", value)

    def set_publisher(self, value: QuotedValue | str) -> None:
        self.set_field("publisher", value)

    def set_school(self, value: QuotedValue | str) -> None:
        self.set_field("school", value)

    def set_title(self, value: QuotedValue | str) -> None:
        self.set_field("title", value)

    def set_year(self, value: QuotedValue | str) -> None:
        self.set_field("year", value)

    def add_required_fields(self, names: Iterable[str]) -> None:
        """Require extra fields on top of the ones the kind requires.

        Names that are already set or already pending are skipped.
        """
        for name in names:
            name = name.lower()
            if name in self._required or self.get_field(name) is not None:
                continue
            self._required.insert(0, name)

    def set_fields_from_entry(self, entry: Entry) -> None:
        """Copy every field of ``entry`` keeping the original names."""
        for field in entry.fields():
            lowered = field.name.lower()
            if lowered in self._required:
                self._required.remove(lowered)
            self._fields[field.name] = field.value

    def next_required_entry(self) -> RequiredField | None:
        """Take the next missing field name as a ``RequiredField`` handle.

        Returns:
            The handle, or None when nothing is missing
        """
        if not self._required:
            return None
        return RequiredField(self, self._required.pop())

    def _restore_required(self, name: str) -> None:
        if name not in self._required and self.get_field(name) is None:
            self._required.append(name)

    def resolve(self) -> Entry | FieldResolver:
        """Build the entry if every required field is set.

        Returns:
            The finished entry, or this resolver unchanged when fields are
            still missing
        """
        if self._required:
            logger.debug(
                "Entry %s is missing %s", self.cite(), list(self.required_fields())
            )
            return self
        return Entry(
            cite_key=self.cite(), kind=self.kind, field_values=dict(self._fields)
        )

    def __str__(self) -> str:
        lines = [f"error: missing required fields in {self.kind} entry", "found:"]
        for name, value in self._fields.items():
            lines.append(f"    {name}: {value}")
        lines.append("missing:")
        for name in self.required_fields():
            lines.append(f"    {name}")
        return "\n".join(lines) + "\n"

    def __repr__(self) -> str:
        return (
            f"FieldResolver(kind={self.kind!r}, cite={self._cite!r}, "
            f"missing={list(self.required_fields())!r})"
        )


def resolver(kind: EntryKind) -> FieldResolver:
    return FieldResolver(kind)


def resolver_with_cite(kind: EntryKind, cite: str) -> FieldResolver:
    return FieldResolver(kind, cite)
