"""Finished bibliography entries and the query view shared with resolvers.

Key components:
- Field: a name/value pair
- Entry: an immutable, complete entry created by a FieldResolver
- FieldQuery: read access common to entries and unresolved resolvers
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol, runtime_checkable

import msgspec

from .fields import EntryKind
from .quoted import QuotedValue


class Field(msgspec.Struct, frozen=True):
    """A single named field value."""

    name: str
    value: QuotedValue


@runtime_checkable
class FieldQuery(Protocol):
    """Read-only view over an entry, resolved or not."""

    @property
    def title(self) -> str: ...

    def cite(self) -> str: ...

    def get_field(self, name: str) -> QuotedValue | None: ...

    def fields(self) -> Iterator[Field]: ...


def lookup_field(
    fields: dict[str, QuotedValue], name: str
) -> QuotedValue | None:
    """Find a field by name, ignoring case."""
    if name in fields:
        return fields[name]
    lowered = name.lower()
    for key, value in fields.items():
        if key.lower() == lowered:
            return value
    return None


class Entry(msgspec.Struct, frozen=True, kw_only=True):
    """A complete bibliography entry.

    Entries are only built by ``FieldResolver.resolve`` once every required
    field is present. The citation key changes only through ``renamed``.
    """

    cite_key: str
    kind: EntryKind
    field_values: dict[str, QuotedValue] = msgspec.field(default_factory=dict)

    def cite(self) -> str:
        return self.cite_key

    @property
    def title(self) -> str:
        value = self.get_field("title")
        return str(value) if value is not None else "No title"

    def get_field(self, name: str) -> QuotedValue | None:
        return lookup_field(self.field_values, name)

    def fields(self) -> Iterator[Field]:
        """Iterate fields, required ones first in catalog order."""
        required = self.kind.required_fields
        seen = set()
        for name in required:
            value = self.get_field(name)
            if value is not None:
                seen.add(name)
                yield Field(name, value)
        for name, value in self.field_values.items():
            if name.lower() not in seen:
                yield Field(name, value)

    def optional_fields(self) -> dict[str, QuotedValue]:
        required = set(self.kind.required_fields)
        return {
            name: value
            for name, value in self.field_values.items()
            if name.lower() not in required
        }

    def renamed(self, cite: str) -> Entry:
        """Return a copy of this entry under a new citation key."""
        return msgspec.structs.replace(self, cite_key=cite)
