"""Bibliographies of finished entries and their partial resolution."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator

from .models import Entry, FieldQuery
from .quoted import QuotedValue
from .resolver import FieldResolver

logger = logging.getLogger(__name__)

INTERACT_HINT = (
    "hint: consider enabling interactive mode (-i / --interact) to add missing "
    "fields."
)


class Collection:
    """Finished entries keyed by citation key, plus a dirty flag."""

    def __init__(self, entries: Iterable[Entry] = (), dirty: bool = False):
        self._entries: dict[str, Entry] = {entry.cite(): entry for entry in entries}
        self._dirty = dirty

    @staticmethod
    def try_resolve(
        resolvers: Iterable[FieldResolver],
    ) -> Collection | CollectionResolver:
        """Resolve every resolver into a collection.

        Returns:
            A collection when every resolver succeeded, otherwise a
            ``CollectionResolver`` holding the finished entries and the
            resolvers that still miss fields
        """
        return CollectionResolver(list(resolvers)).resolve()

    def dirty(self) -> bool:
        """Return whether the collection changed and clear the flag."""
        dirty, self._dirty = self._dirty, False
        return dirty

    def insert(self, entry: Entry) -> None:
        """Insert an entry, replacing any entry with the same key."""
        self._dirty = True
        self._entries[entry.cite()] = entry

    def remove(self, cite: str) -> bool:
        """Remove the entry whose key matches ``cite`` ignoring case."""
        lowered = cite.lower()
        for key in self._entries:
            if key.lower() == lowered:
                del self._entries[key]
                self._dirty = True
                return True
        return False

    def get(self, cite: str) -> Entry | None:
        if cite in self._entries:
            return self._entries[cite]
        lowered = cite.lower()
        for key, entry in self._entries.items():
            if key.lower() == lowered:
                return entry
        return None

    def entries(self) -> Iterator[Entry]:
        return iter(self._entries.values())

    def into_entries(self) -> list[Entry]:
        return list(self._entries.values())

    def merge(self, other: Collection) -> None:
        """Insert every entry of ``other`` into this collection."""
        for entry in other.entries():
            self.insert(entry)

    def contains_field(
        self, name: str, predicate: Callable[[QuotedValue], bool]
    ) -> bool:
        """Check whether any entry has a field ``name`` matching ``predicate``."""
        for entry in self._entries.values():
            value = entry.get_field(name)
            if value is not None and predicate(value):
                return True
        return False

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return self.entries()

    def __contains__(self, cite: object) -> bool:
        return isinstance(cite, str) and self.get(cite) is not None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Collection):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"Collection({len(self)} entries, dirty={self._dirty})"


class CollectionResolver:
    """Finished entries plus resolvers that still miss required fields."""

    def __init__(
        self,
        resolvers: list[FieldResolver],
        entries: list[Entry] | None = None,
        failed: bool = False,
    ):
        self._resolvers = resolvers
        self._entries = entries if entries is not None else []
        self._failed = failed

    def resolve(self) -> Collection | CollectionResolver:
        """Retry the outstanding resolvers.

        Entries that were already finished are kept as they are. A
        collection produced after a failed attempt starts out dirty because
        its resolvers were edited in between.
        """
        remaining: list[FieldResolver] = []
        for field_resolver in self._resolvers:
            result = field_resolver.resolve()
            if isinstance(result, Entry):
                self._entries.append(result)
            else:
                remaining.append(result)
        self._resolvers = remaining

        logger.debug(
            "Resolved %d entries, %d still incomplete",
            len(self._entries),
            len(self._resolvers),
        )

        if not self._resolvers:
            return Collection(self._entries, dirty=self._failed)

        self._failed = True
        return self

    def unresolved(self) -> Iterator[FieldResolver]:
        """Iterate the resolvers that still miss required fields."""
        return iter(self._resolvers)

    def resolved(self) -> Iterator[Entry]:
        return iter(self._entries)

    def checked_remove(self, index: int) -> Entry | FieldResolver | None:
        """Remove an item by its combined index.

        Finished entries are numbered first, followed by the unresolved
        resolvers.

        Returns:
            The removed entry or resolver, or None if the index is out of
            range
        """
        if index < 0:
            return None
        if index < len(self._entries):
            return self._entries.pop(index)
        index -= len(self._entries)
        if index < len(self._resolvers):
            return self._resolvers.pop(index)
        return None

    def __iter__(self) -> Iterator[FieldQuery]:
        yield from self._entries
        yield from self._resolvers

    def __len__(self) -> int:
        return len(self._entries) + len(self._resolvers)

    def __str__(self) -> str:
        reports = "\n".join(str(item) for item in self._resolvers)
        return f"{reports}\n{INTERACT_HINT}"

    def __repr__(self) -> str:
        return (
            f"CollectionResolver({len(self._entries)} resolved, "
            f"{len(self._resolvers)} unresolved)"
        )
