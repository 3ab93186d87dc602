"""Reader and writer abstractions for bibliography text."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from bibadd.core.bibtex import Format
    from bibadd.core.collection import Collection, CollectionResolver


@runtime_checkable
class Reader(Protocol):
    def read(self) -> str: ...


@runtime_checkable
class Writer(Protocol):
    def write(self, text: str) -> None: ...


class StringSource:
    """In-memory reader and writer."""

    def __init__(self, text: str = ""):
        self.text = text

    def read(self) -> str:
        return self.text

    def write(self, text: str) -> None:
        self.text = text


def read_collection(
    reader: Reader, fmt: type[Format]
) -> Collection | CollectionResolver:
    """Read text from ``reader`` and parse it with ``fmt``.

    Raises:
        BibaddError: If reading fails or the text cannot be parsed
    """
    return fmt.parse(reader.read())


def write_collection(
    writer: Writer, collection: Collection, fmt: type[Format]
) -> None:
    """Compose ``collection`` with ``fmt`` and write it to ``writer``."""
    writer.write(fmt.compose(collection))
