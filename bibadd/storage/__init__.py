"""Reading and writing bibliography text.

- **Grammar**: BibTeX records split into fields and value chunks
- **Sources**: reader/writer protocols and an in-memory source
- **Files**: discovery, creation and atomic rewrites of .bib files
"""

from bibadd.storage.files import FormatFile, open_or_create
from bibadd.storage.parser import BibtexParser, Chunk, ParseError, RawField, RawRecord
from bibadd.storage.sources import (
    Reader,
    StringSource,
    Writer,
    read_collection,
    write_collection,
)

__all__ = [
    "BibtexParser",
    "Chunk",
    "FormatFile",
    "ParseError",
    "RawField",
    "RawRecord",
    "Reader",
    "StringSource",
    "Writer",
    "open_or_create",
    "read_collection",
    "write_collection",
]
