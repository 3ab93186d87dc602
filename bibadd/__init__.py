"""Resolve, fetch and edit BibTeX bibliographies."""

__version__ = "0.3.0"

from bibadd.core import (
    BibtexFormat,
    Collection,
    CollectionResolver,
    Entry,
    EntryKind,
    EntryType,
    FieldResolver,
    QuotedValue,
)
from bibadd.exceptions import BibaddError, ErrorKind

__all__ = [
    "BibaddError",
    "BibtexFormat",
    "Collection",
    "CollectionResolver",
    "Entry",
    "EntryKind",
    "EntryType",
    "ErrorKind",
    "FieldResolver",
    "QuotedValue",
    "__version__",
]
