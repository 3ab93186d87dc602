"""Core bibliography model: values, entry kinds, resolution and BibTeX."""

from bibadd.core.bibtex import BibtexFormat, Format, merge_verbatim_chunks
from bibadd.core.collection import Collection, CollectionResolver
from bibadd.core.fields import REQUIRED_FIELDS, EntryKind, EntryType, required_fields
from bibadd.core.models import Entry, Field, FieldQuery
from bibadd.core.quoted import QuotedValue
from bibadd.core.resolver import (
    FieldResolver,
    RequiredField,
    resolver,
    resolver_with_cite,
)

__all__ = [
    "REQUIRED_FIELDS",
    "BibtexFormat",
    "Collection",
    "CollectionResolver",
    "Entry",
    "EntryKind",
    "EntryType",
    "Field",
    "FieldQuery",
    "FieldResolver",
    "Format",
    "QuotedValue",
    "RequiredField",
    "merge_verbatim_chunks",
    "required_fields",
    "resolver",
    "resolver_with_cite",
]
