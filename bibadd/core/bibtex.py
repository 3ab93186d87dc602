"""BibTeX reading and writing.

``BibtexFormat.parse`` turns BibTeX text into resolvers and resolves them
into a collection, or into a ``CollectionResolver`` when records miss
required fields. ``BibtexFormat.compose`` writes a collection back, one
group of entries per kind.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import ClassVar, Protocol

from bibadd.exceptions import BibaddError, ErrorKind
from bibadd.storage.parser import BibtexParser, Chunk, RawRecord

from .collection import Collection, CollectionResolver
from .fields import EntryKind, EntryType
from .models import Entry
from .quoted import QuotedValue
from .resolver import FieldResolver

logger = logging.getLogger(__name__)

# A verbatim chunk ending in this character was cut short by the grammar.
ESCAPE_MARKER = "/"

PARSE_ERROR_MESSAGE = "Unable to parse string as BibTeX"

# Entry type names as written in BibTeX files.
TYPE_NAMES: dict[str, EntryType] = {
    "article": EntryType.ARTICLE,
    "book": EntryType.BOOK,
    "booklet": EntryType.BOOKLET,
    "inbook": EntryType.BOOK_CHAPTER,
    "incollection": EntryType.BOOK_SECTION,
    "suppbook": EntryType.BOOK_SECTION,
    "inproceedings": EntryType.IN_PROCEEDINGS,
    "conference": EntryType.IN_PROCEEDINGS,
    "manual": EntryType.MANUAL,
    "mastersthesis": EntryType.MASTER_THESIS,
    "masterthesis": EntryType.MASTER_THESIS,
    "phdthesis": EntryType.PHD_THESIS,
    "proceedings": EntryType.PROCEEDINGS,
    "techreport": EntryType.TECH_REPORT,
    "report": EntryType.TECH_REPORT,
    "unpublished": EntryType.UNPUBLISHED,
}

KIND_LABELS: dict[EntryType, str] = {
    EntryType.ARTICLE: "article",
    EntryType.BOOK: "book",
    EntryType.BOOKLET: "booklet",
    EntryType.BOOK_CHAPTER: "inbook",
    EntryType.BOOK_PAGES: "inbook",
    EntryType.BOOK_SECTION: "incollection",
    EntryType.IN_PROCEEDINGS: "inproceedings",
    EntryType.MANUAL: "manual",
    EntryType.MASTER_THESIS: "mastersthesis",
    EntryType.PHD_THESIS: "phdthesis",
    EntryType.PROCEEDINGS: "proceedings",
    EntryType.TECH_REPORT: "techreport",
    EntryType.UNPUBLISHED: "unpublished",
}

# Field names that differ between BibTeX and entries.
FIELD_ALIASES = {"booktitle": "book_title"}
_FIELD_NAMES = {alias: name for name, alias in FIELD_ALIASES.items()}


class Format(Protocol):
    """A text format bibliographies can be read from and written to."""

    name: ClassVar[str]
    ext: ClassVar[str]

    @classmethod
    def parse(cls, text: str) -> Collection | CollectionResolver: ...

    @classmethod
    def compose(cls, collection: Collection) -> str: ...


def merge_verbatim_chunks(chunks: Iterable[Chunk]) -> list[tuple[bool, str]]:
    """Rejoin verbatim spans that were split at the escape marker.

    A verbatim chunk ending in ``/`` (as in ``{HTTP/}1{.}1``) continues
    through the following chunks: plain chunks are appended as they are and
    the span ends after the verbatim chunk that follows the second plain
    chunk.

    Args:
        chunks: Value chunks in order

    Returns:
        ``(is_verbatim, text)`` parts for ``QuotedValue.from_parts``
    """
    parts: list[tuple[bool, str]] = []
    remaining = iter(chunks)
    for chunk in remaining:
        if chunk.verbatim:
            parts.append((True, _merge_verbatim(chunk.text, remaining)))
        else:
            parts.append((False, chunk.text))
    return parts


def _merge_verbatim(text: str, remaining: Iterator[Chunk]) -> str:
    if text.endswith(ESCAPE_MARKER):
        return _merge_escaped(text, remaining)
    return text


def _merge_escaped(text: str, remaining: Iterator[Chunk]) -> str:
    plain_count = 0
    for chunk in remaining:
        if chunk.verbatim:
            text += _merge_verbatim(chunk.text, remaining)
            if plain_count == 2:
                return text
        else:
            plain_count += 1
            text += chunk.text
    return text


def field_name_from_bibtex(name: str) -> str:
    name = name.lower()
    return FIELD_ALIASES.get(name, name)


def field_name_to_bibtex(name: str) -> str:
    name = name.lower()
    return _FIELD_NAMES.get(name, name)


def kind_from_bibtex(record: RawRecord) -> EntryKind:
    """Select the entry kind for a record from its declared type."""
    type_name = record.entry_type.lower()
    if type_name == "inbook" and record.get("chapter") is None:
        if record.get("pages") is not None:
            return EntryKind.of(EntryType.BOOK_PAGES)
    entry_type = TYPE_NAMES.get(type_name)
    if entry_type is None:
        return EntryKind.other(record.entry_type)
    return EntryKind.of(entry_type)


def kind_to_bibtex(kind: EntryKind) -> str:
    if kind.is_other:
        return kind.name or ""
    return KIND_LABELS[kind.type]


def resolver_from_record(record: RawRecord) -> FieldResolver:
    """Map a raw record into a resolver for its kind."""
    field_resolver = FieldResolver(kind_from_bibtex(record), record.key)
    for raw_field in record.fields:
        value = QuotedValue.from_parts(merge_verbatim_chunks(raw_field.chunks))
        field_resolver.set_field(field_name_from_bibtex(raw_field.name), value)
    return field_resolver


def _wrap_verbatim(text: str) -> str:
    return "{" + text + "}"


class BibtexFormat:
    """BibTeX codec."""

    name: ClassVar[str] = "BibTeX"
    ext: ClassVar[str] = "bib"

    @classmethod
    def parse(cls, text: str) -> Collection | CollectionResolver:
        """Parse BibTeX text.

        Args:
            text: BibTeX source

        Returns:
            The resolved collection, or a resolver for the records that are
            missing required fields

        Raises:
            BibaddError: If the text is not valid BibTeX or holds no entries
        """
        if not text.strip():
            return Collection()

        parser = BibtexParser()
        records = parser.parse(text)

        for warning in parser.errors:
            if warning.severity != "error":
                logger.warning("BibTeX %s", warning)

        if parser.has_errors:
            first = next(e for e in parser.errors if e.severity == "error")
            raise BibaddError(ErrorKind.DESERIALIZE, PARSE_ERROR_MESSAGE, first)
        if not records:
            raise BibaddError(ErrorKind.DESERIALIZE, PARSE_ERROR_MESSAGE)

        logger.debug("Parsed %d BibTeX records", len(records))
        return Collection.try_resolve(resolver_from_record(r) for r in records)

    @classmethod
    def compose_entry(cls, entry: Entry) -> str:
        lines = [f"@{kind_to_bibtex(entry.kind)}{{{entry.cite()},\n"]
        for field in entry.fields():
            value = field.value.map_quoted(_wrap_verbatim)
            lines.append(f"    {field_name_to_bibtex(field.name)} = {{{value}}},\n")
        lines.append("}\n")
        return "".join(lines)

    @classmethod
    def compose(cls, collection: Collection) -> str:
        """Write a collection as BibTeX grouped by entry kind."""
        groups: dict[str, list[Entry]] = {}
        for entry in collection.entries():
            groups.setdefault(kind_to_bibtex(entry.kind), []).append(entry)

        output = []
        for label in sorted(groups):
            entries = sorted(groups[label], key=lambda e: e.cite())
            body = "".join(cls.compose_entry(entry) for entry in entries)
            output.append(f"% {label}\n{body}\n")
        return "".join(output)
