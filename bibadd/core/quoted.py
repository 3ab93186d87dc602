"""String values with verbatim spans.

BibTeX protects parts of a value from case changes and other style
normalization by wrapping them in braces. ``QuotedValue`` keeps the text
without those delimiters and remembers where the protected (verbatim) spans
were, so the value can be written back with the same protection.
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Iterable, Iterator

EscapePattern = str | Collection[str] | Callable[[str], bool]


def _matcher(pattern: EscapePattern) -> Callable[[str], bool]:
    if callable(pattern):
        return pattern
    if isinstance(pattern, str):
        return lambda char: char == pattern
    chars = frozenset(pattern)
    return lambda char: char in chars


class QuotedValue:
    """A text buffer plus markers delimiting its verbatim spans.

    ``markers`` is a sorted list of offsets into ``value`` with an even
    length. Each consecutive pair ``(start, end)`` encloses one verbatim
    span; everything else is plain text.

    Equality and hashing consider the text only, so two values spelling
    the same text with different quoting compare equal. Compare
    ``markers`` explicitly when the quoting matters.
    """

    __slots__ = ("value", "markers")

    def __init__(self, value: str = "", markers: Iterable[int] = ()):
        self.value = value
        self.markers = list(markers)

    @classmethod
    def new(cls, value: str) -> QuotedValue:
        """Create a plain value without verbatim spans."""
        return cls(value)

    @classmethod
    def quote(cls, value: str) -> QuotedValue:
        """Create a value that is verbatim from start to end."""
        return cls(value, [0, len(value)])

    @classmethod
    def from_escaped(cls, text: str, pattern: EscapePattern) -> QuotedValue:
        """Create a value from text using escape delimiters.

        Every character matching ``pattern`` is dropped from the buffer and
        its position in the resulting buffer is recorded as a marker.

        Args:
            text: Source text including the escape delimiters
            pattern: A single character, a collection of characters or a
                predicate deciding whether a character is a delimiter

        Returns:
            Value with the delimiters removed
        """
        is_escape = _matcher(pattern)
        buffer: list[str] = []
        markers: list[int] = []
        index = 0
        for char in text:
            if is_escape(char):
                markers.append(index)
            else:
                buffer.append(char)
                index += 1
        return cls("".join(buffer), markers)

    from_quoted = from_escaped

    @classmethod
    def from_parts(cls, parts: Iterable[tuple[bool, str]]) -> QuotedValue:
        """Create a value by joining ``(is_verbatim, text)`` parts."""
        buffer: list[str] = []
        markers: list[int] = []
        index = 0
        for verbatim, text in parts:
            start = index
            index += len(text)
            buffer.append(text)
            if verbatim:
                markers.extend((start, index))
        return cls("".join(buffer), markers)

    def map_quoted(self, func: Callable[[str], str]) -> str:
        """Rebuild the text, passing each verbatim span through ``func``.

        Plain spans are copied unchanged. The walk starts in plain mode and
        toggles at every marker.
        """
        if not self.value:
            return ""

        result: list[str] = []
        pos = 0
        verbatim = False
        for marker in self.markers:
            span = self.value[pos:marker]
            result.append(func(span) if verbatim else span)
            pos = marker
            verbatim = not verbatim

        if pos < len(self.value):
            tail = self.value[pos:]
            result.append(func(tail) if verbatim else tail)

        return "".join(result)

    def parts(self) -> Iterator[tuple[bool, str]]:
        """Yield ``(is_verbatim, text)`` pairs covering the whole buffer."""
        pos = 0
        verbatim = False
        for marker in self.markers:
            if marker > pos or verbatim:
                yield verbatim, self.value[pos:marker]
            pos = marker
            verbatim = not verbatim
        if pos < len(self.value):
            yield verbatim, self.value[pos:]

    def is_verbatim(self) -> bool:
        return bool(self.markers)

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"QuotedValue({self.value!r}, markers={self.markers!r})"

    def __len__(self) -> int:
        return len(self.value)

    def __bool__(self) -> bool:
        return bool(self.value)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, QuotedValue):
            return self.value == other.value
        if isinstance(other, str):
            return self.value == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.value)
