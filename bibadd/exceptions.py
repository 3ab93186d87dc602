"""Exceptions raised by bibadd.

Every hard failure surfaced to a caller is a ``BibaddError`` tagged with an
``ErrorKind``. Incomplete entries are not errors: they come back as
resolvers that can be completed and resolved again.
"""

from enum import Enum, unique


@unique
class ErrorKind(Enum):
    """Category of a hard failure."""

    IO = "io"
    DESERIALIZE = "deserialize"
    NO_VALUE = "no_value"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    ErrorKind.IO: "IO error",
    ErrorKind.DESERIALIZE: "Deserialize error",
    ErrorKind.NO_VALUE: "No value error",
}


class BibaddError(Exception):
    """Error carrying a kind, an optional message and an optional cause."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str | None = None,
        source: BaseException | None = None,
    ):
        self.kind = kind
        self.message = message
        self.source = source
        super().__init__(str(self))
        if source is not None:
            self.__cause__ = source

    @classmethod
    def wrap(
        cls,
        kind: ErrorKind,
        source: BaseException,
        message: str | None = None,
    ) -> "BibaddError":
        """Build an error around a caught exception."""
        return cls(kind, message, source)

    def __str__(self) -> str:
        text = f"{self.kind.label}: "
        if self.message:
            text += self.message
        if self.source is not None:
            if self.message:
                text += "\n"
            text += f"caused by {self.source}"
        return text

    def __repr__(self) -> str:
        return (
            f"BibaddError(kind={self.kind.name}, message={self.message!r}, "
            f"source={self.source!r})"
        )
