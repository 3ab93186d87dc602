"""BibTeX grammar: splits text into raw records with chunked field values.

Features:
- @string definitions expanded in field values
- Concatenation with #
- Braced, quoted and bare (number or macro) values
- @comment and @preamble blocks skipped
- Error recovery so every problem in a file is reported

Field values are returned as chunks. Text at the top brace level of a value
is a plain chunk, while the content of each nested brace group is a
verbatim chunk.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import NamedTuple

logger = logging.getLogger(__name__)


class TokenType(Enum):
    """BibTeX token types."""

    AT = auto()
    LBRACE = auto()
    RBRACE = auto()
    LPAREN = auto()
    RPAREN = auto()
    COMMA = auto()
    EQUALS = auto()
    CONCAT = auto()
    QUOTE = auto()
    IDENTIFIER = auto()
    NUMBER = auto()
    UNKNOWN = auto()
    EOF = auto()


@dataclass
class Token:
    """A lexical token with position."""

    type: TokenType
    value: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.type.name}({self.value!r}) at {self.line}:{self.column}"


@dataclass
class ParseError(Exception):
    """Parse error with detailed location."""

    message: str
    line: int
    column: int
    severity: str = "error"  # error, warning

    def __str__(self) -> str:
        prefix = f"[{self.severity.upper()}] " if self.severity != "error" else ""
        return f"{prefix}Line {self.line}, column {self.column}: {self.message}"


class Chunk(NamedTuple):
    """A piece of a field value."""

    verbatim: bool
    text: str


@dataclass
class RawField:
    name: str
    chunks: list[Chunk]


@dataclass
class RawRecord:
    """An entry as written, before it is mapped to an entry kind."""

    entry_type: str
    key: str | None
    fields: list[RawField] = field(default_factory=list)
    line: int = 0

    def get(self, name: str) -> RawField | None:
        name = name.lower()
        for raw_field in self.fields:
            if raw_field.name == name:
                return raw_field
        return None


_SINGLE_CHAR_TOKENS = {
    "@": TokenType.AT,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    ",": TokenType.COMMA,
    "=": TokenType.EQUALS,
    "#": TokenType.CONCAT,
    '"': TokenType.QUOTE,
}

_CLOSING = {TokenType.LBRACE: TokenType.RBRACE, TokenType.LPAREN: TokenType.RPAREN}

_KEY_TERMINATORS = set(",}) \t\r\n")


class BibtexLexer:
    """On-demand tokenizer.

    Tokens are produced one at a time so the parser can switch to reading
    raw value text right after an opening brace or quote.
    """

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.line = 1
        self.column = 1

    def current_char(self) -> str | None:
        if self.pos >= len(self.text):
            return None
        return self.text[self.pos]

    def advance(self, count: int = 1) -> str:
        result = ""
        for _ in range(count):
            if self.pos >= len(self.text):
                break
            char = self.text[self.pos]
            result += char
            self.pos += 1
            if char == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
        return result

    def read_until(self, predicate) -> str:
        start = self.pos
        while self.current_char() and predicate(self.current_char()):
            self.advance()
        return self.text[start : self.pos]

    def skip_whitespace(self) -> None:
        while (char := self.current_char()) is not None:
            if char.isspace():
                self.advance()
            elif char == "%":
                self.read_until(lambda c: c != "\n")
            else:
                break

    def skip_to_record(self) -> None:
        """Skip free text up to the next ``@``."""
        self.read_until(lambda c: c != "@")

    def read_identifier(self) -> str:
        return self.read_until(lambda c: c.isalnum() or c in "_-:./+")

    def read_key(self) -> str:
        return self.read_until(lambda c: c not in _KEY_TERMINATORS)

    def next_token(self) -> Token:
        self.skip_whitespace()
        line, column = self.line, self.column
        char = self.current_char()

        if char is None:
            return Token(TokenType.EOF, "", line, column)
        if char in _SINGLE_CHAR_TOKENS:
            return Token(_SINGLE_CHAR_TOKENS[char], self.advance(), line, column)
        if char.isdigit():
            number = self.read_until(str.isdigit)
            if self.current_char() and self.current_char().isalpha():
                number += self.read_identifier()
                return Token(TokenType.IDENTIFIER, number, line, column)
            return Token(TokenType.NUMBER, number, line, column)
        if char.isalpha() or char == "_":
            return Token(TokenType.IDENTIFIER, self.read_identifier(), line, column)
        return Token(TokenType.UNKNOWN, self.advance(), line, column)

    def read_delimited_chunks(self, closing: str) -> list[Chunk] | None:
        """Read value text up to ``closing`` at the top brace level.

        The opening delimiter must already be consumed. Backslash escapes
        are kept as written and never open or close a group.

        Returns:
            The chunks, or None if the text ended before the value did
        """
        chunks: list[Chunk] = []
        plain: list[str] = []
        group: list[str] = []
        depth = 0

        while (char := self.current_char()) is not None:
            if char == "\\":
                escaped = self.advance(2)
                (group if depth else plain).append(escaped)
                continue

            if depth == 0 and char == closing:
                self.advance()
                if plain:
                    chunks.append(Chunk(False, "".join(plain)))
                return chunks

            self.advance()
            if char == "{":
                depth += 1
                if depth == 1:
                    if plain:
                        chunks.append(Chunk(False, "".join(plain)))
                        plain = []
                    continue
            elif char == "}":
                depth -= 1
                if depth == 0:
                    chunks.append(Chunk(True, "".join(group)))
                    group = []
                    continue
                if depth < 0:
                    return None

            (group if depth else plain).append(char)

        return None


class BibtexParser:
    """BibTeX parser with error recovery."""

    def __init__(self):
        self.lexer = BibtexLexer("")
        self.token = Token(TokenType.EOF, "", 1, 1)
        self.records: list[RawRecord] = []
        self.errors: list[ParseError] = []
        self.string_defs: dict[str, list[Chunk]] = {}

    @property
    def has_errors(self) -> bool:
        return any(error.severity == "error" for error in self.errors)

    def advance(self) -> Token:
        token = self.token
        self.token = self.lexer.next_token()
        return token

    def error(self, message: str, severity: str = "error", recover: bool = True):
        """Record parse error."""
        error = ParseError(message, self.token.line, self.token.column, severity)
        self.errors.append(error)
        logger.debug("BibTeX %s", error)

        if recover and severity == "error":
            self.recover()

    def recover(self):
        """Recover from parse error by skipping to the next record."""
        self.lexer.skip_to_record()
        self.advance()

    def parse(self, text: str) -> list[RawRecord]:
        """Parse BibTeX text into raw records."""
        self.lexer = BibtexLexer(text)
        self.records = []
        self.errors = []
        self.string_defs = {}

        self.lexer.skip_to_record()
        self.advance()

        while self.token.type != TokenType.EOF:
            if self.token.type == TokenType.AT:
                self.advance()
                self.parse_at_command()
            else:
                self.lexer.skip_to_record()
                self.advance()

        return self.records

    def parse_at_command(self):
        """Parse @ command (entry, string, comment, preamble)."""
        if self.token.type != TokenType.IDENTIFIER:
            self.error("Expected entry type after @")
            return

        command = self.token.value.lower()
        if command == "string":
            self.advance()
            self.parse_string_def()
        elif command in {"comment", "preamble"}:
            self.skip_block()
        else:
            self.parse_entry()

    def open_block(self) -> TokenType | None:
        """Get the closing delimiter matching the current token.

        The lexer is left right after the opening delimiter.
        """
        return _CLOSING.get(self.token.type)

    def parse_entry(self):
        """Parse bibliography entry."""
        entry_token = self.advance()

        closing = self.open_block()
        if closing is None:
            self.error(f"Expected {{ or ( after entry type '{entry_token.value}'")
            return

        # The key is read raw since it may contain characters that are not
        # valid in identifiers.
        self.lexer.skip_whitespace()
        key = self.lexer.read_key() or None
        self.advance()

        if key is None:
            self.error("Missing citation key", severity="warning")

        record = RawRecord(entry_token.value, key, line=entry_token.line)

        if self.token.type == TokenType.COMMA:
            self.advance()
        elif self.token.type != closing:
            self.error("Expected comma after citation key")
            return

        if self.parse_fields(record, closing):
            self.records.append(record)

    def parse_fields(self, record: RawRecord, closing: TokenType) -> bool:
        """Parse entry fields up to the closing delimiter."""
        while True:
            if self.token.type == closing:
                self.advance()
                return True
            if self.token.type == TokenType.EOF:
                self.error("Unexpected end of file in entry")
                return False
            if self.token.type == TokenType.COMMA:
                self.advance()
                continue
            if self.token.type != TokenType.IDENTIFIER:
                self.error(f"Expected field name, got {self.token.type.name}")
                return False

            name = self.advance().value.lower()

            if self.token.type != TokenType.EQUALS:
                self.error(f"Expected = after field name '{name}'")
                return False
            self.advance()

            chunks = self.parse_field_value()
            if chunks is None:
                return False

            if record.get(name) is not None:
                self.error(
                    f"Duplicate field '{name}' in entry '{record.key}'",
                    severity="warning",
                )
            record.fields.append(RawField(name, chunks))

            if self.token.type not in {TokenType.COMMA, closing}:
                self.error("Expected comma or closing delimiter")
                return False

    def parse_field_value(self) -> list[Chunk] | None:
        """Parse field value with concatenation support."""
        chunks: list[Chunk] = []

        while True:
            token = self.token

            if token.type == TokenType.LBRACE:
                part = self.lexer.read_delimited_chunks("}")
            elif token.type == TokenType.QUOTE:
                part = self.lexer.read_delimited_chunks('"')
            elif token.type == TokenType.NUMBER:
                part = [Chunk(False, token.value)]
            elif token.type == TokenType.IDENTIFIER:
                # Undefined macros are kept as written
                part = self.string_defs.get(
                    token.value.lower(), [Chunk(False, token.value)]
                )
            else:
                self.error(f"Expected field value, got {token.type.name}")
                return None

            if part is None:
                self.error("Unbalanced braces in field value")
                return None

            chunks.extend(part)
            self.advance()

            if self.token.type == TokenType.CONCAT:
                self.advance()
            else:
                return chunks

    def parse_string_def(self):
        """Parse @string definition."""
        closing = self.open_block()
        if closing is None:
            self.error("Expected { or ( after @string")
            return

        self.advance()
        if self.token.type != TokenType.IDENTIFIER:
            self.error("Expected string name")
            return
        name = self.advance().value.lower()

        if self.token.type != TokenType.EQUALS:
            self.error("Expected = after string name")
            return
        self.advance()

        chunks = self.parse_field_value()
        if chunks is None:
            return
        self.string_defs[name] = chunks

        if self.token.type != closing:
            self.error("Expected closing delimiter after @string")
            return
        self.advance()

    def skip_block(self):
        """Skip a @comment or @preamble block."""
        self.advance()
        closing = {TokenType.LBRACE: "}", TokenType.LPAREN: ")"}.get(self.token.type)
        if closing is None:
            return

        if self.lexer.read_delimited_chunks(closing) is None:
            self.error("Unbalanced braces in block")
            return
        self.advance()
