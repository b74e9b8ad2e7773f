"""
Lexer for QuickApp scripts.

Scripts use a small Kotlin-style call syntax: identifiers, string and integer
literals, parentheses, braces, commas, ``=`` and statement separators. Line and
block comments are skipped. Newlines are significant as separators and are
emitted as NEWLINE tokens.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from ...core.exceptions import ParseError

PUNCTUATION = {
    "(": "LPAREN",
    ")": "RPAREN",
    "{": "LBRACE",
    "}": "RBRACE",
    ",": "COMMA",
    "=": "EQUALS",
    ";": "SEMI",
    ".": "DOT",
    "*": "STAR",
}

ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    '"': '"',
    "\\": "\\",
    "$": "$",
}


@dataclass
class Token:
    type: str
    value: Optional[str]
    line: int
    column: int

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"Token({self.type}, {self.value!r}, {self.line}:{self.column})"


class Lexer:
    """Turns script text into a flat token list ending with EOF."""

    def __init__(self, source: str, filename: str = "<script>") -> None:
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.column = 1

    def tokenize(self) -> List[Token]:
        tokens: List[Token] = []
        while self.pos < len(self.source):
            char = self.source[self.pos]

            if char == "\n":
                tokens.append(Token("NEWLINE", None, self.line, self.column))
                self._advance()
                continue
            if char in " \t\r\ufeff":
                self._advance()
                continue
            if self.source.startswith("//", self.pos):
                self._skip_line_comment()
                continue
            if self.source.startswith("/*", self.pos):
                self._skip_block_comment()
                continue
            if char == '"':
                tokens.append(self._read_string())
                continue
            if "0" <= char <= "9":
                tokens.append(self._read_number())
                continue
            if char.isalpha() or char == "_":
                tokens.append(self._read_identifier())
                continue
            if char in PUNCTUATION:
                tokens.append(Token(PUNCTUATION[char], char, self.line, self.column))
                self._advance()
                continue
            raise ParseError(
                message=f"Unexpected character '{char}'",
                line=self.line,
                column=self.column,
            )

        tokens.append(Token("EOF", None, self.line, self.column))
        return tokens

    def _advance(self, count: int = 1) -> None:
        for _ in range(count):
            if self.source[self.pos] == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def _skip_line_comment(self) -> None:
        while self.pos < len(self.source) and self.source[self.pos] != "\n":
            self._advance()

    def _skip_block_comment(self) -> None:
        start_line, start_col = self.line, self.column
        self._advance(2)
        while self.pos < len(self.source):
            if self.source.startswith("*/", self.pos):
                self._advance(2)
                return
            self._advance()
        raise ParseError(message="Unterminated block comment", line=start_line, column=start_col)

    def _read_string(self) -> Token:
        start_line, start_col = self.line, self.column
        self._advance()
        chars: List[str] = []
        while True:
            if self.pos >= len(self.source) or self.source[self.pos] == "\n":
                raise ParseError(
                    message="Unterminated string literal",
                    line=start_line,
                    column=start_col,
                )
            char = self.source[self.pos]
            if char == '"':
                self._advance()
                break
            if char == "\\":
                if self.pos + 1 >= len(self.source):
                    raise ParseError(
                        message="Unterminated string literal",
                        line=start_line,
                        column=start_col,
                    )
                escaped = self.source[self.pos + 1]
                if escaped not in ESCAPES:
                    raise ParseError(
                        message=f"Unsupported escape sequence '\\{escaped}'",
                        line=self.line,
                        column=self.column,
                    )
                chars.append(ESCAPES[escaped])
                self._advance(2)
                continue
            chars.append(char)
            self._advance()
        return Token("STRING", "".join(chars), start_line, start_col)

    def _read_number(self) -> Token:
        start_line, start_col = self.line, self.column
        digits: List[str] = []
        while self.pos < len(self.source) and (
            "0" <= self.source[self.pos] <= "9" or self.source[self.pos] == "_"
        ):
            if self.source[self.pos] != "_":
                digits.append(self.source[self.pos])
            self._advance()
        if self.pos < len(self.source) and (
            self.source[self.pos].isalpha() or self.source[self.pos] == "."
        ):
            raise ParseError(
                message="Only integer literals are supported",
                line=start_line,
                column=start_col,
            )
        return Token("INT", "".join(digits), start_line, start_col)

    def _read_identifier(self) -> Token:
        start_line, start_col = self.line, self.column
        chars: List[str] = []
        while self.pos < len(self.source) and (
            self.source[self.pos].isalnum() or self.source[self.pos] == "_"
        ):
            chars.append(self.source[self.pos])
            self._advance()
        return Token("IDENT", "".join(chars), start_line, start_col)


def tokenize(source: str, filename: str = "<script>") -> List[Token]:
    """Tokenize helper for tests and tooling."""
    return Lexer(source, filename).tokenize()
