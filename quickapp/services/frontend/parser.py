"""
Parser for QuickApp scripts.

Produces a tree of generic ``Call`` nodes without interpreting declaration
names; scoping rules and argument binding happen in later passes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union

from ...core.exceptions import ParseError
from .lexer import Lexer, Token

Value = Union[str, int, bool]

IGNORED_DIRECTIVES = {"import", "package"}


@dataclass
class Argument:
    value: Value
    line: int
    column: int
    name: Optional[str] = None


@dataclass
class Call:
    """One ``name(args) { block }`` statement."""

    name: str
    line: int
    column: int
    args: List[Argument] = field(default_factory=list)
    block: Optional[List["Call"]] = None

    @property
    def children(self) -> List["Call"]:
        return self.block or []


@dataclass
class Script:
    calls: List[Call] = field(default_factory=list)


class Parser:
    def __init__(self, tokens: List[Token]) -> None:
        self.tokens = tokens
        self.position = 0

    @classmethod
    def from_source(cls, source: str, filename: str = "<script>") -> "Parser":
        return cls(Lexer(source, filename).tokenize())

    def parse_script(self) -> Script:
        script = Script()
        while not self.check("EOF"):
            if self.match("NEWLINE") or self.match("SEMI"):
                continue
            if self.check("IDENT") and self.peek().value in IGNORED_DIRECTIVES:
                self._skip_directive()
                continue
            script.calls.append(self.parse_call())
            self._expect_separator("EOF")
        return script

    def parse_call(self) -> Call:
        name_token = self.consume("IDENT", "Expected a declaration name")
        call = Call(name=name_token.value or "", line=name_token.line, column=name_token.column)

        has_parens = False
        if self.match("LPAREN"):
            has_parens = True
            call.args = self._parse_arguments()
        if self.check("LBRACE"):
            call.block = self._parse_block()
        elif not has_parens:
            raise self.error(f"Expected '(' or '{{' after '{call.name}'", self.peek())
        return call

    def _parse_arguments(self) -> List[Argument]:
        args: List[Argument] = []
        self._skip_newlines()
        if self.match("RPAREN"):
            return args
        while True:
            self._skip_newlines()
            args.append(self._parse_argument())
            self._skip_newlines()
            if self.match("COMMA"):
                self._skip_newlines()
                if self.match("RPAREN"):
                    return args
                continue
            self.consume("RPAREN", "Expected ',' or ')' in argument list")
            return args

    def _parse_argument(self) -> Argument:
        token = self.peek()
        if token.type == "IDENT" and self.peek_offset(1).type == "EQUALS":
            self.advance()
            self.advance()
            self._skip_newlines()
            value = self._parse_value()
            return Argument(value=value, name=token.value, line=token.line, column=token.column)
        return Argument(value=self._parse_value(), line=token.line, column=token.column)

    def _parse_value(self) -> Value:
        token = self.peek()
        if token.type == "STRING":
            self.advance()
            return token.value or ""
        if token.type == "INT":
            self.advance()
            return int(token.value or "0")
        if token.type == "IDENT" and token.value in ("true", "false"):
            self.advance()
            return token.value == "true"
        raise self.error("Expected a string, integer or boolean value", token)

    def _parse_block(self) -> List[Call]:
        self.consume("LBRACE", "Expected '{'")
        calls: List[Call] = []
        while not self.match("RBRACE"):
            if self.check("EOF"):
                raise self.error("Unterminated block: expected '}'", self.peek())
            if self.match("NEWLINE") or self.match("SEMI"):
                continue
            calls.append(self.parse_call())
            self._expect_separator("RBRACE")
        return calls

    def _expect_separator(self, closer: str) -> None:
        if self.check("NEWLINE") or self.check("SEMI") or self.check(closer) or self.check("EOF"):
            return
        raise self.error("Expected a new line or ';' between declarations", self.peek())

    def _skip_directive(self) -> None:
        while not self.check("NEWLINE") and not self.check("SEMI") and not self.check("EOF"):
            self.advance()

    def _skip_newlines(self) -> None:
        while self.match("NEWLINE"):
            pass

    def consume(self, token_type: str, message: str) -> Token:
        token = self.peek()
        if token.type != token_type:
            raise self.error(message, token)
        self.advance()
        return token

    def match(self, token_type: str) -> bool:
        if self.check(token_type):
            self.advance()
            return True
        return False

    def check(self, token_type: str) -> bool:
        return self.peek().type == token_type

    def peek(self) -> Token:
        return self.tokens[self.position]

    def peek_offset(self, offset: int) -> Token:
        idx = min(self.position + offset, len(self.tokens) - 1)
        return self.tokens[idx]

    def advance(self) -> Token:
        token = self.tokens[self.position]
        self.position = min(self.position + 1, len(self.tokens) - 1)
        return token

    def error(self, message: str, token: Token) -> ParseError:
        return ParseError(message=message, line=token.line, column=token.column)


def parse_source(source: str, filename: str = "<script>") -> Script:
    """Parse helper for tests and tooling."""
    return Parser.from_source(source, filename).parse_script()
