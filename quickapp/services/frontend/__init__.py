"""Script front-end: lexer, parser, scope checker and model builder."""

from .parser import Argument, Call, Parser, Script, parse_source
from .scope import check_scopes, find_entry
from .service import parse_app

__all__ = [
    "Argument",
    "Call",
    "Parser",
    "Script",
    "parse_source",
    "check_scopes",
    "find_entry",
    "parse_app",
]
