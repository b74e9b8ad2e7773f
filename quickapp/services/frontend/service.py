"""
Front-End Service.

Turns script text into exactly one AppDeclaration: lexing, parsing, entry
discovery, scope checking and model building. Writes no files.
"""

from __future__ import annotations

from ...core.logging import get_logger
from ...models.app import AppDeclaration
from .builder import build_app
from .parser import Parser
from .scope import check_scopes

logger = get_logger(__name__)


def parse_app(source: str, filename: str = "<script>") -> AppDeclaration:
    """Compile script text into its app declaration.

    Args:
        source: Script text
        filename: Name used in diagnostics

    Returns:
        The app declaration, not yet validated

    Raises:
        StructuralError: Any parse, entry or scope error
    """
    script = Parser.from_source(source, filename).parse_script()
    entry = check_scopes(script)
    app = build_app(entry)
    logger.debug(
        "Parsed app declaration",
        filename=filename,
        app=app.name,
        screens=len(app.screens),
    )
    return app
