"""Render fragments of the crate tree back to source text for history."""

from rusti.syntax import (
    Item,
    LetDeclaration,
    MacroStatement,
    Statement,
    ViewItem,
)


def _normalized(text: str) -> str:
    # Input sits at column 0 in the synthesized program, so the fragment is
    # kept as written. Lines inside string literals must not change.
    return text.strip()


def _terminated(text: str) -> str:
    return text if text.endswith(';') else text + ';'


def print_view_item(item: ViewItem) -> str:
    return _terminated(_normalized(item.text))


def print_statement(statement: Statement) -> str:
    text = _normalized(statement.text)
    if isinstance(statement, LetDeclaration):
        return _terminated(text)
    if isinstance(statement, MacroStatement) and statement.delimiter != '{':
        return _terminated(text)
    if isinstance(statement, Item) and not text.endswith(('}', ';')):
        return _terminated(text)
    return text
