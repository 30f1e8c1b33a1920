"""Fold what a successful input declared into the session history.

Only bindings survive into the next synthesized program. View items and
declarations are kept; expression statements are not, so replaying the
history never repeats an earlier evaluation's side effects."""

import logging

from rusti.logging import RustiLogger
from rusti.pretty import print_statement, print_view_item
from rusti.session import Session
from rusti.syntax import (
    Block,
    ExpressionStatement,
    Item,
    LetDeclaration,
    MacroStatement,
)


_python_logger = logging.getLogger(__name__)
_python_logger.addHandler(logging.NullHandler())
_logger = RustiLogger(_python_logger)


def extract(block: Block, session: Session) -> Session:
    for view_item in block.view_items:
        session = session.with_view_item(print_view_item(view_item))
    for statement in block.statements:
        if isinstance(statement, (LetDeclaration, Item)):
            session = session.with_statement(print_statement(statement))
        elif isinstance(statement, MacroStatement):
            if statement.is_declaration_like:
                session = session.with_statement(print_statement(statement))
            else:
                _logger.debug('not keeping macro call {}', statement.text)
        elif (
            isinstance(statement, ExpressionStatement)
            and statement.is_assignment
        ):
            # Replaying an assignment would apply it again on every input.
            _logger.debug('not keeping assignment {}', statement.text)
    return session
