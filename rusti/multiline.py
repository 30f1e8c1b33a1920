"""Collect a block of lines typed between `:{` and `:}`."""

import enum
import logging
from typing import Callable, Optional

from rusti.commands import MULTILINE_END
from rusti.logging import RustiLogger


_python_logger = logging.getLogger(__name__)
_python_logger.addHandler(logging.NullHandler())
_logger = RustiLogger(_python_logger)


class UnterminatedMultilineError(Exception):
    """Input ended before the block was closed with `:}`."""

    def __init__(self, collected: str) -> None:
        super().__init__(collected)
        self.collected = collected

    def __str__(self) -> str:
        return 'input ended inside a :{ block; expected {}'.format(
            MULTILINE_END
        )


class _State(enum.Enum):
    COLLECTING = enum.auto()
    DONE = enum.auto()


def capture_block(
    read_line: Callable[[str], Optional[str]], prompt: str = ''
) -> str:
    """Read lines until the terminator and return them joined.

    Each collected line keeps a trailing newline. The terminator itself is
    not part of the result."""
    state = _State.COLLECTING
    accumulator = ''
    while state is _State.COLLECTING:
        line = read_line(prompt)
        if line is None:
            raise UnterminatedMultilineError(accumulator)
        if line.strip() == MULTILINE_END:
            state = _State.DONE
        else:
            accumulator += line + '\n'
    _logger.debug('captured block of {} lines', accumulator.count('\n'))
    return accumulator
