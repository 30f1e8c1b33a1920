"""Sources of input lines for the REPL loop."""

import atexit
import logging
import os
import pathlib
from typing import Optional, TextIO

from rusti.commands import complete
from rusti.logging import RustiLogger


_python_logger = logging.getLogger(__name__)
_python_logger.addHandler(logging.NullHandler())
_logger = RustiLogger(_python_logger)

HISTORY_FILE = pathlib.Path('~/.rusti_history').expanduser()


class StreamLineSource:
    """Reads lines from a file without prompting, e.g. from a pipe."""

    interactive = False

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream

    def read_line(self, prompt: str) -> Optional[str]:
        line = self._stream.readline()
        if not line:
            return None
        return line.rstrip('\n')


class ReadlineLineSource:
    """Reads lines from the terminal with history and command completion."""

    interactive = True

    def __init__(self, history_file: Optional[os.PathLike] = HISTORY_FILE):
        self._readline = None
        try:
            import readline
        except ImportError:
            _logger.info('readline is not available')
            return
        self._readline = readline
        readline.set_completer(complete)
        readline.set_completer_delims(' \t\n')
        readline.parse_and_bind('tab: complete')
        if history_file is not None:
            try:
                readline.read_history_file(history_file)
            except OSError:
                _logger.debug('no history file at {}', history_file)
            atexit.register(readline.write_history_file, history_file)

    def read_line(self, prompt: str) -> Optional[str]:
        try:
            return input(prompt)
        except EOFError:
            print()
            return None
