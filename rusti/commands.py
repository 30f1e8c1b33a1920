"""Recognize REPL meta-commands in raw input lines.

A meta-command is a line starting with `:`. The first whitespace-delimited
word after the sentinel names the command and the rest are its arguments."""

import dataclasses
from typing import Optional, Tuple

import parsy


SENTINEL = ':'
MULTILINE_START = '{'
MULTILINE_END = SENTINEL + '}'

COMMAND_NAMES = ('exit', 'clear', 'help', 'load')

HELP_TEXT = """\
REPL commands:
  :exit               exit the REPL
  :clear              forget every accumulated declaration and view item
  :help               show this message
  :load <crate>...    compile (if stale) and link the given crates
  :{ ... :}           enter a block spanning several lines, ended by :}

Anything else is Rust code. Declarations (let, fn, struct, use, ...) are
remembered for the rest of the session; the value of the last expression is
printed."""


@dataclasses.dataclass(frozen=True)
class Command:
    name: str
    args: Tuple[str, ...] = ()


_word = parsy.regex(r'\S+').desc('command word')
_whitespace = parsy.regex(r'\s*')
_words = _whitespace >> _word.sep_by(parsy.regex(r'\s+')) << _whitespace


def parse_command(line: str) -> Optional[Command]:
    """Return the command on this line, or None if the line is code.

    A lone sentinel (or a sentinel followed only by whitespace) is code."""
    if not line.startswith(SENTINEL):
        return None
    words = _words.parse(line[len(SENTINEL):])
    if not words:
        return None
    name, *args = words
    return Command(name, tuple(args))


def complete(text: str, state: int) -> Optional[str]:
    """Suggest meta-command names, in the form readline completers take."""
    if text.startswith(SENTINEL):
        matches = [
            SENTINEL + name
            for name in COMMAND_NAMES
            if (SENTINEL + name).startswith(text)
        ]
    else:
        matches = []
    return matches[state] if state < len(matches) else None
