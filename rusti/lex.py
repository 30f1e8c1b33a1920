"""A lexer for Rust source, built with parsy.

Only the shape of the source matters to the REPL: where statements begin and
end, and which tokens are delimiters. Token values are left as source text."""

import dataclasses
import re
from typing import List

import parsy


@dataclasses.dataclass(frozen=True)
class Token:
    """Class to represent tokens.

    self.type - token type, as string.
    self.value - token text, exactly as it appears in the source.
    self.start - offset of the first character in the source
    self.end - offset just past the last character in the source
    """

    type: str = ''
    value: str = ''
    start: int = 0
    end: int = 0


class LexError(Exception):
    def __init__(self, offset: int, expected: str) -> None:
        super().__init__(offset, expected)
        self.offset = offset
        self.expected = expected

    def __str__(self) -> str:
        return 'cannot tokenize at offset {}: expected {}'.format(
            self.offset, self.expected
        )


OPENING_DELIMITERS = {'(': ')', '[': ']', '{': '}'}

_whitespace = parsy.regex(r'\s+')
_line_comment = parsy.regex(r'//[^\n]*')
_comment_text = parsy.regex(r'[^*/]+|\*(?!/)|/(?!\*)')


@parsy.generate('block comment')
def _block_comment():
    # Block comments nest in Rust.
    yield parsy.string('/*')
    yield (_block_comment | _comment_text).many()
    yield parsy.string('*/')


_trivia = (_whitespace | _line_comment | _block_comment).many()


@parsy.generate('raw string')
def _raw_string():
    hashes = yield parsy.regex(r'b?r(#*)"', group=1)
    yield parsy.regex(r'.*?"' + re.escape(hashes), flags=re.DOTALL)


_string = parsy.regex(r'b?"(?:[^"\\]|\\.)*"', flags=re.DOTALL)
_char = parsy.regex(
    r"b?'(?:[^'\\\n\r\t]|\\(?:x[0-9a-fA-F]{2}|u\{[0-9a-fA-F_]{1,8}\}|.))'"
)
_lifetime = parsy.regex(r"'(?:r#)?[^\W\d]\w*")
_ident = parsy.regex(r'(?:r#)?[^\W\d]\w*')
_number = parsy.regex(
    r'[0-9][0-9_]*(?:\.[0-9][0-9_]*)?(?:[eE][+-]?[0-9_]+)?\w*'
)
_punct = parsy.regex(
    r'<<=|>>=|\.\.\.|\.\.=|::|->|=>|==|!=|<=|>=|&&|\|\||\+=|-=|\*=|/=|%=|'
    r'\^=|&=|\|=|<<|>>|\.\.|[-+*/%^!&|=<>@.,;:#$?~]'
)
_open = parsy.regex(r'[(\[{]')
_close = parsy.regex(r'[)\]}]')


def _typed(type: str, parser: parsy.Parser) -> parsy.Parser:
    return parsy.seq(parsy.index, parser, parsy.index).combine(
        lambda start, _, end: (type, start, end)
    )


_token = parsy.alt(
    _typed('STRING', _raw_string),
    _typed('STRING', _string),
    _typed('CHAR', _char),
    _typed('LIFETIME', _lifetime),
    _typed('IDENT', _ident),
    _typed('NUMBER', _number),
    _typed('OPEN', _open),
    _typed('CLOSE', _close),
    _typed('PUNCT', _punct),
)

_tokens = _trivia >> (_token << _trivia).many()


def tokenize(code: str) -> List[Token]:
    try:
        spans = _tokens.parse(code)
    except parsy.ParseError as e:
        raise LexError(e.index, str(e.expected)) from e
    return [
        Token(type, code[start:end], start, end) for type, start, end in spans
    ]
