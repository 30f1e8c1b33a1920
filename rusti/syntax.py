"""The crate tree the REPL reads back after a successful compile.

Source is grouped into token trees (tokens, or a delimiter pair and
everything between), and sequences of token trees are split into
statements. This is deliberately shallow: the compiler has already accepted
the program, so the REPL only needs to know where each statement begins and
ends and what kind of statement it is.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Generator, List, Optional, Sequence, Tuple, Union

import parsy

from rusti.lex import OPENING_DELIMITERS, Token, tokenize


@dataclasses.dataclass(frozen=True)
class Leaf:
    token: Token

    @property
    def start(self) -> int:
        return self.token.start

    @property
    def end(self) -> int:
        return self.token.end


@dataclasses.dataclass(frozen=True)
class Group:
    opening: Token
    children: Tuple[TokenTree, ...]
    closing: Token

    @property
    def delimiter(self) -> str:
        return self.opening.value

    @property
    def start(self) -> int:
        return self.opening.start

    @property
    def end(self) -> int:
        return self.closing.end


TokenTree = Union[Leaf, Group]


class UnbalancedDelimiterError(Exception):
    pass


def _token_of_type(type: str) -> parsy.Parser:
    return parsy.test_item(lambda token: token.type == type, type + ' token')


_leaf = parsy.test_item(
    lambda token: token.type not in ('OPEN', 'CLOSE'), 'non-delimiter token'
).map(Leaf)


@parsy.generate('delimited group')
def _group() -> Generator[parsy.Parser, Any, Group]:
    opening = yield _token_of_type('OPEN')
    children = yield _token_tree.many()
    closing_value = OPENING_DELIMITERS[opening.value]
    closing = yield parsy.test_item(
        lambda token: token.type == 'CLOSE' and token.value == closing_value,
        repr(closing_value),
    )
    return Group(opening, tuple(children), closing)


_token_tree = _leaf | _group
_token_trees = _token_tree.many()


def token_trees(tokens: Sequence[Token]) -> List[TokenTree]:
    try:
        return _token_trees.parse(list(tokens))
    except parsy.ParseError as e:
        raise UnbalancedDelimiterError(
            'unbalanced delimiters: expected {}'.format(e.expected)
        ) from e


@dataclasses.dataclass(frozen=True)
class Statement:
    trees: Tuple[TokenTree, ...]
    source: str = dataclasses.field(repr=False, compare=False)

    @property
    def text(self) -> str:
        return self.source[self.trees[0].start : self.trees[-1].end]

    def __str__(self) -> str:
        return self.text


class ViewItem(Statement):
    """A `use` declaration or an `extern crate`."""


class LetDeclaration(Statement):
    pass


@dataclasses.dataclass(frozen=True)
class Item(Statement):
    kind: str = ''
    name: Optional[str] = None

    def body_block(self) -> Optional[Block]:
        for tree in reversed(self.trees):
            if isinstance(tree, Group) and tree.delimiter == '{':
                return parse_block(tree, self.source)
        return None


@dataclasses.dataclass(frozen=True)
class MacroStatement(Statement):
    macro_name: str = ''
    delimiter: str = '('

    @property
    def is_declaration_like(self) -> bool:
        return self.macro_name == 'macro_rules' or self.delimiter == '{'


@dataclasses.dataclass(frozen=True)
class ExpressionStatement(Statement):
    is_assignment: bool = False
    has_semicolon: bool = True

    def call_arguments(self, callee: str) -> Optional[Tuple[TokenTree, ...]]:
        """If this statement is `callee(...)`, the trees between the parens."""
        trees = _strip_semicolon(self.trees)
        if (
            len(trees) == 2
            and _is_ident(trees[0], callee)
            and isinstance(trees[1], Group)
            and trees[1].delimiter == '('
        ):
            return trees[1].children
        return None


@dataclasses.dataclass(frozen=True)
class Block:
    contents: Tuple[Statement, ...]

    @property
    def view_items(self) -> List[ViewItem]:
        return [s for s in self.contents if isinstance(s, ViewItem)]

    @property
    def statements(self) -> List[Statement]:
        return [s for s in self.contents if not isinstance(s, ViewItem)]


@dataclasses.dataclass(frozen=True)
class Crate:
    items: Tuple[Statement, ...]
    source: str = dataclasses.field(repr=False, compare=False)

    def function(self, name: str) -> Optional[Item]:
        for item in self.items:
            if (
                isinstance(item, Item)
                and item.kind == 'fn'
                and item.name == name
            ):
                return item
        return None


def parse_crate(source: str) -> Crate:
    trees = token_trees(tokenize(source))
    return Crate(tuple(split_statements(trees, source)), source)


def parse_block(group: Group, source: str) -> Block:
    return Block(tuple(split_statements(group.children, source)))


_ITEM_KEYWORDS = {
    'fn',
    'struct',
    'enum',
    'union',
    'impl',
    'trait',
    'mod',
    'const',
    'static',
    'type',
}
# These items end with a semicolon even when their initializer has braces.
_SEMICOLON_TERMINATED = {'use', 'let', 'const', 'static', 'type', 'crate'}
_ITEM_MODIFIERS = {'pub', 'unsafe', 'async', 'extern', 'default', 'auto'}
_BLOCK_LIKE = {'if', 'match', 'while', 'loop', 'for'}

ASSIGNMENT_OPERATORS = {
    '=',
    '+=',
    '-=',
    '*=',
    '/=',
    '%=',
    '^=',
    '&=',
    '|=',
    '<<=',
    '>>=',
}


def _is_ident(tree: TokenTree, value: Optional[str] = None) -> bool:
    return (
        isinstance(tree, Leaf)
        and tree.token.type == 'IDENT'
        and (value is None or tree.token.value == value)
    )


def _is_punct(tree: TokenTree, value: str) -> bool:
    return (
        isinstance(tree, Leaf)
        and tree.token.type == 'PUNCT'
        and tree.token.value == value
    )


def _is_group(tree: TokenTree, delimiter: str) -> bool:
    return isinstance(tree, Group) and tree.delimiter == delimiter


def _strip_semicolon(
    trees: Sequence[TokenTree],
) -> Sequence[TokenTree]:
    if trees and _is_punct(trees[-1], ';'):
        return trees[:-1]
    return trees


def _skip_attributes(trees: Sequence[TokenTree], i: int) -> int:
    while i < len(trees) and _is_punct(trees[i], '#'):
        if i + 1 < len(trees) and _is_group(trees[i + 1], '['):
            i += 2
        elif (
            i + 2 < len(trees)
            and _is_punct(trees[i + 1], '!')
            and _is_group(trees[i + 2], '[')
        ):
            i += 3
        else:
            break
    return i


def _skip_modifiers(trees: Sequence[TokenTree], i: int) -> int:
    while i < len(trees):
        tree = trees[i]
        if _is_ident(tree, 'pub') and i + 1 < len(trees):
            i += 2 if _is_group(trees[i + 1], '(') else 1
        elif (
            _is_ident(tree, 'extern')
            and i + 1 < len(trees)
            and isinstance(trees[i + 1], Leaf)
            and trees[i + 1].token.type == 'STRING'
        ):
            i += 2
        elif (
            _is_ident(tree, 'const')
            and i + 1 < len(trees)
            and any(
                _is_ident(trees[i + 1], word)
                for word in ('fn', 'unsafe', 'async', 'extern')
            )
        ):
            i += 1
        elif (
            isinstance(tree, Leaf)
            and tree.token.value in _ITEM_MODIFIERS
            and i + 1 < len(trees)
            and not _is_group(trees[i + 1], '{')
            and not _is_ident(trees[i + 1], 'crate')
        ):
            i += 1
        else:
            break
    return i


def _find_semicolon(trees: Sequence[TokenTree], i: int) -> int:
    """Index just past the next top-level semicolon, or the end."""
    while i < len(trees):
        if _is_punct(trees[i], ';'):
            return i + 1
        i += 1
    return len(trees)


def _find_item_end(trees: Sequence[TokenTree], i: int) -> int:
    # Braces inside generic arguments are const arguments, not the body.
    angle_depth = 0
    while i < len(trees):
        tree = trees[i]
        if _is_punct(tree, '<'):
            angle_depth += 1
        elif _is_punct(tree, '>'):
            angle_depth = max(angle_depth - 1, 0)
        elif _is_punct(tree, '>>'):
            angle_depth = max(angle_depth - 2, 0)
        elif _is_punct(tree, ';') or (
            angle_depth == 0 and _is_group(tree, '{')
        ):
            return i + 1
        i += 1
    return len(trees)


def _absorb_semicolon(trees: Sequence[TokenTree], i: int) -> int:
    if i < len(trees) and _is_punct(trees[i], ';'):
        return i + 1
    return i


def _find_block_like_end(trees: Sequence[TokenTree], i: int) -> int:
    """Find the end of an if/match/loop expression used as a statement."""
    while i < len(trees):
        if _is_group(trees[i], '{'):
            i += 1
            if i < len(trees) and _is_ident(trees[i], 'else'):
                i += 1
                continue
            return _absorb_semicolon(trees, i)
        if _is_punct(trees[i], ';'):
            return i + 1
        i += 1
    return len(trees)


def _macro_invocation(
    trees: Sequence[TokenTree], i: int
) -> Optional[Tuple[str, int]]:
    """If a macro invocation path starts at i, its name and the bang index."""
    j = i
    if j < len(trees) and _is_punct(trees[j], '::'):
        j += 1
    name = None
    while j < len(trees) and _is_ident(trees[j]):
        name = trees[j].token.value
        if j + 1 < len(trees) and _is_punct(trees[j + 1], '::'):
            j += 2
            continue
        j += 1
        break
    if name is not None and j < len(trees) and _is_punct(trees[j], '!'):
        return name, j
    return None


def _statement_end(trees: Sequence[TokenTree], start: int) -> int:
    head = _skip_attributes(trees, start)
    if head == len(trees):
        return head
    first = trees[head]
    if _is_ident(first, 'extern') and head + 1 < len(trees):
        if _is_ident(trees[head + 1], 'crate'):
            return _find_semicolon(trees, head)
    kind_index = _skip_modifiers(trees, head)
    if kind_index < len(trees):
        kind_tree = trees[kind_index]
        if isinstance(kind_tree, Leaf):
            kind = kind_tree.token.value
            if (
                kind in _SEMICOLON_TERMINATED
                and kind_tree.token.type == 'IDENT'
                and (kind != 'const' or _is_item_keyword(trees, kind_index))
            ):
                return _find_semicolon(trees, kind_index)
            if _is_item_keyword(trees, kind_index):
                return _find_item_end(trees, kind_index)
        elif _is_group(kind_tree, '{') and kind_index != head:
            # `extern "C" { ... }` and `unsafe { ... }`
            return _absorb_semicolon(trees, kind_index + 1)
    if _is_group(first, '{'):
        return _absorb_semicolon(trees, head + 1)
    if (
        isinstance(first, Leaf)
        and first.token.type == 'LIFETIME'
        and head + 2 < len(trees)
        and _is_punct(trees[head + 1], ':')
    ):
        # labeled loop
        return _find_block_like_end(trees, head + 2)
    if _is_ident(first) and first.token.value in _BLOCK_LIKE:
        return _find_block_like_end(trees, head)
    if _is_ident(first, 'unsafe') and head + 1 < len(trees):
        return _absorb_semicolon(trees, head + 2)
    if (
        _is_ident(first, 'const')
        and head + 1 < len(trees)
        and _is_group(trees[head + 1], '{')
    ):
        # inline const block
        return _absorb_semicolon(trees, head + 2)
    macro = _macro_invocation(trees, head)
    if macro is not None:
        name, bang = macro
        after = bang + 1
        if name == 'macro_rules' and after < len(trees) and _is_ident(
            trees[after]
        ):
            after += 1
        if after < len(trees) and _is_group(trees[after], '{'):
            return _absorb_semicolon(trees, after + 1)
    return _find_semicolon(trees, head)


def _is_item_keyword(trees: Sequence[TokenTree], i: int) -> bool:
    tree = trees[i]
    if not _is_ident(tree) or tree.token.value not in _ITEM_KEYWORDS:
        return False
    if tree.token.value in ('union', 'const'):
        # Only a definition when a name follows. Otherwise this is a union
        # used as a name or an inline const block.
        return i + 1 < len(trees) and _is_ident(trees[i + 1])
    return True


def _classify(trees: Sequence[TokenTree], source: str) -> Statement:
    trees = tuple(trees)
    head = _skip_attributes(trees, 0)
    if head == len(trees):
        return ExpressionStatement(trees, source, has_semicolon=False)
    first = trees[head]
    if _is_ident(first, 'use') or (
        _is_ident(first, 'extern')
        and head + 1 < len(trees)
        and _is_ident(trees[head + 1], 'crate')
    ):
        return ViewItem(trees, source)
    kind_index = _skip_modifiers(trees, head)
    if kind_index < len(trees):
        if _is_ident(trees[kind_index], 'use'):
            return ViewItem(trees, source)
        if _is_item_keyword(trees, kind_index):
            kind = trees[kind_index].token.value
            name = None
            if (
                kind != 'impl'
                and kind_index + 1 < len(trees)
                and _is_ident(trees[kind_index + 1])
            ):
                name = trees[kind_index + 1].token.value
            return Item(trees, source, kind=kind, name=name)
        if (
            kind_index != head
            and _is_group(trees[kind_index], '{')
            and _is_ident(trees[head], 'extern')
        ):
            return Item(trees, source, kind='extern')
    if _is_ident(first, 'let'):
        return LetDeclaration(trees, source)
    macro = _macro_invocation(trees, head)
    if macro is not None:
        name, bang = macro
        rest = _strip_semicolon(trees[bang + 1 :])
        if name == 'macro_rules' and rest and _is_ident(rest[0]):
            rest = rest[1:]
        if len(rest) == 1 and isinstance(rest[0], Group):
            return MacroStatement(
                trees, source, macro_name=name, delimiter=rest[0].delimiter
            )
    return ExpressionStatement(
        trees,
        source,
        is_assignment=any(
            isinstance(tree, Leaf)
            and tree.token.type == 'PUNCT'
            and tree.token.value in ASSIGNMENT_OPERATORS
            for tree in trees[head:]
        ),
        has_semicolon=_is_punct(trees[-1], ';'),
    )


def split_statements(
    trees: Sequence[TokenTree], source: str
) -> List[Statement]:
    statements: List[Statement] = []
    i = 0
    while i < len(trees):
        if _is_punct(trees[i], ';'):
            i += 1
            continue
        end = _statement_end(trees, i)
        statements.append(_classify(trees[i:end], source))
        i = end
    return statements
