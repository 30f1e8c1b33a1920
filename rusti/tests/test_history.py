import dataclasses
import unittest

from hypothesis import given
from hypothesis.strategies import lists, sampled_from

from rusti.driver import MissingInputBlockError, find_input_block
from rusti.history import extract
from rusti.session import Session
from rusti.syntax import parse_crate
from rusti.synthesize import HEADER, MARKER, synthesize


def extract_from_input(session: Session, code: str) -> Session:
    """What the session becomes if this input compiles and runs."""
    crate = parse_crate(synthesize(session, code))
    return extract(find_input_block(crate), session)


inputs = sampled_from(
    [
        'let a = 1;',
        'a += 1;',
        'a = 5;',
        'use std::fmt;',
        'fn f(x: i32) -> i32 { x }',
        'struct P { x: i32 }',
        'println!("{}", 1);',
        'f(2)',
        'macro_rules! twice { ($e:expr) => { $e * 2 } }',
        '#[derive(Debug)]\nenum E { A, B }',
        'let v = vec![1, 2, 3];\nv.len()',
    ]
)


class TestSynthesize(unittest.TestCase):
    def test_layout(self) -> None:
        session = Session(view_items='use a::b;', statements='let x = 1;')
        program = synthesize(session, 'x + 1')
        self.assertTrue(program.startswith(HEADER))
        self.assertLess(program.index('use a::b;'), program.index('fn main'))
        self.assertLess(
            program.index('let x = 1;'), program.index(MARKER + '({')
        )
        self.assertIn(MARKER + '({\nx + 1\n});', program)

    def test_empty_session_is_still_a_whole_program(self) -> None:
        crate = parse_crate(synthesize(Session(), '()'))
        self.assertIsNotNone(crate.function('main'))
        self.assertIsNotNone(crate.function(MARKER))


class TestFindInputBlock(unittest.TestCase):
    def test_finds_block_despite_history(self) -> None:
        session = Session(statements='fn g() { h({ 1 }); }\nlet y = 2;')
        block = find_input_block(parse_crate(synthesize(session, 'let z;')))
        self.assertEqual([s.text for s in block.statements], ['let z;'])

    def test_missing_main(self) -> None:
        with self.assertRaises(MissingInputBlockError):
            find_input_block(parse_crate('fn other() {}'))

    def test_missing_marker(self) -> None:
        with self.assertRaises(MissingInputBlockError):
            find_input_block(parse_crate('fn main() { foo({ 1 }); }'))


class TestExtract(unittest.TestCase):
    def test_declarations_are_kept(self) -> None:
        session = extract_from_input(
            Session(), 'let a = 1;\nfn f() -> i32 { 2 }\nstruct S;'
        )
        self.assertEqual(
            session.statements, 'let a = 1;\nfn f() -> i32 { 2 }\nstruct S;'
        )
        self.assertEqual(session.view_items, '')

    def test_view_items_go_to_view_items(self) -> None:
        session = extract_from_input(
            Session(), 'use std::collections::HashMap;\nlet m = 1;'
        )
        self.assertEqual(session.view_items, 'use std::collections::HashMap;')
        self.assertEqual(session.statements, 'let m = 1;')

    def test_assignments_are_not_replayed(self) -> None:
        session = extract_from_input(Session(), 'let mut a = 1;')
        session = extract_from_input(session, 'a += 1;')
        session = extract_from_input(session, 'a = 7;')
        self.assertEqual(session.statements, 'let mut a = 1;')

    def test_plain_expressions_are_not_replayed(self) -> None:
        session = extract_from_input(Session(), 'let a = 1;')
        session = extract_from_input(session, 'println!("{}", a);\na + 1')
        self.assertEqual(session.statements, 'let a = 1;')

    def test_declaration_like_macros_are_kept(self) -> None:
        code = 'macro_rules! one { () => { 1 } }'
        session = extract_from_input(Session(), code)
        self.assertEqual(session.statements, code)

    def test_multiline_items_are_kept_as_written(self) -> None:
        code = 'fn f() -> i32 {\n        1\n    }'
        session = extract_from_input(Session(), code)
        self.assertEqual(session.statements, code)

    def test_multiline_string_literals_are_unchanged(self) -> None:
        code = 'let s = "a\n    b";'
        session = extract_from_input(Session(), code)
        self.assertEqual(session.statements, code)

    def test_inline_const_blocks_are_not_replayed(self) -> None:
        session = extract_from_input(Session(), 'let a = 1;')
        session = extract_from_input(session, 'const { 5 }')
        self.assertEqual(session.statements, 'let a = 1;')

    def test_const_items_are_kept(self) -> None:
        code = 'const N: usize = 3;\nconst fn n() -> usize { N }'
        session = extract_from_input(Session(), code)
        self.assertEqual(session.statements, code)

    def test_const_generic_arguments_stay_in_the_item(self) -> None:
        code = 'fn f() -> A<{ N }> { A }'
        session = extract_from_input(Session(), code)
        self.assertEqual(session.statements, code)

    def test_other_fields_are_untouched(self) -> None:
        session = Session(prompt='> ', lib_search_paths=('lib',))
        extracted = extract_from_input(session, 'let a = 1;')
        self.assertEqual(
            dataclasses.replace(extracted, statements=''), session
        )

    @given(lists(inputs, max_size=6), inputs)
    def test_history_only_grows(self, earlier, code) -> None:
        session = Session()
        for previous in earlier:
            session = extract_from_input(session, previous)
        extracted = extract_from_input(session, code)
        self.assertTrue(extracted.statements.startswith(session.statements))
        self.assertTrue(extracted.view_items.startswith(session.view_items))
        self.assertNotIn('a += 1', extracted.statements)
