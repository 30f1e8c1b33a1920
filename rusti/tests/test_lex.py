import unittest

from rusti.lex import LexError, tokenize


def types_and_values(code: str):
    return [(token.type, token.value) for token in tokenize(code)]


class TestTokenize(unittest.TestCase):
    def test_let_statement(self) -> None:
        self.assertEqual(
            types_and_values('let x = 1;'),
            [
                ('IDENT', 'let'),
                ('IDENT', 'x'),
                ('PUNCT', '='),
                ('NUMBER', '1'),
                ('PUNCT', ';'),
            ],
        )

    def test_offsets_point_into_source(self) -> None:
        code = '  foo(bar)'
        for token in tokenize(code):
            self.assertEqual(code[token.start : token.end], token.value)

    def test_comments_are_skipped(self) -> None:
        self.assertEqual(
            types_and_values('a // b\n/* c /* nested */ d */ e'),
            [('IDENT', 'a'), ('IDENT', 'e')],
        )

    def test_strings_hide_delimiters(self) -> None:
        self.assertEqual(
            types_and_values(r'"{ \" ;" r#"}"#'),
            [('STRING', r'"{ \" ;"'), ('STRING', 'r#"}"#')],
        )

    def test_chars_and_lifetimes(self) -> None:
        self.assertEqual(
            types_and_values("'a' &'a str '\\n' b'{'"),
            [
                ('CHAR', "'a'"),
                ('PUNCT', '&'),
                ('LIFETIME', "'a"),
                ('IDENT', 'str'),
                ('CHAR', "'\\n'"),
                ('CHAR', "b'{'"),
            ],
        )

    def test_compound_operators(self) -> None:
        self.assertEqual(
            [value for _, value in types_and_values('a += b == c ..= d::e')],
            ['a', '+=', 'b', '==', 'c', '..=', 'd', '::', 'e'],
        )

    def test_ranges_are_not_floats(self) -> None:
        self.assertEqual(
            [value for _, value in types_and_values('0..10 1.5')],
            ['0', '..', '10', '1.5'],
        )

    def test_delimiters(self) -> None:
        self.assertEqual(
            [type for type, _ in types_and_values('({[]})')],
            ['OPEN', 'OPEN', 'OPEN', 'CLOSE', 'CLOSE', 'CLOSE'],
        )

    def test_unterminated_string_is_an_error(self) -> None:
        with self.assertRaises(LexError):
            tokenize('"abc')
