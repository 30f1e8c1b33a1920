import string
import unittest

from hypothesis import given
from hypothesis.strategies import lists, text

from rusti.commands import COMMAND_NAMES, Command, complete, parse_command


words = text(
    alphabet=string.ascii_letters + string.digits + '._-/{}!', min_size=1
)


class TestParseCommand(unittest.TestCase):
    def test_code_is_not_a_command(self) -> None:
        self.assertIsNone(parse_command('let x = 1;'))

    def test_command_without_arguments(self) -> None:
        self.assertEqual(parse_command(':exit'), Command('exit'))

    def test_command_with_arguments(self) -> None:
        self.assertEqual(
            parse_command(':load  foo   bar.rs '),
            Command('load', ('foo', 'bar.rs')),
        )

    def test_lone_sentinel_is_code(self) -> None:
        self.assertIsNone(parse_command(':'))
        self.assertIsNone(parse_command(':   '))

    def test_multiline_start(self) -> None:
        self.assertEqual(parse_command(':{'), Command('{'))

    def test_unknown_names_still_parse(self) -> None:
        self.assertEqual(parse_command(':bogus 1'), Command('bogus', ('1',)))

    @given(words, lists(words))
    def test_words_are_split_on_whitespace(self, name, args) -> None:
        line = ':' + ' '.join([name, *args])
        self.assertEqual(parse_command(line), Command(name, tuple(args)))


class TestComplete(unittest.TestCase):
    def test_completes_command_names(self) -> None:
        self.assertEqual(complete(':l', 0), ':load')
        self.assertIsNone(complete(':l', 1))

    def test_offers_every_command_for_the_sentinel(self) -> None:
        suggestions = []
        state = 0
        while (suggestion := complete(':', state)) is not None:
            suggestions.append(suggestion)
            state += 1
        self.assertEqual(suggestions, [':' + name for name in COMMAND_NAMES])

    def test_does_not_complete_code(self) -> None:
        self.assertIsNone(complete('le', 0))
