import unittest
from typing import Callable, Iterable, Optional

from rusti.multiline import UnterminatedMultilineError, capture_block


def reader(lines: Iterable[str]) -> Callable[[str], Optional[str]]:
    iterator = iter(lines)
    return lambda prompt: next(iterator, None)


class TestCaptureBlock(unittest.TestCase):
    def test_collects_until_terminator(self) -> None:
        block = capture_block(reader(['let x = 1;', 'x', ':}', 'after']))
        self.assertEqual(block, 'let x = 1;\nx\n')

    def test_terminator_may_be_surrounded_by_whitespace(self) -> None:
        self.assertEqual(capture_block(reader(['a', '   :}  '])), 'a\n')

    def test_terminator_must_stand_alone(self) -> None:
        block = capture_block(reader(['foo :}', ':}']))
        self.assertEqual(block, 'foo :}\n')

    def test_empty_block(self) -> None:
        self.assertEqual(capture_block(reader([':}'])), '')

    def test_end_of_input_is_fatal(self) -> None:
        with self.assertRaises(UnterminatedMultilineError) as cm:
            capture_block(reader(['let x = 1;']))
        self.assertEqual(cm.exception.collected, 'let x = 1;\n')

    def test_does_not_read_past_terminator(self) -> None:
        lines = iter(['a', ':}', 'b'])
        capture_block(lambda prompt: next(lines, None))
        self.assertEqual(list(lines), ['b'])
