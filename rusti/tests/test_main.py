"""
Test the driver that you would run with `python -m rusti`.
"""

import os.path
import sys
import tempfile
import unittest

from scripttest import TestFileEnvironment

from rusti.commands import HELP_TEXT


project_root = os.path.join(os.path.dirname(__file__), '..', '..')


def run_rusti(stdin: str, *args: str, **kwargs):
    env = TestFileEnvironment(
        os.path.join(tempfile.mkdtemp(), 'test-output'),
        cwd=os.path.abspath(project_root),
    )
    return env.run(
        sys.executable,
        '-m',
        'rusti',
        '--no-init',
        *args,
        stdin=stdin.encode(),
        **kwargs
    )


class TestMain(unittest.TestCase):
    def test_commands_without_a_compiler(self) -> None:
        result = run_rusti(':help\n:bogus\n\n:clear\n:exit\nnever run\n')
        self.assertIn(HELP_TEXT, result.stdout)
        self.assertIn('Unknown command :bogus', result.stdout)
        # Input is not a terminal, so no prompt and no echo of ().
        self.assertNotIn('rusti>', result.stdout)
        self.assertNotIn('()', result.stdout)

    def test_failed_evaluation_does_not_stop_the_repl(self) -> None:
        result = run_rusti(
            'let a = 1;\n:help\n',
            '--rustc',
            os.path.join(tempfile.mkdtemp(), 'no-such-rustc'),
        )
        self.assertIn('Evaluation failed', result.stdout)
        self.assertIn(HELP_TEXT, result.stdout)

    def test_unterminated_block_exits_with_error(self) -> None:
        result = run_rusti(
            ':{\nlet a = 1;\n', expect_error=True, expect_stderr=True
        )
        self.assertEqual(result.returncode, 1)
        self.assertIn('Input ended inside a :{ block', result.stderr)
