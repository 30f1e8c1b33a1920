"""The read-eval-print loop.

Each line is either a meta-command or Rust code. Code is evaluated by
synthesizing a whole program from the session history plus the line, and
the session only takes in what the line declared if that program compiled
and ran successfully."""

import logging
import os
import pathlib
import sys
from typing import Iterable, Optional

from typing_extensions import Protocol

import rusti
import rusti.driver
from rusti.backend import RustcBackend
from rusti.cache import load_crate
from rusti.commands import HELP_TEXT, MULTILINE_START, Command, parse_command
from rusti.error_reporting import (
    create_evaluation_failure_message,
    create_load_message,
    create_unknown_command_message,
)
from rusti.history import extract
from rusti.logging import RustiLogger
from rusti.multiline import capture_block
from rusti.session import Session
from rusti.synthesize import synthesize


_python_logger = logging.getLogger(__name__)
_python_logger.addHandler(logging.NullHandler())
_logger = RustiLogger(_python_logger)

INIT_FILE_NAME = '.rustirc.rs'
CONTINUATION_PROMPT = '... '


class LineSource(Protocol):
    interactive: bool

    def read_line(self, prompt: str) -> Optional[str]:
        ...


class Repl:
    def __init__(
        self,
        line_source: LineSource,
        backend: Optional[RustcBackend] = None,
        rustc: str = 'rustc',
    ) -> None:
        self.line_source = line_source
        self.backend = RustcBackend() if backend is None else backend
        self.rustc = rustc

    def run_line(self, session: Session, line: str) -> Session:
        command = parse_command(line)
        if command is None:
            return self.evaluate(session, line)
        return self.run_command(session, command)

    def run_command(self, session: Session, command: Command) -> Session:
        _logger.debug('running command {!r}', command)
        if command.name == 'exit':
            return session.stopped()
        if command.name == 'clear':
            return session.cleared()
        if command.name == 'help':
            print(HELP_TEXT)
            return session
        if command.name == 'load':
            return self.load(session, command.args)
        if command.name == MULTILINE_START:
            prompt = ''
            if self.line_source.interactive:
                prompt = CONTINUATION_PROMPT
            block = capture_block(self.line_source.read_line, prompt)
            # The block may itself start with a command.
            return self.run_line(session, block)
        print(create_unknown_command_message(command))
        return session

    def evaluate(self, session: Session, code: str) -> Session:
        program = synthesize(session, code)
        _logger.debug('synthesized program:\n{}', program)
        try:
            result = rusti.driver.run_program(
                self.backend,
                program,
                rusti.driver.options_for(session, self.rustc),
            )
        except KeyboardInterrupt:
            # a ctrl-c during evaluation just cancels that evaluation
            print('\nEvaluation was interrupted.')
            return session
        if not result.succeeded:
            print(create_evaluation_failure_message(result.error))
            return session
        return extract(result.value, session)

    def load(self, session: Session, arguments: Iterable[str]) -> Session:
        for argument in arguments:
            result = load_crate(
                self.backend,
                argument,
                rusti.driver.options_for(session, self.rustc),
            )
            print(create_load_message(result))
            if not result.outcome.is_loaded:
                continue
            declaration = 'extern crate {};'.format(result.name)
            if declaration not in session.view_items.split('\n'):
                session = session.with_view_item(declaration)
            session = session.with_lib_search_path(str(result.directory))
        return session

    def run_init_file(
        self, session: Session, path: os.PathLike = INIT_FILE_NAME
    ) -> Session:
        print('Running startup file...')
        try:
            code = pathlib.Path(path).read_text(encoding='utf-8')
        except FileNotFoundError:
            print('No startup file found.')
            return session
        return self.run_line(session, code)

    def loop(self, session: Session) -> Session:
        while session.running:
            try:
                line = self.line_source.read_line(session.prompt)
            except KeyboardInterrupt:
                # a ctrl-c at the prompt just discards the line
                print('\nInterrupted. Type :exit to leave.')
                continue
            if line is None:
                break
            if not line.strip():
                if self.line_source.interactive:
                    print('()')
                continue
            try:
                session = self.run_line(session, line)
            except KeyboardInterrupt:
                # a ctrl-c in a :{ block or a :load cancels that input
                print('\nInterrupted. Type :exit to leave.')
        return session


def print_intro_message() -> None:
    print(
        'rusti (version {} on Python {}). Type :help for help.'.format(
            rusti.version, sys.version.split()[0]
        )
    )


def repl(
    line_source: LineSource,
    session: Optional[Session] = None,
    backend: Optional[RustcBackend] = None,
    rustc: str = 'rustc',
    init_file: Optional[os.PathLike] = INIT_FILE_NAME,
) -> Session:
    if session is None:
        session = Session()
    interpreter = Repl(line_source, backend, rustc)
    if line_source.interactive:
        print_intro_message()
    if init_file is not None:
        session = interpreter.run_init_file(session, init_file)
    return interpreter.loop(session)
