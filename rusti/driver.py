"""Compile and run a synthesized program, and find the new input in it."""

import logging

import rusti.isolation
import rusti.syntax
from rusti.backend import Options, RustcBackend, Stage
from rusti.logging import RustiLogger
from rusti.session import Session
from rusti.synthesize import MARKER


_python_logger = logging.getLogger(__name__)
_python_logger.addHandler(logging.NullHandler())
_logger = RustiLogger(_python_logger)


class MissingInputBlockError(Exception):
    """The compiled program did not have the shape the synthesizer gives it."""


def options_for(session: Session, rustc: str = 'rustc') -> Options:
    return Options(
        crate_type='bin',
        binary=session.binary_path,
        lib_search_paths=session.lib_search_paths,
        jit=True,
        rustc=rustc,
    )


def compile_and_run(
    backend: RustcBackend, program: str, options: Options
) -> rusti.syntax.Crate:
    with backend.build_session(options) as compilation:
        config = backend.build_configuration(
            compilation, options.binary, program
        )
        return backend.compile_upto(
            compilation, config, program, Stage.EXECUTE
        )


def find_input_block(crate: rusti.syntax.Crate) -> rusti.syntax.Block:
    """Find the block passed to the marker call inside main."""
    main = crate.function('main')
    body = None if main is None else main.body_block()
    if body is None:
        raise MissingInputBlockError('no main function in compiled program')
    for statement in body.statements:
        if not isinstance(statement, rusti.syntax.ExpressionStatement):
            continue
        arguments = statement.call_arguments(MARKER)
        if (
            arguments is not None
            and len(arguments) == 1
            and isinstance(arguments[0], rusti.syntax.Group)
            and arguments[0].delimiter == '{'
        ):
            return rusti.syntax.parse_block(arguments[0], crate.source)
    raise MissingInputBlockError('no call to {} in main'.format(MARKER))


def run_program(
    backend: RustcBackend, program: str, options: Options
) -> rusti.isolation.Attempt[rusti.syntax.Block]:
    """Compile and run program in isolation.

    On success the attempt holds the block with the new input. Diagnostics
    and program output have already gone to the terminal either way."""
    result = rusti.isolation.attempt(
        compile_and_run, backend, program, options
    )
    if not result.succeeded:
        _logger.info('evaluation failed: {}', result.error)
        return rusti.isolation.Attempt(error=result.error)
    try:
        block = find_input_block(result.value)
    except MissingInputBlockError as e:
        _logger.warning('could not read back the program: {}', e)
        return rusti.isolation.Attempt(error=e)
    return rusti.isolation.Attempt(value=block)
