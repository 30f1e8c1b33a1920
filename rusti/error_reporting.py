from rusti.backend import CompileError, RuntimeFailure
from rusti.cache import LoadOutcome, LoadResult
from rusti.commands import SENTINEL, Command
from rusti.isolation import WorkerDied
from rusti.multiline import UnterminatedMultilineError


def create_unknown_command_message(command: Command) -> str:
    return 'Unknown command {}{}. Type {}help for a list of commands.'.format(
        SENTINEL, command.name, SENTINEL
    )


def create_evaluation_failure_message(error: BaseException) -> str:
    if isinstance(error, CompileError):
        # rustc has printed the diagnostics already.
        return 'Compile error. Nothing was added to the session.'
    if isinstance(error, RuntimeFailure):
        return 'Runtime error: {}. Nothing was added to the session.'.format(
            error
        )
    if isinstance(error, WorkerDied):
        return 'The compiler crashed: {}.'.format(error)
    return 'Evaluation failed: {}'.format(error)


def create_load_message(result: LoadResult) -> str:
    if result.outcome is LoadOutcome.COMPILED_FRESH:
        return 'Compiled {}.'.format(result.name)
    if result.outcome is LoadOutcome.SKIPPED_UP_TO_DATE:
        return 'Skipped compiling {}: up to date.'.format(result.name)
    return 'Failed to compile {}.'.format(result.name)


def create_unterminated_block_message(
    error: UnterminatedMultilineError,
) -> str:
    lines = error.collected.count('\n')
    return 'Input ended inside a {}{{ block after {} line{}.'.format(
        SENTINEL, lines, '' if lines == 1 else 's'
    )
