"""Run work that may fail abnormally in a supervised worker process.

Compiling and running user code can fail in ways the REPL cannot recover
from in-process: rustc may die on an internal error and user programs may
abort. Such work runs in a child process and whatever happens there comes
back as an Attempt."""

import dataclasses
import logging
import multiprocessing
import multiprocessing.connection
import signal
import threading
from typing import Callable, Generic, Optional, TypeVar

from rusti.logging import RustiLogger


_python_logger = logging.getLogger(__name__)
_python_logger.addHandler(logging.NullHandler())
_logger = RustiLogger(_python_logger)

T = TypeVar('T')

# rustc keeps global state, so at most one compile may be in flight.
_lock = threading.Lock()


class WorkerDied(Exception):
    def __init__(self, exitcode: Optional[int]) -> None:
        super().__init__(exitcode)
        self.exitcode = exitcode

    def __str__(self) -> str:
        return 'worker process exited with code {} before reporting'.format(
            self.exitcode
        )


@dataclasses.dataclass(frozen=True)
class Attempt(Generic[T]):
    value: Optional[T] = None
    error: Optional[BaseException] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


def _exit_on_terminate(signum: int, frame: object) -> None:
    # Unwinding lets subprocess.run kill and reap the child it waits on.
    raise SystemExit(128 + signum)


def _run(
    connection: multiprocessing.connection.Connection,
    target: Callable[..., T],
    args: tuple,
) -> None:
    # A ctrl-c at the prompt is for the REPL, not the worker.
    signal.signal(signal.SIGINT, signal.SIG_IGN)
    signal.signal(signal.SIGTERM, _exit_on_terminate)
    try:
        result = target(*args)
    except Exception as e:
        connection.send(Attempt(error=e))
    else:
        connection.send(Attempt(value=result))
    finally:
        connection.close()


def attempt(target: Callable[..., T], *args: object) -> Attempt[T]:
    """Call target(*args) in a worker process and wait for it.

    target and args must be picklable. Exceptions raised by target and
    abnormal exits of the worker both become a failed Attempt."""
    with _lock:
        receiver, sender = multiprocessing.Pipe(duplex=False)
        process = multiprocessing.Process(
            target=_run, args=(sender, target, args), daemon=True
        )
        process.start()
        # Only the worker holds the sending end now, so recv sees EOF when it
        # dies without reporting.
        sender.close()
        try:
            result = receiver.recv()
        except EOFError:
            result = None
        except KeyboardInterrupt:
            # The worker kills whatever it is running before it exits.
            process.terminate()
            process.join()
            raise
        finally:
            receiver.close()
        process.join()
    if result is None:
        _logger.warning('worker died with exit code {}', process.exitcode)
        return Attempt(error=WorkerDied(process.exitcode))
    if not result.succeeded:
        _logger.debug('attempt failed: {!r}', result.error)
    return result
