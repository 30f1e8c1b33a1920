from datetime import datetime, timezone
import json
import logging
import logging.handlers
import os
import traceback
from typing import Dict, Optional, Tuple


class RustiLogger:
    """Wraps a logging.Logger so that messages use str.format syntax.

    Nothing is formatted unless the level is enabled, since most debug calls
    sit on the evaluation path."""

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    def debug(
        self, format_string: str, *args: object, **kwargs: object
    ) -> None:
        self._log(logging.DEBUG, format_string, args, kwargs)

    def info(
        self, format_string: str, *args: object, **kwargs: object
    ) -> None:
        self._log(logging.INFO, format_string, args, kwargs)

    def warning(
        self, format_string: str, *args: object, **kwargs: object
    ) -> None:
        self._log(logging.WARNING, format_string, args, kwargs)

    def error(
        self, format_string: str, *args: object, **kwargs: object
    ) -> None:
        self._log(logging.ERROR, format_string, args, kwargs)

    def _log(
        self,
        level: int,
        format_string: str,
        args: Tuple[object, ...],
        kwargs: Dict[str, object],
    ) -> None:
        if not self._logger.isEnabledFor(level):
            return
        exc_info = kwargs.pop('exc_info', None)
        # stacklevel 3 skips this method and the level method, so the record
        # names the code that called debug(), info() and so on.
        self._logger.log(
            level,
            _BraceMessage(format_string, args, kwargs),
            exc_info=exc_info,
            stacklevel=3,
        )


class _BraceMessage:
    def __init__(
        self,
        format_string: str,
        args: Tuple[object, ...],
        kwargs: Dict[str, object],
    ) -> None:
        self.format_string = format_string
        self.args = args
        self.kwargs = kwargs

    def __str__(self) -> str:
        return self.format_string.format(*self.args, **self.kwargs)


class _LogRecordEncoder(json.JSONEncoder):
    """A JSON Encoder that supports logging.LogRecord objects."""

    def default(self, obj: object):
        if isinstance(obj, logging.LogRecord):
            return {
                'name': obj.name,
                'message': obj.getMessage(),
                'level_name': obj.levelname,
                'path_name': obj.pathname,
                'file_name': obj.filename,
                'module': obj.module,
                'exception': (
                    traceback.format_exception(*obj.exc_info)
                    if obj.exc_info
                    else None
                ),
                'line_number': obj.lineno,
                'function_name': obj.funcName,
                'created': datetime.fromtimestamp(
                    obj.created, timezone.utc
                ).isoformat(),
                'process_name': obj.processName,
                'process': obj.process,
            }
        return super().default(obj)


class _JSONFormatter(logging.Formatter):
    """A logging formatter for producing structured JSON logs."""

    def format(self, record: logging.LogRecord) -> str:
        return json.dumps(record, cls=_LogRecordEncoder)


def configure(
    verbose: bool = False, log_file: Optional[os.PathLike] = None
) -> None:
    """Attach handlers to the rusti logger according to the command line.

    Without either option, records are dropped by the NullHandlers each
    module installs."""
    logger = logging.getLogger('rusti')
    if verbose:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(
            logging.Formatter('%(levelname)s:%(name)s: %(message)s')
        )
        logger.addHandler(stream_handler)
        logger.setLevel(logging.DEBUG)
    if log_file is not None:
        file_handler = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=1048576, backupCount=1
        )
        file_handler.setFormatter(_JSONFormatter())
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)
