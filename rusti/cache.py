"""Decide whether a crate passed to `:load` needs recompiling.

Nothing is remembered between calls: every check looks at the filesystem
afresh, comparing the source's modification time to the artifact's."""

import dataclasses
import enum
import logging
import os
import pathlib
from typing import Optional, Tuple

import rusti.isolation
from rusti.backend import SOURCE_SUFFIX, Options, RustcBackend
from rusti.logging import RustiLogger


_python_logger = logging.getLogger(__name__)
_python_logger.addHandler(logging.NullHandler())
_logger = RustiLogger(_python_logger)


class LoadOutcome(enum.Enum):
    COMPILED_FRESH = 'compiled'
    SKIPPED_UP_TO_DATE = 'skipped'
    COMPILE_FAILED = 'failed'

    @property
    def is_loaded(self) -> bool:
        return self is not LoadOutcome.COMPILE_FAILED


@dataclasses.dataclass(frozen=True)
class CacheCheck:
    source_path: pathlib.Path
    candidate_artifact_path: Optional[pathlib.Path]
    source_mtime: float
    artifact_mtime: Optional[float]

    @property
    def is_stale(self) -> bool:
        if self.artifact_mtime is None:
            return True
        return self.artifact_mtime < self.source_mtime


@dataclasses.dataclass(frozen=True)
class LoadResult:
    name: str
    directory: pathlib.Path
    outcome: LoadOutcome


def normalize_crate_argument(argument: str) -> Tuple[str, str]:
    """Split a `:load` argument into (logical name, source file name)."""
    if argument.endswith(SOURCE_SUFFIX):
        return argument[: -len(SOURCE_SUFFIX)], argument
    return argument, argument + SOURCE_SUFFIX


def find_artifact(
    directory: pathlib.Path, stem: str, file_type: str
) -> Optional[pathlib.Path]:
    # rustc may put a hash in the file name, so match on its ends only.
    try:
        entries = sorted(os.listdir(directory))
    except FileNotFoundError:
        return None
    for entry in entries:
        if entry.startswith(stem) and entry.endswith(file_type):
            return directory / entry
    return None


def check(
    backend: RustcBackend, source_path: pathlib.Path, options: Options
) -> CacheCheck:
    library_options = dataclasses.replace(options, crate_type='lib')
    with backend.build_session(library_options) as session:
        outputs = backend.build_output_filenames(source_path, session)
    candidate = find_artifact(
        outputs.out_directory, outputs.stem, outputs.file_type
    )
    return CacheCheck(
        source_path,
        candidate,
        source_path.stat().st_mtime,
        None if candidate is None else candidate.stat().st_mtime,
    )


def _compile_library(
    backend: RustcBackend, source_path: pathlib.Path, options: Options
) -> None:
    backend.compile_library(source_path, options)


def load_crate(
    backend: RustcBackend, argument: str, options: Options
) -> LoadResult:
    name, filename = normalize_crate_argument(argument)
    source_path = pathlib.Path(filename)
    name = pathlib.Path(name).name.replace('-', '_')
    directory = source_path.parent
    try:
        cache_check = check(backend, source_path, options)
    except FileNotFoundError:
        _logger.warning('no source file {}', source_path)
        return LoadResult(name, directory, LoadOutcome.COMPILE_FAILED)
    if not cache_check.is_stale:
        _logger.info(
            '{} is newer than {}, not recompiling',
            cache_check.candidate_artifact_path,
            source_path,
        )
        return LoadResult(name, directory, LoadOutcome.SKIPPED_UP_TO_DATE)
    result = rusti.isolation.attempt(
        _compile_library, backend, source_path, options
    )
    if not result.succeeded:
        _logger.info('compiling {} failed: {}', source_path, result.error)
        return LoadResult(name, directory, LoadOutcome.COMPILE_FAILED)
    return LoadResult(name, directory, LoadOutcome.COMPILED_FRESH)
