"""The boundary to the external compiler.

rustc is run as a subprocess. A compiled program is run as soon as it has
been built, and on success the compiler's input is read back into a crate
tree so the REPL can see what it contained."""

import dataclasses
import enum
import logging
import os
import pathlib
import shutil
import subprocess
import tempfile
from typing import Optional, Tuple

import rusti.syntax
from rusti.logging import RustiLogger


_python_logger = logging.getLogger(__name__)
_python_logger.addHandler(logging.NullHandler())
_logger = RustiLogger(_python_logger)

SOURCE_SUFFIX = '.rs'


class CompileError(Exception):
    """rustc rejected the program. It has already printed its diagnostics."""

    def __init__(self, status: int) -> None:
        super().__init__(status)
        self.status = status

    def __str__(self) -> str:
        return 'compilation failed (rustc exited with status {})'.format(
            self.status
        )


class RuntimeFailure(Exception):
    """The compiled program exited abnormally."""

    def __init__(self, status: int) -> None:
        super().__init__(status)
        self.status = status

    def __str__(self) -> str:
        if self.status < 0:
            return 'program was killed by signal {}'.format(-self.status)
        return 'program exited with status {}'.format(self.status)


class Stage(enum.Enum):
    # Stop once the artifact is on disk.
    LINK = 'link'
    # Run the freshly built program too.
    EXECUTE = 'execute'


@dataclasses.dataclass(frozen=True)
class Options:
    crate_type: str = 'bin'
    binary: str = 'rusti'
    lib_search_paths: Tuple[str, ...] = ()
    jit: bool = True
    rustc: str = 'rustc'
    edition: str = '2021'


@dataclasses.dataclass(frozen=True)
class Configuration:
    source_path: pathlib.Path
    output_path: pathlib.Path


@dataclasses.dataclass(frozen=True)
class OutputFilenames:
    out_directory: pathlib.Path
    stem: str
    file_type: str

    @property
    def out_filename(self) -> pathlib.Path:
        return self.out_directory / (self.stem + self.file_type)


class CompilationSession:
    """Options plus a scratch directory, which is removed on exit."""

    def __init__(self, options: Options) -> None:
        self.options = options
        self.work_directory = pathlib.Path(tempfile.mkdtemp(prefix='rusti-'))

    def __enter__(self) -> 'CompilationSession':
        return self

    def __exit__(self, *exc_info: object) -> None:
        shutil.rmtree(self.work_directory, ignore_errors=True)


def crate_name_of(path: os.PathLike) -> str:
    return pathlib.Path(path).stem.replace('-', '_')


class RustcBackend:
    def build_session(self, options: Options) -> CompilationSession:
        return CompilationSession(options)

    def build_configuration(
        self, session: CompilationSession, binary: str, input: str
    ) -> Configuration:
        source_path = session.work_directory / (binary + SOURCE_SUFFIX)
        source_path.write_text(input, encoding='utf-8')
        return Configuration(source_path, session.work_directory / binary)

    def build_output_filenames(
        self, input: os.PathLike, session: CompilationSession
    ) -> OutputFilenames:
        """Where rustc puts the artifact it builds from the given source."""
        input = pathlib.Path(input)
        if session.options.crate_type == 'lib':
            return OutputFilenames(
                input.parent, 'lib' + crate_name_of(input), '.rlib'
            )
        return OutputFilenames(input.parent, session.options.binary, '')

    def compile_upto(
        self,
        session: CompilationSession,
        config: Configuration,
        input: str,
        stage: Stage,
    ) -> Optional[rusti.syntax.Crate]:
        options = session.options
        command = [
            options.rustc,
            '--edition',
            options.edition,
            '--crate-type',
            options.crate_type,
            '-o',
            str(config.output_path),
        ]
        for path in options.lib_search_paths:
            command += ['-L', path]
        command.append(str(config.source_path))
        _logger.debug('running {}', command)
        status = subprocess.run(command).returncode
        if status != 0:
            raise CompileError(status)
        if stage is Stage.LINK:
            return None
        if options.jit:
            status = subprocess.run([str(config.output_path)]).returncode
            if status != 0:
                raise RuntimeFailure(status)
        return rusti.syntax.parse_crate(input)

    def compile_library(
        self, source_path: os.PathLike, options: Options
    ) -> OutputFilenames:
        """Build an rlib next to its source."""
        options = dataclasses.replace(options, crate_type='lib')
        with self.build_session(options) as session:
            outputs = self.build_output_filenames(source_path, session)
            self.compile_upto(
                session,
                Configuration(pathlib.Path(source_path), outputs.out_filename),
                pathlib.Path(source_path).read_text(encoding='utf-8'),
                Stage.LINK,
            )
        return outputs
