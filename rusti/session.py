"""The state a REPL run accumulates between inputs.

Sessions are never mutated. Every step that changes the session returns a new
one, so a failed evaluation rolls back by keeping the previous value."""

import dataclasses
from typing import Tuple


@dataclasses.dataclass(frozen=True)
class Session:
    prompt: str = 'rusti> '
    binary_path: str = 'rusti'
    running: bool = True
    view_items: str = ''
    statements: str = ''
    lib_search_paths: Tuple[str, ...] = ()

    def with_view_item(self, text: str) -> 'Session':
        return dataclasses.replace(
            self, view_items=_append_line(self.view_items, text)
        )

    def with_statement(self, text: str) -> 'Session':
        return dataclasses.replace(
            self, statements=_append_line(self.statements, text)
        )

    def with_lib_search_path(self, path: str) -> 'Session':
        if path in self.lib_search_paths:
            return self
        return dataclasses.replace(
            self, lib_search_paths=(*self.lib_search_paths, path)
        )

    def cleared(self) -> 'Session':
        return dataclasses.replace(self, view_items='', statements='')

    def stopped(self) -> 'Session':
        return dataclasses.replace(self, running=False)


def _append_line(buffer: str, text: str) -> str:
    # Old content always stays a prefix of the new content.
    return buffer + '\n' + text if buffer else text
