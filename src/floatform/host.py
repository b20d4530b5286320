"""Host editor abstraction.

Provides the ``Host`` protocol that every floatform object talks through.
A host owns buffers (text surfaces), windows bound to buffers, keymaps,
highlight namespaces, a deferred scheduler and a named variable store.

Buffer rows given to and returned by ``set_lines``/``get_lines`` and the
highlight calls are 0-based; cursor rows are 1-based and cursor columns
0-based, matching the editor's own conventions.

Any operation on a buffer, window or variable that does not exist must
raise :class:`~floatform.errors.HostOperationError`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Protocol, TypedDict


@dataclass(frozen=True)
class ContentChange:
    """Location of a buffer mutation (0-based row, 0-based column)."""

    row: int
    col: int


class KeymapOptions(TypedDict, total=False):
    nowait: bool
    noremap: bool
    silent: bool


class Host(Protocol):
    """Interface for host editor operations."""

    # -- Editor ----------------------------------------------------------

    @property
    def columns(self) -> int: ...

    @property
    def lines(self) -> int: ...

    # -- Buffers ---------------------------------------------------------

    def create_buffer(self) -> int: ...

    def set_buffer_option(self, buf: int, name: str, value: Any) -> None: ...

    def on_buffer_wipeout(self, buf: int, callback: Callable[[], None]) -> None:
        """Run *callback* once *buf* is wiped out."""
        ...

    def wipe_buffer(self, buf: int) -> None: ...

    def set_lines(self, buf: int, lines: list[str]) -> None: ...

    def get_lines(self, buf: int) -> list[str]: ...

    def attach(self, buf: int, callback: Callable[[ContentChange], None]) -> None:
        """Subscribe *callback* to content mutations of *buf*."""
        ...

    # -- Windows ---------------------------------------------------------

    def open_window(self, buf: int, enter: bool, config: dict[str, Any]) -> int: ...

    def set_window_config(self, win: int, config: dict[str, Any]) -> None: ...

    def set_window_option(self, win: int, name: str, value: Any) -> None: ...

    def window_height(self, win: int) -> int: ...

    def close_window(self, win: int, force: bool) -> None: ...

    def get_cursor(self, win: int) -> tuple[int, int]: ...

    def set_cursor(self, win: int, row: int, col: int) -> None: ...

    # -- Keymaps ---------------------------------------------------------

    def set_keymap(
        self, buf: int, mode: str, lhs: str, rhs: str, options: KeymapOptions
    ) -> None: ...

    # -- Highlights ------------------------------------------------------

    def create_namespace(self, name: str) -> int: ...

    def define_highlight(self, group: str, attrs: dict[str, Any]) -> None: ...

    def add_highlight(
        self, buf: int, ns: int, group: str, row: int, col_start: int, col_end: int
    ) -> None: ...

    def clear_namespace(self, buf: int, ns: int, line_start: int, line_end: int) -> None: ...

    # -- Scheduling ------------------------------------------------------

    def defer(self, delay_ms: int, callback: Callable[[], None]) -> None:
        """Run *callback* on the event loop after *delay_ms* without blocking."""
        ...

    # -- Variables -------------------------------------------------------

    def get_var(self, name: str) -> Any: ...

    def set_var(self, name: str, value: Any) -> None: ...

    def del_var(self, name: str) -> None: ...
