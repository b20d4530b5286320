"""Floating window with an optional border surface.

A :class:`FloatingWindow` owns one buffer shown in a floating window and,
when requested, a second window drawing a box around it. Geometry is
computed from :class:`WindowOptions` (see :func:`window_config`); the border
always sits one cell outside the primary window on every side and is moved
and resized together with it.

Every host call made after construction goes through ``_call`` so that a
window closed out-of-band degrades into no-ops instead of errors.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass
from functools import partial
from typing import Any, Callable, Literal, TypedDict, TypeVar, Union

from floatform.cache import FunctionCache
from floatform.config import BorderChars, get_config
from floatform.errors import ConfigError, HostOperationError
from floatform.host import ContentChange, Host, KeymapOptions
from floatform.keys import KeyId

logger = logging.getLogger(__name__)

T = TypeVar("T")

# int  ->  exact number of columns/rows
# str  ->  percentage string like "50%"
SizeValue = Union[int, str]

KeyHandler = Union[str, Callable[[], Any]]


class WindowOptions(TypedDict, total=False):
    name: str
    width: SizeValue
    height: SizeValue
    row: int
    col: int
    perw: float
    perh: float
    style: str
    relative: str
    border: bool
    modifiable: bool
    enter: bool
    cursorline: bool


@dataclass
class WindowConfig:
    """Resolved geometry handed to the host."""

    row: int
    col: int
    width: int
    height: int
    style: str = "minimal"
    relative: str = "editor"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class Border:
    window: int
    buffer: int
    config: WindowConfig
    hi_ns: int | None = None


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------


def _parse_size_value(value: SizeValue | None, reference_size: int) -> int | None:
    """Resolve a ``SizeValue`` against *reference_size*.

    * ``None``  -> ``None``
    * ``int``   -> returned as-is
    * ``"50%"`` -> ``math.floor(reference_size * 50 / 100)``
    """
    if value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.endswith("%"):
        try:
            pct = float(value[:-1])
            return math.floor(reference_size * pct / 100)
        except ValueError:
            return None
    return None


def window_config(host: Host, options: WindowOptions) -> WindowConfig:
    """Compute window geometry from *options* and the editor size.

    Width and height default to a fraction of the editor (``perw`` and
    ``perh``), row and col default to centering the window.
    """
    cfg = get_config()
    columns, lines = host.columns, host.lines
    perw = options.get("perw") or cfg.perw
    perh = options.get("perh") or cfg.perh

    width = _parse_size_value(options.get("width"), columns)
    if width is None:
        width = math.ceil(columns * perw)
    height = _parse_size_value(options.get("height"), lines)
    if height is None:
        # Leave room for the border and the command line
        height = math.ceil(lines * perh - 4)
    width, height = max(1, width), max(1, height)

    col = options.get("col")
    if col is None:
        col = math.ceil((columns - width) / 2)
    row = options.get("row")
    if row is None:
        row = math.ceil((lines - height) / 2 - 1)

    return WindowConfig(
        row=row,
        col=col,
        width=width,
        height=height,
        style=options.get("style") or cfg.style,
        relative=options.get("relative") or cfg.relative,
    )


def border_config(config: WindowConfig) -> WindowConfig:
    """Geometry of the border surrounding a window laid out by *config*."""
    return WindowConfig(
        row=config.row - 1,
        col=config.col - 1,
        width=config.width + 2,
        height=config.height + 2,
        style="minimal",
        relative=config.relative,
    )


def border_lines(width: int, height: int, chars: BorderChars | None = None) -> list[str]:
    """Box drawing lines framing a *width* x *height* area."""
    c = chars or get_config().border
    top = c.top_left + c.horizontal * width + c.top_right
    mid = c.vertical + " " * width + c.vertical
    bot = c.bottom_left + c.horizontal * width + c.bottom_right
    return [top, *([mid] * height), bot]


# ---------------------------------------------------------------------------
# Shake animation
# ---------------------------------------------------------------------------

AnimationState = Literal["idle", "animating"]


class ShakeAnimation:
    """Horizontal shake driven by the host scheduler.

    Every step is scheduled up front, ``interval_ms`` apart. Steps alternate
    a +1 and -1 column move, and there are ``times * 3 + 1`` of them (an odd
    ``times`` leaves the window where it started). ``after`` runs once the
    final step is done.
    Cancelling turns the remaining steps into no-ops, moves an open window
    back to the column it had when the animation started and skips
    ``after``.
    """

    def __init__(
        self,
        host: Host,
        window: FloatingWindow,
        times: int = 1,
        after: Callable[[], Any] | None = None,
        interval_ms: int | None = None,
    ) -> None:
        self._host = host
        self._window = window
        self._last_step = max(times, 0) * 3
        self._after = after
        self._interval_ms = get_config().shake_interval_ms if interval_ms is None else interval_ms
        self._generation = 0
        self.state: AnimationState = "idle"
        self.step = -1
        self.origin_col = window.config.col

    @property
    def is_running(self) -> bool:
        return self.state == "animating"

    def start(self) -> ShakeAnimation:
        if self.state == "animating":
            return self
        self.state = "animating"
        self.step = -1
        self.origin_col = self._window.config.col
        self._generation += 1
        for i in range(self._last_step + 1):
            self._host.defer(i * self._interval_ms, partial(self._run_step, self._generation, i))
        return self

    def cancel(self) -> None:
        if self.state != "animating":
            return
        self.state = "idle"
        self._generation += 1
        offset = self.origin_col - self._window.config.col
        if offset and self._window.is_open:
            self._window.move(0, offset)

    def _run_step(self, generation: int, index: int) -> None:
        if generation != self._generation or self.state != "animating":
            return
        self.step = index
        self._window.move(0, 1 if index % 2 == 0 else -1)
        if index == self._last_step:
            self.state = "idle"
            if self._after is not None:
                self._after()


# ---------------------------------------------------------------------------
# FloatingWindow
# ---------------------------------------------------------------------------


class FloatingWindow:
    """A floating editor window, optionally framed by a border window."""

    def __init__(self, host: Host, options: WindowOptions) -> None:
        if not options or not options.get("name"):
            raise ConfigError("window name must be specified in options")
        cfg = get_config()
        self._host = host
        self.name: str = options["name"]

        self.buffer = host.create_buffer()
        host.set_buffer_option(self.buffer, "bufhidden", "wipe")
        host.set_buffer_option(self.buffer, "filetype", self.name)

        self.config = window_config(host, options)
        self.border: Border | None = None
        if options.get("border") is True:
            self.border = self._open_border()

        self.window = host.open_window(self.buffer, options.get("enter", True), self.config.to_dict())
        self._open = True
        host.on_buffer_wipeout(self.buffer, self._on_wipeout)
        host.set_window_option(self.window, "cursorline", options.get("cursorline", True))
        host.set_buffer_option(self.buffer, "modifiable", options.get("modifiable", True))
        host.add_highlight(self.buffer, -1, cfg.header_highlight, 0, 0, -1)

        self.cache = FunctionCache(host, f"window_{self.name}_keymap")
        self._hi_ns: int | None = None
        self._on_change: Callable[[ContentChange], Any] | None = None
        self._attached = False
        self._animation: ShakeAnimation | None = None
        logger.debug("Opened window %s at %s", self.name, self.config)

    @classmethod
    def open(cls, host: Host, options: WindowOptions) -> FloatingWindow:
        return cls(host, options)

    @property
    def is_open(self) -> bool:
        return self._open

    # -- Internals -------------------------------------------------------

    def _call(self, fn: Callable[..., T], *args: Any, default: T | None = None) -> T | None:
        try:
            return fn(*args)
        except HostOperationError:
            logger.debug(
                "%s failed for window %s", getattr(fn, "__name__", fn), self.name, exc_info=True
            )
            return default

    def _open_border(self) -> Border:
        config = border_config(self.config)
        buf = self._host.create_buffer()
        self._host.set_buffer_option(buf, "bufhidden", "wipe")
        win = self._host.open_window(buf, False, config.to_dict())
        self._host.set_lines(buf, border_lines(self.config.width, self.config.height))
        return Border(window=win, buffer=buf, config=config)

    def _on_wipeout(self) -> None:
        self._open = False
        if self._animation is not None:
            self._animation.cancel()
        if self.border is not None:
            self._call(self._host.wipe_buffer, self.border.buffer)

    def _dispatch_change(self, change: ContentChange) -> None:
        if self._on_change is not None:
            self._on_change(change)

    def _namespace(self) -> int:
        if self._hi_ns is None:
            self._hi_ns = self._host.create_namespace(f"{self.name}_hi")
        return self._hi_ns

    # -- Content ---------------------------------------------------------

    def lock(self) -> None:
        """Prevent the buffer from being modified."""
        self._call(self._host.set_buffer_option, self.buffer, "modifiable", False)

    def unlock(self) -> None:
        self._call(self._host.set_buffer_option, self.buffer, "modifiable", True)

    def write_lines(self, lines: list[str]) -> None:
        """Replace the whole buffer with *lines*."""
        self._call(self._host.set_lines, self.buffer, list(lines))

    def read_lines(self) -> list[str]:
        return self._call(self._host.get_lines, self.buffer, default=[]) or []

    def keymap(
        self,
        mode: str,
        bindings: dict[KeyId, KeyHandler],
        options: KeymapOptions | None = None,
    ) -> None:
        """Bind keys in *mode* to host commands or callables.

        Callables are stored in the window's :class:`FunctionCache` and bound
        through the indirection token it returns.
        """
        if not mode:
            raise ConfigError("keybind mode must be specified")
        if not bindings:
            raise ConfigError("keybind bindmap must not be empty")
        opts: KeymapOptions = {"nowait": True, "noremap": True, "silent": True}
        opts.update(options or {})
        for bind, op in bindings.items():
            rhs = op if isinstance(op, str) else self.cache.register(mode, bind, op)
            self._call(self._host.set_keymap, self.buffer, mode, bind, rhs, dict(opts))

    def on_content_change(self, handler: Callable[[ContentChange], Any]) -> None:
        """Set the single content listener; a later call replaces it."""
        self._on_change = handler
        if not self._attached:
            self._call(self._host.attach, self.buffer, self._dispatch_change)
            self._attached = True

    # -- Cursor ----------------------------------------------------------

    def get_cursor(self) -> tuple[int, int]:
        """Current ``(row, col)``: 1-based row, 0-based column."""
        cursor = self._call(self._host.get_cursor, self.window)
        return tuple(cursor) if cursor is not None else (1, 0)  # type: ignore[return-value]

    def set_cursor(self, row: int, col: int) -> None:
        self._call(self._host.set_cursor, self.window, row, col)

    def move_cursor(self, row: int, col: int) -> None:
        """Move the cursor relatively, clamped to the window size."""
        current_row, current_col = self.get_cursor()
        new_row = max(0, min(current_row + row, self.config.height))
        new_col = max(0, min(current_col + col, self.config.width))
        self.set_cursor(new_row, new_col)

    # -- Highlights ------------------------------------------------------

    def highlight(self, group: str | None, row: int, col_start: int = 0, col_end: int = -1) -> None:
        """Highlight part of a 0-based *row*; ``group=None`` clears the row."""
        ns = self._namespace()
        if group is None:
            self._call(self._host.clear_namespace, self.buffer, ns, row, row + 1)
        else:
            self._call(self._host.add_highlight, self.buffer, ns, group, row, col_start, col_end)

    def set_border_color(self, group: str | None) -> None:
        """Color the whole border with *group*; ``None`` restores it."""
        border = self.border
        if border is None:
            return
        if border.hi_ns is None:
            border.hi_ns = self._host.create_namespace(f"{self.name}_hi_border")
        if group is None:
            self._call(self._host.clear_namespace, border.buffer, border.hi_ns, 0, -1)
            return
        height = self._call(self._host.window_height, border.window, default=0) or 0
        for row in range(height):
            self._call(self._host.add_highlight, border.buffer, border.hi_ns, group, row, 0, -1)

    # -- Geometry --------------------------------------------------------

    def update_options(self, options: WindowOptions) -> None:
        """Recompute geometry from *options* and reconfigure both windows."""
        previous = self.config
        self.config = window_config(self._host, options)
        self._call(self._host.set_window_config, self.window, self.config.to_dict())
        if self.border is not None:
            self.border.config = border_config(self.config)
            self._call(self._host.set_window_config, self.border.window, self.border.config.to_dict())
            if (previous.width, previous.height) != (self.config.width, self.config.height):
                self._call(
                    self._host.set_lines,
                    self.border.buffer,
                    border_lines(self.config.width, self.config.height),
                )

    def move(self, row: int, col: int) -> None:
        """Move the window by *row* rows and *col* columns."""
        options: WindowOptions = self.config.to_dict()  # type: ignore[assignment]
        options["row"] = self.config.row + row
        options["col"] = self.config.col + col
        self.update_options(options)

    def shake(self, times: int = 1, after: Callable[[], Any] | None = None) -> ShakeAnimation:
        """Shake the window sideways *times* times, then call *after*."""
        if self._animation is not None:
            self._animation.cancel()
        self._animation = ShakeAnimation(self._host, self, times, after).start()
        return self._animation

    # -- Teardown --------------------------------------------------------

    def close(self, force: bool = True) -> None:
        """Close the window and its border; already closed windows are ignored."""
        if self._animation is not None:
            self._animation.cancel()
        self._call(self._host.close_window, self.window, force)
        if self.border is not None:
            self._call(self._host.close_window, self.border.window, force)
        self._open = False
        logger.debug("Closed window %s", self.name)
