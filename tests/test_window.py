"""Tests for floatform.window -- floating windows, borders and shaking."""

from __future__ import annotations

import pytest

from floatform.config import Config, set_config
from floatform.errors import ConfigError
from floatform.window import (
    FloatingWindow,
    WindowConfig,
    border_config,
    border_lines,
    window_config,
)

from .virtual_host import VirtualHost


def _assert_border_inset(host: VirtualHost, win: FloatingWindow) -> None:
    assert win.border is not None
    primary = host.windows[win.window].config
    border = host.windows[win.border.window].config
    assert border["row"] == primary["row"] - 1
    assert border["col"] == primary["col"] - 1
    assert border["width"] == primary["width"] + 2
    assert border["height"] == primary["height"] + 2


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------


class TestWindowConfig:
    def test_defaults_are_fractions_of_editor(self) -> None:
        host = VirtualHost(lines=40, columns=100)
        cfg = window_config(host, {"name": "w"})
        assert cfg.width == 50
        assert cfg.height == 12  # ceil(40 * 0.4 - 4)

    def test_defaults_center_the_window(self) -> None:
        host = VirtualHost(lines=40, columns=100)
        cfg = window_config(host, {"name": "w"})
        assert cfg.col == 25
        assert cfg.row == 13  # ceil((40 - 12) / 2 - 1)

    def test_explicit_values_win(self) -> None:
        host = VirtualHost()
        cfg = window_config(host, {"name": "w", "width": 30, "height": 5, "row": 2, "col": 3})
        assert (cfg.row, cfg.col, cfg.width, cfg.height) == (2, 3, 30, 5)

    def test_zero_position_is_respected(self) -> None:
        cfg = window_config(VirtualHost(), {"name": "w", "row": 0, "col": 0})
        assert (cfg.row, cfg.col) == (0, 0)

    def test_percentage_sizes(self) -> None:
        host = VirtualHost(lines=40, columns=100)
        cfg = window_config(host, {"name": "w", "width": "60%", "height": "25%"})
        assert (cfg.width, cfg.height) == (60, 10)

    def test_perw_perh_override_fractions(self) -> None:
        host = VirtualHost(lines=40, columns=100)
        cfg = window_config(host, {"name": "w", "perw": 0.8, "perh": 0.5})
        assert (cfg.width, cfg.height) == (80, 16)

    def test_style_and_relative_defaults(self) -> None:
        cfg = window_config(VirtualHost(), {"name": "w"})
        assert cfg.style == "minimal"
        assert cfg.relative == "editor"

    def test_config_defaults_are_used(self) -> None:
        set_config(Config(perw=0.2))
        cfg = window_config(VirtualHost(lines=40, columns=100), {"name": "w"})
        assert cfg.width == 20

    def test_border_config_inset(self) -> None:
        b = border_config(WindowConfig(row=5, col=7, width=20, height=3))
        assert (b.row, b.col, b.width, b.height) == (4, 6, 22, 5)

    def test_border_lines(self) -> None:
        assert border_lines(2, 1) == ["╭──╮", "│  │", "╰──╯"]


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestFloatingWindowOpen:
    def test_name_is_required(self, host: VirtualHost) -> None:
        with pytest.raises(ConfigError):
            FloatingWindow(host, {})  # type: ignore[typeddict-item]

    def test_open_creates_buffer_and_window(self, host: VirtualHost) -> None:
        win = FloatingWindow.open(host, {"name": "demo", "width": 10, "height": 2})
        assert win.is_open
        assert host.windows[win.window].buffer == win.buffer
        assert host.current_window == win.window
        assert host.buffers[win.buffer].options["filetype"] == "demo"
        assert host.buffers[win.buffer].options["bufhidden"] == "wipe"

    def test_open_sets_cursorline_and_modifiable(self, host: VirtualHost) -> None:
        win = FloatingWindow(host, {"name": "demo"})
        assert host.windows[win.window].options["cursorline"] is True
        assert host.buffers[win.buffer].options["modifiable"] is True

    def test_non_modifiable_on_request(self, host: VirtualHost) -> None:
        win = FloatingWindow(host, {"name": "demo", "modifiable": False})
        assert host.buffers[win.buffer].options["modifiable"] is False

    def test_header_highlight_on_first_line(self, host: VirtualHost) -> None:
        win = FloatingWindow(host, {"name": "demo"})
        assert ("FloatformHeader", 0, 0, -1) in host.highlights(win.buffer, -1)

    def test_no_border_by_default(self, host: VirtualHost) -> None:
        win = FloatingWindow(host, {"name": "demo"})
        assert win.border is None
        assert len(host.windows) == 1

    def test_border_surrounds_window(self, host: VirtualHost) -> None:
        win = FloatingWindow(host, {"name": "demo", "width": 4, "height": 2, "border": True})
        _assert_border_inset(host, win)
        assert win.border is not None
        assert host.get_lines(win.border.buffer) == ["╭────╮", "│    │", "│    │", "╰────╯"]

    def test_primary_keeps_focus_over_border(self, host: VirtualHost) -> None:
        win = FloatingWindow(host, {"name": "demo", "border": True})
        assert host.current_window == win.window


# ---------------------------------------------------------------------------
# Content, keymaps, cursor
# ---------------------------------------------------------------------------


class TestFloatingWindowContent:
    def test_write_then_read_lines(self, host: VirtualHost) -> None:
        win = FloatingWindow(host, {"name": "demo"})
        win.write_lines(["a", "b"])
        assert win.read_lines() == ["a", "b"]

    def test_lock_prevents_writes(self, host: VirtualHost) -> None:
        win = FloatingWindow(host, {"name": "demo"})
        win.write_lines(["a"])
        win.lock()
        win.write_lines(["b"])
        assert win.read_lines() == ["a"]
        win.unlock()
        win.write_lines(["c"])
        assert win.read_lines() == ["c"]

    def test_read_lines_after_close_is_empty(self, host: VirtualHost) -> None:
        win = FloatingWindow(host, {"name": "demo"})
        win.close()
        assert win.read_lines() == []


class TestFloatingWindowKeymap:
    def test_requires_mode_and_bindings(self, host: VirtualHost) -> None:
        win = FloatingWindow(host, {"name": "demo"})
        with pytest.raises(ConfigError):
            win.keymap("", {"q": ":q<cr>"})
        with pytest.raises(ConfigError):
            win.keymap("n", {})

    def test_string_bindings_are_bound_directly(self, host: VirtualHost) -> None:
        win = FloatingWindow(host, {"name": "demo"})
        win.keymap("n", {"q": ":close<cr>"})
        rhs, opts = host.buffers[win.buffer].keymaps[("n", "q")]
        assert rhs == ":close<cr>"
        assert opts == {"nowait": True, "noremap": True, "silent": True}

    def test_callables_go_through_the_cache(self, host: VirtualHost) -> None:
        calls: list[str] = []
        win = FloatingWindow(host, {"name": "demo"})
        win.keymap("n", {"<C-x>": lambda: calls.append("x")})
        assert "n\\<C-x\\>" in host.vars["window_demo_keymap"]
        assert host.press("n", "<C-x>")
        assert calls == ["x"]

    def test_explicit_false_option_is_kept(self, host: VirtualHost) -> None:
        win = FloatingWindow(host, {"name": "demo"})
        win.keymap("n", {"q": ":q<cr>"}, {"nowait": False})
        _, opts = host.buffers[win.buffer].keymaps[("n", "q")]
        assert opts["nowait"] is False
        assert opts["silent"] is True


class TestFloatingWindowContentChange:
    def test_last_registration_wins(self, host: VirtualHost) -> None:
        first: list[int] = []
        second: list[int] = []
        win = FloatingWindow(host, {"name": "demo"})
        win.write_lines(["abc"])
        win.on_content_change(lambda c: first.append(c.row))
        win.on_content_change(lambda c: second.append(c.row))
        host.edit_line(win.buffer, 0, "abd")
        assert first == []
        assert second == [0]

    def test_change_reports_column(self, host: VirtualHost) -> None:
        changes = []
        win = FloatingWindow(host, {"name": "demo"})
        win.write_lines(["abc"])
        win.on_content_change(changes.append)
        host.edit_line(win.buffer, 0, "abX")
        assert (changes[0].row, changes[0].col) == (0, 2)


class TestFloatingWindowCursor:
    def _window(self, host: VirtualHost) -> FloatingWindow:
        win = FloatingWindow(host, {"name": "demo", "width": 10, "height": 3})
        win.write_lines(["0123456789", "0123456789", "0123456789"])
        return win

    def test_set_and_get(self, host: VirtualHost) -> None:
        win = self._window(host)
        win.set_cursor(2, 4)
        assert win.get_cursor() == (2, 4)

    def test_relative_move(self, host: VirtualHost) -> None:
        win = self._window(host)
        win.set_cursor(1, 2)
        win.move_cursor(1, 3)
        assert win.get_cursor() == (2, 5)

    def test_move_clamps_to_height(self, host: VirtualHost) -> None:
        win = self._window(host)
        win.set_cursor(2, 0)
        win.move_cursor(10, 0)
        assert win.get_cursor() == (3, 0)

    def test_move_clamps_to_width(self, host: VirtualHost) -> None:
        win = self._window(host)
        win.set_cursor(1, 8)
        win.move_cursor(0, 50)
        assert win.get_cursor() == (1, 10)

    def test_move_floors_column_at_zero(self, host: VirtualHost) -> None:
        win = self._window(host)
        win.set_cursor(2, 3)
        win.move_cursor(0, -10)
        assert win.get_cursor() == (2, 0)

    def test_cursor_on_closed_window_is_default(self, host: VirtualHost) -> None:
        win = self._window(host)
        win.close()
        win.set_cursor(1, 1)
        assert win.get_cursor() == (1, 0)


# ---------------------------------------------------------------------------
# Highlights
# ---------------------------------------------------------------------------


class TestFloatingWindowHighlight:
    def test_highlight_uses_lazy_namespace(self, host: VirtualHost) -> None:
        win = FloatingWindow(host, {"name": "demo"})
        assert "demo_hi" not in host.namespaces
        win.highlight("Error", 1, 4)
        ns = host.namespaces["demo_hi"]
        assert host.highlights(win.buffer, ns) == [("Error", 1, 4, -1)]

    def test_clear_only_touches_that_row(self, host: VirtualHost) -> None:
        win = FloatingWindow(host, {"name": "demo"})
        win.write_lines(["a", "b", "c"])
        win.highlight("Error", 0)
        win.highlight("Error", 1)
        win.highlight(None, 0)
        ns = host.namespaces["demo_hi"]
        assert host.highlights(win.buffer, ns) == [("Error", 1, 0, -1)]

    def test_border_color_without_border_is_noop(self, host: VirtualHost) -> None:
        win = FloatingWindow(host, {"name": "demo"})
        win.set_border_color("Error")
        assert "demo_hi_border" not in host.namespaces

    def test_border_color_covers_every_row(self, host: VirtualHost) -> None:
        win = FloatingWindow(host, {"name": "demo", "height": 3, "border": True})
        win.set_border_color("Error")
        assert win.border is not None
        ns = host.namespaces["demo_hi_border"]
        rows = [h[1] for h in host.highlights(win.border.buffer, ns)]
        assert rows == [0, 1, 2, 3, 4]

    def test_border_color_none_clears(self, host: VirtualHost) -> None:
        win = FloatingWindow(host, {"name": "demo", "height": 3, "border": True})
        win.set_border_color("Error")
        win.set_border_color(None)
        assert win.border is not None
        ns = host.namespaces["demo_hi_border"]
        assert host.highlights(win.border.buffer, ns) == []


# ---------------------------------------------------------------------------
# Geometry updates and shaking
# ---------------------------------------------------------------------------


class TestFloatingWindowGeometry:
    def test_update_options_reconfigures_both(self, host: VirtualHost) -> None:
        win = FloatingWindow(host, {"name": "demo", "border": True})
        win.update_options({"name": "demo", "row": 3, "col": 4, "width": 12, "height": 6})
        assert host.windows[win.window].config["row"] == 3
        _assert_border_inset(host, win)

    def test_resize_redraws_border(self, host: VirtualHost) -> None:
        win = FloatingWindow(host, {"name": "demo", "width": 2, "height": 1, "border": True})
        win.update_options({"name": "demo", "width": 3, "height": 1})
        assert win.border is not None
        assert host.get_lines(win.border.buffer) == ["╭───╮", "│   │", "╰───╯"]

    def test_move_is_relative(self, host: VirtualHost) -> None:
        win = FloatingWindow(host, {"name": "demo", "row": 5, "col": 5, "border": True})
        win.move(2, -1)
        assert (win.config.row, win.config.col) == (7, 4)
        assert host.windows[win.window].config["col"] == 4
        _assert_border_inset(host, win)

    def test_move_keeps_size(self, host: VirtualHost) -> None:
        win = FloatingWindow(host, {"name": "demo", "width": 17, "height": 4})
        win.move(1, 1)
        assert (win.config.width, win.config.height) == (17, 4)


class TestShake:
    def test_shake_is_deferred(self, host: VirtualHost) -> None:
        win = FloatingWindow(host, {"name": "demo", "col": 10})
        anim = win.shake()
        assert anim.is_running
        assert host.pending == 4
        assert win.config.col == 10

    def test_steps_alternate_and_return_home(self, host: VirtualHost) -> None:
        win = FloatingWindow(host, {"name": "demo", "col": 10, "border": True})
        cols: list[int] = []
        win.shake()
        for t in (0, 100, 200, 300):
            host.run_deferred(until_ms=t)
            cols.append(win.config.col)
            _assert_border_inset(host, win)
        assert cols == [11, 10, 11, 10]

    def test_steps_are_spaced_by_interval(self, host: VirtualHost) -> None:
        set_config(Config(shake_interval_ms=50))
        win = FloatingWindow(host, {"name": "demo", "col": 10})
        win.shake()
        assert host.run_deferred(until_ms=100) == 3

    def test_after_runs_once_at_the_end(self, host: VirtualHost) -> None:
        done: list[int] = []
        win = FloatingWindow(host, {"name": "demo"})
        anim = win.shake(2, after=lambda: done.append(win.config.col))
        assert host.pending == 7
        host.run_deferred()
        assert len(done) == 1
        assert not anim.is_running
        assert anim.step == 6

    def test_cancel_stops_remaining_steps(self, host: VirtualHost) -> None:
        done: list[bool] = []
        win = FloatingWindow(host, {"name": "demo", "col": 10})
        anim = win.shake(after=lambda: done.append(True))
        host.run_deferred(until_ms=0)
        assert win.config.col == 11
        anim.cancel()
        assert win.config.col == 10
        host.run_deferred()
        assert win.config.col == 10
        assert done == []

    def test_reshake_mid_animation_returns_home(self, host: VirtualHost) -> None:
        win = FloatingWindow(host, {"name": "demo", "col": 10, "border": True})
        win.shake()
        host.run_deferred(until_ms=0)
        second = win.shake()
        assert second.origin_col == 10
        host.run_deferred()
        assert win.config.col == 10
        assert host.windows[win.border.window].config["col"] == 9  # type: ignore[union-attr]

    def test_close_mid_animation_is_tolerated(self, host: VirtualHost) -> None:
        win = FloatingWindow(host, {"name": "demo", "border": True})
        win.shake()
        host.run_deferred(until_ms=100)
        win.close()
        host.run_deferred()
        assert host.windows == {}


# ---------------------------------------------------------------------------
# Teardown
# ---------------------------------------------------------------------------


class TestFloatingWindowClose:
    def test_close_removes_both_windows(self, host: VirtualHost) -> None:
        win = FloatingWindow(host, {"name": "demo", "border": True})
        win.close()
        assert host.windows == {}
        assert not win.is_open

    def test_close_twice_is_quiet(self, host: VirtualHost) -> None:
        win = FloatingWindow(host, {"name": "demo", "border": True})
        win.close()
        win.close()

    def test_wiping_primary_wipes_border(self, host: VirtualHost) -> None:
        win = FloatingWindow(host, {"name": "demo", "border": True})
        assert win.border is not None
        border_buffer = win.border.buffer
        host.wipe_buffer(win.buffer)
        assert border_buffer not in host.buffers
        assert not win.is_open
