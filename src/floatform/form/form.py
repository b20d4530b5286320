"""Form: an ordered set of fields shown in one floating window.

Each field is rendered as one row of the window. Keys are bound once per
(mode, key) for the whole form and dispatched to the field under the
cursor; buffer edits are forwarded to the field owning the edited row.
Submitting reads the rows back, validates them and either closes the
form with the parsed values or shakes the window and stays open.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Any, Callable, Literal

from floatform.config import get_config
from floatform.errors import ConfigError, ValidationError
from floatform.form.button import Button
from floatform.form.field import Field
from floatform.highlights import Highlights, define_highlights
from floatform.host import ContentChange, Host
from floatform.keys import KeyId
from floatform.window import FloatingWindow, WindowOptions

logger = logging.getLogger(__name__)

FormState = Literal["closed", "open"]


def default_submit_button(form: Form) -> Field:
    """Build the default ``<submit>`` button for *form*."""
    return Button("submit", on_press=form.submit)


class Form:
    """A form made of fields, opened in a bordered floating window.

    Use :meth:`open` to show it; :meth:`submit` returns the parsed values
    (also kept in :attr:`values`) or ``None`` if any field is invalid.
    """

    def __init__(
        self,
        host: Host,
        name: str,
        fields: list[Field],
        *,
        on_submit: Callable[[dict[str, Any]], Any] | None = None,
        no_submit: bool = False,
        submit_button: Field | None = None,
        window_options: WindowOptions | None = None,
    ) -> None:
        if not name:
            raise ConfigError("form name must be declared")
        if fields is None:
            raise ConfigError("form fields must be declared")
        self._host = host
        self.name = name
        self.fields: list[Field] = list(fields)
        if not no_submit:
            self.fields.append(submit_button or default_submit_button(self))

        seen: set[str] = set()
        for i, field in enumerate(self.fields, start=1):
            if field.name in seen:
                raise ConfigError(f"duplicate field name: {field.name}")
            seen.add(field.name)
            field.pos = (i, 0)

        winopts: WindowOptions = dict(window_options or {})  # type: ignore[assignment]
        winopts["name"] = name
        winopts.setdefault(
            "width", max([get_config().min_form_width, *(f.width for f in self.fields)])
        )
        winopts.setdefault("height", len(self.fields))
        winopts.setdefault("border", True)
        self.window_options = winopts

        self.window: FloatingWindow | None = None
        self.values: dict[str, Any] | None = None
        self.on_submit = on_submit

    def __repr__(self) -> str:
        return f"Form(name={self.name!r}, state={self.state!r}, fields={len(self.fields)})"

    # -- State -----------------------------------------------------------

    @property
    def state(self) -> FormState:
        return "open" if self.is_open else "closed"

    @property
    def is_open(self) -> bool:
        if self.window is not None and not self.window.is_open:
            # Closed by the user outside of the form
            self.window = None
        return self.window is not None

    def get_field(self, name: str) -> Field | None:
        for field in self.fields:
            if field.name == name:
                return field
        return None

    # -- Lifecycle -------------------------------------------------------

    def open(self) -> None:
        """Show the form in a new window. No-op if already open."""
        if self.is_open:
            return
        self.values = None
        define_highlights(self._host)
        window = FloatingWindow(self._host, self.window_options)
        self.window = window
        window.keymap("n", {"<Esc>": self.close})
        self._render(window)
        self._apply_keymap(window)
        logger.info("Opened form %s", self.name)

    def close(self) -> None:
        """Close the form's window. Parsed values are kept."""
        if self.window is None:
            return
        self.window.close()
        self.window = None
        logger.debug("Closed form %s", self.name)

    def invalid(self) -> None:
        """Flash the border and shake the window to signal a bad submission."""
        window = self.window if self.is_open else None
        if window is None:
            return
        window.set_border_color(Highlights.FORM_INVALID)
        window.shake(1, after=lambda: window.set_border_color(None))

    def submit(self) -> dict[str, Any] | None:
        """Validate every field and close the form.

        Returns the parsed values, or ``None`` when the form is closed or a
        field is invalid (the form then stays open).
        """
        window = self.window if self.is_open else None
        if window is None:
            return None
        lines = window.read_lines()
        values: dict[str, Any] = {}
        for row, line in enumerate(lines, start=1):
            for field in self.fields:
                if not field.is_active((row, 0)):
                    continue
                try:
                    values[field.name] = field.parse(line)
                except ValidationError as e:
                    logger.info("Form %s: field %s rejected %r", self.name, field.name, e.value)
                    self.invalid()
                    return None

        for field in self.fields:
            if field.on_submit is not None:
                field.on_submit(values.get(field.name))
        if self.on_submit is not None:
            self.on_submit(values)

        self.close()
        self.values = values
        logger.info("Submitted form %s", self.name)
        return values

    # -- Internals -------------------------------------------------------

    def _render(self, window: FloatingWindow) -> None:
        lines: list[str] = []
        for field in self.fields:
            field.render(lines)
        window.write_lines(lines)

    def _apply_keymap(self, window: FloatingWindow) -> None:
        keymap: dict[str, dict[KeyId, Callable[[], None]]] = {"i": {}, "n": {}}
        for field in self.fields:
            for mode, keys in field.keymap.items():
                binds = keymap.setdefault(mode, {})
                for key in keys:
                    binds[key] = partial(self._dispatch_key, window, mode, key)
        window.on_content_change(partial(self._dispatch_change, window))
        for mode, binds in keymap.items():
            if binds:
                window.keymap(mode, binds)

    def _dispatch_key(self, window: FloatingWindow, mode: str, key: KeyId) -> None:
        cursor = window.get_cursor()
        for field in self.fields:
            handler = field.keymap.get(mode, {}).get(key)
            if handler is not None and field.is_active(cursor):
                handler(window, field)

    def _dispatch_change(self, window: FloatingWindow, change: ContentChange) -> None:
        lines = window.read_lines()
        line = lines[change.row] if change.row < len(lines) else ""
        cursor = (change.row + 1, change.col)
        for field in self.fields:
            if field.on_update is not None and field.is_active(cursor):
                field.on_update(window, field, line, change)
