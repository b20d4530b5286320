"""Text input fields and their validated variants."""

from __future__ import annotations

import math
import re
from typing import Any

from floatform.errors import ValidationError
from floatform.form.field import Field, FieldHandler, Keymap, Validator
from floatform.highlights import Highlights
from floatform.host import ContentChange
from floatform.utils import setdefault
from floatform.window import FloatingWindow


class Matches:
    """Common patterns for :func:`MatchInput`."""

    PHONE = r"\d{3}-\d{3}-\d{4}"
    EMAIL = r"[A-Za-z0-9+.\-_]+@[A-Za-z0-9+.\-_]+\.[A-Za-z]{2,}"


_BOOLEANS: dict[str, bool] = {
    "true": True,
    "1": True,
    "false": False,
    "0": False,
}


def protect_down(window: FloatingWindow, field: Field) -> None:
    """Move down a row instead of inserting a newline."""
    window.move_cursor(1, 0)


def protect_field(direction: int) -> FieldHandler:
    """Build a handler moving the cursor by *direction* columns.

    The cursor never enters the field's label; moving left from the first
    value column stays there.
    """

    def handler(window: FloatingWindow, field: Field) -> None:
        row, col = window.get_cursor()
        protected = field.label_width
        if col < protected or (direction < 0 and col == protected):
            window.set_cursor(row, protected)
        else:
            window.move_cursor(0, direction)

    return handler


def dyn_highlight(window: FloatingWindow, field: Field, line: str, change: ContentChange) -> None:
    """Mark the value region invalid while it fails validation."""
    window.highlight(None, change.row)
    try:
        field.parse(line)
    except ValidationError:
        window.highlight(Highlights.FIELD_INVALID, change.row, field.label_width)


def TextInput(
    name: str,
    *,
    validate: Validator | None = None,
    keymap: Keymap | None = None,
    **options: Any,
) -> Field:
    """Build a free text field.

    With a validator and no explicit ``on_update`` the field validates live.
    """
    keymap = {mode: dict(keys) for mode, keys in (keymap or {}).items()}
    for mode in ("n", "i"):
        keys = setdefault(keymap, mode, {})
        keys["<Enter>"] = protect_down
        keys["<Left>"] = protect_field(-1)
        keys["<Right>"] = protect_field(1)
    if validate is not None:
        options.setdefault("on_update", dyn_highlight)
    return Field(name, validate=validate, keymap=keymap, **options)


def _match(pattern: str) -> Validator:
    compiled = re.compile(pattern)

    def validate(value: str) -> str:
        if compiled.fullmatch(value) is None:
            raise ValidationError(f"invalid: {value}", value)
        return value

    return validate


def _number(value: str) -> int | float:
    try:
        return int(value)
    except ValueError:
        pass
    try:
        number = float(value)
    except ValueError:
        raise ValidationError(f"invalid number: {value}", value) from None
    if not math.isfinite(number):
        raise ValidationError(f"invalid number: {value}", value)
    return number


def _render_bool(field: Field, lines: list[str]) -> None:
    value = field.value
    if isinstance(value, bool):
        value = "true" if value else "false"
    lines.append(f"{field.name}: {value}")


def _boolean(value: str) -> bool:
    result = _BOOLEANS.get(value)
    if result is None:
        raise ValidationError(f"invalid boolean: {value}", value)
    return result


def MatchInput(name: str, match: str, **options: Any) -> Field:
    """Build a text field whose whole value must match *match*."""
    return TextInput(name, validate=_match(match), **options)


def NumberInput(name: str, **options: Any) -> Field:
    """Build a text field parsed as an int, or a finite float."""
    return TextInput(name, validate=_number, **options)


def BoolInput(name: str, **options: Any) -> Field:
    """Build a text field accepting ``true``/``1`` and ``false``/``0``."""
    options.setdefault("render", _render_bool)
    return TextInput(name, validate=_boolean, **options)
