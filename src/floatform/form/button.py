"""Button field."""

from __future__ import annotations

from typing import Any, Callable

from floatform.form.field import Field, FieldHandler, Keymap, Validator
from floatform.utils import setdefault
from floatform.window import FloatingWindow


def render(field: Field, lines: list[str]) -> None:
    lines.append(f"<{field.name}>")


def press(on_press: Callable[[], Any] | None) -> FieldHandler:
    def handler(window: FloatingWindow, field: Field) -> None:
        if on_press is not None:
            on_press()

    return handler


def _constant(value: Any) -> Validator:
    def validate(_: str) -> Any:
        return value

    return validate


def Button(
    name: str,
    *,
    on_press: Callable[[], Any] | None = None,
    value: Any = True,
    keymap: Keymap | None = None,
    **options: Any,
) -> Field:
    """Build a button rendered as ``<name>``; ``<Enter>`` calls *on_press*.

    Its submitted value is always *value*.
    """
    keymap = {mode: dict(keys) for mode, keys in (keymap or {}).items()}
    for mode in ("n", "i"):
        setdefault(keymap, mode, {})["<Enter>"] = press(on_press)
    options.setdefault("render", render)
    options.setdefault("validate", _constant(value))
    return Field(name, keymap=keymap, **options)
