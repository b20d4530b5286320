"""Declarative forms built from fields."""

from floatform.form.button import Button
from floatform.form.field import Field, Keymap, default_render
from floatform.form.form import Form, FormState, default_submit_button
from floatform.form.text import (
    BoolInput,
    Matches,
    MatchInput,
    NumberInput,
    TextInput,
    dyn_highlight,
    protect_down,
    protect_field,
)

__all__ = [
    "BoolInput",
    "Button",
    "Field",
    "Form",
    "FormState",
    "Keymap",
    "MatchInput",
    "Matches",
    "NumberInput",
    "TextInput",
    "default_render",
    "default_submit_button",
    "dyn_highlight",
    "protect_down",
    "protect_field",
]
