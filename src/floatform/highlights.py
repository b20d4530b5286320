"""Highlight groups used by windows and forms."""

from __future__ import annotations

from typing import Any

from floatform.config import get_config
from floatform.host import Host


class Highlights:
    """Highlight group names."""

    FIELD_VALID = "FieldValid"
    FIELD_INVALID = "FieldInvalid"
    FORM_VALID = "FormValid"
    FORM_INVALID = "FormInvalid"


DEFAULT_HIGHLIGHTS: dict[str, dict[str, Any]] = {
    Highlights.FIELD_INVALID: {"ctermbg": 0, "bg": "red"},
    Highlights.FIELD_VALID: {"ctermbg": 0, "bg": "green"},
    Highlights.FORM_INVALID: {"ctermbg": 0, "fg": "red"},
    Highlights.FORM_VALID: {"ctermbg": 0, "fg": "green"},
}


def define_highlights(host: Host) -> None:
    """Define the default groups (and the header group) on *host*."""
    for group, attrs in DEFAULT_HIGHLIGHTS.items():
        host.define_highlight(group, dict(attrs))
    host.define_highlight(get_config().header_highlight, {"link": "Title", "default": True})
