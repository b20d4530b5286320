"""Tunable defaults with JSON persistence.

A single process wide :class:`Config` holds the defaults used when window
and form options leave something unspecified. It can be loaded from a JSON
file whose keys use camelCase names (``shakeIntervalMs``) or the Python
attribute names.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pydantic
from pydantic import BaseModel, ConfigDict, Field

from floatform.errors import ConfigError

logger = logging.getLogger(__name__)


class BorderChars(BaseModel):
    """Box drawing characters used for window borders."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    top_left: str = Field(default="╭", alias="topLeft")
    top_right: str = Field(default="╮", alias="topRight")
    bottom_left: str = Field(default="╰", alias="bottomLeft")
    bottom_right: str = Field(default="╯", alias="bottomRight")
    horizontal: str = "─"
    vertical: str = "│"


class Config(BaseModel):
    """Defaults for floating windows and forms."""

    model_config = ConfigDict(populate_by_name=True)

    # Window size as a fraction of the editor when width/height are unset
    perw: float = Field(default=0.5, gt=0, le=1)
    perh: float = Field(default=0.4, gt=0, le=1)
    style: str = "minimal"
    relative: str = "editor"
    header_highlight: str = Field(default="FloatformHeader", alias="headerHighlight")
    shake_interval_ms: int = Field(default=100, ge=0, alias="shakeIntervalMs")
    min_form_width: int = Field(default=20, ge=1, alias="minFormWidth")
    border: BorderChars = Field(default_factory=BorderChars)


def load_config(path: str | Path) -> Config:
    """Load a :class:`Config` from a JSON file.

    A missing file yields the defaults. Unreadable or invalid content
    raises :class:`ConfigError`.
    """
    p = Path(path)
    if not p.exists():
        logger.debug("No config at %s, using defaults", p)
        return Config()
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"cannot read config {p}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config {p} must contain a JSON object")
    try:
        return Config.model_validate(data)
    except pydantic.ValidationError as e:
        raise ConfigError(f"invalid config {p}: {e}") from e


_global_config: Config | None = None


def get_config() -> Config:
    global _global_config
    if _global_config is None:
        _global_config = Config()
    return _global_config


def set_config(config: Config) -> None:
    global _global_config
    _global_config = config
