"""floatform: floating windows and forms for a host editor."""

# Configuration
from floatform.config import BorderChars, Config, get_config, load_config, set_config

# Keybind callback cache
from floatform.cache import FunctionCache, dispatch, parse_token

# Errors
from floatform.errors import (
    ConfigError,
    FloatformError,
    HostOperationError,
    ValidationError,
)

# Forms
from floatform.form import (
    BoolInput,
    Button,
    Field,
    Form,
    FormState,
    Matches,
    MatchInput,
    NumberInput,
    TextInput,
)

# Highlight groups
from floatform.highlights import Highlights, define_highlights

# Host interface
from floatform.host import ContentChange, Host, KeymapOptions

# Key notation
from floatform.keys import escape_bind, normalize_key, unescape_bind

# Windows
from floatform.window import (
    FloatingWindow,
    ShakeAnimation,
    WindowConfig,
    WindowOptions,
    border_config,
    window_config,
)

__all__ = [
    # Configuration
    "BorderChars",
    "Config",
    "get_config",
    "load_config",
    "set_config",
    # Cache
    "FunctionCache",
    "dispatch",
    "parse_token",
    # Errors
    "ConfigError",
    "FloatformError",
    "HostOperationError",
    "ValidationError",
    # Forms
    "BoolInput",
    "Button",
    "Field",
    "Form",
    "FormState",
    "MatchInput",
    "Matches",
    "NumberInput",
    "TextInput",
    # Highlights
    "Highlights",
    "define_highlights",
    # Host
    "ContentChange",
    "Host",
    "KeymapOptions",
    # Keys
    "escape_bind",
    "normalize_key",
    "unescape_bind",
    # Windows
    "FloatingWindow",
    "ShakeAnimation",
    "WindowConfig",
    "WindowOptions",
    "border_config",
    "window_config",
]
