"""Field base widget shared by every form input."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from floatform.errors import ConfigError, ValidationError
from floatform.host import ContentChange
from floatform.keys import KeyId, normalize_key
from floatform.utils import cell_width

if TYPE_CHECKING:
    from floatform.window import FloatingWindow

Renderer = Callable[["Field", list[str]], None]
Validator = Callable[[str], Any]
FieldHandler = Callable[["FloatingWindow", "Field"], Any]
UpdateHandler = Callable[["FloatingWindow", "Field", str, ContentChange], Any]
SubmitHandler = Callable[[Any], Any]
Keymap = dict[str, dict[KeyId, FieldHandler]]


def default_render(field: Field, lines: list[str]) -> None:
    lines.append(f"{field.name}: {field.value}")


class Field:
    """A named, positioned unit of a form.

    ``pos`` is assigned by the containing form: the row is the 1-based
    index of the field, matching editor cursor rows. A field occupies
    ``height`` rows starting there.
    """

    def __init__(
        self,
        name: str,
        *,
        default: str = "",
        width: int | None = None,
        height: int = 1,
        keymap: Keymap | None = None,
        render: Renderer | None = None,
        validate: Validator | None = None,
        on_update: UpdateHandler | None = None,
        on_submit: SubmitHandler | None = None,
    ) -> None:
        if not name:
            raise ConfigError("field name must be specified")
        self.name = name
        self.default = default
        self.value: Any = default
        self.height = height
        self.width = (
            width if width is not None else cell_width(name) + cell_width(str(default)) + 4
        )
        self.keymap: Keymap = {
            mode: {normalize_key(key): handler for key, handler in keys.items()}
            for mode, keys in (keymap or {}).items()
        }
        self.renderer = render or default_render
        self.validate = validate
        self.on_update = on_update
        self.on_submit = on_submit
        self.pos: tuple[int, int] = (1, 0)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, value={self.value!r}, pos={self.pos})"

    @property
    def label_width(self) -> int:
        """Columns taken by the ``"<name>: "`` label."""
        return len(self.name) + 2

    def render(self, lines: list[str]) -> None:
        """Append the field's display line(s) to *lines*."""
        self.renderer(self, lines)

    def is_active(self, cursor: tuple[int, int]) -> bool:
        """Return ``True`` if the cursor row falls inside the field.

        Only rows are checked; a field owns its rows across the full width.
        """
        row = cursor[0]
        return self.pos[0] <= row < self.pos[0] + self.height

    def parse(self, content: str) -> Any:
        """Strip the label from *content*, validate it and store the value.

        On a validation failure the current value is left untouched and a
        :class:`ValidationError` is raised.
        """
        prefix = f"{self.name}: "
        raw = content[len(prefix):] if content.startswith(prefix) else content
        value: Any = raw
        if self.validate is not None:
            try:
                value = self.validate(raw)
            except ValidationError:
                raise
            except (ValueError, TypeError) as e:
                raise ValidationError(str(e) or f"invalid: {raw}", raw) from e
        self.value = value
        return value
