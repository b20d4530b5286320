"""Editor key notation helpers.

Key strings use the editor's angle bracket notation (``"<C-x>"``,
``"<Enter>"``, ``"q"``). ``normalize_key`` gives every spelling of a key a
single canonical form so keymaps merged from several fields end up with one
handler per key, and ``escape_bind`` makes a key safe to embed in a cache
key or an indirection command.
"""

from __future__ import annotations

import re

KeyId = str

# Canonical names for special keys, indexed by lowercase spelling
_SPECIAL_KEYS: dict[str, str] = {
    "cr": "Enter",
    "enter": "Enter",
    "return": "Enter",
    "esc": "Esc",
    "escape": "Esc",
    "tab": "Tab",
    "bs": "BS",
    "backspace": "BS",
    "del": "Del",
    "delete": "Del",
    "space": "Space",
    "left": "Left",
    "right": "Right",
    "up": "Up",
    "down": "Down",
    "home": "Home",
    "end": "End",
    "pageup": "PageUp",
    "pagedown": "PageDown",
    "lt": "lt",
    "leader": "Leader",
}

# C-, S-, A-/M-, D- prefixes inside <...>
MODIFIERS: dict[str, str] = {
    "c": "C",
    "s": "S",
    "a": "A",
    "m": "A",
    "d": "D",
}

_BRACKETED_RE = re.compile(r"<([^<>]+)>")
_FKEY_RE = re.compile(r"^f(\d{1,2})$", re.IGNORECASE)


def _normalize_bracketed(inner: str) -> str | None:
    parts = inner.split("-")
    # "<C-->" style keys keep the trailing dash as the base key
    if inner.endswith("-") and len(parts) > 1:
        parts = parts[:-2] + ["-"]
    *mods, base = parts
    if not base:
        return None

    mod_names: list[str] = []
    for mod in mods:
        canonical = MODIFIERS.get(mod.lower())
        if canonical is None:
            return None
        if canonical not in mod_names:
            mod_names.append(canonical)

    lower = base.lower()
    if lower in _SPECIAL_KEYS:
        base = _SPECIAL_KEYS[lower]
    elif _FKEY_RE.match(base):
        base = base.upper()
    elif len(base) == 1:
        # <C-X> and <C-x> are the same key in the editor
        if "C" in mod_names:
            base = base.lower()
    else:
        return None

    if not mod_names:
        return f"<{base}>" if len(base) > 1 else base
    return "<" + "-".join(mod_names + [base]) + ">"


def normalize_key(key: KeyId) -> KeyId:
    """Return the canonical spelling of *key*.

    Unknown ``<...>`` groups are left untouched.
    """

    def _replace(m: re.Match[str]) -> str:
        normalized = _normalize_bracketed(m.group(1))
        return normalized if normalized is not None else m.group(0)

    return _BRACKETED_RE.sub(_replace, key)


def escape_bind(bind: KeyId) -> str:
    """Escape angle brackets so *bind* is kept literal by the editor."""
    return bind.replace("<", "\\<").replace(">", "\\>")


def unescape_bind(escaped: str) -> KeyId:
    """Reverse one level of :func:`escape_bind`."""
    return escaped.replace("\\<", "<").replace("\\>", ">")
