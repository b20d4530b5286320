"""Named, persisted mapping from keybind keys to callbacks.

Editor keymaps can only hold command strings. A callback bound to a key is
therefore stored in a :class:`FunctionCache` persisted in the host's
variable store, and the keymap receives an indirection token that names the
cache and the key. The host resolves the token with :func:`dispatch`.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Mapping
from typing import Any, Callable

from floatform.errors import ConfigError, HostOperationError
from floatform.host import Host
from floatform.keys import KeyId, escape_bind, unescape_bind

logger = logging.getLogger(__name__)

Callback = Callable[[], Any]

TOKEN_FORMAT = "<cmd>call FloatformDispatch('{name}', '{key}')<cr>"
_TOKEN_RE = re.compile(r"^<cmd>call FloatformDispatch\('([^']+)', '(.*)'\)<cr>$")


def _get_var(host: Host, name: str) -> dict[str, Callback] | None:
    try:
        value = host.get_var(name)
    except HostOperationError:
        return None
    if not isinstance(value, dict):
        return None
    return value


class FunctionCache(Mapping[str, Callback]):
    """Callbacks keyed by ``mode + escaped bind``, persisted under ``name``."""

    def __init__(
        self,
        host: Host,
        name: str,
        entries: Mapping[str, Callback] | None = None,
    ) -> None:
        if not name:
            raise ConfigError("name of cache must be specified")
        self._host = host
        self.name = name
        if entries is None:
            entries = _get_var(host, name) or {}
        self._entries: dict[str, Callback] = dict(entries)

    # -- Mapping ---------------------------------------------------------

    def __getitem__(self, key: str) -> Callback:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    # -- Persistence -----------------------------------------------------

    def load(self) -> FunctionCache:
        """Return a new cache holding the persisted mapping, empty if none."""
        return FunctionCache(self._host, self.name, _get_var(self._host, self.name) or {})

    def save(self) -> None:
        """Persist the in-memory mapping, replacing any previous value."""
        try:
            self._host.set_var(self.name, dict(self._entries))
        except HostOperationError:
            logger.debug("Failed to persist cache %s", self.name, exc_info=True)

    def delete(self) -> FunctionCache:
        """Remove the persisted mapping. Missing entries are ignored."""
        try:
            self._host.del_var(self.name)
        except HostOperationError:
            logger.debug("Cache %s was not persisted", self.name)
        return self

    # -- Registration ----------------------------------------------------

    def register(self, mode: str, bind: KeyId, handler: Callback) -> str:
        """Store *handler* for ``mode``/``bind`` and return its indirection token."""
        key = mode + escape_bind(bind)
        self._entries[key] = handler
        self.save()
        # The token itself goes through the keymap parser, escape once more
        return TOKEN_FORMAT.format(name=self.name, key=escape_bind(key))


def parse_token(token: str) -> tuple[str, str] | None:
    """Split an indirection token into ``(cache name, cache key)``."""
    m = _TOKEN_RE.match(token)
    if m is None:
        return None
    return m.group(1), unescape_bind(m.group(2))


def dispatch(host: Host, name: str, key: str) -> bool:
    """Invoke the callback persisted in cache *name* under *key*.

    Returns ``False`` when no such callback is registered.
    """
    handler = FunctionCache(host, name).get(key)
    if handler is None:
        logger.debug("No cached callback %r in %s", key, name)
        return False
    handler()
    return True
