"""A process-wide store of setting groups and their editor-side handlers."""

from __future__ import annotations

import copy
import logging
import threading
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, Protocol, TypeVar

_log = logging.getLogger(__name__)

T = TypeVar("T")

UpdateHandler = Callable[[Any], None]
Reader = Callable[[], Any]


class _NeovimClient(Protocol):
    def get_var(self, name: str) -> Awaitable[Any]: ...

    def set_var(self, name: str, value: Any) -> Awaitable[Any]: ...

    def command(self, command: str) -> Awaitable[Any]: ...


def _notifier_script(name: str) -> str:
    return (
        'exe "'
        f"fun! NeovideNotify{name}Changed(d, k, z)\n"
        f"call rpcnotify(1, 'setting_changed', '{name}', g:neovide_{name})\n"
        "endf\n"
        f"call dictwatcheradd(g:, 'neovide_{name}', 'NeovideNotify{name}Changed')\""
    )


class Settings:
    """Holds one settings object per type and keeps editor variables in sync.

    Each registered property has an update handler, called with a new value
    from the editor, and a reader, which produces the current value to send
    to the editor.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._settings: dict[type, Any] = {}
        self._listeners: dict[str, UpdateHandler] = {}
        self._readers: dict[str, Reader] = {}

    def set_setting_handlers(
        self, property_name: str, update_func: UpdateHandler, reader_func: Reader
    ) -> None:
        """Register the update handler and reader for a property."""
        with self._lock:
            self._listeners[property_name] = update_func
            self._readers[property_name] = reader_func

    def set(self, value: Any) -> None:
        """Store a copy of ``value`` under its type, replacing any previous one."""
        stored = copy.deepcopy(value)
        with self._lock:
            self._settings[type(value)] = stored

    def get(self, setting_type: type[T]) -> T:
        """Return a copy of the stored object of ``setting_type``."""
        with self._lock:
            try:
                stored = self._settings[setting_type]
            except KeyError:
                raise LookupError(
                    "Trying to retrieve a settings object that doesn't exist: "
                    f"{setting_type.__name__}"
                ) from None
            return copy.deepcopy(stored)

    def _property_names(self) -> list[str]:
        with self._lock:
            return list(self._listeners)

    async def read_initial_values(self, nvim: _NeovimClient) -> None:
        """Load each property from the editor, or push our value if it has none."""
        for name in self._property_names():
            variable_name = f"neovide_{name}"
            try:
                value = await nvim.get_var(variable_name)
            except Exception as error:
                _log.debug("Initial value load failed for %s: %s", name, error)
                with self._lock:
                    reader = self._readers[name]
                try:
                    await nvim.set_var(variable_name, reader())
                except Exception as set_error:
                    _log.debug("Could not set %s: %s", variable_name, set_error)
            else:
                with self._lock:
                    listener = self._listeners[name]
                listener(value)

    async def setup_changed_listeners(self, nvim: _NeovimClient) -> None:
        """Install editor-side watchers that notify us when a property changes."""
        for name in self._property_names():
            try:
                await nvim.command(_notifier_script(name))
            except Exception as error:
                raise RuntimeError(
                    f"Could not setup setting notifier for {name}"
                ) from error

    def handle_changed_notification(self, arguments: Sequence[Any]) -> None:
        """Dispatch a ``setting_changed`` notification of ``[name, value]``."""
        if len(arguments) < 2:
            raise ValueError(
                f"setting_changed expects a name and a value, got {len(arguments)} arguments"
            )
        name, value = arguments[0], arguments[1]
        if not isinstance(name, str):
            raise TypeError(f"setting name must be a string, got {name!r}")
        with self._lock:
            try:
                listener = self._listeners[name]
            except KeyError:
                raise KeyError(f"no handler registered for setting {name!r}") from None
        listener(value)


SETTINGS = Settings()