"""Translation of keyboard events into editor key notation."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import TypeAlias

from .settings import SETTINGS, Settings
from .window_settings import KeyboardSettings

_log = logging.getLogger(__name__)

_KEY_NAMES = [
    "BACKSPACE",
    "SPACE",
    "ESCAPE",
    "DELETE",
    "ARROW_UP",
    "ARROW_DOWN",
    "ARROW_LEFT",
    "ARROW_RIGHT",
    *(f"F{number}" for number in range(1, 36)),
    "INSERT",
    "HOME",
    "END",
    "PAGE_UP",
    "PAGE_DOWN",
    "TAB",
    "ENTER",
    "SHIFT",
    "CONTROL",
    "ALT",
    "SUPER",
]

Key = Enum("Key", _KEY_NAMES)
Key.__doc__ = "Named keys; character keys are given as plain strings."

LogicalKey: TypeAlias = "Key | str"

_SPECIAL_NAMES: dict[Key, str] = {
    Key.BACKSPACE: "BS",
    Key.ESCAPE: "Esc",
    Key.DELETE: "Del",
    Key.ARROW_UP: "Up",
    Key.ARROW_DOWN: "Down",
    Key.ARROW_LEFT: "Left",
    Key.ARROW_RIGHT: "Right",
    **{Key[f"F{number}"]: f"F{number}" for number in range(1, 36)},
    Key.INSERT: "Insert",
    Key.HOME: "Home",
    Key.END: "End",
    Key.PAGE_UP: "PageUp",
    Key.PAGE_DOWN: "PageDown",
    Key.TAB: "Tab",
}

_NAMED_KEY_TEXT: dict[Key, str] = {
    Key.SPACE: " ",
    Key.ENTER: "\r",
    Key.TAB: "\t",
}


@dataclass(frozen=True)
class Modifiers:
    """The state of the modifier keys."""

    shift: bool = False
    control: bool = False
    alt: bool = False
    logo: bool = False


@dataclass(frozen=True)
class KeyEvent:
    """A key press or release.

    ``text`` is the text the key produces, if any; ``key_without_modifiers``
    is the key as it would be without modifiers and defaults to the logical key.
    """

    logical_key: Key | str
    text: str | None = None
    pressed: bool = True
    key_without_modifiers: Key | str | None = None


@dataclass(frozen=True)
class KeyboardInput:
    event: KeyEvent
    is_synthetic: bool = False


@dataclass(frozen=True)
class ImeCommit:
    text: str


@dataclass(frozen=True)
class ImePreedit:
    text: str
    cursor: tuple[int, int] | None = None


@dataclass(frozen=True)
class ModifiersChanged:
    modifiers: Modifiers


KeyboardEvent: TypeAlias = "KeyboardInput | ImeCommit | ImePreedit | ModifiersChanged"


def get_special_key(key_event: KeyEvent) -> str | None:
    """Return the notation name of a special key, or ``None``."""
    key = key_event.logical_key
    if key is Key.SPACE:
        # Space can finish a dead-key sequence; only a plain space is special.
        return "Space" if key_event.text == " " else None
    if isinstance(key, Key):
        return _SPECIAL_NAMES.get(key)
    return None


def _key_text(key: Key | str) -> str | None:
    if isinstance(key, str):
        return key
    return _NAMED_KEY_TEXT.get(key)


@dataclass
class KeyboardManager:
    """Tracks modifier and input-method state and formats key presses."""

    settings: Settings | None = None
    macos: bool = field(default_factory=lambda: sys.platform == "darwin")
    modifiers: Modifiers = field(default_factory=Modifiers)
    ime_preedit: tuple[str, tuple[int, int] | None] = ("", None)

    def _use_alt(self) -> bool:
        if not self.macos:
            return True
        store = SETTINGS if self.settings is None else self.settings
        return store.get(KeyboardSettings).macos_alt_is_meta

    def handle_event(self, event: KeyboardEvent) -> str | None:
        """Update state from ``event`` and return key text to send, if any."""
        match event:
            case KeyboardInput(event=key_event, is_synthetic=False) if not self.ime_preedit[0]:
                if key_event.pressed:
                    text = self.format_key(key_event)
                    if text is not None:
                        _log.debug("Key pressed %s %r", text, self.modifiers)
                    return text
            case ImeCommit(text=text):
                _log.debug("Ime commit %s", text)
                return text
            case ImePreedit(text=text, cursor=cursor):
                self.ime_preedit = (text, cursor)
            case ModifiersChanged(modifiers=modifiers):
                self.modifiers = modifiers
        return None

    def format_key(self, key_event: KeyEvent) -> str | None:
        """Return the notation for a key event, or ``None`` if it has none."""
        special = get_special_key(key_event)
        if special is not None:
            return self._format_key_text(special, True)
        return self._format_normal_key(key_event)

    def _format_normal_key(self, key_event: KeyEvent) -> str | None:
        if self.macos and self.modifiers.alt and self._use_alt():
            base = key_event.key_without_modifiers
            text = _key_text(key_event.logical_key if base is None else base)
            return None if text is None else self._format_key_text(text, True)
        text = key_event.text
        if text is None and isinstance(key_event.logical_key, str):
            text = key_event.logical_key
        return None if text is None else self._format_key_text(text, False)

    def _format_key_text(self, text: str, is_special: bool) -> str:
        modifiers = self.format_modifier_string(is_special)
        # "<" is written as a special name, but keeps the modifier stripping of a normal key.
        if text == "<":
            text, is_special = "lt", True
        if not modifiers:
            return f"<{text}>" if is_special else text
        return f"<{modifiers}{text}>"

    def format_modifier_string(self, is_special: bool) -> str:
        """Return the modifier prefix, such as ``S-C-``, for the current state."""
        state = self.modifiers
        use_shift = is_special or state.logo
        parts = []
        if state.shift and use_shift:
            parts.append("S-")
        if state.control:
            parts.append("C-")
        if state.alt and (self._use_alt() or is_special):
            parts.append("M-")
        if state.logo:
            parts.append("D-")
        return "".join(parts)