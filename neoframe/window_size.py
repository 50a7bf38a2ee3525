"""Persistence of the window's size, position and maximized state."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypeAlias

from .settings import SETTINGS
from .window_settings import WindowSettings

_log = logging.getLogger(__name__)

SETTINGS_FILE = "neovide-settings.json"


@dataclass(frozen=True)
class Dimensions:
    """A size measured in grid cells."""

    width: int
    height: int


DEFAULT_WINDOW_GEOMETRY = Dimensions(width=100, height=50)


@dataclass(frozen=True)
class Maximized:
    """The window was maximized when last closed."""


@dataclass(frozen=True)
class Windowed:
    """The window was a normal window; ``pixel_size`` is ``None`` if not remembered."""

    position: tuple[int, int] = (0, 0)
    pixel_size: tuple[int, int] | None = None


PersistentWindowSettings: TypeAlias = Maximized | Windowed


def _data_dir() -> Path:
    if os.name == "nt":
        return Path.home() / "AppData" / "local" / "nvim-data"
    xdg = os.environ.get("XDG_DATA_HOME")
    root = Path(xdg) if xdg and Path(xdg).is_absolute() else Path.home() / ".local" / "share"
    return root / "nvim"


def settings_path() -> Path:
    """Return the path of the file holding the saved window state."""
    return _data_dir() / SETTINGS_FILE


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _parse_pair(data: Any, first: str, second: str, *, unsigned: bool) -> tuple[int, int]:
    if not isinstance(data, dict) or set(data) != {first, second}:
        raise ValueError(f"expected an object with `{first}` and `{second}`, found {data!r}")
    pair = (data[first], data[second])
    for value in pair:
        if not _is_int(value) or (unsigned and value < 0):
            raise ValueError(f"invalid coordinate {value!r}")
    return pair


def _parse_window(data: Any) -> PersistentWindowSettings:
    if data == "Maximized" or data == {"Maximized": None}:
        return Maximized()
    if isinstance(data, dict) and set(data) == {"Windowed"}:
        body = data["Windowed"]
        if not isinstance(body, dict):
            raise ValueError(f"invalid Windowed settings: {body!r}")
        position = (0, 0)
        if "position" in body:
            position = _parse_pair(body["position"], "x", "y", unsigned=False)
        pixel_size = None
        if body.get("pixel_size") is not None:
            pixel_size = _parse_pair(body["pixel_size"], "width", "height", unsigned=True)
        return Windowed(position=position, pixel_size=pixel_size)
    raise ValueError(f"unknown window settings: {data!r}")


def _dump_window(window: PersistentWindowSettings) -> Any:
    if isinstance(window, Maximized):
        return "Maximized"
    x, y = window.position
    size = None
    if window.pixel_size is not None:
        width, height = window.pixel_size
        size = {"width": width, "height": height}
    return {"Windowed": {"position": {"x": x, "y": y}, "pixel_size": size}}


def load_last_window_settings(path: str | os.PathLike[str] | None = None) -> PersistentWindowSettings:
    """Read the saved window state.

    Raises ``OSError`` if the file cannot be read and ``ValueError`` if its
    contents are not valid.
    """
    target = settings_path() if path is None else Path(path)
    document = json.loads(target.read_text(encoding="utf-8"))
    if not isinstance(document, dict) or "window" not in document:
        raise ValueError("missing field `window`")
    window = _parse_window(document["window"])
    _log.debug("Loaded window settings: %r", window)
    return window


def save_window_size(
    window_settings: WindowSettings | None,
    maximized: bool,
    size: tuple[int, int],
    position: tuple[int, int] | None,
    path: str | os.PathLike[str] | None = None,
) -> PersistentWindowSettings:
    """Save the window state, honouring the remember-size and -position options."""
    if window_settings is None:
        window_settings = SETTINGS.get(WindowSettings)
    if maximized and window_settings.remember_window_size:
        window: PersistentWindowSettings = Maximized()
    else:
        remembered_position = position if window_settings.remember_window_position else None
        window = Windowed(
            position=remembered_position if remembered_position is not None else (0, 0),
            pixel_size=size if window_settings.remember_window_size else None,
        )
    target = settings_path() if path is None else Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    text = json.dumps({"window": _dump_window(window)}, separators=(",", ":"))
    _log.debug("Saved Window Settings: %s", text)
    target.write_text(text, encoding="utf-8")
    return window