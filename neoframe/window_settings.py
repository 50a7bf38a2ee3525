"""Setting groups that control the editor window and keyboard input."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class WindowSettings:
    """Options that shape how the window is drawn and behaves."""

    refresh_rate: int = 60
    refresh_rate_idle: int = 5
    idle: bool = True
    transparency: float = 1.0
    scale_factor: float = 1.0
    fullscreen: bool = False
    iso_layout: bool = False
    remember_window_size: bool = True
    remember_window_position: bool = True
    hide_mouse_when_typing: bool = False
    touch_deadzone: float = 6.0
    touch_drag_timeout: float = 0.17
    background_color: str = ""
    confirm_quit: bool = True
    padding_top: int = 0
    padding_left: int = 0
    padding_right: int = 0
    padding_bottom: int = 0
    theme: str = ""


@dataclass
class KeyboardSettings:
    """Options for keyboard and input-method handling."""

    macos_alt_is_meta: bool = False
    ime: bool = True