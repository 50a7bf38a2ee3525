"""Settings, config loading, window state persistence and input translation for a Neovim GUI."""

__version__ = "0.1.0"

__all__ = [
    "from_value",
    "settings",
    "config",
    "window_settings",
    "window_size",
    "keyboard",
    "mouse",
]