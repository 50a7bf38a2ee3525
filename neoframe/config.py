"""Loading of the TOML configuration file into environment variables."""

from __future__ import annotations

import os
import sys
import tomllib
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

CONFIG_FILE = "config.toml"

_BOOL_FIELDS = ("wsl", "multigrid", "maximized", "vsync", "srgb", "idle")
_STRING_FIELDS = ("frame", "theme")


class ConfigError(Exception):
    """Raised when the configuration file exists but cannot be used."""


def _config_dir() -> Path:
    if os.name == "nt":
        appdata = os.environ.get("APPDATA")
        root = Path(appdata) if appdata else Path.home() / "AppData" / "Roaming"
    else:
        xdg = os.environ.get("XDG_CONFIG_HOME")
        if xdg and Path(xdg).is_absolute():
            root = Path(xdg)
        else:
            root = Path.home() / ".config"
    return root / "neovide"


def config_path() -> Path:
    """Return the path of the configuration file."""
    return _config_dir() / CONFIG_FILE


@dataclass(frozen=True)
class Config:
    """Options read from the configuration file; ``None`` means unset."""

    wsl: bool | None = None
    multigrid: bool | None = None
    maximized: bool | None = None
    vsync: bool | None = None
    srgb: bool | None = None
    idle: bool | None = None
    neovim_bin: Path | None = None
    frame: str | None = None
    theme: str | None = None

    def write_to_env(self, environ: MutableMapping[str, str] | None = None) -> None:
        """Export every set option as its environment variable."""
        target = os.environ if environ is None else environ
        for field, variable in (
            ("wsl", "NEOVIDE_WSL"),
            ("multigrid", "NEOVIDE_MULTIGRID"),
            ("maximized", "NEOVIDE_MAXIMIZED"),
            ("vsync", "NEOVIDE_VSYNC"),
            ("srgb", "NEOVIDE_SRGB"),
            ("idle", "NEOVIDE_IDLE"),
        ):
            value = getattr(self, field)
            if value is not None:
                target[variable] = "true" if value else "false"
        if self.frame is not None:
            target["NEOVIDE_FRAME"] = self.frame
        if self.neovim_bin is not None:
            target["NEOVIM_BIN"] = str(self.neovim_bin)
        if self.theme is not None:
            target["NEOVIDE_THEME"] = self.theme


def _from_document(document: Mapping[str, Any]) -> Config:
    values: dict[str, Any] = {}
    for field in _BOOL_FIELDS:
        if field in document:
            value = document[field]
            if not isinstance(value, bool):
                raise ValueError(
                    f"invalid type for `{field}`: expected a boolean, found {value!r}"
                )
            values[field] = value
    for field in _STRING_FIELDS:
        if field in document:
            value = document[field]
            if not isinstance(value, str):
                raise ValueError(
                    f"invalid type for `{field}`: expected a string, found {value!r}"
                )
            values[field] = value
    if "neovim_bin" in document:
        value = document["neovim_bin"]
        if not isinstance(value, str):
            raise ValueError(
                f"invalid type for `neovim_bin`: expected a path, found {value!r}"
            )
        values["neovim_bin"] = Path(value)
    return Config(**values)


def load_config(path: str | os.PathLike[str]) -> Config | None:
    """Read the configuration at ``path``; ``None`` if the file does not exist."""
    path = Path(path)
    if not path.exists():
        return None
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as error:
        raise ConfigError(
            f"Error while trying to open config file {path}:\n{error}\n"
            "Continuing with default config."
        ) from error
    try:
        return _from_document(tomllib.loads(text))
    except (tomllib.TOMLDecodeError, ValueError) as error:
        raise ConfigError(
            f"Error while parsing config file {path}:\n{error}\n"
            "Continuing with default config."
        ) from error


def init_config(
    path: str | os.PathLike[str] | None = None,
    environ: MutableMapping[str, str] | None = None,
) -> Config | None:
    """Load the configuration and export it; report problems on stderr."""
    try:
        config = load_config(config_path() if path is None else path)
    except ConfigError as error:
        print(error, file=sys.stderr)
        return None
    if config is not None:
        config.write_to_env(environ)
    return config