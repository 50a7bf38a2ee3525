# neoframe

The settings and input layer of a Neovim GUI frontend. It has no
dependencies outside the standard library.

## Modules

- `neoframe.from_value` converts values that arrive from the editor into
  typed settings. It has `parse_f32`, `parse_u64`, `parse_u32`, `parse_i32`,
  `parse_string` and `parse_bool`. Each function takes the current value and
  the received value and returns the converted value. If the received value
  has the wrong type, it logs an error and returns the current value.
  `parse_u32` and `parse_i32` truncate wider integers. `parse_f32` rounds to
  single precision. `parse_bool` also accepts unsigned integers, where
  non-zero means true.
- `neoframe.settings` provides `Settings` and a process-wide instance,
  `SETTINGS`. A `Settings` object holds one stored object per type through
  `set` and `get`. Both copy the object. `get` raises `LookupError` for an
  unknown type. It also keeps an update handler and a reader for each
  property (`set_setting_handlers`). With any async client that has
  `get_var`, `set_var` and `command`:
  - `read_initial_values` loads each `g:neovide_<name>` variable. If a
    variable cannot be read, it writes the reader's value to it instead.
  - `setup_changed_listeners` installs watchers that send a
    `setting_changed` notification.
  - `handle_changed_notification` dispatches such a notification to the
    handler for that property.
- `neoframe.config` reads `config.toml`:
  - `config_path()` gives the file's location. This is
    `$XDG_CONFIG_HOME/neovide` or `~/.config/neovide`, and `%APPDATA%\neovide`
    on Windows.
  - `load_config(path)` returns a frozen `Config`, or `None` if the file is
    missing. It raises `ConfigError` if the file cannot be read or parsed.
  - `Config.write_to_env(environ)` exports the set options as
    `NEOVIDE_WSL`, `NEOVIDE_MULTIGRID`, `NEOVIDE_MAXIMIZED`, `NEOVIDE_VSYNC`,
    `NEOVIDE_SRGB`, `NEOVIDE_IDLE`, `NEOVIDE_FRAME`, `NEOVIM_BIN` and
    `NEOVIDE_THEME`.
  - `init_config(path, environ)` does both steps and prints errors to stderr.
- `neoframe.window_settings` holds the `WindowSettings` and
  `KeyboardSettings` dataclasses and their defaults.
- `neoframe.window_size` stores the last window state as `Maximized` or
  `Windowed(position, pixel_size)` in `neovide-settings.json`. The default
  location is under Neovim's data directory (`settings_path()`).
  - `save_window_size(window_settings, maximized, size, position, path)`
    honours the `remember_window_size` and `remember_window_position` options.
  - `load_last_window_settings(path)` reads the state back.
  - `Dimensions` and `DEFAULT_WINDOW_GEOMETRY` (100×50 cells) describe grid
    sizes.
- `neoframe.keyboard.KeyboardManager` takes `KeyboardInput`, `ImeCommit`,
  `ImePreedit` and `ModifiersChanged` events. `handle_event` returns the key
  text to send, such as `<C-Tab>`, `<lt>` or `<M-x>`, or `None`. While an IME
  preedit is in progress, key presses are ignored. `get_special_key` maps
  named keys (`Key`) to their notation names.
- `neoframe.mouse.MouseManager` takes `CursorMoved`, `MouseInput`,
  `LineScroll`, `PixelScroll`, `TouchEvent` and `KeyboardInput` events.
  `handle_event` returns a list of command dicts of type `mouse_button`,
  `drag` or `scroll`, positioned relative to the grid under the pointer. The
  grids come from the `WindowRegion`s in a `SurfaceState`. Touch input
  supports a deadzone, tap-to-click, drag after a timeout and scrolling.
  `clamp_position` and `to_grid_coords` are the helpers for pixel-to-cell
  conversion.

## Example

```python
from neoframe.keyboard import (
    Key, KeyEvent, KeyboardInput, KeyboardManager, Modifiers, ModifiersChanged,
)

manager = KeyboardManager()
manager.handle_event(ModifiersChanged(Modifiers(control=True)))
text = manager.handle_event(KeyboardInput(KeyEvent(logical_key=Key.TAB)))
print(text)  # <C-Tab>
```

Loading the user's config into the environment:

```python
import os
from neoframe.config import config_path, init_config

init_config(config_path(), os.environ)
```

## What it does not do

The package opens no window and draws nothing. It has no command-line
program and does not start or talk to Neovim by itself. The RPC client for
`Settings` is passed in by the caller. The keyboard and mouse managers return
the commands they produce and do not send them anywhere.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```