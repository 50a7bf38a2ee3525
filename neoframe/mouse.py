"""Translation of pointer, wheel and touch events into editor mouse commands."""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable, Hashable
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from .keyboard import KeyboardInput, KeyboardManager
from .settings import SETTINGS, Settings
from .window_settings import WindowSettings

_log = logging.getLogger(__name__)

Command: TypeAlias = dict[str, Any]
Position: TypeAlias = tuple[float, float]
GridPosition: TypeAlias = tuple[int, int]

_BUTTON_NAMES = {"left": "left", "right": "right", "middle": "middle"}
_TOUCH_PHASES = {"started", "moved", "ended", "cancelled"}


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle in physical pixels."""

    left: float
    top: float
    right: float
    bottom: float

    @classmethod
    def from_wh(cls, width: float, height: float) -> Rect:
        return cls(0.0, 0.0, float(width), float(height))

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x < self.right and self.top <= y < self.bottom


@dataclass(frozen=True)
class WindowRegion:
    """Where an editor grid is drawn on the surface."""

    id: int
    region: Rect


@dataclass
class SurfaceState:
    """What the mouse handling needs to know about the drawing surface.

    ``window_regions`` are in draw order, so later regions lie on top of
    earlier ones. ``cursor_visible`` is updated by the mouse manager.
    """

    size: tuple[int, int]
    font_dimensions: tuple[int, int]
    window_regions: list[WindowRegion] = field(default_factory=list)
    cursor_visible: bool = True


@dataclass(frozen=True)
class CursorMoved:
    x: float
    y: float


@dataclass(frozen=True)
class LineScroll:
    x: float
    y: float


@dataclass(frozen=True)
class PixelScroll:
    x: float
    y: float


@dataclass(frozen=True)
class TouchEvent:
    """A touch event; ``phase`` is started, moved, ended or cancelled."""

    device_id: Hashable
    finger_id: int
    x: float
    y: float
    phase: str

    def __post_init__(self) -> None:
        if self.phase not in _TOUCH_PHASES:
            raise ValueError(f"unknown touch phase {self.phase!r}")


@dataclass(frozen=True)
class MouseInput:
    button: str
    pressed: bool


MouseEvent: TypeAlias = "CursorMoved | LineScroll | PixelScroll | TouchEvent | MouseInput | KeyboardInput"


def clamp_position(
    position: Position, region: Rect, font_dimensions: tuple[int, int]
) -> Position:
    """Keep ``position`` inside ``region``, leaving room for one cell."""
    font_width, font_height = font_dimensions
    x, y = position
    return (
        max(min(x, region.right - font_width), region.left),
        max(min(y, region.bottom - font_height), region.top),
    )


def to_grid_coords(position: Position, font_dimensions: tuple[int, int]) -> GridPosition:
    """Convert a pixel position into grid cell coordinates."""
    font_width, font_height = font_dimensions
    x, y = position
    return (max(0, int(x)) // font_width, max(0, int(y)) // font_height)


def _round(value: float) -> int:
    """Round half away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


@dataclass
class _TouchTrace:
    start_time: float
    start: Position
    last: Position
    left_deadzone_once: bool


class MouseManager:
    """Tracks pointer state and produces mouse, drag and scroll commands."""

    def __init__(
        self,
        settings: Settings | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.settings = settings
        self.clock = clock
        self.enabled = True
        self.dragging: str | None = None
        self.drag_position: GridPosition = (0, 0)
        self.has_moved = False
        self.position: GridPosition = (0, 0)
        self.relative_position: GridPosition = (0, 0)
        self.window_details_under_mouse: WindowRegion | None = None
        self.mouse_hidden = False
        self._scroll_position = [0.0, 0.0]
        self._touches: dict[tuple[Hashable, int], _TouchTrace] = {}

    def _window_settings(self) -> WindowSettings:
        store = SETTINGS if self.settings is None else self.settings
        return store.get(WindowSettings)

    def _pointer_motion(
        self, x: int, y: int, keyboard: KeyboardManager, surface: SurfaceState
    ) -> list[Command]:
        width, height = surface.size
        if x < 0 or x >= width or y < 0 or y >= height:
            return []
        position = (float(x), float(y))

        if self.dragging is not None:
            if self.window_details_under_mouse is None:
                raise RuntimeError("If dragging, there should be a window details recorded")
            drag_id = self.window_details_under_mouse.id
            details = next(
                (region for region in surface.window_regions if region.id == drag_id), None
            )
        else:
            details = None
            for region in surface.window_regions:
                if region.region.contains(*position):
                    details = region

        bounds = details.region if details is not None else Rect.from_wh(width, height)
        clamped = clamp_position(position, bounds, surface.font_dimensions)
        self.position = to_grid_coords(clamped, surface.font_dimensions)

        commands: list[Command] = []
        if details is None:
            return commands

        relative = (clamped[0] - details.region.left, clamped[1] - details.region.top)
        self.relative_position = to_grid_coords(relative, surface.font_dimensions)
        previous = self.drag_position
        self.drag_position = self.relative_position
        moved = self.drag_position != previous

        if self.dragging is not None and moved:
            commands.append(
                {
                    "type": "drag",
                    "button": self.dragging,
                    "grid_id": details.id,
                    "position": self.drag_position,
                    "modifier_string": keyboard.format_modifier_string(True),
                }
            )
        else:
            self.window_details_under_mouse = details
        if moved:
            commands.append(
                {
                    "type": "mouse_button",
                    "button": "move",
                    "action": "",
                    "grid_id": details.id,
                    "position": self.relative_position,
                    "modifier_string": keyboard.format_modifier_string(True),
                }
            )
        self.has_moved = self.dragging is not None and (self.has_moved or moved)
        return commands

    def _pointer_transition(
        self, button: str, down: bool, keyboard: KeyboardManager
    ) -> list[Command]:
        commands: list[Command] = []
        if not self.enabled:
            return commands
        button_text = _BUTTON_NAMES.get(button)
        if button_text is None:
            return commands
        details = self.window_details_under_mouse
        if details is not None:
            position = (
                self.drag_position if not down and self.has_moved else self.relative_position
            )
            commands.append(
                {
                    "type": "mouse_button",
                    "button": button_text,
                    "action": "press" if down else "release",
                    "grid_id": details.id,
                    "position": position,
                    "modifier_string": keyboard.format_modifier_string(True),
                }
            )
        self.dragging = button_text if down else None
        if self.dragging is None:
            self.has_moved = False
        return commands

    def _scroll_axis(
        self, axis: int, delta: float, directions: tuple[str, str], keyboard: KeyboardManager
    ) -> list[Command]:
        previous = int(self._scroll_position[axis])
        self._scroll_position[axis] += delta
        new = int(self._scroll_position[axis])
        if new == previous:
            return []
        command = {
            "type": "scroll",
            "direction": directions[0] if new > previous else directions[1],
            "grid_id": (
                self.window_details_under_mouse.id
                if self.window_details_under_mouse is not None
                else 0
            ),
            "position": self.drag_position,
            "modifier_string": keyboard.format_modifier_string(True),
        }
        return [dict(command) for _ in range(abs(new - previous))]

    def _line_scroll(self, x: float, y: float, keyboard: KeyboardManager) -> list[Command]:
        if not self.enabled:
            return []
        commands = self._scroll_axis(1, y, ("up", "down"), keyboard)
        commands += self._scroll_axis(0, x, ("right", "left"), keyboard)
        return commands

    def _pixel_scroll(
        self, font_dimensions: tuple[int, int], delta: Position, keyboard: KeyboardManager
    ) -> list[Command]:
        font_width, font_height = font_dimensions
        return self._line_scroll(delta[0] / font_width, delta[1] / font_height, keyboard)

    def _touch(
        self, event: TouchEvent, keyboard: KeyboardManager, surface: SurfaceState
    ) -> list[Command]:
        key = (event.device_id, event.finger_id)
        location = (float(event.x), float(event.y))
        rounded = (_round(location[0]), _round(location[1]))
        commands: list[Command] = []

        if event.phase == "started":
            settings = self._window_settings()
            self._touches[key] = _TouchTrace(
                start_time=self.clock(),
                start=location,
                last=location,
                left_deadzone_once=not settings.touch_deadzone >= 0.0,
            )
        elif event.phase == "moved":
            dragging_just_now = False
            trace = self._touches.get(key)
            if trace is not None:
                if not trace.left_deadzone_once:
                    distance = math.hypot(
                        trace.start[0] - location[0], trace.start[1] - location[1]
                    )
                    settings = self._window_settings()
                    if distance >= settings.touch_deadzone:
                        trace.left_deadzone_once = True
                    timeout = max(0.0, settings.touch_drag_timeout)
                    if self.dragging is None and self.clock() - trace.start_time >= timeout:
                        dragging_just_now = True

                if self.dragging is not None or dragging_just_now:
                    commands += self._pointer_motion(*rounded, keyboard, surface)
                elif trace.left_deadzone_once:
                    delta = (trace.last[0] - location[0], location[1] - trace.last[1])
                    trace.last = location
                    commands += self._pixel_scroll(surface.font_dimensions, delta, keyboard)

            if dragging_just_now:
                commands += self._pointer_motion(*rounded, keyboard, surface)
                commands += self._pointer_transition("left", True, keyboard)
        else:
            trace = self._touches.pop(key, None)
            if trace is not None:
                if self.dragging is not None:
                    commands += self._pointer_transition("left", False, keyboard)
                if not trace.left_deadzone_once:
                    start = (_round(trace.start[0]), _round(trace.start[1]))
                    commands += self._pointer_motion(*start, keyboard, surface)
                    commands += self._pointer_transition("left", True, keyboard)
                    commands += self._pointer_transition("left", False, keyboard)
        return commands

    def handle_event(
        self, event: MouseEvent, keyboard_manager: KeyboardManager, surface: SurfaceState
    ) -> list[Command]:
        """Update state from ``event`` and return the commands it produces."""
        match event:
            case CursorMoved(x=x, y=y):
                commands = self._pointer_motion(int(x), int(y), keyboard_manager, surface)
                if self.mouse_hidden:
                    surface.cursor_visible = True
                    self.mouse_hidden = False
                return commands
            case LineScroll(x=x, y=y):
                return self._line_scroll(x, y, keyboard_manager)
            case PixelScroll(x=x, y=y):
                return self._pixel_scroll(surface.font_dimensions, (x, y), keyboard_manager)
            case TouchEvent():
                return self._touch(event, keyboard_manager, surface)
            case MouseInput(button=button, pressed=pressed):
                return self._pointer_transition(button, pressed, keyboard_manager)
            case KeyboardInput(event=key_event):
                if key_event.pressed:
                    settings = self._window_settings()
                    if settings.hide_mouse_when_typing and not self.mouse_hidden:
                        surface.cursor_visible = False
                        self.mouse_hidden = True
        return []