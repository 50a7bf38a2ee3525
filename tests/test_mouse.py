import pytest

from neoframe.keyboard import KeyboardInput, KeyboardManager, KeyEvent, Modifiers
from neoframe.mouse import (
    CursorMoved,
    LineScroll,
    MouseInput,
    MouseManager,
    PixelScroll,
    Rect,
    SurfaceState,
    TouchEvent,
    WindowRegion,
    clamp_position,
    to_grid_coords,
)
from neoframe.settings import Settings
from neoframe.window_settings import WindowSettings

FONT = (10, 20)


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def make_settings(**overrides):
    store = Settings()
    store.set(WindowSettings(**overrides))
    return store


def make_manager(clock=None, **overrides):
    return MouseManager(settings=make_settings(**overrides), clock=clock or FakeClock())


def make_surface(regions=None):
    if regions is None:
        regions = [WindowRegion(id=7, region=Rect(0.0, 0.0, 400.0, 200.0))]
    return SurfaceState(size=(400, 200), font_dimensions=FONT, window_regions=regions)


def keyboard(**mods):
    return KeyboardManager(macos=False, modifiers=Modifiers(**mods))


def test_clamp_position_inside_region_is_unchanged():
    region = Rect(0.0, 0.0, 400.0, 200.0)
    assert clamp_position((35.0, 45.0), region, FONT) == (35.0, 45.0)


def test_clamp_position_keeps_room_for_one_cell():
    region = Rect(10.0, 10.0, 100.0, 100.0)
    x, y = clamp_position((500.0, -50.0), region, FONT)
    assert region.left <= x <= region.right - FONT[0]
    assert region.top <= y <= region.bottom - FONT[1]
    assert y == region.top


def test_to_grid_coords_cell_contains_position():
    for position in [(0.0, 0.0), (39.5, 61.0), (123.0, 199.0)]:
        gx, gy = to_grid_coords(position, FONT)
        assert gx * FONT[0] <= position[0] < (gx + 1) * FONT[0]
        assert gy * FONT[1] <= position[1] < (gy + 1) * FONT[1]


def test_cursor_move_emits_move_command():
    manager = make_manager()
    surface = make_surface()
    commands = manager.handle_event(CursorMoved(55.0, 45.0), keyboard(), surface)
    assert len(commands) == 1
    command = commands[0]
    assert command["type"] == "mouse_button"
    assert command["button"] == "move"
    assert command["action"] == ""
    assert command["grid_id"] == 7
    assert command["position"] == manager.relative_position
    assert manager.window_details_under_mouse.id == 7


def test_cursor_move_within_same_cell_is_silent():
    manager = make_manager()
    surface = make_surface()
    manager.handle_event(CursorMoved(55.0, 45.0), keyboard(), surface)
    assert manager.handle_event(CursorMoved(56.0, 46.0), keyboard(), surface) == []


def test_cursor_outside_surface_is_ignored():
    manager = make_manager()
    surface = make_surface()
    assert manager.handle_event(CursorMoved(-1.0, 5.0), keyboard(), surface) == []
    assert manager.handle_event(CursorMoved(400.0, 5.0), keyboard(), surface) == []
    assert manager.window_details_under_mouse is None


def test_topmost_region_is_chosen():
    regions = [
        WindowRegion(id=1, region=Rect(0.0, 0.0, 400.0, 200.0)),
        WindowRegion(id=2, region=Rect(100.0, 40.0, 300.0, 160.0)),
    ]
    manager = make_manager()
    surface = make_surface(regions)
    commands = manager.handle_event(CursorMoved(150.0, 100.0), keyboard(), surface)
    assert commands[0]["grid_id"] == 2
    manager.handle_event(CursorMoved(20.0, 20.0), keyboard(), surface)
    assert manager.window_details_under_mouse.id == 1


def test_press_and_release():
    manager = make_manager()
    surface = make_surface()
    kb = keyboard()
    manager.handle_event(CursorMoved(55.0, 45.0), kb, surface)
    press = manager.handle_event(MouseInput("left", True), kb, surface)
    assert [(c["button"], c["action"]) for c in press] == [("left", "press")]
    assert manager.dragging == "left"
    release = manager.handle_event(MouseInput("left", False), kb, surface)
    assert [(c["button"], c["action"]) for c in release] == [("left", "release")]
    assert manager.dragging is None


def test_drag_emits_drag_command_and_release_uses_drag_position():
    manager = make_manager()
    surface = make_surface()
    kb = keyboard()
    manager.handle_event(CursorMoved(55.0, 45.0), kb, surface)
    manager.handle_event(MouseInput("right", True), kb, surface)
    commands = manager.handle_event(CursorMoved(155.0, 125.0), kb, surface)
    types = [c["type"] for c in commands]
    assert "drag" in types
    drag = commands[types.index("drag")]
    assert drag["button"] == "right"
    assert drag["position"] == manager.drag_position
    assert manager.has_moved is True
    release = manager.handle_event(MouseInput("right", False), kb, surface)
    assert release[0]["position"] == manager.drag_position
    assert manager.has_moved is False


def test_unknown_button_is_ignored():
    manager = make_manager()
    surface = make_surface()
    manager.handle_event(CursorMoved(55.0, 45.0), keyboard(), surface)
    assert manager.handle_event(MouseInput("back", True), keyboard(), surface) == []
    assert manager.dragging is None


def test_modifier_string_is_attached():
    manager = make_manager()
    surface = make_surface()
    commands = manager.handle_event(CursorMoved(55.0, 45.0), keyboard(control=True), surface)
    assert commands[0]["modifier_string"] == "C-"


def test_line_scroll_vertical_and_horizontal():
    manager = make_manager()
    surface = make_surface()
    up = manager.handle_event(LineScroll(0.0, 3.0), keyboard(), surface)
    assert [c["direction"] for c in up] == ["up"] * 3
    down = manager.handle_event(LineScroll(0.0, -1.0), keyboard(), surface)
    assert [c["direction"] for c in down] == ["down"]
    right = manager.handle_event(LineScroll(2.0, 0.0), keyboard(), surface)
    assert [c["direction"] for c in right] == ["right"] * 2
    assert all(c["grid_id"] == 0 for c in up + down + right)


def test_fractional_scroll_accumulates():
    manager = make_manager()
    surface = make_surface()
    assert manager.handle_event(LineScroll(0.0, 0.5), keyboard(), surface) == []
    second = manager.handle_event(LineScroll(0.0, 0.5), keyboard(), surface)
    assert [c["direction"] for c in second] == ["up"]


def test_pixel_scroll_divides_by_font_size():
    manager = make_manager()
    surface = make_surface()
    commands = manager.handle_event(PixelScroll(-FONT[0] * 2.0, 0.0), keyboard(), surface)
    assert [c["direction"] for c in commands] == ["left", "left"]


def test_disabled_manager_ignores_buttons_and_scroll():
    manager = make_manager()
    manager.enabled = False
    surface = make_surface()
    manager.handle_event(CursorMoved(55.0, 45.0), keyboard(), surface)
    assert manager.handle_event(MouseInput("left", True), keyboard(), surface) == []
    assert manager.handle_event(LineScroll(0.0, 4.0), keyboard(), surface) == []


def test_hide_mouse_when_typing():
    manager = make_manager(hide_mouse_when_typing=True)
    surface = make_surface()
    manager.handle_event(KeyboardInput(KeyEvent("a", text="a")), keyboard(), surface)
    assert surface.cursor_visible is False
    manager.handle_event(CursorMoved(55.0, 45.0), keyboard(), surface)
    assert surface.cursor_visible is True


def test_typing_keeps_mouse_visible_by_default():
    manager = make_manager()
    surface = make_surface()
    manager.handle_event(KeyboardInput(KeyEvent("a", text="a")), keyboard(), surface)
    assert surface.cursor_visible is True


def test_touch_tap_clicks():
    manager = make_manager()
    surface = make_surface()
    kb = keyboard()
    manager.handle_event(TouchEvent("dev", 1, 55.0, 45.0, "started"), kb, surface)
    commands = manager.handle_event(TouchEvent("dev", 1, 55.0, 45.0, "ended"), kb, surface)
    actions = [c["action"] for c in commands if c["button"] == "left"]
    assert actions == ["press", "release"]
    assert manager.dragging is None


def test_touch_hold_then_move_starts_drag():
    clock = FakeClock()
    manager = make_manager(clock=clock)
    surface = make_surface()
    kb = keyboard()
    manager.handle_event(TouchEvent("dev", 1, 55.0, 45.0, "started"), kb, surface)
    clock.now = 1.0
    commands = manager.handle_event(TouchEvent("dev", 1, 57.0, 46.0, "moved"), kb, surface)
    assert commands[-1]["action"] == "press"
    assert manager.dragging == "left"
    ended = manager.handle_event(TouchEvent("dev", 1, 57.0, 46.0, "ended"), kb, surface)
    assert ended[0]["action"] == "release"
    assert manager.dragging is None


def test_touch_swipe_scrolls():
    manager = make_manager()
    surface = make_surface()
    kb = keyboard()
    manager.handle_event(TouchEvent("dev", 1, 50.0, 50.0, "started"), kb, surface)
    commands = manager.handle_event(
        TouchEvent("dev", 1, 50.0, 50.0 + FONT[1] * 3, "moved"), kb, surface
    )
    assert [c["direction"] for c in commands] == ["up"] * 3
    ended = manager.handle_event(TouchEvent("dev", 1, 50.0, 110.0, "ended"), kb, surface)
    assert ended == []


def test_touch_invalid_phase_rejected():
    with pytest.raises(ValueError):
        TouchEvent("dev", 1, 0.0, 0.0, "hover")