"""Keyboard, mouse and game controller state, advanced once per frame."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field, replace
from enum import Enum, IntFlag, auto
from typing import Any, Callable, Optional, Protocol

from .debug import log

MOUSE_BUTTON_LEFT = 1
MOUSE_BUTTON_RIGHT = 3

AXIS_LEFT_X = 0
AXIS_LEFT_Y = 1
AXIS_RIGHT_X = 2
AXIS_RIGHT_Y = 3
AXIS_TRIGGER_LEFT = 4
AXIS_TRIGGER_RIGHT = 5

AXIS_MAX = 32767.0
BUTTON_COUNT = 15

Vec2 = tuple[float, float]
_ZERO: Vec2 = (0.0, 0.0)


class InputDevice(Enum):
    """Kind of device that produced the most recent input."""

    MOUSE = auto()
    KEYBOARD = auto()
    GAMEPAD = auto()


class ControllerButton(IntFlag):
    """Bit of each game controller button in a button mask."""

    A = 1
    B = 2
    X = 4
    Y = 8
    BACK = 16
    GUIDE = 32
    START = 64
    LEFTSTICK = 128
    RIGHTSTICK = 256
    LEFTSHOULDER = 512
    RIGHTSHOULDER = 1024
    DPAD_UP = 2048
    DPAD_DOWN = 4096
    DPAD_LEFT = 8192
    DPAD_RIGHT = 16384


class ControllerDevice(Protocol):
    """An open game controller that can be polled."""

    def button(self, index: int) -> bool: ...

    def axis(self, index: int) -> int: ...


@dataclass
class GameControllerData:
    """One poll of a controller: sticks and triggers in [-1, 1], buttons as a mask."""

    left_stick: Vec2 = _ZERO
    right_stick: Vec2 = _ZERO
    left_trigger: float = 0.0
    right_trigger: float = 0.0
    buttons: int = 0


@dataclass
class GameController:
    """A connected controller with its current and previous poll."""

    controller: Any = None
    index: int = 0
    current_data: GameControllerData = field(default_factory=GameControllerData)
    old_data: GameControllerData = field(default_factory=GameControllerData)
    dead_zone: float = 0.15
    last_buttons_pressed: int = 0

    def _stick_axis(self, axis: int, invert: bool) -> float:
        value = self.controller.axis(axis) / AXIS_MAX
        if abs(value) < self.dead_zone:
            return 0.0
        return -value if invert else value

    def poll(self) -> None:
        """Move current data to old data and read the device afresh."""
        self.old_data = replace(self.current_data)
        buttons = 0
        for bit in range(BUTTON_COUNT):
            if self.controller.button(bit):
                buttons |= 1 << bit
        if buttons:
            self.last_buttons_pressed = buttons
        self.current_data = GameControllerData(
            left_stick=(
                self._stick_axis(AXIS_LEFT_X, False),
                self._stick_axis(AXIS_LEFT_Y, True),
            ),
            right_stick=(
                self._stick_axis(AXIS_RIGHT_X, False),
                self._stick_axis(AXIS_RIGHT_Y, True),
            ),
            left_trigger=self.controller.axis(AXIS_TRIGGER_LEFT) / AXIS_MAX,
            right_trigger=self.controller.axis(AXIS_TRIGGER_RIGHT) / AXIS_MAX,
            buttons=buttons,
        )


class InputManager:
    """Collects input events and exposes per-frame key, mouse and controller state.

    Events are queued as they arrive and take effect at the next ``update``,
    so "just pressed" and "just released" refer to the frame that update starts.
    """

    def __init__(self) -> None:
        self.mouse: Vec2 = _ZERO
        self.mouse_rel: Vec2 = _ZERO
        self.last_device = InputDevice.MOUSE
        self.left_click = False
        self.right_click = False
        self._was_left_click = False
        self._was_right_click = False
        self._pending: deque[Callable[[], Optional[bool]]] = deque()
        self._key_events: list[tuple[int, bool]] = []
        self._last_known: dict[int, bool] = {}
        self._held: set[int] = set()
        self._controllers: list[GameController] = []

    # Event sources -------------------------------------------------------

    def press_key(self, key: int) -> None:
        """Queue a key press."""
        self._pending.append(lambda: self._apply_key(key, True))

    def release_key(self, key: int) -> None:
        """Queue a key release."""
        self._pending.append(lambda: self._apply_key(key, False))

    def mouse_motion(self, x: float, y: float, dx: float, dy: float, screen_height: int) -> None:
        """Queue mouse motion; y is measured from the top and stored from the bottom."""
        def apply() -> None:
            self.mouse = (float(x), float(screen_height - y))
            self.mouse_rel = (float(dx), float(dy))
            self.last_device = InputDevice.MOUSE
        self._pending.append(apply)

    def mouse_button(self, button: int, pressed: bool) -> None:
        """Queue a mouse button change."""
        def apply() -> None:
            if button == MOUSE_BUTTON_LEFT:
                self.left_click = pressed
            if button == MOUSE_BUTTON_RIGHT:
                self.right_click = pressed
        self._pending.append(apply)

    def request_quit(self) -> None:
        """Queue a request to end the application."""
        self._pending.append(lambda: False)

    def controller_connected(self, index: int, device: ControllerDevice) -> None:
        """Queue the connection of an opened controller device."""
        def apply() -> None:
            if device is None:
                return
            self._controllers.append(GameController(controller=device, index=index))
            log("Game Controller Connected")
        self._pending.append(apply)

    def controller_disconnected(self, index: int) -> None:
        """Queue the removal of the controller with this device index."""
        def apply() -> None:
            for position, controller in enumerate(self._controllers):
                if controller.index == index:
                    _close_device(controller.controller)
                    del self._controllers[position]
                    log("Game Controller Disconnected")
                    return
        self._pending.append(apply)

    def _apply_key(self, key: int, down: bool) -> None:
        self._key_events.append((key, down))
        if down:
            self._held.add(key)
            self.last_device = InputDevice.KEYBOARD
        else:
            self._held.discard(key)

    # Frame ---------------------------------------------------------------

    def update(self) -> bool:
        """Start a frame: apply queued events and poll controllers.

        Returns False when a quit was requested; events queued after the
        quit stay queued.
        """
        self._swap()
        self.mouse_rel = _ZERO
        while self._pending:
            if self._pending.popleft()() is False:
                return False
        self._poll_controllers()
        return True

    def _swap(self) -> None:
        self._was_left_click = self.left_click
        self._was_right_click = self.right_click
        for key, value in self._key_events:
            self._last_known[key] = value
        self._key_events.clear()

    def _poll_controllers(self) -> None:
        for controller in self._controllers:
            if controller.controller is None:
                continue
            controller.poll()
            current, old = controller.current_data, controller.old_data
            if current.buttons & ~old.buttons:
                self.last_device = InputDevice.GAMEPAD
            if current.left_stick != _ZERO or current.right_stick != _ZERO:
                self.last_device = InputDevice.GAMEPAD
                controller.last_buttons_pressed = 0

    def close(self) -> None:
        """Close every connected controller."""
        while self._controllers:
            _close_device(self._controllers.pop(0).controller)

    # Keys ----------------------------------------------------------------

    def get_key(self, key: int) -> bool:
        """Whether the key is held down."""
        return key in self._held

    def _first_event(self, key: int) -> Optional[bool]:
        return next((down for k, down in self._key_events if k == key), None)

    def just_pressed_key(self, key: int) -> bool:
        """Whether the key went down this frame after being up."""
        return bool(self._first_event(key)) and not self._last_known.get(key, False)

    def just_released_key(self, key: int) -> bool:
        """Whether the key's first event this frame was a release."""
        return self._first_event(key) is False

    # Controllers ---------------------------------------------------------

    def _controller(self, controller_id: int) -> Optional[GameController]:
        if 0 <= controller_id < len(self._controllers):
            return self._controllers[controller_id]
        return None

    @property
    def controllers(self) -> list[GameController]:
        """The connected controllers, in connection order."""
        return list(self._controllers)

    def get_button(self, controller_id: int, button: int) -> bool:
        """Whether the button is held on the controller."""
        c = self._controller(controller_id)
        return c is not None and c.current_data.buttons & button > 0

    def just_pressed_button(self, controller_id: int, button: int) -> bool:
        """Whether the button went down at the latest poll."""
        c = self._controller(controller_id)
        return (
            c is not None
            and c.current_data.buttons & button > 0
            and c.old_data.buttons & button == 0
        )

    def just_released_button(self, controller_id: int, button: int) -> bool:
        """Whether the button came up at the latest poll."""
        c = self._controller(controller_id)
        return (
            c is not None
            and c.current_data.buttons & button == 0
            and c.old_data.buttons & button > 0
        )

    def last_buttons_pressed(self, controller_id: int, button: int) -> bool:
        """Whether the button was part of the last non-empty set of pressed buttons."""
        c = self._controller(controller_id)
        return c is not None and bool(c.last_buttons_pressed & button)

    def get_left_stick(self, controller_id: int) -> Vec2:
        """Left stick position, y up."""
        c = self._controller(controller_id)
        return c.current_data.left_stick if c is not None else _ZERO

    def get_right_stick(self, controller_id: int) -> Vec2:
        """Right stick position, y up."""
        c = self._controller(controller_id)
        return c.current_data.right_stick if c is not None else _ZERO

    def get_left_trigger(self, controller_id: int) -> float:
        """Left trigger value."""
        c = self._controller(controller_id)
        return c.current_data.left_trigger if c is not None else 0.0

    def get_right_trigger(self, controller_id: int) -> float:
        """Right trigger value."""
        c = self._controller(controller_id)
        return c.current_data.right_trigger if c is not None else 0.0

    # Mouse buttons -------------------------------------------------------

    def left_click_released(self) -> bool:
        """Whether the left button came up this frame."""
        return not self.left_click and self._was_left_click

    def just_left_clicked(self) -> bool:
        """Whether the left button went down this frame."""
        return self.left_click and not self._was_left_click

    def right_click_released(self) -> bool:
        """Whether the right button came up this frame."""
        return not self.right_click and self._was_right_click

    def just_right_clicked(self) -> bool:
        """Whether the right button went down this frame."""
        return self.right_click and not self._was_right_click

    # Window binding ------------------------------------------------------

    def attach(self, window: Any) -> None:
        """Feed this manager from a pyglet window's events."""
        buttons = {1: MOUSE_BUTTON_LEFT, 4: MOUSE_BUTTON_RIGHT}

        def on_key_press(symbol, modifiers):
            self.press_key(symbol)
            return True

        def on_key_release(symbol, modifiers):
            self.release_key(symbol)
            return True

        def on_mouse_motion(x, y, dx, dy):
            # pyglet measures y from the bottom and dy upwards.
            self.mouse_motion(x, window.height - y, dx, -dy, window.height)

        def on_mouse_drag(x, y, dx, dy, button, modifiers):
            on_mouse_motion(x, y, dx, dy)

        def on_mouse_press(x, y, button, modifiers):
            if button in buttons:
                self.mouse_button(buttons[button], True)

        def on_mouse_release(x, y, button, modifiers):
            if button in buttons:
                self.mouse_button(buttons[button], False)

        def on_close():
            self.request_quit()
            return True

        window.push_handlers(
            on_key_press=on_key_press,
            on_key_release=on_key_release,
            on_mouse_motion=on_mouse_motion,
            on_mouse_drag=on_mouse_drag,
            on_mouse_press=on_mouse_press,
            on_mouse_release=on_mouse_release,
            on_close=on_close,
        )


def _close_device(device: Any) -> None:
    close = getattr(device, "close", None)
    if callable(close):
        close()