import pytest

from canisgl.inputs import (
    AXIS_LEFT_X,
    AXIS_LEFT_Y,
    AXIS_RIGHT_X,
    AXIS_TRIGGER_LEFT,
    AXIS_TRIGGER_RIGHT,
    MOUSE_BUTTON_LEFT,
    MOUSE_BUTTON_RIGHT,
    ControllerButton,
    InputDevice,
    InputManager,
)

KEY_W = 26


class FakeController:
    def __init__(self):
        self.buttons = set()
        self.axes = {}
        self.closed = False

    def button(self, index):
        return index in self.buttons

    def axis(self, index):
        return self.axes.get(index, 0)

    def close(self):
        self.closed = True


@pytest.fixture
def manager():
    return InputManager()


def connect(manager, index=0):
    device = FakeController()
    manager.controller_connected(index, device)
    manager.update()
    return device


def test_key_press_is_seen_for_one_frame(manager):
    manager.press_key(KEY_W)
    assert manager.update() is True
    assert manager.just_pressed_key(KEY_W)
    assert manager.get_key(KEY_W)
    manager.update()
    assert not manager.just_pressed_key(KEY_W)
    assert manager.get_key(KEY_W)


def test_events_wait_for_update(manager):
    manager.press_key(KEY_W)
    assert not manager.get_key(KEY_W)
    assert not manager.just_pressed_key(KEY_W)


def test_key_release(manager):
    manager.press_key(KEY_W)
    manager.update()
    manager.release_key(KEY_W)
    manager.update()
    assert manager.just_released_key(KEY_W)
    assert not manager.get_key(KEY_W)
    assert not manager.just_pressed_key(KEY_W)


def test_repeat_press_while_held_is_not_just_pressed(manager):
    manager.press_key(KEY_W)
    manager.update()
    manager.press_key(KEY_W)
    manager.update()
    assert not manager.just_pressed_key(KEY_W)


def test_last_device_tracks_keyboard_and_mouse(manager):
    manager.press_key(KEY_W)
    manager.update()
    assert manager.last_device is InputDevice.KEYBOARD
    manager.mouse_motion(5, 5, 1, 1, 100)
    manager.update()
    assert manager.last_device is InputDevice.MOUSE


def test_mouse_motion_flips_y_and_resets_relative(manager):
    manager.mouse_motion(10, 20, 3, -4, 600)
    manager.update()
    assert manager.mouse == (10.0, 580.0)
    assert manager.mouse_rel == (3.0, -4.0)
    manager.update()
    assert manager.mouse_rel == (0.0, 0.0)
    assert manager.mouse == (10.0, 580.0)


def test_left_click_cycle(manager):
    manager.mouse_button(MOUSE_BUTTON_LEFT, True)
    manager.update()
    assert manager.just_left_clicked()
    assert not manager.left_click_released()
    manager.update()
    assert manager.left_click and not manager.just_left_clicked()
    manager.mouse_button(MOUSE_BUTTON_LEFT, False)
    manager.update()
    assert manager.left_click_released()


def test_right_click_cycle(manager):
    manager.mouse_button(MOUSE_BUTTON_RIGHT, True)
    manager.update()
    assert manager.just_right_clicked()
    assert not manager.just_left_clicked()
    manager.mouse_button(MOUSE_BUTTON_RIGHT, False)
    manager.update()
    assert manager.right_click_released()


def test_quit_stops_update_and_keeps_later_events(manager):
    manager.request_quit()
    manager.press_key(KEY_W)
    assert manager.update() is False
    assert not manager.get_key(KEY_W)
    assert manager.update() is True
    assert manager.get_key(KEY_W)


def test_controller_button_press_and_release(manager):
    device = connect(manager)
    device.buttons.add(0)
    manager.update()
    assert manager.get_button(0, ControllerButton.A)
    assert manager.just_pressed_button(0, ControllerButton.A)
    assert not manager.get_button(0, ControllerButton.B)
    assert manager.last_device is InputDevice.GAMEPAD
    manager.update()
    assert not manager.just_pressed_button(0, ControllerButton.A)
    device.buttons.clear()
    manager.update()
    assert manager.just_released_button(0, ControllerButton.A)
    assert manager.last_buttons_pressed(0, ControllerButton.A)


def test_button_bits_follow_index(manager):
    device = connect(manager)
    device.buttons.add(14)
    manager.update()
    assert manager.get_button(0, ControllerButton.DPAD_RIGHT)
    assert manager.controllers[0].current_data.buttons == ControllerButton.DPAD_RIGHT


def test_sticks_dead_zone_and_inversion(manager):
    device = connect(manager)
    device.axes = {AXIS_LEFT_X: 32767, AXIS_LEFT_Y: 32767, AXIS_RIGHT_X: 1000}
    manager.update()
    assert manager.get_left_stick(0) == (1.0, -1.0)
    assert manager.get_right_stick(0) == (0.0, 0.0)


def test_triggers(manager):
    device = connect(manager)
    device.axes = {AXIS_TRIGGER_LEFT: 32767, AXIS_TRIGGER_RIGHT: 0}
    manager.update()
    assert manager.get_left_trigger(0) == 1.0
    assert manager.get_right_trigger(0) == 0.0


def test_stick_movement_clears_last_buttons(manager):
    device = connect(manager)
    device.buttons.add(1)
    manager.update()
    device.buttons.clear()
    device.axes = {AXIS_LEFT_X: 32767}
    manager.update()
    assert not manager.last_buttons_pressed(0, ControllerButton.B)
    assert manager.last_device is InputDevice.GAMEPAD


def test_unknown_controller_gives_neutral_values(manager):
    assert not manager.get_button(3, ControllerButton.A)
    assert not manager.just_pressed_button(3, ControllerButton.A)
    assert not manager.just_released_button(3, ControllerButton.A)
    assert not manager.last_buttons_pressed(3, ControllerButton.A)
    assert manager.get_left_stick(3) == (0.0, 0.0)
    assert manager.get_right_trigger(3) == 0.0


def test_disconnect_closes_and_removes(manager):
    first = connect(manager, index=7)
    second = connect(manager, index=9)
    manager.controller_disconnected(7)
    manager.update()
    assert first.closed
    assert not second.closed
    assert [c.index for c in manager.controllers] == [9]


def test_close_closes_all(manager):
    first = connect(manager, index=1)
    second = connect(manager, index=2)
    manager.close()
    assert first.closed and second.closed
    assert manager.controllers == []