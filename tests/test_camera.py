import numpy as np
import pytest

from canisgl.camera import SENSITIVITY, SPEED, YAW, ZOOM, Camera, CameraMovement


def _assert_orthonormal(camera):
    for v in (camera.front, camera.right, camera.up):
        assert np.linalg.norm(v) == pytest.approx(1.0)
    assert np.dot(camera.front, camera.right) == pytest.approx(0.0, abs=1e-12)
    assert np.dot(camera.front, camera.up) == pytest.approx(0.0, abs=1e-12)
    assert np.dot(camera.right, camera.up) == pytest.approx(0.0, abs=1e-12)


def test_defaults():
    camera = Camera()
    assert camera.yaw == YAW
    assert camera.zoom == ZOOM
    assert camera.movement_speed == SPEED
    assert camera.mouse_sensitivity == SENSITIVITY
    assert np.allclose(camera.front, [0.0, 0.0, 1.0])
    _assert_orthonormal(camera)


def test_rotate_sets_angles_and_front():
    camera = Camera()
    camera.rotate(0.0, 0.0)
    assert (camera.yaw, camera.pitch) == (0.0, 0.0)
    assert np.allclose(camera.front, [1.0, 0.0, 0.0])
    _assert_orthonormal(camera)


@pytest.mark.parametrize("yaw,pitch", [(10.0, 30.0), (-120.0, -60.0), (200.0, 85.0)])
def test_vectors_stay_orthonormal(yaw, pitch):
    camera = Camera()
    camera.rotate(yaw, pitch)
    _assert_orthonormal(camera)
    assert np.dot(camera.up, camera.world_up) > 0


def test_pitch_is_constrained():
    camera = Camera()
    camera.process_mouse_movement(0.0, 1000.0)
    assert camera.pitch == 89.0
    camera.process_mouse_movement(0.0, -5000.0)
    assert camera.pitch == -89.0


def test_pitch_unconstrained_when_asked():
    camera = Camera()
    camera.process_mouse_movement(0.0, 1000.0, False)
    assert camera.pitch > 89.0


def test_mouse_movement_scales_by_sensitivity():
    camera = Camera()
    camera.mouse_sensitivity = 1.0
    camera.process_mouse_movement(10.0, 0.0)
    assert camera.yaw == pytest.approx(YAW + 10.0)


def test_scroll_zoom_is_clamped():
    camera = Camera()
    camera.process_mouse_scroll(100.0)
    assert camera.zoom == 1.0
    camera.process_mouse_scroll(-100.0)
    assert camera.zoom == 45.0


@pytest.mark.parametrize(
    "there,back",
    [
        (CameraMovement.FORWARD, CameraMovement.BACKWARD),
        (CameraMovement.LEFT, CameraMovement.RIGHT),
    ],
)
def test_opposite_moves_cancel(there, back):
    camera = Camera(position=(1.0, 2.0, 3.0))
    camera.process_keyboard(there, 0.25)
    assert not np.allclose(camera.position, [1.0, 2.0, 3.0])
    camera.process_keyboard(back, 0.25)
    assert np.allclose(camera.position, [1.0, 2.0, 3.0])


def test_forward_moves_along_front_by_speed():
    camera = Camera()
    start = camera.position.copy()
    camera.process_keyboard(CameraMovement.FORWARD, 0.1)
    moved = camera.position - start
    assert np.linalg.norm(moved) == pytest.approx(camera.movement_speed * 0.1)
    assert np.allclose(normalize_of(moved), camera.front)


def normalize_of(v):
    return v / np.linalg.norm(v)


def test_view_matrix_centres_camera():
    camera = Camera(position=(0.0, 0.0, -3.0))
    camera.rotate(30.0, 20.0)
    view = camera.view_matrix()
    assert np.allclose(view @ [*camera.position, 1.0], [0.0, 0.0, 0.0, 1.0])
    ahead = view @ [*(camera.position + camera.front), 1.0]
    assert np.allclose(ahead[:3], [0.0, 0.0, -1.0])


def test_override_returns_model_matrix():
    camera = Camera()
    custom = np.arange(16, dtype=float).reshape(4, 4)
    camera.model_matrix = custom
    camera.override_camera = True
    assert np.array_equal(camera.view_matrix(), custom)