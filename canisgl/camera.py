"""A free-flying camera driven by Euler angles."""

from __future__ import annotations

import math
from enum import Enum, auto

import numpy as np

from .linalg import look_at, normalize

YAW = 90.0
PITCH = 0.0
SPEED = 50.0
SENSITIVITY = 0.35
ZOOM = 10.0

_PITCH_LIMIT = 89.0
_MIN_ZOOM = 1.0
_MAX_ZOOM = 45.0


class CameraMovement(Enum):
    """Directions the camera can be moved in."""

    FORWARD = auto()
    BACKWARD = auto()
    LEFT = auto()
    RIGHT = auto()


class Camera:
    """Camera that turns input into Euler angles, direction vectors and a view matrix."""

    def __init__(self, position=(0.0, 0.0, 0.0), up=(0.0, 1.0, 0.0), yaw=YAW, pitch=PITCH):
        self.position = np.asarray(position, dtype=float).reshape(3).copy()
        self.world_up = np.asarray(up, dtype=float).reshape(3).copy()
        self.yaw = float(yaw)
        self.pitch = float(pitch)
        self.front = np.array([0.0, 0.0, -1.0])
        self.up = self.world_up.copy()
        self.right = np.zeros(3)
        self.movement_speed = SPEED
        self.mouse_sensitivity = SENSITIVITY
        self.zoom = ZOOM
        self.fov = math.radians(90.0)
        self.near_plane = 0.1
        self.far_plane = 100.0
        self.override_camera = False
        self.model_matrix = np.identity(4)
        self.update_vectors()

    def view_matrix(self) -> np.ndarray:
        """The view matrix, or the override matrix when override is on."""
        if self.override_camera:
            return self.model_matrix
        return look_at(self.position, self.position + self.front, self.up)

    def process_keyboard(self, direction: CameraMovement, delta_time: float) -> None:
        """Move the camera in a direction for delta_time seconds."""
        velocity = self.movement_speed * delta_time
        if direction is CameraMovement.FORWARD:
            self.position = self.position + self.front * velocity
        elif direction is CameraMovement.BACKWARD:
            self.position = self.position - self.front * velocity
        elif direction is CameraMovement.LEFT:
            self.position = self.position - self.right * velocity
        elif direction is CameraMovement.RIGHT:
            self.position = self.position + self.right * velocity

    def process_mouse_movement(self, xoffset: float, yoffset: float, constrain_pitch: bool = True) -> None:
        """Turn the camera by a mouse offset, keeping pitch within bounds if asked."""
        self.yaw += xoffset * self.mouse_sensitivity
        self.pitch += yoffset * self.mouse_sensitivity
        if constrain_pitch:
            self.pitch = min(max(self.pitch, -_PITCH_LIMIT), _PITCH_LIMIT)
        self.update_vectors()

    def process_mouse_scroll(self, yoffset: float) -> None:
        """Change zoom by a scroll offset, kept within its range."""
        self.zoom = min(max(self.zoom - float(yoffset), _MIN_ZOOM), _MAX_ZOOM)

    def rotate(self, yaw: float, pitch: float) -> None:
        """Set yaw and pitch in degrees."""
        self.yaw = float(yaw)
        self.pitch = float(pitch)
        self.update_vectors()

    def update_vectors(self) -> None:
        """Recompute front, right and up from yaw and pitch."""
        yaw, pitch = math.radians(self.yaw), math.radians(self.pitch)
        front = np.array([
            math.cos(yaw) * math.cos(pitch),
            math.sin(pitch),
            math.sin(yaw) * math.cos(pitch),
        ])
        self.front = normalize(front)
        self.right = normalize(np.cross(self.front, self.world_up))
        self.up = normalize(np.cross(self.right, self.front))