"""Vector and matrix helpers plus the plain data types of a scene.

Matrices are 4x4 numpy arrays acting on column vectors (``m @ v``).
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


def _vec3(values) -> np.ndarray:
    return np.asarray(values, dtype=float).reshape(3)


def normalize(v) -> np.ndarray:
    """Return v scaled to unit length."""
    v = np.asarray(v, dtype=float)
    return v / np.linalg.norm(v)


def translate(m, v) -> np.ndarray:
    """Return m followed by a translation by v."""
    t = np.identity(4)
    t[:3, 3] = _vec3(v)
    return np.asarray(m, dtype=float) @ t


def rotate(m, angle: float, axis) -> np.ndarray:
    """Return m followed by a rotation of angle radians about axis."""
    x, y, z = a = normalize(_vec3(axis))
    c, s = np.cos(angle), np.sin(angle)
    skew = np.array([[0.0, -z, y], [z, 0.0, -x], [-y, x, 0.0]])
    r = np.identity(4)
    r[:3, :3] = c * np.identity(3) + s * skew + (1.0 - c) * np.outer(a, a)
    return np.asarray(m, dtype=float) @ r


def scale(m, v) -> np.ndarray:
    """Return m followed by a scaling by v."""
    s = np.diag([*_vec3(v), 1.0])
    return np.asarray(m, dtype=float) @ s


def perspective(fovy: float, aspect: float, near: float, far: float) -> np.ndarray:
    """Right-handed perspective projection mapping depth to [-1, 1]."""
    if aspect == 0:
        raise ValueError("aspect ratio must not be zero")
    if near == far:
        raise ValueError("near and far planes must differ")
    f = 1.0 / np.tan(fovy / 2.0)
    p = np.zeros((4, 4))
    p[0, 0] = f / aspect
    p[1, 1] = f
    p[2, 2] = -(far + near) / (far - near)
    p[2, 3] = -(2.0 * far * near) / (far - near)
    p[3, 2] = -1.0
    return p


def look_at(eye, center, up) -> np.ndarray:
    """Right-handed view matrix looking from eye towards center."""
    eye = _vec3(eye)
    f = normalize(_vec3(center) - eye)
    s = normalize(np.cross(f, _vec3(up)))
    u = np.cross(s, f)
    view = np.identity(4)
    view[0, :3] = s
    view[1, :3] = u
    view[2, :3] = -f
    view[0, 3] = -np.dot(s, eye)
    view[1, 3] = -np.dot(u, eye)
    view[2, 3] = np.dot(f, eye)
    return view


@dataclass(eq=False)
class Transform:
    """Position, Euler rotation in radians and scale of an object."""

    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    rotation: np.ndarray = field(default_factory=lambda: np.zeros(3))
    scale: np.ndarray = field(default_factory=lambda: np.ones(3))

    def __post_init__(self) -> None:
        self.position = _vec3(self.position)
        self.rotation = _vec3(self.rotation)
        self.scale = _vec3(self.scale)

    def matrix(self) -> np.ndarray:
        """Model matrix: translate, rotate about x, y, z, then scale."""
        m = translate(np.identity(4), self.position)
        m = rotate(m, self.rotation[0], (1.0, 0.0, 0.0))
        m = rotate(m, self.rotation[1], (0.0, 1.0, 0.0))
        m = rotate(m, self.rotation[2], (0.0, 0.0, 1.0))
        return scale(m, self.scale)


@dataclass(eq=False)
class PointLight:
    """A light radiating from a point, with distance attenuation."""

    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    ambient: np.ndarray = field(default_factory=lambda: np.zeros(3))
    diffuse: np.ndarray = field(default_factory=lambda: np.zeros(3))
    specular: np.ndarray = field(default_factory=lambda: np.zeros(3))
    constant: float = 0.0
    linear: float = 0.0
    quadratic: float = 0.0

    def __post_init__(self) -> None:
        self.position = _vec3(self.position)
        self.ambient = _vec3(self.ambient)
        self.diffuse = _vec3(self.diffuse)
        self.specular = _vec3(self.specular)


@dataclass(eq=False)
class DirectionalLight:
    """A light shining in one direction everywhere."""

    direction: np.ndarray = field(default_factory=lambda: np.full(3, -1.0))
    ambient: np.ndarray = field(default_factory=lambda: np.full(3, 0.05))
    diffuse: np.ndarray = field(default_factory=lambda: np.full(3, 0.8))
    specular: np.ndarray = field(default_factory=lambda: np.full(3, 0.5))

    def __post_init__(self) -> None:
        self.direction = _vec3(self.direction)
        self.ambient = _vec3(self.ambient)
        self.diffuse = _vec3(self.diffuse)
        self.specular = _vec3(self.specular)


@dataclass
class Texture:
    """A texture object on the GPU with its pixel size."""

    id: int = 0
    width: int = 0
    height: int = 0