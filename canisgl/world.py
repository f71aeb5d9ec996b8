"""The scene: entities, lights, the camera and the skybox, updated and drawn each frame."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field, replace
from typing import Any, Callable, NamedTuple, Optional

import numpy as np

from .camera import Camera, CameraMovement
from .linalg import DirectionalLight, PointLight, Texture, Transform, perspective
from .mesh import Mesh
from .model import load_model
from .shader import Shader
from .textures import load_cubemap, load_image_gl

# Key symbols as delivered by the window's key events.
KEY_W = 119
KEY_S = 115
KEY_A = 97
KEY_D = 100
KEY_ESCAPE = 0xFF1B

FIXED_UPDATE_STEP = 0.1
NUMBER_OF_POINT_LIGHTS = 4

FIRE_TAG = "fire"
FIREPLACE_POSITION = np.array([15.0, 4.5, 9.0])
FIREPLACE_RADIUS = 0.1
FIRE_DIFFUSE = np.array([0.8, 0.4, 0.1])
FIRE_AMBIENT = np.array([0.3, 0.1, 0.0])

SKYBOX_VERTEX_SHADER = "assets/shaders/skybox.vs"
SKYBOX_FRAGMENT_SHADER = "assets/shaders/skybox.fs"
SKYBOX_MODEL = "assets/models/cube.obj"
SKYBOX_FACES = (
    "skybox_left.png",
    "skybox_right.png",
    "skybox_up.png",
    "skybox_down.png",
    "skybox_front.png",
    "skybox_back.png",
)

UpdateFn = Callable[["World", "Entity", float], None]


@dataclass(eq=False)
class Entity:
    """An object in the scene: where it is, what it looks like and how it behaves.

    ``model`` is anything with a ``draw()`` method, such as a Mesh.
    """

    active: bool = True
    name: str = ""
    tag: str = ""
    transform: Transform = field(default_factory=Transform)
    model: Any = None
    shader: Optional[Shader] = None
    color: np.ndarray = field(default_factory=lambda: np.ones(3))
    albedo: Optional[Texture] = None
    specular: Optional[Texture] = None
    update: Optional[UpdateFn] = None

    def __post_init__(self) -> None:
        self.color = np.asarray(self.color, dtype=float).reshape(3)


def _copy_entity(entity: Entity) -> Entity:
    transform = Transform(
        entity.transform.position.copy(),
        entity.transform.rotation.copy(),
        entity.transform.scale.copy(),
    )
    return replace(entity, transform=transform, color=entity.color.copy())


def _copy_point_light(light: PointLight) -> PointLight:
    return PointLight(
        position=light.position.copy(),
        ambient=light.ambient.copy(),
        diffuse=light.diffuse.copy(),
        specular=light.specular.copy(),
        constant=light.constant,
        linear=light.linear,
        quadratic=light.quadratic,
    )


def _copy_directional_light(light: DirectionalLight) -> DirectionalLight:
    return DirectionalLight(
        direction=light.direction.copy(),
        ambient=light.ambient.copy(),
        diffuse=light.diffuse.copy(),
        specular=light.specular.copy(),
    )


def fire_flicker(time: float, light: PointLight) -> float:
    """Set a fire light's diffuse and ambient colours for this moment; return the flicker."""
    flicker = 0.8 + 0.2 * math.sin(time * 10.0 + float(light.position[0]))
    light.diffuse = FIRE_DIFFUSE * flicker
    light.ambient = FIRE_AMBIENT * (0.5 + 0.5 * flicker)
    return flicker


def fire_texture_path(index: int) -> str:
    """Path of the fire animation frame with this index."""
    return f"assets/textures/fire_textures/fire_{index}.png"


class _Skybox(NamedTuple):
    shader: Shader
    cubemap: int
    mesh: Mesh


def _seconds_since(start: float) -> Callable[[], float]:
    return lambda: time.monotonic() - start


class World:
    """Holds the scene and moves it forward one frame at a time.

    The skybox shader, cube map and mesh are loaded the first time the world
    is drawn, when a GL context exists.
    """

    def __init__(self, window: Any, input_manager: Any, skybox_path: str) -> None:
        self.window = window
        self.input_manager = input_manager
        self.skybox_path = str(skybox_path)
        self.camera = Camera(position=(0.0, 0.0, -3.0))
        self.directional_light = DirectionalLight()
        self.entities: list[Entity] = []
        self.point_lights: list[PointLight] = []
        self.clock: Callable[[], float] = _seconds_since(time.monotonic())
        self._skybox: Optional[_Skybox] = None
        self._fire_textures: dict[str, Texture] = {}

    # Frame ---------------------------------------------------------------

    def update(self, delta_time: float) -> None:
        """Move the camera from input, then run every entity's update."""
        self.update_camera_movement(delta_time)
        for entity in list(self.entities):
            if entity.update is not None:
                entity.update(self, entity, FIXED_UPDATE_STEP)

    def draw(self, delta_time: float) -> None:
        """Draw every active entity, then the skybox behind them."""
        from pyglet import gl

        projection = perspective(
            math.radians(45.0), self.window.width / self.window.height, 0.01, 100.0
        )
        view = self.camera.view_matrix()

        for entity in self.entities:
            if not entity.active:
                continue
            shader = entity.shader
            shader.use()
            shader.set_vec3("COLOR", entity.color)
            shader.set_vec3("VIEWPOS", self.camera.position)
            shader.set_int("NUMBEROFPOINTLIGHTS", NUMBER_OF_POINT_LIGHTS)
            shader.set_float("TIME", self.clock())
            self.update_lights(shader)

            gl.glActiveTexture(gl.GL_TEXTURE0)
            gl.glBindTexture(gl.GL_TEXTURE_2D, entity.albedo.id)
            gl.glActiveTexture(gl.GL_TEXTURE1)
            gl.glBindTexture(gl.GL_TEXTURE_2D, entity.specular.id)

            shader.set_mat4("VIEW", view)
            shader.set_mat4("PROJECTION", projection)
            shader.set_mat4("TRANSFORM", entity.transform.matrix())
            entity.model.draw()
            shader.unuse()

        skybox = self._ensure_skybox()
        gl.glDepthFunc(gl.GL_LEQUAL)
        skybox.shader.use()
        # Keeping only the rotation removes the camera's position from the skybox.
        sky_view = np.identity(4)
        sky_view[:3, :3] = view[:3, :3]
        skybox.shader.set_mat4("VIEW", sky_view)
        skybox.shader.set_mat4("PROJECTION", projection)
        gl.glActiveTexture(gl.GL_TEXTURE0)
        gl.glBindTexture(gl.GL_TEXTURE_CUBE_MAP, skybox.cubemap)
        skybox.mesh.draw()
        skybox.shader.unuse()
        gl.glDepthFunc(gl.GL_LESS)

    def _ensure_skybox(self) -> _Skybox:
        if self._skybox is None:
            shader = Shader()
            shader.compile(SKYBOX_VERTEX_SHADER, SKYBOX_FRAGMENT_SHADER)
            shader.add_attribute("aPosition")
            shader.link()
            shader.use()
            shader.set_int("SKYBOX", 0)
            shader.unuse()
            cubemap = load_cubemap([f"{self.skybox_path}{face}" for face in SKYBOX_FACES])
            mesh = Mesh(load_model(SKYBOX_MODEL))
            mesh.upload()
            self._skybox = _Skybox(shader, cubemap, mesh)
        return self._skybox

    # Scene contents ------------------------------------------------------

    def spawn(self, entity: Entity) -> Entity:
        """Add a copy of the entity to the scene and return the copy."""
        stored = _copy_entity(entity)
        self.entities.append(stored)
        return stored

    def spawn_point_light(self, light: PointLight) -> PointLight:
        """Add a copy of the point light to the scene and return the copy."""
        stored = _copy_point_light(light)
        self.point_lights.append(stored)
        return stored

    def spawn_directional_light(self, light: DirectionalLight) -> None:
        """Replace the scene's directional light with a copy of this one."""
        self.directional_light = _copy_directional_light(light)

    def update_fire_texture(self, index: int) -> None:
        """Show fire animation frame ``index`` on the first entity tagged fire."""
        fire = self.entity_with_tag(FIRE_TAG)
        if fire is None:
            return
        path = fire_texture_path(index)
        texture = self._fire_textures.get(path)
        if texture is None:
            texture = load_image_gl(path, True)
            self._fire_textures[path] = texture
        fire.albedo = texture

    def entity_with_tag(self, tag: str) -> Optional[Entity]:
        """The first entity with this tag, or None."""
        return next((entity for entity in self.entities if entity.tag == tag), None)

    def entities_with_tag(self, tag: str) -> list[Entity]:
        """Every entity with this tag, in spawn order."""
        return [entity for entity in self.entities if entity.tag == tag]

    def point_light_at(self, position) -> Optional[PointLight]:
        """The point light at exactly this position, or None."""
        target = np.asarray(position, dtype=float).reshape(3)
        return next(
            (light for light in self.point_lights if np.array_equal(light.position, target)),
            None,
        )

    # Per-frame helpers ---------------------------------------------------

    def update_lights(self, shader: Any) -> None:
        """Send the directional light and every point light to the shader."""
        sun = self.directional_light
        shader.set_vec3("DIRECTIONALLIGHT.direction", sun.direction)
        shader.set_vec3("DIRECTIONALLIGHT.ambient", sun.ambient)
        shader.set_vec3("DIRECTIONALLIGHT.diffuse", sun.diffuse)
        shader.set_vec3("DIRECTIONALLIGHT.specular", sun.specular)
        for i, light in enumerate(self.point_lights):
            prefix = f"POINTLIGHTS[{i}]"
            shader.set_vec3(f"{prefix}.position", light.position)
            shader.set_vec3(f"{prefix}.ambient", light.ambient)
            shader.set_vec3(f"{prefix}.diffuse", light.diffuse)
            shader.set_vec3(f"{prefix}.specular", light.specular)
            shader.set_float(f"{prefix}.constant", light.constant)
            shader.set_float(f"{prefix}.linear", light.linear)
            shader.set_float(f"{prefix}.quadratic", light.quadratic)

    def update_camera_movement(self, delta_time: float) -> None:
        """Move and turn the camera from input, toggle mouse lock, flicker the fireplace."""
        inputs = self.input_manager
        moves = (
            (KEY_W, CameraMovement.FORWARD),
            (KEY_S, CameraMovement.BACKWARD),
            (KEY_A, CameraMovement.LEFT),
            (KEY_D, CameraMovement.RIGHT),
        )
        for key, direction in moves:
            if inputs.get_key(key):
                self.camera.process_keyboard(direction, delta_time)

        if self.window.mouse_locked:
            dx, dy = inputs.mouse_rel
            self.camera.process_mouse_movement(dx, -dy, True)

        if inputs.just_pressed_key(KEY_ESCAPE):
            self.window.mouse_lock(not self.window.mouse_locked)

        now = self.clock()
        for light in self.point_lights:
            if np.linalg.norm(light.position - FIREPLACE_POSITION) < FIREPLACE_RADIUS:
                fire_flicker(now, light)