"""The demo scene: a voxel map of blocks, plants and an animated fireplace."""

from __future__ import annotations

import random
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, NamedTuple, Optional, Protocol

import numpy as np

from .config import get_config, load_config
from .debug import log
from .framerate import FrameRateManager
from .inputs import InputManager
from .linalg import DirectionalLight, PointLight, Texture, Transform
from .mesh import Mesh
from .model import load_model
from .shader import Shader
from .textures import load_image_gl
from .window import (
    COLOR_BUFFER_BIT,
    DEPTH_BUFFER_BIT,
    Window,
    WindowFlags,
    clear_buffer,
    enable_alpha_channel,
    enable_depth_test,
)
from .world import Entity, World, fire_texture_path

CONFIG_PATH = "assets/project.canis"
MAP_PATH = "assets/maps/level.map"
SKYBOX_PATH = "assets/textures/lowpoly-skybox/"
TEXTURE_DIR = "assets/textures/"
VERTEX_SHADER = "assets/shaders/hello_shader.vs"
FRAGMENT_SHADER = "assets/shaders/hello_shader.fs"
WINDOW_TITLE = "Hello Graphics"
TARGET_FPS = 60

FIRE_FRAMES = 31
FIRE_FRAME_INTERVAL = 0.2

NEW_LAYER = -2
NEW_ROW = -1

_INT_RE = re.compile(r"[+-]?\d+")
_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1
_UINT_MODULUS = 2**32

Level = list[list[list[int]]]


# Map -----------------------------------------------------------------------


def _integers(text: str) -> Iterator[int]:
    """Integers read one after another; reading stops at the first non-integer."""
    for token in text.split():
        while token:
            match = _INT_RE.match(token)
            if match is None:
                return
            value = int(match.group())
            if not _INT_MIN <= value <= _INT_MAX:
                return
            yield value
            token = token[match.end():]


def parse_map(text: str) -> Level:
    """Parse map text into level[y][x][z] block codes.

    -2 starts a new layer, -1 a new row; other numbers are block codes stored
    as unsigned 32-bit values. Reading ends at the first token that is not an
    integer.
    """
    level: Level = [[[]]]
    for number in _integers(text):
        if number == NEW_LAYER:
            level.append([[]])
        elif number == NEW_ROW:
            level[-1].append([])
        else:
            level[-1][-1].append(number % _UINT_MODULUS)
    return level


def load_map(path: str | Path) -> Level:
    """Read a map file; a missing file raises FileNotFoundError."""
    return parse_map(Path(path).read_text())


# Plants --------------------------------------------------------------------


class Plant(NamedTuple):
    """A plant's tag and the name of its texture."""

    tag: str
    texture: str


GRASS = Plant("grass", "grass")
FLOWERS = (
    Plant("blue orchid", "blue_orchid"),
    Plant("poppy", "poppy"),
    Plant("azure bullet", "azure_bluet"),
    Plant("cornflower", "cornflower"),
    Plant("dandelion", "dandelion"),
)


class _RandRange(Protocol):
    def randrange(self, stop: int) -> int: ...


def choose_plant(rng: _RandRange) -> Optional[Plant]:
    """Pick what grows on a plant cell: nothing half the time, else mostly grass."""
    if rng.randrange(100) < 50:
        return None
    if rng.randrange(100) < 75:
        return GRASS
    return FLOWERS[rng.randrange(len(FLOWERS))]


# Lights --------------------------------------------------------------------


def scene_lights() -> tuple[DirectionalLight, list[PointLight]]:
    """The sun and the point lights of the scene, the fireplace light last."""
    sun = DirectionalLight(ambient=(0.2, 0.2, 0.2))

    def room_light(position) -> PointLight:
        return PointLight(
            position=position,
            ambient=np.full(3, 0.2),
            diffuse=np.full(3, 0.5),
            specular=np.full(3, 1.0),
            constant=1.0,
            linear=0.09,
            quadratic=0.032,
        )

    lights = [
        room_light((0.0, 0.0, 0.0)),
        room_light((5.0, 6.0, 4.0)),   # left side of the house
        room_light((5.0, 6.0, 14.0)),  # right side of the house
    ]
    fireplace = room_light((15.0, 4.5, 9.0))
    fireplace.ambient = np.array([0.3, 0.1, 0.0])
    fireplace.diffuse = np.array([0.8, 0.4, 0.1])
    fireplace.specular = np.array([1.0, 0.5, 0.2])
    lights.append(fireplace)
    return sun, lights


def spawn_lights(world: World) -> None:
    """Add the scene's lights to the world."""
    sun, lights = scene_lights()
    world.spawn_directional_light(sun)
    for light in lights:
        world.spawn_point_light(light)


# Fire animation ------------------------------------------------------------


@dataclass
class FireAnimation:
    """Steps through the fire frames, one frame per interval."""

    frames: int = FIRE_FRAMES
    interval: float = FIRE_FRAME_INTERVAL
    elapsed: float = 0.0
    index: int = 1

    def advance(self, delta_time: float) -> Optional[int]:
        """Add elapsed time; return the new frame index when it changes, else None."""
        self.elapsed += delta_time
        if self.elapsed < self.interval:
            return None
        self.elapsed = 0.0
        self.index += 1
        if self.index > self.frames:
            self.index = 1
        return self.index


# Scene assets --------------------------------------------------------------

# name: (shininess, wind effect or None)
_SHADER_SPECS: dict[str, tuple[float, Optional[float]]] = {
    "default": (64, None),
    "brick": (32, None),
    "dirt": (32, None),
    "cobblestone": (64, None),
    "grassblock": (32, None),
    "oakplank": (64, None),
    "oaklog": (32, None),
    "netherrack": (64, None),
    "grass": (64, 0.2),
    "flower": (64, 0.2),
}

_PLANT_TEXTURES = ("grass", "blue_orchid", "poppy", "azure_bluet", "dandelion", "cornflower")
_BLOCK_TEXTURES = (
    "glass", "bricks", "dirt", "cobblestone", "grass_block_top",
    "oak_planks_floor", "oak_log", "oak_planks", "netherrack", "container2_specular",
)

# code: (tag, texture, shader)
_BLOCKS: dict[int, tuple[str, str, str]] = {
    1: ("glass", "glass", "default"),
    3: ("brick", "bricks", "brick"),
    4: ("dirt", "dirt", "dirt"),
    5: ("cobblestone", "cobblestone", "cobblestone"),
    6: ("grass block", "grass_block_top", "grassblock"),
    7: ("oak plank floor", "oak_planks_floor", "oakplank"),
    8: ("oak log", "oak_log", "oaklog"),
    9: ("oak plank ", "oak_planks", "oakplank"),
    10: ("netherrack", "netherrack", "netherrack"),
}
_PLANT_CODE = 2
_FIRE_CODE = 11


@dataclass
class _Assets:
    shaders: dict[str, Shader] = field(default_factory=dict)
    textures: dict[str, Texture] = field(default_factory=dict)
    meshes: dict[str, Mesh] = field(default_factory=dict)
    fire_frames: list[Texture] = field(default_factory=list)


def _build_shader(shininess: float, wind_effect: Optional[float]) -> Shader:
    shader = Shader()
    shader.compile(VERTEX_SHADER, FRAGMENT_SHADER)
    shader.add_attribute("aPosition")
    shader.link()
    shader.use()
    shader.set_int("MATERIAL.diffuse", 0)
    shader.set_int("MATERIAL.specular", 1)
    shader.set_float("MATERIAL.shininess", shininess)
    shader.set_bool("WIND", wind_effect is not None)
    if wind_effect is not None:
        shader.set_float("WINDEFFECT", wind_effect)
    shader.unuse()
    return shader


def _load_mesh(path: str) -> Mesh:
    mesh = Mesh(load_model(path))
    mesh.upload()
    return mesh


def _load_assets() -> _Assets:
    assets = _Assets()
    assets.shaders = {
        name: _build_shader(shininess, wind)
        for name, (shininess, wind) in _SHADER_SPECS.items()
    }
    for name in _PLANT_TEXTURES:
        assets.textures[name] = load_image_gl(f"{TEXTURE_DIR}{name}.png", False)
    for name in _BLOCK_TEXTURES:
        assets.textures[name] = load_image_gl(f"{TEXTURE_DIR}{name}.png", True)
    assets.meshes = {
        "cube": _load_mesh("assets/models/cube.obj"),
        "plants": _load_mesh("assets/models/plants.obj"),
        "fire": _load_mesh("assets/models/fire.obj"),
    }
    assets.fire_frames = [
        load_image_gl(fire_texture_path(i), True) for i in range(1, FIRE_FRAMES + 1)
    ]
    return assets


def _make_entity(code: int, position, rng: _RandRange, assets: _Assets) -> Optional[Entity]:
    specular = assets.textures["container2_specular"]
    if code in _BLOCKS:
        tag, texture, shader = _BLOCKS[code]
        albedo, model, program = assets.textures[texture], assets.meshes["cube"], assets.shaders[shader]
    elif code == _PLANT_CODE:
        plant = choose_plant(rng)
        if plant is None:
            return None
        tag, albedo = plant.tag, assets.textures[plant.texture]
        model, program = assets.meshes["plants"], assets.shaders["flower"]
    elif code == _FIRE_CODE:
        tag, albedo = "fire", assets.fire_frames[0]
        model, program = assets.meshes["fire"], assets.shaders["default"]
    else:
        return None
    return Entity(
        active=True,
        tag=tag,
        transform=Transform(position=position),
        model=model,
        shader=program,
        albedo=albedo,
        specular=specular,
    )


def _populate(world: World, level: Level, rng: _RandRange, assets: _Assets) -> None:
    for y, layer in enumerate(level):
        for x, row in enumerate(layer):
            for z, code in enumerate(row):
                entity = _make_entity(code, (float(x), float(y), float(z)), rng, assets)
                if entity is not None:
                    world.spawn(entity)


# Entry point ---------------------------------------------------------------


def main(argv: Optional[list[str]] = None) -> int:
    """Open the window, build the scene from the map and run until closed."""
    try:
        load_config(CONFIG_PATH)
    except OSError:
        pass
    config = get_config()
    rng = random.Random()

    inputs = InputManager()
    frame_rate = FrameRateManager(TARGET_FPS)

    window = Window()
    window.mouse_lock(True)
    flags = WindowFlags.FULLSCREEN if config.fullscreen else WindowFlags(0)
    window.create(WINDOW_TITLE, config.width, config.height, flags)
    inputs.attach(window.native)

    world = World(window, inputs, SKYBOX_PATH)
    spawn_lights(world)

    enable_alpha_channel()
    enable_depth_test()

    assets = _load_assets()

    try:
        level = load_map(MAP_PATH)
    except OSError:
        print(f"file not found at: {MAP_PATH} ", flush=True)
        return 1
    _populate(world, level, rng, assets)

    fire = FireAnimation()
    try:
        while inputs.update():
            delta_time = frame_rate.start_frame()
            clear_buffer(COLOR_BUFFER_BIT | DEPTH_BUFFER_BIT)
            world.update(delta_time)
            frame = fire.advance(delta_time)
            if frame is not None:
                world.update_fire_texture(frame)
            world.draw(delta_time)
            window.swap_buffer()
            fps = frame_rate.end_frame()
            log(f"FPS: {fps:.6f} DeltaTime: {delta_time:.6f}")
    finally:
        inputs.close()
    return 0


def _native(window: Any) -> Any:
    return window.native