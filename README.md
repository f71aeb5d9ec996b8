# canisgl

A small OpenGL scene engine built on pyglet, and a block-map viewer built on
it. The viewer reads a project configuration, opens a window, reads a layered
block map, fills the scene with textured cubes, plants and an animated fire,
lights it with one directional light and four point lights (the fireplace light
flickers), draws a skybox, and lets you fly around with a first-person camera.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Running the viewer

Run it from a directory that holds an `assets/` folder with the shaders,
textures, models, skybox and map:

```
canisgl
```

Controls:

- `W`, `A`, `S`, `D` move the camera.
- The mouse turns the camera while the mouse is locked (it starts locked).
- `Escape` locks or unlocks the mouse.
- Closing the window ends the program.

If `assets/maps/level.map` is missing the viewer prints
`file not found at: assets/maps/level.map` and exits with status 1.

## Configuration

`assets/project.canis` is a whitespace-separated list of keys and values. The
file and every key are optional; if the file is missing the defaults are used:

```
fullscreen false
width 1280
heigth 800
volume 1.0
use_frame_limit false
frame_limit 60
override_seed false
seed 0
log true
```

Unknown words are skipped; a value of the wrong kind ends reading. `volume` is
clamped to the range 0.0–1.5. Messages from `canisgl.debug` (`log`, `warning`,
`error`, `fatal_error`) are only printed when `log` is `true`; `fatal_error`
always raises `canisgl.debug.FatalError`.

`canisgl.config.parse_config(text)` parses such text into a `ProjectConfig`;
`load_config(path)` reads a file into the shared configuration returned by
`get_config()`.

## Map format

`assets/maps/level.map` is a stream of integers. `-1` starts a new row and
`-2` starts a new layer; every other number is a block placed at the next
position in the current row. Reading stops at the first token that is not an
integer.

| Value | Block                                       |
|-------|---------------------------------------------|
| 0     | empty                                       |
| 1     | glass                                       |
| 2     | nothing (50%), grass, or one of five flowers |
| 3     | brick                                       |
| 4     | dirt                                        |
| 5     | cobblestone                                 |
| 6     | grass block                                 |
| 7     | oak plank floor                             |
| 8     | oak log                                     |
| 9     | oak planks                                  |
| 10    | netherrack                                  |
| 11    | fire                                        |

`canisgl.app.parse_map` turns such text into a nested list indexed as
`[layer][row][column]`; `load_map(path)` reads a file. The fire cycles through
31 frames, one every 0.2 seconds (`canisgl.app.FireAnimation`).

## Using the library

The pieces that do not need a window can be used on their own:

```python
from canisgl.config import parse_config
from canisgl.camera import Camera, CameraMovement
from canisgl.objloader import parse_obj
from canisgl.model import build_vertices

config = parse_config("width 640 heigth 480 log true")

camera = Camera()
camera.process_keyboard(CameraMovement.FORWARD, 0.1)
view = camera.view_matrix()

with open("assets/models/cube.obj") as f:
    positions, uvs, normals = parse_obj(f)
vertices = build_vertices(positions, normals, uvs)
```

Other modules:

- `canisgl.linalg`: `translate`, `rotate`, `scale`, `perspective`, `look_at`,
  `normalize`, and the `Transform`, `PointLight`, `DirectionalLight` and
  `Texture` data types.
- `canisgl.objloader`: `parse_obj`, `load_obj`, `load_obj_vertices` for
  triangulated OBJ files whose faces carry vertex/uv/normal indices; other
  files raise `ObjFormatError`.
- `canisgl.model`: `Model` and `load_model`.
- `canisgl.inputs.InputManager`: keyboard, mouse and game-controller state,
  advanced once per frame by `update()`; `attach(window)` feeds it from a
  pyglet window.
- `canisgl.framerate.FrameRateManager`: frame times, an averaged frame rate,
  and sleeping to hold a target frame rate.
- `canisgl.shader`, `canisgl.textures`, `canisgl.mesh`, `canisgl.window` and
  `canisgl.world`: GPU-side pieces that need an OpenGL context.

## What it does not do

- There is no in-window editor: clicking does not select entities and there
  is no panel for editing them.
- Game controllers are not picked up from the window automatically; a
  controller object must be handed to `InputManager.controller_connected`.
- There is no sound: `volume` and `mute` are stored in the configuration but
  nothing plays audio. `use_frame_limit`, `frame_limit`, `override_seed` and
  `seed` are also only stored; the viewer always targets 60 frames per second
  and seeds plants randomly.