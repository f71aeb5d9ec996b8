[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "canisgl"
version = "0.1.0"
description = "A small OpenGL voxel scene engine: camera, lights, OBJ models, input handling and a block-map viewer"
requires-python = ">=3.10"
keywords = ["opengl", "3d", "voxel", "engine", "obj", "camera", "pyglet"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
    "Topic :: Games/Entertainment",
]
dependencies = [
    "numpy",
    "pyglet",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
canisgl = "canisgl.app:main"

[tool.hatch.build.targets.wheel]
packages = ["canisgl"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
