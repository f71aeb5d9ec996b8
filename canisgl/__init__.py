"""A small OpenGL scene engine on pyglet and a block-map viewer built on it."""

__version__ = "0.1.0"