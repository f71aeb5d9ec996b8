"""The application window with its OpenGL context, plus global render state."""

from __future__ import annotations

from enum import IntFlag
from typing import Any

from .debug import fatal_error, log

COLOR_BUFFER_BIT = 0x00004000
DEPTH_BUFFER_BIT = 0x00000100

ICON_SIZE = 16

# Window icon: ARGB4444 colours keyed by character, one string per row, top first.
_ICON_COLOURS = {".": 0x0FFF, "o": 0xF435, "w": 0xFFFF}
_ICON_ROWS = (
    ".....oooooo.....",
    "...oooowwoooo...",
    "..ooooowwooooo..",
    ".ooooowwwwooooo.",
    ".owwoowwwwooooo.",
    "oowwwowwwwooowoo",
    "owwwwoowwooowwwo",
    "owwwwoooooowwwwo",
    "oowwoowwwoowwwwo",
    "ooooowwwwwoowwoo",
    "oooowwwwwwoooooo",
    ".ooowwwwwwwoooo.",
    ".ooowwwwwwwoooo.",
    "..ooowwwwwoooo..",
    "...ooowwwoooo...",
    ".....oooooo.....",
)


class WindowFlags(IntFlag):
    """Options for creating a window."""

    FULLSCREEN = 1
    BORDERLESS = 16


def _argb4444_to_rgba(value: int) -> bytes:
    nibbles = ((value >> 8) & 0xF, (value >> 4) & 0xF, value & 0xF, (value >> 12) & 0xF)
    return bytes(n * 17 for n in nibbles)


def icon_pixels() -> bytes:
    """The 16x16 window icon as RGBA bytes, top row first."""
    return b"".join(
        _argb4444_to_rgba(_ICON_COLOURS[cell]) for row in _ICON_ROWS for cell in row
    )


def enable_depth_test() -> None:
    """Turn on depth testing."""
    from pyglet import gl

    gl.glEnable(gl.GL_DEPTH_TEST)


def enable_alpha_channel() -> None:
    """Turn on alpha blending."""
    from pyglet import gl

    gl.glEnable(gl.GL_BLEND)
    gl.glBlendFunc(gl.GL_SRC_ALPHA, gl.GL_ONE_MINUS_SRC_ALPHA)


def clear_buffer(bits: int) -> None:
    """Clear the buffers named by bits (COLOR_BUFFER_BIT, DEPTH_BUFFER_BIT)."""
    from pyglet import gl

    gl.glClear(int(bits))


class Window:
    """A window with an OpenGL 3.3 context, created by ``create``."""

    def __init__(self) -> None:
        self.fps = 0.0
        self.width = 0
        self.height = 0
        self.fullscreen = False
        self.mouse_locked = False
        self._native: Any = None

    @property
    def native(self) -> Any:
        """The underlying pyglet window, or None before creation."""
        return self._native

    def _require_native(self) -> Any:
        if self._native is None:
            raise RuntimeError("window has not been created")
        return self._native

    def create(self, name: str, width: int, height: int, flags: int = 0) -> None:
        """Open the window and set up the context; failure is fatal."""
        import pyglet
        from pyglet import gl

        flags = WindowFlags(flags)
        self.width, self.height = int(width), int(height)
        if flags & WindowFlags.FULLSCREEN:
            self.fullscreen = True
        style = (
            pyglet.window.Window.WINDOW_STYLE_BORDERLESS
            if flags & WindowFlags.BORDERLESS
            else None
        )
        config = gl.Config(
            double_buffer=True, major_version=3, minor_version=3,
            stencil_size=8, depth_size=24,
        )
        try:
            if flags & WindowFlags.FULLSCREEN:
                native = pyglet.window.Window(
                    caption=name, fullscreen=True, style=style, config=config, vsync=False
                )
            else:
                native = pyglet.window.Window(
                    width=self.width, height=self.height, caption=name,
                    style=style, config=config, vsync=False,
                )
        except Exception:
            fatal_error("Window could not be created")
            raise  # pragma: no cover - fatal_error always raises
        self._native = native
        self.width, self.height = native.width, native.height

        icon = pyglet.image.ImageData(
            ICON_SIZE, ICON_SIZE, "RGBA", icon_pixels(), pitch=-ICON_SIZE * 4
        )
        native.set_icon(icon)
        native.set_exclusive_mouse(self.mouse_locked)

        version = native.context.get_info().get_version_string()
        log(f"*** OpenGL Version: {version} ***")

        gl.glClearColor(0.05, 0.05, 0.05, 1.0)
        gl.glEnable(gl.GL_BLEND)
        gl.glBlendFunc(gl.GL_SRC_ALPHA, gl.GL_ONE_MINUS_SRC_ALPHA)

    def create_fullscreen(self, name: str) -> None:
        """Open a fullscreen window the size of the default screen."""
        import pyglet

        display_module = getattr(pyglet, "display", None) or pyglet.canvas
        screen = display_module.get_display().get_default_screen()
        self.fullscreen = True
        self.create(name, screen.width, screen.height, WindowFlags.FULLSCREEN)

    def set_window_name(self, name: str) -> None:
        """Change the window title."""
        self._require_native().set_caption(name)

    def swap_buffer(self) -> None:
        """Show the drawn frame and collect pending window events."""
        native = self._require_native()
        native.flip()
        native.dispatch_events()

    def mouse_lock(self, locked: bool) -> None:
        """Capture and hide the mouse, reporting relative motion, or release it."""
        self.mouse_locked = bool(locked)
        if self._native is not None:
            self._native.set_exclusive_mouse(self.mouse_locked)

    def toggle_fullscreen(self) -> None:
        """Switch between fullscreen and windowed."""
        self.fullscreen = not self.fullscreen
        if self._native is not None:
            self._native.set_fullscreen(self.fullscreen)