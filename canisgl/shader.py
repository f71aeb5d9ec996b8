"""GLSL shader programs built from a vertex and a fragment source file."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Callable, Optional

import numpy as np

from .debug import fatal_error

StageFactory = Callable[[str, str], Any]
ProgramFactory = Callable[..., Any]


def _pyglet_stage(source: str, kind: str) -> Any:
    from pyglet.graphics.shader import Shader as StageShader

    return StageShader(source, kind)


def _pyglet_program(*stages: Any) -> Any:
    from pyglet.graphics.shader import ShaderProgram

    return ShaderProgram(*stages)


def read_shader_source(path: str | Path) -> str:
    """Return the text of a shader file; a missing file is a fatal error."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError:
        fatal_error(f'Unable to open file "{path}"')
        raise  # pragma: no cover - fatal_error always raises


def _location(info: Any) -> int:
    if isinstance(info, Mapping):
        return int(info["location"])
    return int(info.location)


def _vector(args: tuple, size: int) -> tuple[float, ...]:
    if len(args) == 1:
        values = np.asarray(args[0], dtype=float).ravel()
    else:
        values = np.asarray(args, dtype=float).ravel()
    if values.size != size:
        raise ValueError(f"expected {size} components, got {values.size}")
    return tuple(float(v) for v in values)


def _matrix(mat: Any, size: int) -> tuple[float, ...]:
    values = np.asarray(mat, dtype=float)
    if values.shape != (size, size):
        raise ValueError(f"expected a {size}x{size} matrix, got shape {values.shape}")
    # Column-major order, as the GPU expects without transposition.
    return tuple(values.flatten(order="F").tolist())


class Shader:
    """A shader program: compiled from two files, linked once, then fed uniforms.

    Setting a uniform the program does not have is silently ignored.
    """

    def __init__(
        self,
        stage_factory: Optional[StageFactory] = None,
        program_factory: Optional[ProgramFactory] = None,
    ) -> None:
        self._stage_factory = stage_factory or _pyglet_stage
        self._program_factory = program_factory or _pyglet_program
        self._stages: tuple[Any, ...] = ()
        self._program: Any = None
        self._uniforms: dict[str, Any] = {}
        self.attributes: list[str] = []

    @property
    def is_linked(self) -> bool:
        """Whether the program has been linked."""
        return self._program is not None

    @property
    def program_id(self) -> int:
        """The GPU id of the linked program, or 0."""
        if self._program is None:
            return 0
        return int(getattr(self._program, "id", 0))

    def compile(self, vertex_path: str | Path, fragment_path: str | Path) -> None:
        """Compile the vertex and fragment stages from their files."""
        stages = []
        for path, kind in ((vertex_path, "vertex"), (fragment_path, "fragment")):
            source = read_shader_source(path)
            try:
                stages.append(self._stage_factory(source, kind))
            except Exception as exc:
                fatal_error(f"Shader {path} failed to compile\nOpengl Error: {exc}")
        self._stages = tuple(stages)
        self._program = None
        self._uniforms = {}

    def link(self) -> None:
        """Link the compiled stages into a program; does nothing once linked."""
        if self._program is not None:
            return
        if not self._stages:
            raise RuntimeError("compile must be called before link")
        try:
            program = self._program_factory(*self._stages)
        except Exception as exc:
            fatal_error(f"Shader failed to link!\nOpengl Error: {exc}")
            raise  # pragma: no cover - fatal_error always raises
        self._program = program
        self._uniforms = dict(program.uniforms)

    def add_attribute(self, name: str) -> None:
        """Record a vertex attribute; attributes are numbered in the order added."""
        self.attributes.append(name)

    def _linked_program(self) -> Any:
        if self._program is None:
            raise RuntimeError("shader is not linked")
        return self._program

    def use(self) -> None:
        """Make this program the active one."""
        self._linked_program().use()

    def unuse(self) -> None:
        """Stop using any program."""
        self._linked_program().stop()

    def uniform_location(self, name: str) -> int:
        """Location of a uniform; an unknown name is a fatal error."""
        self._linked_program()
        info = self._uniforms.get(name)
        if info is None:
            fatal_error(f"Uniform {name} not found in shader!")
        return _location(info)

    def _set(self, name: str, value: Any) -> None:
        program = self._linked_program()
        if name in self._uniforms:
            program[name] = value

    def set_bool(self, name: str, value: bool) -> None:
        """Set a boolean uniform."""
        self._set(name, int(bool(value)))

    def set_int(self, name: str, value: int) -> None:
        """Set an integer uniform."""
        self._set(name, int(value))

    def set_float(self, name: str, value: float) -> None:
        """Set a float uniform."""
        self._set(name, float(value))

    def set_vec2(self, name: str, *args: Any) -> None:
        """Set a vec2 from one sequence or two numbers."""
        self._set(name, _vector(args, 2))

    def set_vec3(self, name: str, *args: Any) -> None:
        """Set a vec3 from one sequence or three numbers."""
        self._set(name, _vector(args, 3))

    def set_vec4(self, name: str, *args: Any) -> None:
        """Set a vec4 from one sequence or four numbers."""
        self._set(name, _vector(args, 4))

    def set_mat2(self, name: str, mat: Any) -> None:
        """Set a 2x2 matrix uniform."""
        self._set(name, _matrix(mat, 2))

    def set_mat3(self, name: str, mat: Any) -> None:
        """Set a 3x3 matrix uniform."""
        self._set(name, _matrix(mat, 3))

    def set_mat4(self, name: str, mat: Any) -> None:
        """Set a 4x4 matrix uniform."""
        self._set(name, _matrix(mat, 4))