"""Model geometry loaded from an OBJ file, laid out for drawing."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Sequence

from .debug import fatal_error
from .objloader import ObjFormatError, load_obj

FLOATS_PER_VERTEX = 8


def build_vertices(
    positions: Iterable[Sequence[float]],
    normals: Iterable[Sequence[float]],
    uvs: Iterable[Sequence[float]],
) -> list[float]:
    """Interleave attributes as position (3), normal (3), uv (2) per vertex."""
    return [
        float(component)
        for position, normal, uv in zip(positions, normals, uvs)
        for component in (*position[:3], *normal[:3], *uv[:2])
    ]


@dataclass
class Model:
    """Geometry of a model together with its interleaved vertex data."""

    path: str = ""
    positions: list = field(default_factory=list)
    uvs: list = field(default_factory=list)
    normals: list = field(default_factory=list)
    vertices: list[float] = field(default_factory=list)

    def vertex_count(self) -> int:
        """Number of vertices in the interleaved data."""
        return len(self.vertices) // FLOATS_PER_VERTEX


def load_model(path: str | Path) -> Model:
    """Load a model from an OBJ file; a file that cannot be parsed is fatal."""
    try:
        data = load_obj(path)
    except ObjFormatError as exc:
        fatal_error(f"Failed to load model at path {path}")
        raise  # pragma: no cover - fatal_error always raises
    return Model(
        path=str(path),
        positions=data.positions,
        uvs=data.uvs,
        normals=data.normals,
        vertices=build_vertices(data.positions, data.normals, data.uvs),
    )