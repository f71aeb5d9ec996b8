"""Reader for the triangulated Wavefront OBJ subset used by the engine's models."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, NamedTuple

from .debug import fatal_error

Vec2 = tuple[float, float]
Vec3 = tuple[float, float, float]


class ObjFormatError(ValueError):
    """The OBJ data cannot be read by this simple parser."""


class ObjData(NamedTuple):
    """Per-vertex attributes, one entry for every corner of every triangle."""

    positions: list[Vec3]
    uvs: list[Vec2]
    normals: list[Vec3]


def _floats(values: list[str], count: int, header: str) -> tuple[float, ...]:
    if len(values) < count:
        raise ObjFormatError(f"'{header}' needs {count} numbers")
    try:
        return tuple(float(value) for value in values[:count])
    except ValueError as exc:
        raise ObjFormatError(f"bad number in '{header}' line") from exc


def _corner(token: str) -> tuple[int, int, int]:
    parts = token.split("/")
    if len(parts) != 3:
        raise ObjFormatError(
            "File can't be read by our simple parser; faces need vertex/uv/normal indices"
        )
    try:
        return tuple(int(part) for part in parts)  # type: ignore[return-value]
    except ValueError as exc:
        raise ObjFormatError(
            "File can't be read by our simple parser; faces need vertex/uv/normal indices"
        ) from exc


def _lookup(table: list, index: int, kind: str):
    if not 1 <= index <= len(table):
        raise ObjFormatError(f"{kind} index {index} out of range")
    return table[index - 1]


def parse_obj(lines: Iterable[str]) -> ObjData:
    """Parse OBJ lines into triangle-corner positions, uvs (v flipped) and normals.

    Only the first three corners of a face are used; every corner must carry
    vertex, texture and normal indices.
    """
    vertices: list[Vec3] = []
    tex_coords: list[Vec2] = []
    normals: list[Vec3] = []
    corners: list[tuple[int, int, int]] = []

    for line in lines:
        tokens = line.split()
        if not tokens:
            continue
        header, values = tokens[0], tokens[1:]
        if header == "v":
            vertices.append(_floats(values, 3, header))  # type: ignore[arg-type]
        elif header == "vt":
            u, v = _floats(values, 2, header)
            tex_coords.append((u, -v))
        elif header == "vn":
            normals.append(_floats(values, 3, header))  # type: ignore[arg-type]
        elif header == "f":
            if len(values) < 3:
                raise ObjFormatError(
                    "File can't be read by our simple parser; faces need three corners"
                )
            corners.extend(_corner(token) for token in values[:3])

    result = ObjData([], [], [])
    for vertex_index, uv_index, normal_index in corners:
        result.positions.append(_lookup(vertices, vertex_index, "vertex"))
        result.uvs.append(_lookup(tex_coords, uv_index, "uv"))
        result.normals.append(_lookup(normals, normal_index, "normal"))
    return result


def load_obj(path: str | Path) -> ObjData:
    """Read an OBJ file; an unreadable file is a fatal error."""
    try:
        with open(path, encoding="utf-8") as file:
            return parse_obj(file)
    except OSError as exc:
        fatal_error(f"Can not open model: {path}")
        raise  # pragma: no cover - fatal_error always raises
    

def load_obj_vertices(path: str | Path) -> list[float]:
    """Read an OBJ file into interleaved floats: position, uv, normal per vertex."""
    data = load_obj(path)
    return [
        component
        for position, uv, normal in zip(data.positions, data.uvs, data.normals)
        for component in (*position, *uv, *normal)
    ]