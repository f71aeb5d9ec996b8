"""A model's vertex data uploaded to the GPU and drawn as triangles."""

from __future__ import annotations

from typing import Any

import numpy as np

from .model import FLOATS_PER_VERTEX, Model

FLOAT_SIZE = 4
STRIDE = FLOATS_PER_VERTEX * FLOAT_SIZE

# (attribute location, component count, offset in floats): position, normal, uv.
ATTRIBUTE_LAYOUT = ((0, 3, 0), (1, 3, 3), (2, 2, 6))


class Mesh:
    """Vertex array and buffer for one model."""

    def __init__(self, model: Model) -> None:
        self.model = model
        self.data = np.asarray(model.vertices, dtype=np.float32)
        self._vao: Any = None
        self._vbo: Any = None

    @property
    def uploaded(self) -> bool:
        """Whether the vertex data is on the GPU."""
        return self._vao is not None

    @property
    def vertex_count(self) -> int:
        """Number of vertices drawn."""
        return self.model.vertex_count()

    def upload(self) -> None:
        """Create the vertex array and buffer and describe the attribute layout."""
        if self.data.size == 0:
            raise ValueError(f"model {self.model.path!r} has no vertices")
        from pyglet import gl
        from pyglet.graphics.vertexarray import VertexArray
        from pyglet.graphics.vertexbuffer import BufferObject

        vao = VertexArray()
        vao.bind()
        vbo = BufferObject(self.data.nbytes)
        vbo.bind()
        vbo.set_data(self.data.tobytes())
        for location, components, offset in ATTRIBUTE_LAYOUT:
            gl.glVertexAttribPointer(
                location, components, gl.GL_FLOAT, gl.GL_FALSE, STRIDE, offset * FLOAT_SIZE
            )
            gl.glEnableVertexAttribArray(location)
        vbo.unbind()
        vao.unbind()
        self._vao, self._vbo = vao, vbo

    def draw(self) -> None:
        """Draw the mesh as triangles."""
        if self._vao is None:
            raise RuntimeError("mesh has not been uploaded")
        from pyglet import gl

        self._vao.bind()
        gl.glDrawArrays(gl.GL_TRIANGLES, 0, self.vertex_count)
        self._vao.unbind()