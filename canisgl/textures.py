"""Image decoding and upload of 2D and cube map textures."""

from __future__ import annotations

from pathlib import Path
from typing import Any, NamedTuple, Sequence

from PIL import Image, ImageOps

from .debug import error
from .linalg import Texture

CUBE_FACES = 6

# GPU texture objects are freed when collected, so they are held here.
_LIVE_TEXTURES: dict[int, Any] = {}


class DecodedImage(NamedTuple):
    """RGBA pixels, four bytes per pixel, rows in upload order."""

    width: int
    height: int
    pixels: bytes


def decode_image(path: str | Path, flip: bool) -> DecodedImage:
    """Decode an image file to RGBA; with flip the bottom row comes first.

    Raises OSError (FileNotFoundError for a missing file) when it cannot be read.
    """
    with Image.open(path) as image:
        rgba = image.convert("RGBA")
    if flip:
        rgba = ImageOps.flip(rgba)
    return DecodedImage(rgba.width, rgba.height, rgba.tobytes())


def _decode_or_report(path: str | Path) -> DecodedImage | None:
    try:
        return decode_image(path, flip=True)
    except FileNotFoundError:
        error(f"Failed to open file at path : {path}")
    except OSError:
        print(f"Failed to load texture {path}", flush=True)
    return None


def _upload_2d(image: DecodedImage, wrap: bool) -> Texture:
    from pyglet import gl
    from pyglet.image import Texture as GpuTexture

    gpu = GpuTexture.create(image.width, image.height, blank_data=False)
    gl.glBindTexture(gl.GL_TEXTURE_2D, gpu.id)
    gl.glTexImage2D(
        gl.GL_TEXTURE_2D, 0, gl.GL_RGBA, image.width, image.height, 0,
        gl.GL_RGBA, gl.GL_UNSIGNED_BYTE, image.pixels,
    )
    mode = gl.GL_REPEAT if wrap else gl.GL_CLAMP_TO_EDGE
    gl.glTexParameteri(gl.GL_TEXTURE_2D, gl.GL_TEXTURE_WRAP_S, mode)
    gl.glTexParameteri(gl.GL_TEXTURE_2D, gl.GL_TEXTURE_WRAP_T, mode)
    gl.glTexParameteri(gl.GL_TEXTURE_2D, gl.GL_TEXTURE_MIN_FILTER, gl.GL_LINEAR_MIPMAP_NEAREST)
    gl.glTexParameteri(gl.GL_TEXTURE_2D, gl.GL_TEXTURE_MAG_FILTER, gl.GL_NEAREST)
    gl.glGenerateMipmap(gl.GL_TEXTURE_2D)
    gl.glBindTexture(gl.GL_TEXTURE_2D, 0)
    _LIVE_TEXTURES[gpu.id] = gpu
    return Texture(id=gpu.id, width=image.width, height=image.height)


def load_image_gl(path: str | Path, wrap: bool) -> Texture:
    """Load an image as a mipmapped 2D texture, repeating or clamped at the edges.

    An image that cannot be read is reported and yields an empty texture (id 0).
    """
    image = _decode_or_report(path)
    if image is None:
        return Texture()
    return _upload_2d(image, wrap)


def load_cubemap(faces: Sequence[str | Path]) -> int:
    """Load up to six images as the faces of a cube map and return its id.

    Faces go in the order +X, -X, +Y, -Y, +Z, -Z; unreadable faces are reported
    and left empty.
    """
    faces = list(faces)
    if len(faces) > CUBE_FACES:
        raise ValueError(f"a cube map has {CUBE_FACES} faces, got {len(faces)}")

    images: list[tuple[int, DecodedImage]] = []
    for offset, face in enumerate(faces):
        try:
            images.append((offset, decode_image(face, flip=False)))
        except OSError:
            error(f"Cubemap texture failed to load at path: {face}")

    from pyglet import gl
    from pyglet.image import Texture as GpuTexture

    width, height = (images[0][1].width, images[0][1].height) if images else (1, 1)
    gpu = GpuTexture.create(width, height, target=gl.GL_TEXTURE_CUBE_MAP, blank_data=False)
    gl.glBindTexture(gl.GL_TEXTURE_CUBE_MAP, gpu.id)
    for offset, image in images:
        gl.glTexImage2D(
            gl.GL_TEXTURE_CUBE_MAP_POSITIVE_X + offset, 0, gl.GL_RGBA,
            image.width, image.height, 0, gl.GL_RGBA, gl.GL_UNSIGNED_BYTE, image.pixels,
        )
    gl.glTexParameteri(gl.GL_TEXTURE_CUBE_MAP, gl.GL_TEXTURE_MIN_FILTER, gl.GL_LINEAR)
    gl.glTexParameteri(gl.GL_TEXTURE_CUBE_MAP, gl.GL_TEXTURE_MAG_FILTER, gl.GL_LINEAR)
    for axis in (gl.GL_TEXTURE_WRAP_S, gl.GL_TEXTURE_WRAP_T, gl.GL_TEXTURE_WRAP_R):
        gl.glTexParameteri(gl.GL_TEXTURE_CUBE_MAP, axis, gl.GL_CLAMP_TO_EDGE)
    gl.glBindTexture(gl.GL_TEXTURE_CUBE_MAP, 0)
    _LIVE_TEXTURES[gpu.id] = gpu
    return int(gpu.id)