import pytest
from PIL import Image

from canisgl.config import get_config
from canisgl.linalg import Texture
from canisgl.textures import decode_image, load_cubemap, load_image_gl

TOP_LEFT = (10, 20, 30, 40)
TOP_RIGHT = (50, 60, 70, 80)
BOTTOM_LEFT = (90, 100, 110, 120)
BOTTOM_RIGHT = (130, 140, 150, 160)


@pytest.fixture
def png(tmp_path):
    image = Image.new("RGBA", (2, 2))
    image.putpixel((0, 0), TOP_LEFT)
    image.putpixel((1, 0), TOP_RIGHT)
    image.putpixel((0, 1), BOTTOM_LEFT)
    image.putpixel((1, 1), BOTTOM_RIGHT)
    path = tmp_path / "img.png"
    image.save(path)
    return path


@pytest.fixture
def logging_on(monkeypatch):
    monkeypatch.setattr(get_config(), "log", True)


def test_decode_size_and_length(png):
    decoded = decode_image(png, flip=False)
    assert (decoded.width, decoded.height) == (2, 2)
    assert len(decoded.pixels) == 2 * 2 * 4


def test_decode_without_flip_starts_at_top(png):
    pixels = decode_image(png, flip=False).pixels
    assert tuple(pixels[0:4]) == TOP_LEFT
    assert tuple(pixels[4:8]) == TOP_RIGHT
    assert tuple(pixels[8:12]) == BOTTOM_LEFT


def test_decode_with_flip_starts_at_bottom(png):
    pixels = decode_image(png, flip=True).pixels
    assert tuple(pixels[0:4]) == BOTTOM_LEFT
    assert tuple(pixels[12:16]) == TOP_RIGHT


def test_decode_flip_is_row_reversal(png):
    plain = decode_image(png, flip=False).pixels
    flipped = decode_image(png, flip=True).pixels
    assert flipped[:8] == plain[8:] and flipped[8:] == plain[:8]


def test_decode_rgb_gets_opaque_alpha(tmp_path):
    path = tmp_path / "rgb.png"
    Image.new("RGB", (3, 2), (1, 2, 3)).save(path)
    decoded = decode_image(path, flip=True)
    assert set(decoded.pixels[3::4]) == {255}
    assert tuple(decoded.pixels[0:3]) == (1, 2, 3)


def test_decode_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        decode_image(tmp_path / "none.png", flip=False)


def test_decode_garbage_file(tmp_path):
    path = tmp_path / "bad.png"
    path.write_bytes(b"not an image at all")
    with pytest.raises(OSError):
        decode_image(path, flip=False)


def test_load_missing_reports_and_returns_empty(tmp_path, logging_on, capsys):
    path = tmp_path / "none.png"
    assert load_image_gl(path, True) == Texture()
    assert f"Failed to open file at path : {path}" in capsys.readouterr().out


def test_load_garbage_reports_and_returns_empty(tmp_path, capsys):
    path = tmp_path / "bad.png"
    path.write_bytes(b"garbage")
    assert load_image_gl(path, False) == Texture()
    assert f"Failed to load texture {path}" in capsys.readouterr().out


def test_cubemap_rejects_too_many_faces(tmp_path):
    faces = [tmp_path / f"f{i}.png" for i in range(7)]
    with pytest.raises(ValueError):
        load_cubemap(faces)