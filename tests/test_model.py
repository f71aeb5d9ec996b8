import pytest

from canisgl.debug import FatalError
from canisgl.model import Model, build_vertices, load_model

TRIANGLE = """\
v 0.0 0.0 0.0
v 1.0 0.0 0.0
v 0.0 1.0 0.0
vt 0.0 0.0
vt 1.0 0.5
vt 0.0 1.0
vn 0.0 0.0 1.0
f 1/1/1 2/2/1 3/3/1
"""


def test_build_vertices_orders_position_normal_uv():
    result = build_vertices([(1, 2, 3)], [(4, 5, 6)], [(7, 8)])
    assert result == [1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0]


def test_build_vertices_empty():
    assert build_vertices([], [], []) == []


def test_vertex_count_divides_by_eight():
    model = Model(vertices=[0.0] * 24)
    assert model.vertex_count() == 3


def test_load_model_builds_interleaved_data(tmp_path):
    path = tmp_path / "tri.obj"
    path.write_text(TRIANGLE)
    model = load_model(path)
    assert model.path == str(path)
    assert model.vertex_count() == len(model.positions) == 3
    assert model.vertices[8:16] == [1.0, 0.0, 0.0, 0.0, 0.0, 1.0, 1.0, -0.5]


def test_load_model_vertices_match_build(tmp_path):
    path = tmp_path / "tri.obj"
    path.write_text(TRIANGLE)
    model = load_model(path)
    assert model.vertices == build_vertices(model.positions, model.normals, model.uvs)


def test_load_model_bad_faces_is_fatal(tmp_path):
    path = tmp_path / "bad.obj"
    path.write_text("v 0 0 0\nvn 0 0 1\nf 1//1 1//1 1//1\n")
    with pytest.raises(FatalError):
        load_model(path)


def test_load_model_missing_file_is_fatal(tmp_path):
    with pytest.raises(FatalError):
        load_model(tmp_path / "none.obj")