import dataclasses

import pytest

from canisgl.config import ProjectConfig, get_config, load_config, parse_config


@pytest.fixture
def restore_config():
    saved = dataclasses.replace(get_config())
    yield
    for field in dataclasses.fields(saved):
        setattr(get_config(), field.name, getattr(saved, field.name))


def test_empty_text_gives_defaults():
    config = parse_config("")
    assert config == ProjectConfig()
    assert config.width == 1280
    assert config.height == 800
    assert config.frame_limit == 60


def test_all_keys_are_read():
    text = (
        "fullscreen true\nwidth 1920\nheigth 1080\nvolume 0.5\n"
        "use_frame_limit true\nframe_limit 144\noverride_seed true\n"
        "seed 42\nlog true\n"
    )
    config = parse_config(text)
    assert config.fullscreen is True
    assert config.width == 1920
    assert config.height == 1080
    assert config.volume == pytest.approx(0.5)
    assert config.use_frame_limit is True
    assert config.frame_limit == 144
    assert config.override_seed is True
    assert config.seed == 42
    assert config.log is True


def test_bool_is_true_only_for_the_word_true():
    assert parse_config("fullscreen yes").fullscreen is False
    assert parse_config("log TRUE").log is False


def test_volume_is_clamped():
    assert parse_config("volume 2.0").volume == pytest.approx(1.5)
    assert parse_config("volume -3").volume == pytest.approx(0.0)


def test_unknown_words_are_skipped():
    config = parse_config("title demo width 640 colour blue heigth 480")
    assert (config.width, config.height) == (640, 480)


def test_bad_number_stops_parsing():
    config = parse_config("width wide log true")
    assert config.width == 1280
    assert config.log is False


def test_number_with_suffix_leaves_rest_as_word():
    config = parse_config("width 1024px heigth 768")
    assert config.width == 1024
    assert config.height == 768


def test_height_key_keeps_its_spelling():
    assert parse_config("height 600").height == 800


def test_load_config_updates_shared_config(tmp_path, restore_config):
    path = tmp_path / "project.canis"
    path.write_text("width 800 log true")
    loaded = load_config(path)
    assert loaded is get_config()
    assert get_config().width == 800
    assert get_config().log is True


def test_load_config_missing_file(tmp_path, restore_config):
    before = dataclasses.replace(get_config())
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.canis")
    assert get_config() == before


def test_get_config_is_shared(restore_config):
    get_config().width = 1234
    get_config().log = True
    config = get_config()
    assert config.width == 1234
    assert config.log is True