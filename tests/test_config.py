import json

import pytest

from utils.config import Config
from utils.failures import ConfigError


def write(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")


@pytest.fixture
def configs_dir(tmp_path):
    configs = tmp_path / "configs"
    configs.mkdir()
    write(configs / "a_camera.json", {"camera": {"index": 0, "width": 640}})
    write(configs / "b_override.json", {"camera": {"width": 320}, "model": {"path": "assets/m.pt"}})
    return configs


def test_files_merge_in_name_order(configs_dir):
    config = Config(str(configs_dir), environ={})

    assert config.get("camera.index") == 0
    assert config.get_int("camera.width") == 320


def test_environment_overrides(configs_dir):
    config = Config(str(configs_dir), environ={
        "LIVELENS_CAMERA_INDEX": "2",
        "LIVELENS_LOG_LEVEL": "DEBUG",
    })

    assert config.get_int("camera.index") == 2
    assert config.get("logging.level") == "DEBUG"


def test_relative_paths_resolve_against_project_root(configs_dir, tmp_path):
    config = Config(str(configs_dir), environ={})

    assert config.get_path("model.path") == tmp_path.resolve() / "assets" / "m.pt"
    assert config.get_path("labels.path") is None
    assert config.get_path("labels.path", "/abs/labels.txt").as_posix() == "/abs/labels.txt"


def test_typed_getters_fall_back_on_bad_values(configs_dir):
    config = Config(str(configs_dir), environ={})
    config.set("ranking.threshold", "not-a-number")

    assert config.get_float("ranking.threshold", 0.2) == 0.2
    assert config.get_int("missing.key", 7) == 7


def test_malformed_json_is_a_config_error(tmp_path):
    (tmp_path / "bad.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError):
        Config(str(tmp_path), environ={})


def test_missing_directory_gives_empty_config(tmp_path):
    config = Config(str(tmp_path / "absent"), environ={})
    assert config.config == {}

