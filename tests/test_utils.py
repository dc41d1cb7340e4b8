import json
import logging

import pytest

from utils import FieldConfig, load_config


def test_defaults():
    config = FieldConfig.from_dict({})
    assert config.base_count == 120
    assert config.opacity == 0.5
    assert config.link is True
    assert config.seed is None


def test_none_section_uses_defaults():
    assert FieldConfig.from_dict(None).base_count == 120


def test_values_are_read():
    config = FieldConfig.from_dict({"base_count": 110, "opacity": 0.35, "link": False, "seed": 4})
    assert (config.base_count, config.opacity, config.link, config.seed) == (110, 0.35, False, 4)


@pytest.mark.parametrize("opacity, expected", [(1.5, 1.0), (-0.2, 0.0)])
def test_opacity_is_clamped_with_warning(caplog, opacity, expected):
    with caplog.at_level(logging.WARNING):
        config = FieldConfig.from_dict({"opacity": opacity})
    assert config.opacity == expected
    assert "outside [0, 1]" in caplog.text


@pytest.mark.parametrize("params", [
    {"base_count": 0},
    {"base_count": -5},
    {"base_count": "many"},
    {"base_count": True},
    {"opacity": "half"},
    {"link": "yes"},
    {"seed": 1.5},
])
def test_invalid_values_raise(params):
    with pytest.raises(ValueError):
        FieldConfig.from_dict(params)


def test_unknown_keys_warn(caplog):
    with caplog.at_level(logging.WARNING):
        FieldConfig.from_dict({"baseCount": 50})
    assert "baseCount" in caplog.text


def test_load_config(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"particle_field": {"base_count": 90}}))
    assert load_config(str(path)) == {"particle_field": {"base_count": 90}}


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.json"))


def test_load_config_bad_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")
    with pytest.raises(json.JSONDecodeError):
        load_config(str(path))
