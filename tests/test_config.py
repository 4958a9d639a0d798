"""
Unit tests for configuration loading

Run with: pytest tests/test_config.py -v
"""

import json

import pytest

from mini_fuzz_py.utils.config import DEFAULTS, ConfigError, load_config


def test_defaults_are_copied():
    config = load_config()
    config["trials"] = 99
    assert DEFAULTS["trials"] == 10
    assert load_config()["seed_input"] == '<html a="value">...</html>'


def test_json_overrides(tmp_path):
    path = tmp_path / "fuzz.json"
    path.write_text(json.dumps({"timeout": 0.5, "trials": 2}))
    config = load_config(str(path))
    assert config["timeout"] == 0.5
    assert config["trials"] == 2
    assert config["workdir"] == DEFAULTS["workdir"]


def test_unknown_key(tmp_path):
    path = tmp_path / "fuzz.json"
    path.write_text(json.dumps({"trails": 2}))
    with pytest.raises(ConfigError, match="trails"):
        load_config(str(path))


@pytest.mark.parametrize("content", ["not json", "[1, 2]"])
def test_invalid_file(tmp_path, content):
    path = tmp_path / "fuzz.json"
    path.write_text(content)
    with pytest.raises(ConfigError):
        load_config(str(path))


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        load_config(str(tmp_path / "nope.json"))


@pytest.mark.parametrize("data", [
    {"timeout": "5"},
    {"trials": 2.5},
    {"trials": True},
    {"insert_special": 1},
    {"rng_seed": "abc"},
    {"workdir": None},
])
def test_wrong_value_type(tmp_path, data):
    path = tmp_path / "fuzz.json"
    path.write_text(json.dumps(data))
    key = next(iter(data))
    with pytest.raises(ConfigError, match=key):
        load_config(str(path))


@pytest.mark.parametrize("data", [
    {"timeout": None},
    {"timeout": 3},
    {"rng_seed": None},
    {"rng_seed": 7},
    {"insert_special": False},
])
def test_accepted_value_types(tmp_path, data):
    path = tmp_path / "fuzz.json"
    path.write_text(json.dumps(data))
    config = load_config(str(path))
    for key, value in data.items():
        assert config[key] == value
