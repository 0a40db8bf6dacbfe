# tests/test_project_config.py
import json
import os

import pytest

from runner.errors import ConfigError
from specsheet.config import find_config_file, load_project_config


def _write(path, data):
    path.write_text(json.dumps(data) if not isinstance(data, str) else data, encoding="utf-8")
    return str(path)


def _config():
    return {
        "projectName": "Demo Shop",
        "baseUrl": "http://localhost:3000",
        "outputDir": "out",
        "viewport": {"width": 1280, "height": 720},
        "pages": [
            {
                "name": "home",
                "path": "/",
                "waitStrategy": "graph",
                "actions": [{"type": "click", "selector": "#go", "waitAfter": 0, "required": True}],
            },
            {"name": "cart", "path": "/cart", "category": "Checkout"},
        ],
        "screens": [{"filename": "cart", "title": "Cart", "description": "Basket contents"}],
        "specSheet": {"fileName": "custom.xlsx"},
    }


def test_camel_case_keys_are_accepted(tmp_path):
    config = load_project_config(_write(tmp_path / "specsheet.config.json", _config()))
    assert config.project_name == "Demo Shop"
    assert config.viewport.width == 1280
    home = config.pages[0]
    assert home.wait_strategy == "graph"
    assert home.actions[0].wait_after == 0
    assert home.actions[0].required is True
    assert config.pages[1].wait_strategy == "basic"
    assert config.spec_sheet.file_name == "custom.xlsx"


def test_output_locations_resolve_against_config_dir(tmp_path):
    config = load_project_config(_write(tmp_path / "config.json", _config()))
    assert config.output_dir == os.path.join(str(tmp_path), "out")
    assert config.spec_output_dir == os.path.join(str(tmp_path), "out", "specifications")
    assert config.screenshot_dir == os.path.join(config.spec_output_dir, "screens")


def test_screen_meta_lookup_by_page_name(tmp_path):
    config = load_project_config(_write(tmp_path / "config.json", _config()))
    assert config.screen_meta("cart").title == "Cart"
    assert config.screen_meta("home") is None


def test_config_discovery_order(tmp_path):
    _write(tmp_path / "config.json", _config())
    _write(tmp_path / "mockup-config.json", _config())
    assert find_config_file(str(tmp_path)).endswith("mockup-config.json")
    assert find_config_file(str(tmp_path / "missing")) is None


def test_missing_file_raises_config_error(tmp_path):
    with pytest.raises(ConfigError):
        load_project_config(str(tmp_path / "nope.json"))


def test_no_config_found_in_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(ConfigError):
        load_project_config()


def test_invalid_json_raises_config_error(tmp_path):
    with pytest.raises(ConfigError):
        load_project_config(_write(tmp_path / "config.json", "{not json"))


@pytest.mark.parametrize("pages", [[], None])
def test_pages_must_be_non_empty(tmp_path, pages):
    data = _config()
    data["pages"] = pages
    with pytest.raises(ConfigError):
        load_project_config(_write(tmp_path / "config.json", data))
