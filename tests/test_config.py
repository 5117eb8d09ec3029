import json

from blogwriter.config import (
    DEFAULT_BASE_URL,
    DEFAULT_MODEL,
    ConfigManager,
    mask_key,
)


def test_defaults_without_file(tmp_path):
    config = ConfigManager(tmp_path).load()
    assert config.api_key is None
    assert config.model == DEFAULT_MODEL
    assert config.base_url == DEFAULT_BASE_URL


def test_api_key_persists(tmp_path):
    ConfigManager(tmp_path).set_api_key("  secret-key ")

    reloaded = ConfigManager(tmp_path)
    assert reloaded.get_api_key() == "secret-key"

    data = json.loads((tmp_path / "config.json").read_text(encoding="utf-8"))
    assert data["api_key"] == "secret-key"


def test_clear_api_key(tmp_path):
    manager = ConfigManager(tmp_path)
    manager.set_api_key("secret-key")
    manager.clear_api_key()
    assert ConfigManager(tmp_path).get_api_key() is None


def test_partial_file_uses_defaults(tmp_path):
    (tmp_path / "config.json").write_text(json.dumps({"api_key": "k"}), encoding="utf-8")
    config = ConfigManager(tmp_path).load()
    assert config.api_key == "k"
    assert config.model == DEFAULT_MODEL


def test_corrupt_file_falls_back_to_defaults(tmp_path):
    (tmp_path / "config.json").write_text("{not json", encoding="utf-8")
    config = ConfigManager(tmp_path).load()
    assert config.model == DEFAULT_MODEL
    assert config.api_key is None


def test_invalid_utf8_file_falls_back_to_defaults(tmp_path):
    (tmp_path / "config.json").write_bytes(b'{"api_key": "\xff"}')
    config = ConfigManager(tmp_path).load()
    assert config.model == DEFAULT_MODEL
    assert config.api_key is None


def test_wrong_types_fall_back_to_defaults(tmp_path):
    (tmp_path / "config.json").write_text(json.dumps({"temperature": "hot"}), encoding="utf-8")
    config = ConfigManager(tmp_path).load()
    assert config.temperature == 0.7


def test_clear_all(tmp_path):
    manager = ConfigManager(tmp_path)
    manager.set_api_key("k")
    manager.set_model("gemini-1.5-pro")
    manager.clear_all()

    config = ConfigManager(tmp_path).load()
    assert config.api_key is None
    assert config.model == DEFAULT_MODEL


def test_mask_key():
    assert mask_key(None) == ""
    assert mask_key("short") == "*****"
    assert mask_key("AIzaSyABCDEFGH1234") == "AIza**********1234"
