import json
from pathlib import Path

from sessionjar.config import Config, load_config, save_config


def test_load_default_config(tmp_path: Path):
    config = load_config(tmp_path / "nonexistent.json")
    assert config.baseUrl is None
    assert config.scheme is None
    assert config.storagePrefix == "better-auth"
    assert config.cookiePrefix == "better-auth"
    assert config.disableCache is False
    assert config.debug is False
    assert config.outputFormat == "text"


def test_save_and_load_config(tmp_path: Path):
    path = tmp_path / "config.json"
    config = Config(baseUrl="https://auth.example.com/api/auth", cookiePrefix=["a", "b"])
    save_config(config, path)

    loaded = load_config(path)
    assert loaded.baseUrl == "https://auth.example.com/api/auth"
    assert loaded.cookiePrefix == ["a", "b"]
    assert loaded.storagePrefix == "better-auth"


def test_config_json_uses_camel_case(tmp_path: Path):
    path = tmp_path / "config.json"
    save_config(Config(scheme="myapp"), path)
    raw = json.loads(path.read_text())
    assert "baseUrl" in raw
    assert "base_url" not in raw
    assert "storagePrefix" in raw
    assert "cookiePrefix" in raw
    assert "disableCache" in raw


def test_partial_config_file_uses_defaults(tmp_path: Path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"storagePrefix": "my-app", "cookiePrefix": ""}))

    loaded = load_config(path)
    assert loaded.storagePrefix == "my-app"
    assert loaded.cookiePrefix == ""
    assert loaded.outputFormat == "text"


def test_storage_keys_follow_prefix():
    assert Config().cookieKey == "better-auth_cookie"
    assert Config().sessionCacheKey == "better-auth_session_data"
    assert Config(storagePrefix="my-app").cookieKey == "my-app_cookie"
    assert Config(storagePrefix="").cookieKey == "better-auth_cookie"


def test_null_cookie_prefix_uses_default(tmp_path: Path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"cookiePrefix": None}))

    assert load_config(path).cookiePrefix == "better-auth"
