import io
import json
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest

from sessionjar.api.models import AuthenticationError
from sessionjar.config import Config
from sessionjar.main import create_parser, main


def _run_cli(argv: list[str], tmp_path: Path, config: Config | None = None, stdin: str | None = None) -> int:
    """Run main() against a temporary storage file and the given config."""
    with (
        patch("sessionjar.main.load_config", return_value=config or Config()),
        patch("sessionjar.main.ensure_dirs"),
        patch("sessionjar.main.STORAGE_FILE", tmp_path / "storage.json"),
        patch("sys.argv", ["sessionjar"] + argv),
        patch("sys.stdin", io.StringIO(stdin or "")),
    ):
        return main()


# --- Parser ---


def test_parser_parse():
    parser = create_parser()
    args = parser.parse_args(["parse", "a=1"])
    assert args.command == "parse"
    assert args.header == "a=1"


def test_parser_parse_header_optional():
    parser = create_parser()
    args = parser.parse_args(["parse"])
    assert args.header is None


def test_parser_store_all_flag():
    parser = create_parser()
    args = parser.parse_args(["store", "a=1", "--all", "--format", "json"])
    assert args.command == "store"
    assert args.all is True
    assert args.format == "json"


def test_parser_request():
    parser = create_parser()
    args = parser.parse_args(["request", "/sign-in/email", "-X", "POST", "-d", '{"a": 1}'])
    assert args.path == "/sign-in/email"
    assert args.method == "POST"
    assert args.data == '{"a": 1}'


def test_parser_config_set_flags():
    parser = create_parser()
    args = parser.parse_args(["config", "set", "--cookie-prefix", "", "--no-disable-cache"])
    assert args.config_action == "set"
    assert args.cookie_prefix == ""
    assert args.disable_cache is False
    assert args.debug is None


# --- parse ---


def test_parse_outputs_json(tmp_path, capsys):
    header = "a=1; Max-Age=60, b=2; Path=/; Secure"
    result = _run_cli(["parse", header, "--format", "json"], tmp_path)

    assert result == 0
    rows = json.loads(capsys.readouterr().out)
    assert [r["name"] for r in rows] == ["a", "b"]
    assert rows[0]["max-age"] == "60"
    assert rows[0]["expiresAt"].endswith("Z")
    assert rows[1]["path"] == "/"
    assert rows[1]["secure"] == ""
    assert rows[1]["expiresAt"] is None


def test_parse_text_table(tmp_path, capsys):
    result = _run_cli(["parse", "session=abc; Domain=example.com"], tmp_path)

    assert result == 0
    out = capsys.readouterr().out
    assert "name" in out
    assert "---" in out
    assert "session" in out
    assert "example.com" in out


def test_parse_reads_stdin(tmp_path, capsys):
    result = _run_cli(["parse", "--format", "tsv", "--columns", "name,value"], tmp_path, stdin="a=1, b=2\n")

    assert result == 0
    lines = capsys.readouterr().out.strip().split("\n")
    assert lines == ["name\tvalue", "a\t1", "b\t2"]


def test_parse_empty_input(tmp_path, capsys):
    result = _run_cli(["parse"], tmp_path, stdin="   ")
    assert result == 1
    assert "No Set-Cookie header" in capsys.readouterr().err


# --- store / cookie / clear ---


def test_store_then_cookie(tmp_path, capsys):
    result = _run_cli(["store", "better-auth.session_token=abc; Path=/"], tmp_path)
    assert result == 0
    assert json.loads(capsys.readouterr().out) == {
        "stored": 1,
        "skipped": False,
        "sessionChanged": True,
    }

    result = _run_cli(["cookie"], tmp_path)
    assert result == 0
    assert capsys.readouterr().out.strip() == "better-auth.session_token=abc"


def test_store_same_value_is_not_a_change(tmp_path, capsys):
    _run_cli(["store", "better-auth.session_token=abc"], tmp_path)
    capsys.readouterr()

    _run_cli(["store", "better-auth.session_token=abc; Max-Age=600"], tmp_path)
    assert json.loads(capsys.readouterr().out)["sessionChanged"] is False


def test_store_skips_third_party_cookies(tmp_path, capsys):
    result = _run_cli(["store", "__cf_bm=abc"], tmp_path)

    assert result == 0
    assert json.loads(capsys.readouterr().out)["skipped"] is True
    assert not (tmp_path / "storage.json").exists()


def test_store_all_keeps_third_party_cookies(tmp_path, capsys):
    result = _run_cli(["store", "__cf_bm=abc", "--all"], tmp_path)

    assert result == 0
    assert json.loads(capsys.readouterr().out)["skipped"] is False
    _run_cli(["cookie", "--format", "json"], tmp_path)
    assert json.loads(capsys.readouterr().out) == {"cookie": "__cf_bm=abc"}


def test_store_uses_configured_storage_prefix(tmp_path, capsys):
    config = Config(storagePrefix="my-app", cookiePrefix="my-app")
    _run_cli(["store", "my-app.session_token=abc"], tmp_path, config=config)

    raw = json.loads((tmp_path / "storage.json").read_text())
    assert "my-app_cookie" in raw


def test_clear(tmp_path, capsys):
    _run_cli(["store", "better-auth.session_token=abc"], tmp_path)
    capsys.readouterr()

    result = _run_cli(["clear"], tmp_path)
    assert result == 0
    raw = json.loads((tmp_path / "storage.json").read_text())
    assert raw["better-auth_cookie"] == "{}"
    assert raw["better-auth_session_data"] == "{}"


# --- request ---


def test_request_requires_base_url(tmp_path, capsys):
    result = _run_cli(["request", "/get-session"], tmp_path)

    assert result == 1
    data = json.loads(capsys.readouterr().err)
    assert data["errors"][0]["code"] == "ConfigException"


def test_request_invalid_json_body(tmp_path, capsys):
    config = Config(baseUrl="https://auth.example.com/api/auth")
    result = _run_cli(["request", "/sign-in/email", "-X", "post", "-d", "{bad"], tmp_path, config=config)

    assert result == 1
    data = json.loads(capsys.readouterr().err)
    assert data["errors"][0]["code"] == "InvalidArgument"
    assert data["errors"][0]["path"] == "--data"


def test_request_prints_json_response(tmp_path, capsys):
    config = Config(baseUrl="https://auth.example.com/api/auth")
    resp = httpx.Response(200, json={"user": {"id": "u1"}})

    with patch("sessionjar.api.client.SessionClient.request", return_value=resp) as mock_request:
        result = _run_cli(["request", "/sign-in/email", "-X", "post", "-d", '{"email": "a@b.c"}'], tmp_path, config=config)

    assert result == 0
    mock_request.assert_called_once_with("POST", "/sign-in/email", json={"email": "a@b.c"})
    assert json.loads(capsys.readouterr().out) == {"user": {"id": "u1"}}


def test_request_prints_text_response(tmp_path, capsys):
    config = Config(baseUrl="https://auth.example.com/api/auth")
    resp = httpx.Response(200, text="pong")

    with patch("sessionjar.api.client.SessionClient.request", return_value=resp):
        result = _run_cli(["request", "/ok"], tmp_path, config=config)

    assert result == 0
    assert capsys.readouterr().out.strip() == "pong"


def test_request_auth_error_exit_code(tmp_path, capsys):
    config = Config(baseUrl="https://auth.example.com/api/auth")

    with patch(
        "sessionjar.api.client.SessionClient.request",
        side_effect=AuthenticationError("Session expired or missing (401)"),
    ):
        result = _run_cli(["request", "/get-session"], tmp_path, config=config)

    assert result == 2
    data = json.loads(capsys.readouterr().err)
    assert data["errors"][0]["code"] == "AuthenticationException"


def test_unexpected_error_is_reported(tmp_path, capsys):
    config = Config(baseUrl="https://auth.example.com/api/auth")

    with patch(
        "sessionjar.api.client.SessionClient.request",
        side_effect=httpx.ConnectError("connection refused"),
    ):
        result = _run_cli(["request", "/get-session"], tmp_path, config=config)

    assert result == 1
    data = json.loads(capsys.readouterr().err)
    assert data["errors"][0]["code"] == "ConnectError"


# --- config ---


def test_config_show_json(tmp_path, capsys):
    cfg = Config(baseUrl="https://auth.example.com/api/auth", cookiePrefix=["a", "b"])

    with patch("sessionjar.commands.config_cmd.load_config", return_value=cfg):
        result = _run_cli(["config", "show", "--format", "json"], tmp_path, config=cfg)

    assert result == 0
    data = json.loads(capsys.readouterr().out)
    assert data["baseUrl"] == "https://auth.example.com/api/auth"
    assert data["cookiePrefix"] == ["a", "b"]


def test_config_set(tmp_path, capsys):
    cfg = Config()

    with (
        patch("sessionjar.commands.config_cmd.load_config", return_value=cfg),
        patch("sessionjar.commands.config_cmd.save_config") as mock_save,
    ):
        result = _run_cli([
            "config", "set",
            "--base-url", "https://auth.example.com/api/auth",
            "--scheme", "myapp",
            "--cookie-prefix", "better-auth, my-app",
            "--disable-cache",
        ], tmp_path)

    assert result == 0
    saved = mock_save.call_args.args[0]
    assert saved.baseUrl == "https://auth.example.com/api/auth"
    assert saved.scheme == "myapp"
    assert saved.cookiePrefix == ["better-auth", "my-app"]
    assert saved.disableCache is True
    assert saved.debug is False
    assert json.loads(capsys.readouterr().out)["status"] == "ok"


def test_config_set_empty_cookie_prefix(tmp_path, capsys):
    cfg = Config()

    with (
        patch("sessionjar.commands.config_cmd.load_config", return_value=cfg),
        patch("sessionjar.commands.config_cmd.save_config") as mock_save,
    ):
        _run_cli(["config", "set", "--cookie-prefix", ""], tmp_path)

    assert mock_save.call_args.args[0].cookiePrefix == ""


def test_config_set_cookie_prefix_help_explains_empty_value(capsys):
    parser = create_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["config", "set", "--help"])

    help_text = " ".join(capsys.readouterr().out.split())
    assert "ending in session_token or session_data" in help_text
