import io
import json

import pytest

from peekmq import config
from peekmq.cli import main as cli


@pytest.fixture(autouse=True)
def fresh_config(cfg_file, monkeypatch):
    new_config = config.load_user_config()
    monkeypatch.setattr(config, "CURRENT_CONFIG", new_config)
    monkeypatch.setattr(cli, "CURRENT_CONFIG", new_config)
    return new_config


def test_version(capsys):
    assert cli.main(["--version"]) == 0
    assert "PeekMQ" in capsys.readouterr().out


def test_render_info(tmp_path, capsysbinary):
    body = tmp_path / "body.json"
    body.write_bytes(b'{"a":1}')
    ret = cli.main(
        [
            "render",
            str(body),
            "--info",
            "-t",
            "application/json",
            "-H",
            '{"x": 1}',
            "-e",
            "amq.direct",
            "-d",
            "3",
        ]
    )
    assert ret == 0
    doc = json.loads(capsysbinary.readouterr().out)
    assert doc["data"] == {"a": 1}
    assert doc["props"]["headers"] == {"x": 1}
    assert doc["deliver"]["exchange"] == "amq.direct"
    assert doc["deliver"]["delivery_tag"] == 3


def test_render_passthrough(tmp_path, capsysbinary):
    body = tmp_path / "body.bin"
    body.write_bytes(b"\x00\xffraw")
    assert cli.main(["render", str(body), "-t", "image/png"]) == 0
    assert capsysbinary.readouterr().out == b"\x00\xffraw"


def test_render_stdin(monkeypatch, capsysbinary):
    fake_stdin = io.TextIOWrapper(io.BytesIO(b"[1,2]"))
    monkeypatch.setattr(cli.sys, "stdin", fake_stdin)
    assert cli.main(["render", "-t", "application/json"]) == 0
    assert json.loads(capsysbinary.readouterr().out) == [1, 2]


def test_render_error(tmp_path, capsysbinary):
    body = tmp_path / "body.json"
    body.write_bytes(b"{broken")
    assert cli.main(["render", str(body), "-i", "-t", "application/json"]) == 1
    assert capsysbinary.readouterr().out == b""


def test_render_config_defaults(tmp_path, capsysbinary, fresh_config):
    fresh_config.set("INFO_MODE", True)
    fresh_config.set("DEFAULT_CONTENT_TYPE", "text/plain")
    body = tmp_path / "body.txt"
    body.write_bytes(b"hello")
    assert cli.main(["render", str(body)]) == 0
    doc = json.loads(capsysbinary.readouterr().out)
    assert doc["props"]["content_type"] == "text/plain"
    assert doc["data"] == "hello"


def test_bad_headers():
    with pytest.raises(SystemExit):
        cli.main(["render", "-H", "[1, 2]"])


def test_bad_delivery_tag():
    with pytest.raises(SystemExit):
        cli.main(["render", "-d", "-1"])


def test_set_and_list(cfg_file, capsys):
    assert cli.main(["set", "json_indent", "4"]) == 0
    assert json.loads(cfg_file.read_text())["JSON_INDENT"] == 4
    assert cli.main(["list", "--values"]) == 0
    assert "JSON_INDENT=4" in capsys.readouterr().out


def test_render_missing_file(tmp_path, capsysbinary):
    assert cli.main(["render", str(tmp_path / "missing.bin")]) == 1
    assert capsysbinary.readouterr().out == b""


def test_render_surrogate_body(tmp_path, capsysbinary):
    body = tmp_path / "body.json"
    body.write_bytes(b'"\\ud800"')
    assert cli.main(["render", str(body), "-t", "application/json"]) == 1
    assert capsysbinary.readouterr().out == b""
