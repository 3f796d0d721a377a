import json
from pathlib import Path

from cli.check_source import main as cli
from click.testing import CliRunner


def _write(tmp_path: Path, name: str, data: bytes) -> str:
    p = tmp_path / name
    p.write_bytes(data)
    return str(p)


def test_cli_clean_file(tmp_path: Path):
    good = _write(tmp_path, "good.py", b"print('hi')\n")
    runner = CliRunner()
    res = runner.invoke(cli, [good])
    assert res.exit_code == 0, res.output
    assert res.output == f"Checking {good}\n"


def test_cli_violations_do_not_change_exit_code(tmp_path: Path):
    bad = _write(tmp_path, "bad.c", b"int x;\r\n\tint y;\n")
    runner = CliRunner()
    res = runner.invoke(cli, [bad])
    assert res.exit_code == 0, res.output
    assert f"{bad}(1) [ERROR] :Windows newline sequence (CR,LF)" in res.output
    assert f"{bad}(2) [ERROR] :Tab character" in res.output


def test_cli_strict_failure(tmp_path: Path):
    bad = _write(tmp_path, "bad.c", b"no newline")
    good = _write(tmp_path, "good.c", b"ok\n")
    runner = CliRunner()
    res = runner.invoke(cli, [good, bad, "--strict"])
    assert res.exit_code == 2
    assert f"{bad}(1) [ERROR] :Missing EOL at end of file" in res.output

    res = runner.invoke(cli, [good, "--strict"])
    assert res.exit_code == 0, res.output


def test_cli_strict_default_from_settings(tmp_path: Path, monkeypatch):
    from srccheck.config import settings

    bad = _write(tmp_path, "bad.c", b"\t\n")
    monkeypatch.setattr(settings, "STRICT", True)
    runner = CliRunner()
    assert runner.invoke(cli, [bad]).exit_code == 2
    assert runner.invoke(cli, [bad, "--no-strict"]).exit_code == 0


def test_cli_missing_file_fails_but_scans_the_rest(tmp_path: Path):
    missing = str(tmp_path / "missing.c")
    good = _write(tmp_path, "good.c", b"ok\n")
    runner = CliRunner()
    res = runner.invoke(cli, [missing, good])
    assert res.exit_code == 1
    assert f"Checking {missing}" in res.output
    assert "No such file or directory" in res.output
    assert f"Checking {good}" in res.output


def test_cli_no_arguments_succeeds():
    runner = CliRunner()
    res = runner.invoke(cli, [])
    assert res.exit_code == 0
    assert res.output == ""


def test_cli_json_exposes_counters(tmp_path: Path):
    tabs = _write(tmp_path, "tabs.txt", b"\ta\n\tb\n\tc\n\td\n\te\n")
    good = _write(tmp_path, "good.txt", "€ ok\n".encode("utf-8"))
    runner = CliRunner()
    res = runner.invoke(cli, ["--json", tabs, good])
    assert res.exit_code == 0, res.output
    payload = json.loads(res.output)
    assert [r["path"] for r in payload] == [tabs, good]

    first = payload[0]
    assert first["ok"] is True
    assert first["clean"] is False
    assert first["counts"]["tab"] == 5
    assert first["line_count"] == 5
    assert first["incidents"] == [
        {"category": "tab", "line": 1, "message": "Tab character"}
    ]
    assert payload[1]["clean"] is True
    assert payload[1]["incidents"] == []


def test_cli_rejects_unknown_log_level(tmp_path: Path):
    good = _write(tmp_path, "good.c", b"ok\n")
    runner = CliRunner()
    res = runner.invoke(cli, ["--log-level", "LOUD", good])
    assert res.exit_code == 2


def test_cli_directory_argument_is_an_io_failure(tmp_path: Path):
    good = _write(tmp_path, "good.c", b"ok\n")
    adir = tmp_path / "adir"
    adir.mkdir()
    runner = CliRunner()
    res = runner.invoke(cli, [good, str(adir)])
    assert res.exit_code == 1
    assert f"Checking {good}" in res.output
    assert f"Checking {adir}" in res.output
    assert f"{adir}: Is a directory" in res.output


def test_cli_json_unreadable_file_is_not_clean(tmp_path: Path):
    missing = str(tmp_path / "missing.c")
    runner = CliRunner()
    res = runner.invoke(cli, ["--json", missing])
    assert res.exit_code == 1
    # stderr may be mixed into output; the JSON array starts at the first "[" line
    payload = json.loads(res.output[res.output.index("[\n") :])
    assert payload[0]["ok"] is False
    assert payload[0]["clean"] is False
    assert payload[0]["error"] == "No such file or directory"
