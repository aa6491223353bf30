import json
from pathlib import Path

import pytest

from batchline import cli


def _write_events(path: Path, records) -> Path:
    path.write_text("\n".join(json.dumps(r) for r in records) + "\n")
    return path


def _passing_run():
    return [
        {"event": "dispatch", "agents": ["Chrome", "Firefox"]},
        {"event": "result", "agent": "Chrome", "details": {"name": "a", "passed": 2, "failed": 0}},
        {"event": "result", "agent": "Firefox", "details": {"name": "a", "passed": 2, "failed": 0}},
        {"event": "complete"},
    ]


def test_cli_no_args_prints_help(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main([])
    assert excinfo.value.code == 0
    assert "replay" in capsys.readouterr().out


def test_cli_replay_success(tmp_path: Path, capsys) -> None:
    events = _write_events(tmp_path / "run.ndjson", _passing_run())
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["replay", str(events), "--tests", "1", "--no-tty"])
    assert excinfo.value.code == 0

    out = capsys.readouterr().out
    assert "Testing started on Chrome, Firefox" in out
    assert "Testing... / 100% complete (2/2)" in out
    assert "4 tests passed!" in out
    assert "\x1b" not in out


def test_cli_replay_failure_exit_code(tmp_path: Path, capsys) -> None:
    records = [
        {"event": "dispatch", "agents": ["Chrome"]},
        {
            "event": "result",
            "agent": "Chrome",
            "details": {
                "name": "login.html",
                "passed": 0,
                "failed": 1,
                "ui": {"login": {"passed": 0, "failed": 1, "type": "test", "message": "nope"}},
            },
        },
        {"event": "complete"},
    ]
    events = _write_events(tmp_path / "run.ndjson", records)
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["replay", str(events), "-n", "1", "--no-tty"])
    assert excinfo.value.code == 1

    out = capsys.readouterr().out
    assert "login.html on Chrome" in out
    assert "   in ui" in out
    assert "     login: nope" in out
    assert "Failures: 1 of 1 tests failed." in out


def test_cli_replay_batch_file_and_config(tmp_path: Path, capsys) -> None:
    batch = tmp_path / "batch.txt"
    batch.write_text("a.html\n\nb.html\n")
    config = tmp_path / "reporter.yaml"
    config.write_text("reporter:\n  status_prefix: Running\n")
    events = _write_events(tmp_path / "run.ndjson", _passing_run())

    with pytest.raises(SystemExit) as excinfo:
        cli.main(
            ["replay", str(events), "--batch", str(batch), "--config", str(config), "--no-tty"]
        )
    assert excinfo.value.code == 0
    assert "Running / 50% complete (2/4)" in capsys.readouterr().out


def test_cli_replay_batch_record(tmp_path: Path, capsys) -> None:
    records = [{"event": "batch", "tests": ["a", "b", "c"]}] + _passing_run()
    events = _write_events(tmp_path / "run.ndjson", records)
    with pytest.raises(SystemExit):
        cli.main(["replay", str(events), "--no-tty"])
    assert "(2/6)" in capsys.readouterr().out


def test_cli_replay_empty_dispatch_exits_one(tmp_path: Path, capsys) -> None:
    events = _write_events(
        tmp_path / "run.ndjson",
        [{"event": "dispatch", "agents": []}, {"event": "complete"}],
    )
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["replay", str(events), "--tests", "3", "--no-tty"])
    assert excinfo.value.code == 1
    assert "No browsers connected, exiting." in capsys.readouterr().out


def test_cli_replay_without_complete_exits_one(tmp_path: Path) -> None:
    events = _write_events(tmp_path / "run.ndjson", _passing_run()[:-1])
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["replay", str(events), "--tests", "1"])
    assert excinfo.value.code == 1


def test_cli_missing_file(tmp_path: Path, capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["replay", str(tmp_path / "missing.ndjson")])
    assert excinfo.value.code == 1
    assert "File not found" in capsys.readouterr().err


def test_cli_invalid_stream(tmp_path: Path, capsys) -> None:
    events = _write_events(tmp_path / "run.ndjson", [{"event": "nope"}])
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["replay", str(events), "--no-tty"])
    assert excinfo.value.code == 1
    assert "Invalid input" in capsys.readouterr().err


def test_cli_reads_stdin(monkeypatch, capsys) -> None:
    import io

    text = "\n".join(json.dumps(r) for r in _passing_run())
    monkeypatch.setattr("sys.stdin", io.StringIO(text))
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["replay", "-", "--tests", "1", "--no-tty"])
    assert excinfo.value.code == 0
    assert "4 tests passed!" in capsys.readouterr().out
