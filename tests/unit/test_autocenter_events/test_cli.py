"""Tests for the autocenter-events CLI."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from autocenter_events.cli import main

pytestmark = pytest.mark.unit


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    path = tmp_path / "autocenter.yml"
    path.write_text(
        "registry:\n"
        "  backend: sqlite\n"
        f"  sqlite_path: {tmp_path / 'tokens.db'}\n"
        "gateway:\n"
        "  backend: log\n"
        "service:\n"
        "  trigger_status: Pendente\n",
        encoding="utf-8",
    )
    return path


def _run(config_path: Path, *args: str) -> int:
    return main(["--config", str(config_path), *args])


def _json_lines(output: str) -> list[dict]:
    return [json.loads(line) for line in output.splitlines() if line.startswith("{")]


def test_tokens_add_list_remove(config_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(config_path, "tokens", "add", "tok-maria", "--role", "mecanico", "--username", "maria") == 0
    assert _run(config_path, "tokens", "add", "tok-ana", "--role", "aligner") == 0
    capsys.readouterr()

    assert _run(config_path, "tokens", "list") == 0
    rows = _json_lines(capsys.readouterr().out)
    assert [r["token"] for r in rows] == ["tok-ana", "tok-maria"]

    assert _run(config_path, "tokens", "remove", "tok-ana") == 0
    assert _run(config_path, "tokens", "list") == 0
    rows = _json_lines(capsys.readouterr().out)
    assert [r["token"] for r in rows] == ["tok-maria"]


def test_replay_dispatches_through_log_gateway(
    config_path: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _run(config_path, "tokens", "add", "tok-maria", "--role", "mecanico", "--username", "maria")
    before = tmp_path / "before.json"
    after = tmp_path / "after.json"
    before.write_text(json.dumps({"status": "Pendente", "assignedMechanic": "joao"}), encoding="utf-8")
    after.write_text(
        json.dumps({"status": "Pendente", "assignedMechanic": "maria", "carModel": "Civic", "licensePlate": "ABC123"}),
        encoding="utf-8",
    )
    capsys.readouterr()

    code = _run(config_path, "replay", "--category", "service", "--before", str(before), "--after", str(after))

    assert code == 0
    summary = _json_lines(capsys.readouterr().out)[-1]
    assert summary["dispatched"] is True
    assert summary["recipients"] == ["tok-maria"]
    assert summary["body"] == "Veículo: Civic (ABC123)\nServiço: Ver detalhes"


def test_replay_non_qualifying_write(config_path: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    after = tmp_path / "after.json"
    after.write_text(json.dumps({"status": "Concluído", "assignedMechanic": "maria"}), encoding="utf-8")

    assert _run(config_path, "replay", "--category", "service", "--after", str(after)) == 0
    assert _json_lines(capsys.readouterr().out)[-1] == {"dispatched": False}


def test_replay_requires_a_document(config_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(config_path, "replay", "--category", "alignment") == 2
    assert "provide --before" in capsys.readouterr().err


def test_invalid_config_exits_with_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "bad.yml"
    path.write_text("registry:\n  backend: redis\n", encoding="utf-8")
    assert main(["--config", str(path), "tokens", "list"]) == 2
    assert "Invalid configuration" in capsys.readouterr().err
