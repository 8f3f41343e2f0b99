from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from urd.cli import app
from urd.storage import load_store

runner = CliRunner()


def invoke(store_path: Path, *args: str, **kwargs):
    return runner.invoke(app, [*args, "--store", str(store_path)], **kwargs)


def seed(store_path: Path, *streams: tuple[str, str, int]) -> None:
    store_path.write_text(
        json.dumps(
            {
                "streams": [
                    {"id": sid, "name": name, "seconds": seconds, "active": False, "created_at": "2026-03-01T08:00:00Z"}
                    for sid, name, seconds in streams
                ],
                "sessions": [],
            }
        ),
        encoding="utf-8",
    )


def test_add_and_list(store_path: Path) -> None:
    assert invoke(store_path, "add", "Writing").exit_code == 0
    assert invoke(store_path, "add", "Reviews", "--at", "1").exit_code == 0

    result = invoke(store_path, "list")

    assert result.exit_code == 0
    lines = result.stdout.splitlines()
    assert "Reviews" in lines[0]
    assert "Writing" in lines[1]
    assert "0h 00m 00s" in lines[0]


def test_add_rejects_blank_name(store_path: Path) -> None:
    result = invoke(store_path, "add", "   ")

    assert result.exit_code == 1
    assert not store_path.exists()


def test_list_empty_store(store_path: Path) -> None:
    result = invoke(store_path, "list")

    assert result.exit_code == 0
    assert "No streams" in result.stdout


def test_toggle_stop_and_continue(store_path: Path) -> None:
    invoke(store_path, "add", "Writing")

    result = invoke(store_path, "toggle", "1")
    assert result.exit_code == 0
    assert "Started Writing." in result.stdout
    assert "●" in result.stdout
    assert load_store(store_path).has_active()

    result = invoke(store_path, "stop")
    assert result.exit_code == 0
    assert "Stopped 1 stream(s)." in result.stdout
    stored = load_store(store_path)
    assert not stored.has_active()
    assert stored.last_active == [stored.streams[0].id]

    result = invoke(store_path, "continue")
    assert result.exit_code == 0
    assert "Continued 1 stream(s)." in result.stdout
    stored = load_store(store_path)
    assert stored.has_active()
    assert stored.last_active == []
    assert len(stored.sessions) == 2


def test_toggle_by_id(store_path: Path) -> None:
    seed(store_path, ("abc123", "Writing", 0))

    result = invoke(store_path, "toggle", "abc123")

    assert result.exit_code == 0
    assert load_store(store_path).get_stream("abc123").active


def test_toggle_unknown_reference(store_path: Path) -> None:
    seed(store_path, ("abc123", "Writing", 0))

    result = invoke(store_path, "toggle", "7")

    assert result.exit_code == 1
    assert not load_store(store_path).has_active()


def test_delete_asks_before_removing_recorded_time(store_path: Path) -> None:
    seed(store_path, ("abc123", "Writing", 90))

    result = invoke(store_path, "delete", "1", input="n\n")

    assert result.exit_code == 1
    assert len(load_store(store_path).streams) == 1

    result = invoke(store_path, "delete", "1", input="y\n")

    assert result.exit_code == 0
    stored = load_store(store_path)
    assert stored.streams == []
    assert stored.retired_seconds == 90


def test_delete_without_recorded_time_skips_prompt(store_path: Path) -> None:
    seed(store_path, ("abc123", "Writing", 0), ("def456", "Reviews", 0))

    result = invoke(store_path, "delete", "def456")

    assert result.exit_code == 0
    assert [s.name for s in load_store(store_path).streams] == ["Writing"]


def test_inconsistent_file_is_reported(store_path: Path) -> None:
    store_path.write_text(
        json.dumps(
            {
                "streams": [],
                "sessions": [{"start": "2026-03-01T09:00:00Z", "end": "2026-03-01T10:00:00Z"}],
            }
        ),
        encoding="utf-8",
    )

    result = invoke(store_path, "list")

    assert result.exit_code == 1
    assert "inconsistent data" in result.output
