"""Tests for the structured logger's file sink."""

from __future__ import annotations

import json
import threading
from pathlib import Path

from shared.logger import ToolLogger


def _records(path: Path) -> list[dict]:
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


def test_json_lines_carry_tool_and_operation(tmp_path: Path) -> None:
    log_path = tmp_path / "logs" / "elfscope.jsonl"
    log = ToolLogger(
        "engine", log_file=log_path, json_logs=True, console_output=False
    )

    log.info("outside")
    with log.operation("decode"):
        log.warning("Decoding %s failed", "a.out", stage="identification")

    first, second = _records(log_path)
    assert first["tool_name"] == "engine"
    assert first["operation"] is None
    assert second["message"] == "Decoding a.out failed"
    assert second["level"] == "WARNING"
    assert second["operation"] == "decode"
    assert second["context"] == {"stage": "identification"}


def test_level_filters_file_records(tmp_path: Path) -> None:
    log_path = tmp_path / "quiet.jsonl"
    log = ToolLogger(
        "levels", log_level="WARNING", log_file=log_path, json_logs=True, console_output=False
    )
    log.debug("hidden")
    log.info("hidden")
    log.error("shown")
    assert [r["message"] for r in _records(log_path)] == ["shown"]


def test_timed_logs_start_and_completion(tmp_path: Path) -> None:
    log_path = tmp_path / "timed.jsonl"
    log = ToolLogger(
        "timer", log_level="DEBUG", log_file=log_path, json_logs=True, console_output=False
    )
    with log.timed("batch"):
        pass
    messages = [r["message"] for r in _records(log_path)]
    assert messages[0] == "Started: batch"
    assert messages[1].startswith("Completed: batch (")


def test_operation_is_per_thread(tmp_path: Path) -> None:
    log_path = tmp_path / "threads.jsonl"
    log = ToolLogger("threads", log_file=log_path, json_logs=True, console_output=False)

    with log.operation("load"):
        worker = threading.Thread(target=log.info, args=("from worker",))
        worker.start()
        worker.join()
        log.info("from main")

    by_message = {r["message"]: r["operation"] for r in _records(log_path)}
    assert by_message == {"from worker": None, "from main": "load"}


def test_plain_text_file(tmp_path: Path) -> None:
    log_path = tmp_path / "plain.log"
    log = ToolLogger("plain", log_file=log_path, console_output=False)
    with log.operation("load"):
        log.info("Inspecting %s", "x.elf")
    line = log_path.read_text(encoding="utf-8").strip()
    assert "| INFO     | elfscope.plain | load | Inspecting x.elf" in line
