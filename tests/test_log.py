"""Tests for the logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from jobmatch import log


@pytest.fixture
def bare_root(monkeypatch: pytest.MonkeyPatch) -> logging.Logger:
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)
    return root


def test_console_only_by_default(bare_root: logging.Logger, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("JOBMATCH_LOG_DIR", raising=False)
    monkeypatch.setenv("LOG_LEVEL", "debug")
    log._configure()

    assert [type(h) for h in bare_root.handlers] == [logging.StreamHandler]
    assert bare_root.level == logging.DEBUG


def test_log_dir_adds_dated_file(
    bare_root: logging.Logger, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("JOBMATCH_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    log._configure()

    files = [h for h in bare_root.handlers if isinstance(h, logging.FileHandler)]
    try:
        assert len(files) == 1
        bare_root.info("hello")
        files[0].flush()
        written = list((tmp_path / "logs").glob("jobmatch_*.log"))
        assert len(written) == 1
        assert "hello" in written[0].read_text(encoding="utf-8")
    finally:
        for h in files:
            h.close()
