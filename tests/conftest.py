"""Shared pytest fixtures for receiptflow tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from receiptflow.runtime.paths import reset_paths


@pytest.fixture(autouse=True)
def isolated_project_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point project paths at a temp dir and clear env overrides."""
    for name in (
        "RECEIPTFLOW_PROVIDER",
        "RECEIPTFLOW_BASE_URL",
        "RECEIPTFLOW_MODEL",
        "RECEIPTFLOW_TIMEOUT",
        "OPENAI_API_KEY",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("RECEIPTFLOW_HOME", str(tmp_path))
    reset_paths()
    yield tmp_path
    reset_paths()
