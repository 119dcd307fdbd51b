"""Shared pytest fixtures for receiptlens tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from receiptlens.runtime import paths as paths_module
from receiptlens.runtime.paths import ProjectPaths

TESCO_EXTRA_TEXT = """TESCO EXTRA
12/06/2023
Milk 1L           4.50
Bread             3.20
TOTAL            RM7.70"""


@pytest.fixture
def tesco_extra_text() -> str:
    return TESCO_EXTRA_TEXT


@pytest.fixture
def project_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point runtime path resolution at an empty temporary project."""
    monkeypatch.setattr(paths_module, "_paths", ProjectPaths(root=tmp_path))
    return tmp_path
