"""Pytest configuration for repository test runs."""

from __future__ import annotations

from pathlib import Path
import sys
from typing import Callable

import pytest


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture
def write_source(tmp_path: Path) -> Callable[[str, str], Path]:
    """Return a helper writing UTF-8 source files under tmp_path."""

    def _write(name: str, text: str) -> Path:
        source_path = tmp_path / name
        source_path.parent.mkdir(parents=True, exist_ok=True)
        source_path.write_text(text, encoding="utf-8")
        return source_path

    return _write
