from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _ensure_project_root_on_path() -> None:
    """Guarantee the repository root is discoverable for absolute imports."""

    root = Path(__file__).resolve().parent.parent
    root_str = str(root)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)


_ensure_project_root_on_path()

from app.config import reset_parser_config_cache  # noqa: E402


@pytest.fixture(autouse=True)
def _parser_config_cache():
    """Each test starts from the bundled parser configuration."""

    reset_parser_config_cache()
    yield
    reset_parser_config_cache()
