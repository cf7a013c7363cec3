"""Pytest bootstrap for local source imports and settings isolation.

Puts the repository root on ``sys.path`` so ``import studylenses`` resolves
to the local package, and points persisted user settings at a temp file so
no test reads or writes the real config directory.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
PROJECT_ROOT_STR = str(PROJECT_ROOT)

if PROJECT_ROOT_STR not in sys.path:
    sys.path.insert(0, PROJECT_ROOT_STR)


@pytest.fixture(autouse=True)
def isolated_user_config(tmp_path, monkeypatch):
    from studylenses import config

    monkeypatch.setattr(config, "CONFIG_PATH", tmp_path / "studylenses-config.json")
    monkeypatch.delenv(config.TOKEN_ENV_VAR, raising=False)
