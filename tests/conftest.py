# tests/conftest.py
from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure project root importable
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from quackfetch.search import engine  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_default_context():
    # module-level search() shares one context per process; isolate tests
    engine.reset_default_context()
    yield
    engine.reset_default_context()
