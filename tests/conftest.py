"""Pytest configuration helpers and shared fixtures.

Ensure the project root is on sys.path so tests can import the package
without requiring PYTHONPATH to be set externally.
"""
import sys
from pathlib import Path

import pytest

from tests.helpers import FIXED_NOW


def pytest_configure(config):
    # Insert repo root (one level up from tests/) to sys.path
    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root))


@pytest.fixture
def fixed_codec():
    from session_lib.cookies.codec import CookieCodec
    return CookieCodec(clock=lambda: FIXED_NOW)


@pytest.fixture
def memory_store():
    from session_lib.session.store import MemorySessionStore
    return MemorySessionStore()


@pytest.fixture
def app(memory_store):
    from session_lib.config import SessionConfig
    from session_lib.main import create_app
    return create_app(SessionConfig(store='memory'), store=memory_store)


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient
    return TestClient(app)
