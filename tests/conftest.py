"""
Test configuration and utilities
"""

import os
import logging
from datetime import datetime, timezone

import pytest

from romance_engine.config import reset_config
from romance_engine.core.models import RomanticRelationship
from romance_engine.logging import reset_logging


class FixedRng:
    """
    Stand-in for numpy.random.Generator that returns scripted draws.

    `uniforms` are handed out in order by uniform(); integers() always
    returns `integer`. Every call is recorded in `calls`.
    """

    def __init__(self, uniforms=(), integer=2):
        self._uniforms = list(uniforms)
        self.integer = integer
        self.calls = []

    def uniform(self, low, high):
        self.calls.append(("uniform", low, high))
        if not self._uniforms:
            raise AssertionError("FixedRng ran out of scripted uniform draws")
        return self._uniforms.pop(0)

    def integers(self, low, high):
        self.calls.append(("integers", low, high))
        return self.integer


@pytest.fixture(autouse=True)
def setup_test_logging():
    """Setup logging for tests"""
    logging.basicConfig(
        level=logging.DEBUG,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Let package records propagate to pytest's handlers instead of stdout
    logging.getLogger("romance_engine").handlers.clear()
    yield
    logging.getLogger("romance_engine").handlers.clear()


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Run every test against default configuration"""
    for key in list(os.environ):
        if key.startswith("ROMANCE_"):
            monkeypatch.delenv(key)
    reset_config()
    reset_logging()

    yield

    # .env files loaded during a test write straight into os.environ
    for key in list(os.environ):
        if key.startswith("ROMANCE_"):
            os.environ.pop(key)
    reset_config()
    reset_logging()


@pytest.fixture
def fixed_rng():
    """Factory for scripted random generators"""
    return FixedRng


@pytest.fixture
def now():
    return datetime(2026, 10, 19, 20, 30, tzinfo=timezone.utc)


@pytest.fixture
def make_relationship():
    """Factory for relationships with sensible defaults"""

    def _make(**overrides):
        data = {
            "id": "romance-001",
            "partner_a_id": "player-001",
            "partner_b_id": "npc-042",
            "partner_b_name": "Riley Vox",
        }
        data.update(overrides)
        return RomanticRelationship(**data)

    return _make
