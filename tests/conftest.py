"""Shared fixtures: seeded randomness and fresh settings for every test."""

import random
import sys
from pathlib import Path

# Add parent directory to path so the schoolbook package imports without installation
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from schoolbook.config import reset_settings


@pytest.fixture
def rng():
    return random.Random(20240611)


@pytest.fixture(autouse=True)
def fresh_settings():
    reset_settings()
    yield
    reset_settings()
