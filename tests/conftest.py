"""
Configuration for pytest to set up the import path and shared fixtures.
"""

import sys
from pathlib import Path

import pytest

# Add the parent directory to Python path so we can import collection, functions, etc.
sys.path.insert(0, str(Path(__file__).parent.parent))

import functions
from functions import ThreadScheduler
from models import Settings


@pytest.fixture(autouse=True)
def default_settings():
    """Isolate every test from UNDERSCORE_* variables in the environment."""
    functions.configure(Settings())
    yield
    functions.configure(Settings())


@pytest.fixture
def timer_scheduler():
    scheduler = ThreadScheduler()
    yield scheduler
    scheduler.join(timeout=5)


@pytest.fixture
def stooges():
    return [
        {"name": "moe", "age": 40},
        {"name": "larry", "age": 50},
        {"name": "curly", "age": 60},
    ]
