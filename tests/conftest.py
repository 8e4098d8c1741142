"""
Pytest configuration file for the LazyIterator tests.

This file ensures that the parent directory is in the Python path
so that test files can import lazy.
"""

import sys
from pathlib import Path

# Add the parent directory to the Python path
parent_dir = Path(__file__).parent.parent
if str(parent_dir) not in sys.path:
    sys.path.insert(0, str(parent_dir))

import pytest


@pytest.fixture
def call_log():
    """List that tracking callbacks append to"""
    return []


@pytest.fixture
def one_shot():
    """Factory for single-pass generator sources"""
    def make(items):
        return (item for item in items)
    return make
