"""
Shared fixtures for bookrecon tests.
"""

import pytest
from fixtures import FakeFetch


@pytest.fixture
def fake_fetch():
    """Factory for FakeFetch instances."""
    return FakeFetch
