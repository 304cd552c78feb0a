"""Shared fixtures."""

import pytest
from fakes import FakeCompressor, FakeEngine, FakeStorage


@pytest.fixture
def engine():
    return FakeEngine()


@pytest.fixture
def compressor():
    return FakeCompressor()


@pytest.fixture
def storage():
    return FakeStorage()
