"""Shared fixtures for the redweave test suite."""

import pytest
from payloads import StubTransport

from redweave.models import ModelRegistry, default_registry


@pytest.fixture
def registry() -> ModelRegistry:
    return default_registry()


@pytest.fixture
def transport() -> StubTransport:
    return StubTransport()
