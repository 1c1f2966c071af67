"""Test configuration."""

import pytest

from ens_index.core.logging import configure_logging


@pytest.fixture(autouse=True, scope="session")
def setup_logging() -> None:
    """Configure console logging for tests."""
    configure_logging(testing=True, level="DEBUG")
