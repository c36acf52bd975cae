"""Shared test fixtures for ruletag.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Add project-wide fixtures here; keep
domain-specific fixtures close to the tests that use them.
"""
from __future__ import annotations

from collections.abc import Iterator

import pytest

from ruletag.engine import ValidatorEngine, use_engine


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "ruletag"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"


@pytest.fixture()
def engine() -> ValidatorEngine:
    """Return a fresh engine with only the built-in validators."""
    return ValidatorEngine()


@pytest.fixture()
def isolated_default() -> Iterator[ValidatorEngine]:
    """Install a fresh engine as the process default for one test."""
    with use_engine() as active:
        yield active
