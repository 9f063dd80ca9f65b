"""Shared pytest configuration and fixtures for the test suite.

This module centralizes:
- Path setup (eliminates sys.path hacks in individual test files)
- Pytest markers for test categorization (unit, integration)
- Common fixtures: golden 3-D points, scalar items, computed results
- Environment isolation for configuration-driven defaults
"""
from __future__ import annotations

import sys
from pathlib import Path

import pytest


# ==============================================================================
# Path Setup - Ensures hclust/ and tests/helpers are importable
# ==============================================================================

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from hclust.config import DEFAULT_LINKAGE_ENV, LOG_DIR_ENV, LOG_LEVEL_ENV, ON_REUSE_ENV  # noqa: E402
from hclust.hierarchy import HierarchicalClustering  # noqa: E402
from tests.helpers.points import Scalar, golden_points  # noqa: E402


# ==============================================================================
# Pytest Configuration
# ==============================================================================

def pytest_configure(config):
    """Register custom markers for test categorization."""
    config.addinivalue_line(
        "markers",
        "unit: Fast tests with no I/O",
    )
    config.addinivalue_line(
        "markers",
        "integration: Tests touching the file system or comparing against SciPy",
    )


# ==============================================================================
# Environment Isolation
# ==============================================================================

@pytest.fixture(autouse=True)
def clean_hclust_env(monkeypatch):
    """Keep a developer's .env or shell exports from changing engine defaults."""
    for name in (DEFAULT_LINKAGE_ENV, ON_REUSE_ENV, LOG_DIR_ENV, LOG_LEVEL_ENV):
        monkeypatch.delenv(name, raising=False)


# ==============================================================================
# Item Fixtures
# ==============================================================================

@pytest.fixture
def points():
    """The 7 golden 3-D points (Euclidean distance)."""
    return golden_points()


@pytest.fixture
def scalars():
    """Six numbers forming two well separated groups: {0, 1, 3} and {20, 21, 24}."""
    return [Scalar(v) for v in (0.0, 1.0, 3.0, 20.0, 21.0, 24.0)]


@pytest.fixture
def single_result(points):
    """Full single-linkage clustering of the golden points."""
    return HierarchicalClustering("single").cluster(points)
