"""Shared fixtures for bayessmooth tests."""

from __future__ import annotations

import numpy as np
import pytest

from bayessmooth.core.backend import set_engine


@pytest.fixture(autouse=True)
def _reset_engine():
    set_engine("numba")
    yield
    set_engine("numba")


@pytest.fixture(params=["numba", "numpy"])
def engine(request):
    """Run a test once per compute engine."""
    return request.param


@pytest.fixture
def plus_window():
    return np.array([[0, 1, 0], [1, 1, 1], [0, 1, 0]], dtype=np.int32)


@pytest.fixture
def ones_window():
    return np.ones((3, 3), dtype=np.int32)


@pytest.fixture
def prob_raster():
    """Random 0-10000 raster with a few missing cells."""
    rng = np.random.default_rng(42)
    raster = rng.uniform(500.0, 9500.0, size=(12, 9))
    raster[rng.random(raster.shape) < 0.1] = np.nan
    return raster


@pytest.fixture
def prob_cube():
    """Three-class probability cube on the 0-1 scale with one missing pixel."""
    rng = np.random.default_rng(7)
    raw = rng.dirichlet(np.ones(3), size=(10, 8))
    cube = np.moveaxis(raw, -1, 0)
    cube[:, 4, 4] = np.nan
    return cube
