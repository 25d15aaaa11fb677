"""Whole-raster neighborhood Bayesian smoothing."""

import logging

import numpy as np

from bayessmooth.core import numba_utils
from bayessmooth.core.backend import resolve_engine

from .estimator import logit
from .results import SmoothResult
from .utils import _check_value_range, _check_variance, _validate_raster, _validate_window

__all__ = ["bayes_smooth", "bayes_smooth_result"]

log = logging.getLogger(__name__)


def bayes_smooth(raster, window, variance, *, engine=None):
    """Smooth every cell of a raster with its weighted neighborhood.

    Each cell ``(i, j)`` is replaced by the Bayesian blend of its own logit
    value and the logit values of its neighbors, as computed by
    :func:`~bayessmooth.smooth.estimator.estimate_pixel` over the neighbors
    returned by :func:`~bayessmooth.smooth.estimator.gather_neighbors`.

    Parameters
    ----------
    raster : array_like
        2D raster of shape (nrow, ncol) on the 0-10000 scale. NaN marks
        missing cells.
    window : array_like
        2D integer weight window, normally odd-sized. Only strictly positive
        weights contribute, and they multiply the neighbor values literally.
    variance : float
        Assumed noise variance in logit space.
    engine : {"numba", "numpy"}, optional
        Compute engine. Defaults to the active engine.

    Returns
    -------
    ndarray
        Flat array of length ``nrow * ncol`` in row-major order. Missing
        cells and cells whose neighborhood has fewer than two samples are NaN.
    """
    raster, window, variance, engine = _prepare(raster, window, variance, engine)
    return _smooth(raster, window, variance, engine)


def bayes_smooth_result(raster, window, variance, *, engine=None):
    """Smooth a raster and wrap the estimates in a :class:`SmoothResult`.

    Parameters
    ----------
    raster, window, variance, engine
        See :func:`bayes_smooth`.

    Returns
    -------
    SmoothResult
        Estimates reshaped to the raster's shape, plus run metadata.
    """
    raster, window, variance, engine = _prepare(raster, window, variance, engine)
    estimates = _smooth(raster, window, variance, engine).reshape(raster.shape)

    return SmoothResult(
        estimates=estimates,
        window=window,
        variance=variance,
        engine=engine,
        n_missing=int(np.isnan(raster).sum()),
        n_unresolved=int(np.isnan(estimates).sum()),
    )


def _prepare(raster, window, variance, engine):
    raster = _validate_raster(raster)
    window = _validate_window(window, stacklevel=4)
    variance = _check_variance(variance, stacklevel=4)
    _check_value_range(raster, stacklevel=4)
    return raster, window, variance, resolve_engine(engine)


def _smooth(raster, window, variance, engine):
    log.debug("Smoothing %dx%d raster with %s window on %s engine", *raster.shape, window.shape, engine)
    if engine == "numba":
        return numba_utils.bayes_smooth_pass(raster, window, variance)
    return _bayes_smooth_numpy(raster, window, variance)


def _shift_bounds(n, offset):
    """Return the destination slice bounds for a shift of *offset* cells."""
    lo = min(n, max(0, -offset))
    hi = max(lo, min(n, n - offset))
    return lo, hi


def _bayes_smooth_numpy(raster, window, variance):
    nrow, ncol = raster.shape
    wrows, wcols = window.shape
    positions = [(k, l) for k in range(wrows) for l in range(wcols) if window[k, l] > 0]  # noqa: E741

    logits = np.empty((len(positions), nrow, ncol))
    valid = np.zeros((len(positions), nrow, ncol), dtype=bool)

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        for p, (k, l) in enumerate(positions):  # noqa: E741
            di = k - wrows // 2
            dj = l - wcols // 2
            r0, r1 = _shift_bounds(nrow, di)
            c0, c1 = _shift_bounds(ncol, dj)

            shifted = np.full((nrow, ncol), np.nan)
            shifted[r0:r1, c0:c1] = raster[r0 + di : r1 + di, c0 + dj : c1 + dj]
            valid[p] = ~np.isnan(shifted)
            logits[p] = logit(shifted * window[k, l])

        count = valid.sum(axis=0)
        mean = np.where(valid, logits, 0.0).sum(axis=0) / count
        v = np.where(valid, (logits - mean) ** 2, 0.0).sum(axis=0) / (count - 1)

        x = logit(raster)
        w1 = v / (variance + v)
        w2 = variance / (variance + v)
        result = w1 * x + w2 * mean

    result[np.isnan(raster)] = np.nan
    return result.ravel()
