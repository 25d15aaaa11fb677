"""Per-cell neighborhood gathering and Bayesian estimation."""

import numpy as np

from bayessmooth.core import numba_utils
from bayessmooth.core.backend import resolve_engine
from bayessmooth.core.numba_utils import PROB_SCALE

from .utils import _validate_raster, _validate_window

__all__ = [
    "estimate_pixel",
    "gather_neighbors",
    "logit",
]


def logit(values):
    r"""Map values on the 0-10000 scale to the real line.

    Computes :math:`\log(x / (10000 - x))` element-wise. Values at the ends of
    the scale give ``-inf``/``inf`` and values outside it give NaN; no
    floating-point warnings are raised for either.

    Parameters
    ----------
    values : float or array_like
        Values to transform.

    Returns
    -------
    float or ndarray
        Transformed values with the same shape as the input.
    """
    values = np.asarray(values, dtype=np.float64)
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.log(values / (PROB_SCALE - values))


def gather_neighbors(raster, window, row, col, *, engine=None):
    """Collect the weighted, valid neighbors of one raster cell.

    The window is centred on ``(row, col)`` using floor division of its
    dimensions. A window position contributes ``raster value * weight`` when
    it falls inside the raster, its weight is strictly positive and the
    raster value is not NaN.

    Parameters
    ----------
    raster : array_like
        2D raster of shape (nrow, ncol). NaN marks missing cells.
    window : array_like
        2D integer weight window.
    row, col : int
        Position of the target cell.
    engine : {"numba", "numpy"}, optional
        Compute engine. Defaults to the active engine.

    Returns
    -------
    ndarray
        Weighted neighbor values in window row-major order, possibly empty.
    """
    raster = _validate_raster(raster)
    window = _validate_window(window)

    if resolve_engine(engine) == "numba":
        return numba_utils.gather_neighbors(raster, window, row, col)
    return _gather_neighbors_numpy(raster, window, row, col)


def estimate_pixel(center_value, neighbors, variance, *, engine=None):
    """Blend a cell's value with the mean of its neighborhood.

    Both the cell value and the neighbors are mapped through :func:`logit`.
    The cell's own value is weighted by ``v / (variance + v)`` and the
    neighborhood mean by ``variance / (variance + v)``, where ``v`` is the
    sample variance (``n - 1`` denominator) of the transformed neighbors.

    Parameters
    ----------
    center_value : float
        Value of the target cell on the 0-10000 scale.
    neighbors : array_like
        Weighted neighbor values, e.g. from :func:`gather_neighbors`.
    variance : float
        Assumed noise variance in logit space.
    engine : {"numba", "numpy"}, optional
        Compute engine. Defaults to the active engine.

    Returns
    -------
    float
        Smoothed logit value. NaN when the cell is missing or the
        neighborhood is too small to have a variance.
    """
    if resolve_engine(engine) == "numba":
        return numba_utils.estimate_pixel(center_value, neighbors, variance)
    return _estimate_pixel_numpy(float(center_value), np.asarray(neighbors, dtype=np.float64), float(variance))


def _gather_neighbors_numpy(raster, window, row, col):
    nrow, ncol = raster.shape
    wrows, wcols = window.shape

    k, l = np.indices(window.shape)  # noqa: E741
    data_i = (row + k - wrows // 2).ravel()
    data_j = (col + l - wcols // 2).ravel()
    weights = window.ravel()

    inside = (data_i >= 0) & (data_j >= 0) & (data_i < nrow) & (data_j < ncol) & (weights > 0)
    values = np.full(weights.shape, np.nan)
    values[inside] = raster[data_i[inside], data_j[inside]]
    keep = inside & ~np.isnan(values)
    return values[keep] * weights[keep]


def _estimate_pixel_numpy(p, neigh, variance):
    if np.isnan(p):
        return np.nan

    with np.errstate(divide="ignore", invalid="ignore"):
        log_neigh = logit(neigh)
        n = log_neigh.size
        mean = np.sum(log_neigh) / n
        v = np.sum((log_neigh - mean) ** 2) / (n - 1)
        x = logit(p)
        w1 = v / (variance + v)
        w2 = variance / (variance + v)
        return float(w1 * x + w2 * mean)
