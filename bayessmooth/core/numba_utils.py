"""Numba-accelerated kernels for the neighborhood Bayesian smoother."""

import numba as nb
import numpy as np

__all__ = [
    "PROB_SCALE",
    "bayes_smooth_pass",
    "estimate_pixel",
    "gather_neighbors",
]

PROB_SCALE = 10000.0


# error_model="numpy" keeps float division by zero as inf/NaN instead of
# raising ZeroDivisionError, so degenerate pixels propagate NaN.
@nb.njit(cache=True, nogil=True, error_model="numpy")
def _gather_neighbors_impl(data, window, i, j):
    nrow, ncol = data.shape
    wrows, wcols = window.shape
    neigh = np.empty(wrows * wcols)
    n = 0

    for k in range(wrows):
        for l in range(wcols):  # noqa: E741
            data_i = i + k - wrows // 2
            data_j = j + l - wcols // 2
            if (
                data_i >= 0
                and data_j >= 0
                and data_i < nrow
                and data_j < ncol
                and window[k, l] > 0
                and not np.isnan(data[data_i, data_j])
            ):
                neigh[n] = data[data_i, data_j] * window[k, l]
                n += 1

    return neigh[:n]


@nb.njit(cache=True, nogil=True, error_model="numpy")
def _estimate_pixel_impl(p, neigh, variance):
    if np.isnan(p):
        return np.nan

    n = neigh.shape[0]
    log_neigh = np.empty(n)
    total = 0.0
    for idx in range(n):
        log_neigh[idx] = np.log(neigh[idx] / (PROB_SCALE - neigh[idx]))
        total += log_neigh[idx]
    mean = total / n

    sum_sq = 0.0
    for idx in range(n):
        diff = log_neigh[idx] - mean
        sum_sq += diff * diff
    v = sum_sq / (n - 1)

    x = np.log(p / (PROB_SCALE - p))
    w1 = v / (variance + v)
    w2 = variance / (variance + v)
    return w1 * x + w2 * mean


@nb.njit(cache=True, nogil=True, error_model="numpy")
def _bayes_smooth_impl(data, window, variance):
    nrow, ncol = data.shape
    result = np.empty(nrow * ncol)

    k = 0
    for i in range(nrow):
        for j in range(ncol):
            result[k] = _estimate_pixel_impl(data[i, j], _gather_neighbors_impl(data, window, i, j), variance)
            k += 1

    return result


def gather_neighbors(data, window, i, j):
    """Collect the weighted valid neighbors of cell ``(i, j)``.

    Parameters
    ----------
    data : ndarray
        2D float raster of shape (nrow, ncol). NaN marks missing cells.
    window : ndarray
        2D integer weight window of shape (wrows, wcols).
    i, j : int
        Row and column of the target cell.

    Returns
    -------
    ndarray
        Weighted neighbor values in window row-major order. Empty when no
        neighbor qualifies.
    """
    return _gather_neighbors_impl(
        np.ascontiguousarray(data, dtype=np.float64),
        np.ascontiguousarray(window, dtype=np.int64),
        int(i),
        int(j),
    )


def estimate_pixel(p, neigh, variance):
    """Blend a cell value with its neighborhood in logit space.

    Parameters
    ----------
    p : float
        Value of the target cell on the 0-10000 scale.
    neigh : ndarray
        Weighted neighbor values.
    variance : float
        Assumed noise variance in logit space.

    Returns
    -------
    float
        Smoothed logit value, NaN for missing or degenerate pixels.
    """
    return _estimate_pixel_impl(
        float(p),
        np.ascontiguousarray(neigh, dtype=np.float64),
        float(variance),
    )


def bayes_smooth_pass(data, window, variance):
    """Run the estimator over every cell of a raster in row-major order.

    Parameters
    ----------
    data : ndarray
        2D float raster of shape (nrow, ncol).
    window : ndarray
        2D integer weight window.
    variance : float
        Assumed noise variance in logit space.

    Returns
    -------
    ndarray
        Flat array of length ``nrow * ncol``.
    """
    return _bayes_smooth_impl(
        np.ascontiguousarray(data, dtype=np.float64),
        np.ascontiguousarray(window, dtype=np.int64),
        float(variance),
    )
