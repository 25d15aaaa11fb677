"""Input validation for the smoothing estimators."""

import warnings

import numpy as np

from bayessmooth.core.numba_utils import PROB_SCALE

__all__ = [
    "_check_value_range",
    "_check_variance",
    "_validate_cube",
    "_validate_raster",
    "_validate_window",
]


def _validate_raster(raster, name="raster"):
    """Coerce *raster* to a 2D float64 array."""
    raster = np.asarray(raster, dtype=np.float64)
    if raster.ndim != 2:
        raise ValueError(f"{name} must be a 2-dimensional array.")
    return raster


def _validate_cube(probs):
    """Coerce a probability cube to a 3D float64 array."""
    probs = np.asarray(probs, dtype=np.float64)
    if probs.ndim != 3:
        raise ValueError("probs must be a 3-dimensional array of shape (n_classes, nrow, ncol).")
    if probs.shape[0] == 0:
        raise ValueError("probs must contain at least one class band.")
    return probs


def _validate_window(window, stacklevel=3):
    """Coerce *window* to a 2D int64 array of weights.

    Float windows are accepted only when every entry is a whole number.
    Even-sized dimensions are allowed but centred with floor division.
    *stacklevel* is passed to :func:`warnings.warn` and must point at the
    public function's caller.
    """
    window = np.asarray(window)
    if window.ndim != 2:
        raise ValueError("window must be a 2-dimensional array.")

    if window.dtype == np.bool_:
        window = window.astype(np.int64)
    elif np.issubdtype(window.dtype, np.floating):
        if not np.all(np.isfinite(window)) or not np.all(window == np.floor(window)):
            raise TypeError("window must contain integer weights.")
        window = window.astype(np.int64)
    elif not np.issubdtype(window.dtype, np.integer):
        raise TypeError("window must contain integer weights.")

    wrows, wcols = window.shape
    if wrows % 2 == 0 or wcols % 2 == 0:
        warnings.warn(
            f"window has even dimensions {window.shape}; its center is taken at "
            f"({wrows // 2}, {wcols // 2}) using floor division.",
            UserWarning,
            stacklevel=stacklevel,
        )

    return window.astype(np.int64, copy=False)


def _check_variance(variance, stacklevel=3):
    """Return *variance* as a float, warning when it is not positive."""
    variance = float(variance)
    if not variance > 0:
        warnings.warn(
            f"variance is {variance}; blend weights are undefined for non-positive variances.",
            UserWarning,
            stacklevel=stacklevel,
        )
    return variance


def _check_value_range(raster, stacklevel=3):
    """Warn when valid raster values fall outside the 0-10000 scale."""
    valid = raster[~np.isnan(raster)]
    if valid.size and (valid.min() < 0 or valid.max() > PROB_SCALE):
        warnings.warn(
            f"raster values outside [0, {PROB_SCALE:g}] detected. Their logit transform will be NaN.",
            UserWarning,
            stacklevel=stacklevel,
        )
