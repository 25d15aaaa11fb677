"""Bayesian smoothing of class probability cubes."""

import logging
from functools import partial

import numpy as np
from scipy import special

from bayessmooth.core.backend import resolve_engine
from bayessmooth.core.numba_utils import PROB_SCALE
from bayessmooth.core.parallel import map_bands

from .raster import _smooth
from .results import CubeSmoothResult
from .utils import _check_value_range, _check_variance, _validate_cube, _validate_window
from .window import make_window

__all__ = [
    "inverse_logit",
    "label_probs",
    "normalize_probs",
    "scale_probs",
    "smooth_probs",
]

log = logging.getLogger(__name__)


def smooth_probs(
    probs,
    window=None,
    smoothness=10.0,
    *,
    window_size=5,
    class_names=None,
    n_jobs=1,
    engine=None,
):
    """Smooth every class band of a probability cube.

    Each band is smoothed independently with :func:`bayes_smooth`, using its
    own noise variance. The smoothed logits are mapped back to probabilities,
    normalized across classes and labelled by their most probable class.

    Parameters
    ----------
    probs : array_like
        Cube of shape (n_classes, nrow, ncol). Values on the 0-1 scale are
        rescaled to 0-10000. NaN marks missing pixels.
    window : array_like, optional
        Integer weight window. Defaults to ``make_window(window_size)``.
    smoothness : float or sequence of float, default 10.0
        Noise variance in logit space, either shared by all classes or one
        per class. Shorter sequences are recycled across the classes.
    window_size : int, default 5
        Side of the unit window built when *window* is not given.
    class_names : sequence of str, optional
        One name per class band.
    n_jobs : int, default 1
        Number of bands smoothed concurrently. -1 uses all cores.
    engine : {"numba", "numpy"}, optional
        Compute engine. Defaults to the active engine.

    Returns
    -------
    CubeSmoothResult
        Smoothed logits, probabilities and labels.
    """
    probs = scale_probs(_validate_cube(probs))
    n_classes = probs.shape[0]
    _check_value_range(probs)

    window = make_window(window_size) if window is None else _validate_window(window)
    variances = _resolve_smoothness(smoothness, n_classes)
    for variance in np.unique(variances):
        _check_variance(variance)

    if class_names is not None:
        class_names = [str(name) for name in class_names]
        if len(class_names) != n_classes:
            raise ValueError(f"class_names has {len(class_names)} entries but probs has {n_classes} classes.")

    engine = resolve_engine(engine)
    log.debug("Smoothing %d class bands with n_jobs=%s", n_classes, n_jobs)

    logits = map_bands(partial(_smooth_band, window=window, engine=engine), probs, variances, n_jobs=n_jobs)

    smoothed = np.round(normalize_probs(inverse_logit(logits)))

    return CubeSmoothResult(
        logits=logits,
        probs=smoothed,
        labels=label_probs(smoothed),
        smoothness=variances,
        window=window,
        class_names=class_names,
        engine=engine,
    )


def scale_probs(probs):
    """Return a float copy of *probs* on the 0-10000 scale.

    Cubes whose largest valid value is at most 1 are taken to be on the 0-1
    scale and multiplied by 10000. Anything else is assumed to be on the
    0-10000 scale already and is copied unchanged.
    """
    probs = np.array(probs, dtype=np.float64)
    valid = probs[~np.isnan(probs)]
    if valid.size and valid.max() <= 1.0:
        probs *= PROB_SCALE
    return probs


def inverse_logit(x):
    """Map logit values back to probabilities in [0, 1]."""
    return special.expit(np.asarray(x, dtype=np.float64))


def normalize_probs(probs):
    """Rescale each pixel's class probabilities to sum to 10000.

    Parameters
    ----------
    probs : array_like
        Cube of shape (n_classes, nrow, ncol).

    Returns
    -------
    ndarray
        Normalized cube. Pixels whose classes sum to zero or NaN are NaN.
    """
    probs = np.asarray(probs, dtype=np.float64)
    with np.errstate(divide="ignore", invalid="ignore"):
        total = probs.sum(axis=0, keepdims=True)
        total = np.where(total > 0, total, np.nan)
        return probs / total * PROB_SCALE


def label_probs(probs):
    """Return the most probable class per pixel.

    NaN bands are ignored; pixels where every band is NaN get -1.
    """
    probs = np.asarray(probs, dtype=np.float64)
    all_missing = np.all(np.isnan(probs), axis=0)
    labels = np.argmax(np.where(np.isnan(probs), -np.inf, probs), axis=0).astype(np.int64)
    labels[all_missing] = -1
    return labels


def _smooth_band(band, variance, *, window, engine):
    return _smooth(band, window, float(variance), engine).reshape(band.shape)


def _resolve_smoothness(smoothness, n_classes):
    """Expand *smoothness* to one variance per class."""
    values = np.atleast_1d(np.asarray(smoothness, dtype=np.float64))
    if values.ndim != 1 or values.size == 0:
        raise ValueError("smoothness must be a scalar or a 1-dimensional sequence.")
    if n_classes % values.size != 0:
        raise ValueError(f"smoothness has {values.size} values, which does not divide {n_classes} classes.")
    return np.resize(values, n_classes)
