"""Neighborhood Bayesian smoothing of rasters and probability cubes."""

import bayessmooth.smooth.format  # noqa: F401
from bayessmooth.smooth.cube import inverse_logit, label_probs, normalize_probs, scale_probs, smooth_probs
from bayessmooth.smooth.estimator import estimate_pixel, gather_neighbors, logit
from bayessmooth.smooth.raster import bayes_smooth, bayes_smooth_result
from bayessmooth.smooth.results import CubeSmoothResult, SmoothResult
from bayessmooth.smooth.window import make_window

__all__ = [
    "CubeSmoothResult",
    "SmoothResult",
    "bayes_smooth",
    "bayes_smooth_result",
    "estimate_pixel",
    "gather_neighbors",
    "inverse_logit",
    "label_probs",
    "logit",
    "make_window",
    "normalize_probs",
    "scale_probs",
    "smooth_probs",
]
