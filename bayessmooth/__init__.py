"""Neighborhood Bayesian smoothing for classified rasters."""

from bayessmooth.core.backend import get_engine, set_engine, use_engine
from bayessmooth.core.numba_utils import PROB_SCALE
from bayessmooth.smooth import (
    CubeSmoothResult,
    SmoothResult,
    bayes_smooth,
    bayes_smooth_result,
    estimate_pixel,
    gather_neighbors,
    inverse_logit,
    label_probs,
    logit,
    make_window,
    normalize_probs,
    scale_probs,
    smooth_probs,
)

__all__ = [
    "PROB_SCALE",
    "CubeSmoothResult",
    "SmoothResult",
    "bayes_smooth",
    "bayes_smooth_result",
    "estimate_pixel",
    "gather_neighbors",
    "get_engine",
    "inverse_logit",
    "label_probs",
    "logit",
    "make_window",
    "normalize_probs",
    "scale_probs",
    "set_engine",
    "smooth_probs",
    "use_engine",
]
