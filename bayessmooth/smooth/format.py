"""Formatting for smoothing result objects."""

from bayessmooth.core.format import (
    attach_summary,
    band_section,
    logit_section,
    render,
    summary_header,
    window_section,
)

from .results import CubeSmoothResult, SmoothResult

_TITLE = "Bayesian Neighborhood Smoothing"


def format_smooth_result(result):
    """Format a single-raster smoothing result for display."""
    nrow, ncol = result.estimates.shape
    lines = summary_header(
        _TITLE,
        "Single Raster",
        {
            "Raster shape": f"{nrow} x {ncol}",
            "Engine": result.engine,
            "Variance": f"{result.variance:g}",
        },
    )
    lines.extend(window_section(result.window))
    lines.extend(logit_section(result.estimates, result.n_missing))
    return render(lines, "NaN estimates mark missing cells or neighborhoods with fewer than two samples.")


def format_cube_smooth_result(result):
    """Format a smoothed probability cube for display."""
    _, nrow, ncol = result.logits.shape
    names = result.class_names if result.class_names is not None else [str(i) for i in range(result.n_classes)]
    lines = summary_header(
        _TITLE,
        "Class Probability Cube",
        {
            "Classes": result.n_classes,
            "Raster shape": f"{nrow} x {ncol}",
            "Engine": result.engine,
            "Window": f"{result.window.shape[0]} x {result.window.shape[1]}",
        },
    )
    lines.extend(band_section(names, result.smoothness, result.probs, result.labels))
    return render(lines, "Probabilities are on the 0-10000 scale.")


attach_summary(SmoothResult, format_smooth_result)
attach_summary(CubeSmoothResult, format_cube_smooth_result)
