"""Concurrent smoothing of the class bands of a probability cube."""

from __future__ import annotations

import contextvars
import os
from concurrent.futures import ThreadPoolExecutor

import numpy as np

__all__ = ["map_bands", "resolve_n_jobs"]


def resolve_n_jobs(n_jobs, n_bands):
    """Return the number of worker threads to use for *n_bands* bands.

    Parameters
    ----------
    n_jobs : int
        1 runs the bands sequentially, -1 uses every core and values above 1
        use that many threads. Never more threads than bands are started.
    n_bands : int
        Number of bands to process.

    Returns
    -------
    int
        Worker count, at least 1.
    """
    if isinstance(n_jobs, bool) or not isinstance(n_jobs, (int, np.integer)):
        raise ValueError(f"n_jobs must be an integer, got {n_jobs!r}.")
    if n_jobs == 0 or n_jobs < -1:
        raise ValueError(f"n_jobs must be -1 or a positive integer, got {n_jobs}.")

    workers = (os.cpu_count() or 1) if n_jobs == -1 else int(n_jobs)
    return max(1, min(workers, n_bands))


def map_bands(func, bands, variances, n_jobs=1):
    """Apply ``func(band, variance)`` to every band and stack the results.

    The bands are independent, so they can be processed on a thread pool.
    NumPy operations and the ``nogil`` Numba kernels release the GIL. Each
    band runs inside its own copy of the caller's context, so the engine
    chosen with :func:`~bayessmooth.core.backend.use_engine` applies in the
    workers too.

    Parameters
    ----------
    func : callable
        Called as ``func(band, variance)`` and returning an array of the
        band's shape.
    bands : ndarray
        Cube of shape (n_bands, nrow, ncol).
    variances : array_like
        One noise variance per band.
    n_jobs : int, default 1
        See :func:`resolve_n_jobs`.

    Returns
    -------
    ndarray
        Stacked results in band order, shape (n_bands, nrow, ncol).
    """
    if len(variances) != len(bands):
        raise ValueError(f"Got {len(variances)} variances for {len(bands)} bands.")
    if len(bands) == 0:
        raise ValueError("bands must contain at least one band.")

    workers = resolve_n_jobs(n_jobs, len(bands))
    if workers == 1:
        return np.stack([func(band, variance) for band, variance in zip(bands, variances, strict=True)])

    contexts = [contextvars.copy_context() for _ in range(len(bands))]

    def run_band(ctx, band, variance):
        return ctx.run(func, band, variance)

    with ThreadPoolExecutor(max_workers=workers) as pool:
        return np.stack(list(pool.map(run_band, contexts, bands, variances)))
