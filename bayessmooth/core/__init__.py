"""Core engine, kernel and formatting utilities."""

from bayessmooth.core.backend import ENGINES, get_engine, resolve_engine, set_engine, use_engine
from bayessmooth.core.numba_utils import PROB_SCALE
from bayessmooth.core.parallel import map_bands, resolve_n_jobs

__all__ = [
    "ENGINES",
    "PROB_SCALE",
    "get_engine",
    "map_bands",
    "resolve_engine",
    "resolve_n_jobs",
    "set_engine",
    "use_engine",
]
