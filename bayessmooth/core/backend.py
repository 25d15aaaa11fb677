"""Compute engine dispatch for the raster pass."""

from __future__ import annotations

import contextlib
from contextvars import ContextVar

__all__ = [
    "ENGINES",
    "get_engine",
    "resolve_engine",
    "set_engine",
    "use_engine",
]

ENGINES = ("numba", "numpy")

_active_engine: ContextVar[str] = ContextVar("bayessmooth_engine", default="numba")


def set_engine(name):
    """Set the active compute engine.

    Parameters
    ----------
    name : {"numba", "numpy"}
        Engine to activate. ``"numba"`` runs the JIT-compiled per-cell loop,
        ``"numpy"`` the vectorized array implementation.
    """
    _active_engine.set(_validate_engine_name(name))


def get_engine():
    """Return the name of the active compute engine.

    Returns
    -------
    str
        ``"numba"`` or ``"numpy"``.
    """
    return _active_engine.get()


@contextlib.contextmanager
def use_engine(name):
    """Context manager that temporarily activates an engine.

    The previous engine is restored when the context exits, even if an
    exception is raised. Each ``copy_context()`` snapshot inherits the
    value set here, so ``use_engine`` composes correctly with
    :func:`~bayessmooth.core.parallel.map_bands`.

    Parameters
    ----------
    name : {"numba", "numpy"}
        Engine to activate for the duration of the block.
    """
    token = _active_engine.set(_validate_engine_name(name))
    try:
        yield
    finally:
        _active_engine.reset(token)


def resolve_engine(engine=None):
    """Return *engine* validated, or the active engine when it is None."""
    if engine is None:
        return get_engine()
    return _validate_engine_name(engine)


def _validate_engine_name(name):
    """Normalise and validate an engine name."""
    name = str(name).lower()
    if name not in ENGINES:
        raise ValueError(f"Unknown engine {name!r}. Choose 'numba' or 'numpy'.")
    return name
