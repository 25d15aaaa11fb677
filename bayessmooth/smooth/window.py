"""Weight windows for neighborhood smoothing."""

import numpy as np


def make_window(size=5):
    """Build a square window of unit weights.

    Parameters
    ----------
    size : int, default 5
        Side length of the window. Must be an odd positive integer so the
        window has a well-defined center.

    Returns
    -------
    ndarray
        Array of ones with shape (size, size) and dtype int32.
    """
    if isinstance(size, bool) or not isinstance(size, (int, np.integer)):
        raise ValueError("window_size must be an odd positive integer.")
    if size < 1 or size % 2 == 0:
        raise ValueError(f"window_size must be an odd positive integer, got {size}.")
    return np.ones((size, size), dtype=np.int32)
