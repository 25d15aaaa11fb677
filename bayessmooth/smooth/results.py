"""Result containers."""

from typing import NamedTuple

import numpy as np
import polars as pl


class SmoothResult(NamedTuple):
    """Container for a single-raster smoothing pass.

    Attributes
    ----------
    estimates : ndarray
        Smoothed logit values with the raster's shape (nrow, ncol).
    window : ndarray
        Integer weight window used for the neighborhood.
    variance : float
        Noise variance in logit space.
    engine : str
        Compute engine that produced the estimates.
    n_missing : int
        Number of missing (NaN) input cells.
    n_unresolved : int
        Number of NaN output cells, missing cells included.
    """

    estimates: np.ndarray
    window: np.ndarray
    variance: float
    engine: str
    n_missing: int
    n_unresolved: int


class CubeSmoothResult(NamedTuple):
    """Container for a smoothed class probability cube.

    Attributes
    ----------
    logits : ndarray
        Smoothed logit values, shape (n_classes, nrow, ncol).
    probs : ndarray
        Smoothed probabilities on the 0-10000 scale, normalized so each
        pixel's classes sum to 10000 and rounded to whole numbers.
    labels : ndarray
        Index of the most probable class per pixel, -1 where undefined.
    smoothness : ndarray
        Noise variance used for each class.
    window : ndarray
        Integer weight window used for the neighborhood.
    class_names : list of str or None
        Optional class names, one per band.
    engine : str
        Compute engine that produced the estimates.
    """

    logits: np.ndarray
    probs: np.ndarray
    labels: np.ndarray
    smoothness: np.ndarray
    window: np.ndarray
    class_names: list | None
    engine: str

    @property
    def n_classes(self) -> int:
        """Number of class bands."""
        return self.logits.shape[0]

    def to_dataframe(self) -> pl.DataFrame:
        """Summarise each class as a Polars DataFrame."""
        names = self.class_names if self.class_names is not None else [str(i) for i in range(self.n_classes)]
        counts = np.array([int(np.sum(self.labels == i)) for i in range(self.n_classes)], dtype=np.int64)
        mean_probs = np.array(
            [np.nanmean(band) if np.any(~np.isnan(band)) else np.nan for band in self.probs],
            dtype=np.float64,
        )
        return pl.DataFrame(
            {
                "Class": names,
                "Smoothness": self.smoothness,
                "Mean Prob": mean_probs,
                "Labelled Pixels": counts,
            }
        )
