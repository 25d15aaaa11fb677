"""Tests for concurrent band smoothing."""

import threading
import time

import numpy as np
import pytest

from bayessmooth.core.parallel import map_bands, resolve_n_jobs


@pytest.fixture
def bands():
    return np.arange(5 * 3 * 4, dtype=np.float64).reshape(5, 3, 4)


def _scale_band(band, variance):
    return band * variance


class TestMapBands:
    @pytest.mark.parametrize("n_jobs", [1, 2, -1])
    def test_stacks_in_band_order(self, bands, n_jobs):
        variances = np.array([1.0, 2.0, 3.0, 4.0, 5.0])
        result = map_bands(_scale_band, bands, variances, n_jobs=n_jobs)

        assert result.shape == bands.shape
        np.testing.assert_array_equal(result, bands * variances[:, None, None])

    def test_order_kept_when_bands_finish_out_of_order(self, bands):
        def slow_first(band, variance):
            time.sleep(0.05 if variance == 0 else 0.0)
            return np.full(band.shape, variance)

        result = map_bands(slow_first, bands, np.arange(5.0), n_jobs=5)
        np.testing.assert_array_equal(result[:, 0, 0], np.arange(5.0))

    def test_runs_on_worker_threads(self, bands):
        main = threading.get_ident()

        def thread_flag(band, variance):
            return np.full(band.shape, float(threading.get_ident() != main))

        assert map_bands(thread_flag, bands, np.ones(5), n_jobs=2).all()
        assert not map_bands(thread_flag, bands, np.ones(5), n_jobs=1).any()

    def test_worker_exception_propagates(self, bands):
        def boom(band, variance):
            if variance == 2.0:
                raise RuntimeError("band failed")
            return band

        with pytest.raises(RuntimeError, match="band failed"):
            map_bands(boom, bands, np.arange(5.0), n_jobs=2)

    def test_variance_count_mismatch(self, bands):
        with pytest.raises(ValueError, match="3 variances for 5 bands"):
            map_bands(_scale_band, bands, np.ones(3))

    def test_empty_cube_rejected(self):
        with pytest.raises(ValueError, match="at least one band"):
            map_bands(_scale_band, np.empty((0, 2, 2)), np.empty(0))

    @pytest.mark.parametrize("n_jobs", [0, -2, 1.5, True, "2"])
    def test_invalid_n_jobs(self, bands, n_jobs):
        with pytest.raises(ValueError, match="n_jobs"):
            map_bands(_scale_band, bands, np.ones(5), n_jobs=n_jobs)


class TestResolveNJobs:
    def test_sequential(self):
        assert resolve_n_jobs(1, 10) == 1

    def test_capped_by_band_count(self):
        assert resolve_n_jobs(16, 3) == 3

    def test_all_cores(self, monkeypatch):
        monkeypatch.setattr("os.cpu_count", lambda: 6)
        assert resolve_n_jobs(-1, 10) == 6
        assert resolve_n_jobs(-1, 2) == 2

    def test_unknown_cpu_count(self, monkeypatch):
        monkeypatch.setattr("os.cpu_count", lambda: None)
        assert resolve_n_jobs(-1, 4) == 1

    def test_numpy_integer_accepted(self):
        assert resolve_n_jobs(np.int64(2), 4) == 2
