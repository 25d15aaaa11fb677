"""Tests for the whole-raster smoothing pass."""

import warnings

import numpy as np
import pytest

from bayessmooth import SmoothResult, bayes_smooth, bayes_smooth_result, estimate_pixel, gather_neighbors, use_engine


class TestScenarios:
    def test_uniform_midpoint_raster_is_zero(self, engine, plus_window):
        raster = np.full((2, 2), 5000.0)
        result = bayes_smooth(raster, plus_window, 0.1, engine=engine)
        np.testing.assert_array_equal(result, np.zeros(4))

    def test_missing_center_only_affects_itself(self, engine, ones_window):
        raster = np.full((3, 3), 5000.0)
        raster[1, 1] = np.nan
        result = bayes_smooth(raster, ones_window, 0.1, engine=engine).reshape(3, 3)

        assert np.isnan(result[1, 1])
        mask = np.ones((3, 3), dtype=bool)
        mask[1, 1] = False
        assert np.all(np.isfinite(result[mask]))

    def test_weight_scaling_changes_output(self, engine, prob_raster, ones_window):
        raster = np.clip(prob_raster, None, 4500.0)
        base = bayes_smooth(raster, ones_window, 1.0, engine=engine)
        scaled = bayes_smooth(raster, 2 * ones_window, 1.0, engine=engine)

        finite = np.isfinite(base) & np.isfinite(scaled)
        assert finite.any()
        assert not np.allclose(base[finite], scaled[finite])


class TestMissingAndDegenerate:
    def test_missing_cells_stay_missing(self, engine, prob_raster, ones_window):
        result = bayes_smooth(prob_raster, ones_window, 1.0, engine=engine)
        assert np.all(np.isnan(result[np.isnan(prob_raster).ravel()]))

    def test_zero_window_gives_nan_everywhere(self, engine):
        raster = np.full((4, 5), 3000.0)
        with warnings.catch_warnings():
            warnings.simplefilter("error", RuntimeWarning)
            result = bayes_smooth(raster, np.zeros((3, 3), dtype=int), 1.0, engine=engine)
        assert np.all(np.isnan(result))

    def test_center_only_window_gives_nan(self, engine):
        raster = np.full((3, 3), 3000.0)
        window = np.zeros((3, 3), dtype=int)
        window[1, 1] = 1
        assert np.all(np.isnan(bayes_smooth(raster, window, 1.0, engine=engine)))

    def test_isolated_valid_cell_is_nan(self, engine, ones_window):
        raster = np.full((5, 5), np.nan)
        raster[2, 2] = 4000.0
        result = bayes_smooth(raster, ones_window, 1.0, engine=engine)
        assert np.all(np.isnan(result))


class TestLayoutAndDeterminism:
    def test_flat_row_major_output(self, engine, prob_raster, ones_window):
        result = bayes_smooth(prob_raster, ones_window, 1.5, engine=engine)
        assert result.shape == (prob_raster.size,)

        nrow, ncol = prob_raster.shape
        for i, j in [(0, 0), (3, 7), (nrow - 1, ncol - 1)]:
            neigh = gather_neighbors(prob_raster, ones_window, i, j, engine=engine)
            expected = estimate_pixel(prob_raster[i, j], neigh, 1.5, engine=engine)
            np.testing.assert_allclose(result[i * ncol + j], expected, rtol=1e-12)

    def test_deterministic(self, engine, prob_raster, ones_window):
        first = bayes_smooth(prob_raster, ones_window, 1.0, engine=engine)
        second = bayes_smooth(prob_raster, ones_window, 1.0, engine=engine)
        np.testing.assert_array_equal(first, second)

    def test_input_not_modified(self, engine, prob_raster, ones_window):
        before = prob_raster.copy()
        bayes_smooth(prob_raster, ones_window, 1.0, engine=engine)
        np.testing.assert_array_equal(prob_raster, before)


class TestEngineAgreement:
    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_numba_matches_numpy(self, seed):
        rng = np.random.default_rng(seed)
        raster = rng.uniform(100.0, 4900.0, size=(15, 13))
        raster[rng.random(raster.shape) < 0.2] = np.nan
        window = rng.integers(0, 3, size=(5, 5))

        result_numba = bayes_smooth(raster, window, 0.8, engine="numba")
        result_numpy = bayes_smooth(raster, window, 0.8, engine="numpy")

        np.testing.assert_array_equal(np.isnan(result_numba), np.isnan(result_numpy))
        np.testing.assert_allclose(result_numba, result_numpy, rtol=1e-10, atol=1e-12)

    def test_active_engine_is_used(self, prob_raster, ones_window):
        with use_engine("numpy"):
            result = bayes_smooth_result(prob_raster, ones_window, 1.0)
        assert result.engine == "numpy"


class TestSmoothResult:
    def test_fields(self, prob_raster, ones_window):
        result = bayes_smooth_result(prob_raster, ones_window, 2.0)

        assert isinstance(result, SmoothResult)
        assert result.estimates.shape == prob_raster.shape
        assert result.variance == 2.0
        assert result.engine == "numba"
        assert result.n_missing == int(np.isnan(prob_raster).sum())
        assert result.n_unresolved >= result.n_missing
        np.testing.assert_array_equal(result.window, ones_window)

    def test_estimates_match_flat_pass(self, prob_raster, ones_window):
        result = bayes_smooth_result(prob_raster, ones_window, 2.0)
        flat = bayes_smooth(prob_raster, ones_window, 2.0)
        np.testing.assert_array_equal(result.estimates.ravel(), flat)
