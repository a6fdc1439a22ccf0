"""Tests for the moment analyzer."""

import math

import pytest

from clt_montecarlo import (
    DensityFunction,
    MomentEstimates,
    NegativeVariance,
    analyze_moments,
    normalize,
)
from clt_montecarlo import moments as moments_module


def _normalized(pdf, xmin=0.0, xmax=10.0):
    return normalize(DensityFunction(pdf, xmin, xmax))


class TestAnalyzeMoments:
    """Test E[X], E[X²] and the CLT prediction."""

    def test_uniform(self):
        """Test the uniform density on [0, 10]."""
        estimates = analyze_moments(_normalized(lambda x: 1.0), num_iterations=100)
        assert estimates.mean == pytest.approx(5.0, rel=1e-9)
        assert estimates.second_moment == pytest.approx(100.0 / 3.0, rel=1e-9)
        assert estimates.variance == pytest.approx(100.0 / 12.0, rel=1e-9)
        assert estimates.predicted_stdev == pytest.approx(0.288675, abs=1e-6)

    def test_parabola(self):
        """Test x² on [0, 10]: mean 7.5, E[X²] 60, variance 3.75."""
        estimates = analyze_moments(_normalized(lambda x: x * x), num_iterations=100)
        assert estimates.mean == pytest.approx(7.5, rel=1e-9)
        assert estimates.second_moment == pytest.approx(60.0, rel=1e-9)
        assert estimates.variance == pytest.approx(3.75, rel=1e-8)
        assert estimates.predicted_stdev == pytest.approx(math.sqrt(0.0375), rel=1e-8)

    def test_normal_preset(self):
        """Test the truncated normal preset is close to N(5, 2)."""
        normalized = normalize(DensityFunction.from_preset("normal"))
        estimates = analyze_moments(normalized, num_iterations=1)
        assert estimates.mean == pytest.approx(5.0, abs=1e-6)
        # truncation at 2.5 sigma slightly narrows the distribution
        assert 1.8 < estimates.stdev < 2.0

    def test_batch_size_scaling(self):
        """Test that the predicted stdev scales with 1/sqrt(num_iterations)."""
        normalized = _normalized(lambda x: x * x)
        one = analyze_moments(normalized, num_iterations=1)
        many = analyze_moments(normalized, num_iterations=400)
        assert many.predicted_stdev == pytest.approx(one.predicted_stdev / 20.0)
        assert many.predicted_mean == one.predicted_mean

    def test_invalid_num_iterations(self):
        """Test that a batch size below 1 is rejected."""
        with pytest.raises(ValueError):
            analyze_moments(_normalized(lambda x: 1.0), num_iterations=0)


class TestNegativeVariance:
    """Test handling of inconsistent moment integrals."""

    def _patch_integrals(self, monkeypatch, values):
        results = iter(values)
        monkeypatch.setattr(
            moments_module,
            "integrate_over_domain",
            lambda func, xmin, xmax: next(results),
        )

    def test_raises(self, monkeypatch):
        """Test that a clearly negative variance raises NegativeVariance."""
        normalized = _normalized(lambda x: 1.0)
        self._patch_integrals(monkeypatch, [5.0, 20.0])
        with pytest.raises(NegativeVariance) as exc_info:
            analyze_moments(normalized, num_iterations=10)
        assert exc_info.value.variance == pytest.approx(-5.0)

    def test_rounding_noise_clamped(self, monkeypatch):
        """Test that a negative variance within tolerance becomes zero."""
        normalized = _normalized(lambda x: 1.0)
        self._patch_integrals(monkeypatch, [1.0, 1.0 - 1e-13])
        estimates = analyze_moments(normalized, num_iterations=10)
        assert estimates.variance == 0.0
        assert estimates.predicted_stdev == 0.0


class TestMomentEstimates:
    """Test the result container."""

    def test_derived_values(self):
        """Test predicted variance and stdev."""
        estimates = MomentEstimates(2.0, 8.0, 4.0, num_iterations=16)
        assert estimates.stdev == 2.0
        assert estimates.predicted_variance == 0.25
        assert estimates.predicted_stdev == 0.5
        assert estimates.predicted_mean == 2.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
