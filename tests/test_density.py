"""Tests for density functions, presets and normalization."""

import math

import numpy as np
import pytest
from scipy import integrate

from clt_montecarlo import (
    PRESETS,
    DensityFunction,
    InvalidDistribution,
    normalize,
)


class TestDensityFunction:
    """Test the PDF wrapper."""

    def test_evaluate(self):
        """Test scalar and vector evaluation."""
        density = DensityFunction(lambda x: x * x, 0.0, 10.0)
        assert density(3.0) == 9.0
        values = density.evaluate([0.0, 1.0, 2.0])
        assert values.dtype == np.float64
        np.testing.assert_array_equal(values, [0.0, 1.0, 4.0])

    def test_width(self):
        """Test domain width."""
        assert DensityFunction(lambda x: 1.0, -2.0, 3.0).width == 5.0

    def test_name_from_function(self):
        """Test that the name defaults to the function name."""

        def triangle(x):
            return x

        assert DensityFunction(triangle, 0.0, 1.0).name == "triangle"
        assert DensityFunction(triangle, 0.0, 1.0, name="tri").name == "tri"

    def test_not_callable(self):
        """Test that a non-callable pdf raises TypeError."""
        with pytest.raises(TypeError):
            DensityFunction(1.0, 0.0, 1.0)

    @pytest.mark.parametrize("xmin,xmax", [(1.0, 1.0), (2.0, 1.0), (0.0, math.inf)])
    def test_invalid_domain(self, xmin, xmax):
        """Test that empty, reversed or infinite domains are rejected."""
        with pytest.raises(ValueError):
            DensityFunction(lambda x: 1.0, xmin, xmax)


class TestPresets:
    """Test the built-in densities."""

    def test_available_names(self):
        """Test that every classic example is available."""
        assert set(PRESETS) == {
            "normal",
            "bimodal",
            "parabolic",
            "uniform",
            "step",
            "lopsided",
        }

    def test_from_preset(self):
        """Test creating a preset by name."""
        density = DensityFunction.from_preset("parabolic", 0.0, 5.0)
        assert density.name == "parabolic"
        assert density.xmax == 5.0
        assert density(2.0) == 4.0

    def test_step_shape(self):
        """Test the step density is 1 on [1, 5) and 0 elsewhere."""
        step = DensityFunction.from_preset("step")
        assert step(0.5) == 0.0
        assert step(1.0) == 1.0
        assert step(4.99) == 1.0
        assert step(5.0) == 0.0

    def test_unknown_preset(self):
        """Test that an unknown name lists the available presets."""
        with pytest.raises(ValueError, match="parabolic"):
            DensityFunction.from_preset("cauchy")

    @pytest.mark.parametrize("name", sorted(PRESETS))
    def test_presets_normalize(self, name):
        """Test that every preset is a valid density on [0, 10]."""
        normalized = normalize(DensityFunction.from_preset(name))
        assert normalized.integral > 0
        assert math.isclose(normalized.norm_const * normalized.integral, 1.0)


class TestNormalize:
    """Test normalization and validation."""

    def test_parabola_integral(self):
        """Test the raw integral of x² over [0, 10]."""
        normalized = normalize(DensityFunction(lambda x: x * x, 0.0, 10.0))
        assert normalized.integral == pytest.approx(1000.0 / 3.0, rel=1e-9)
        assert normalized.norm_const == pytest.approx(3.0 / 1000.0, rel=1e-9)

    @pytest.mark.parametrize(
        "pdf",
        [
            lambda x: 1.0,
            lambda x: x * x,
            lambda x: math.exp(-((x - 5.0) ** 2) / 8.0),
            lambda x: math.sin(x) + 10.0,
        ],
    )
    def test_normalized_integrates_to_one(self, pdf):
        """Test that the normalized density integrates to 1."""
        normalized = normalize(DensityFunction(pdf, 0.0, 10.0))
        total, _ = integrate.quad(normalized, 0.0, 10.0)
        assert abs(total - 1.0) < 1e-6

    def test_normalized_evaluate(self):
        """Test that evaluation is scaled by the normalization constant."""
        normalized = normalize(DensityFunction(lambda x: 2.0, 0.0, 4.0))
        assert normalized(1.0) == pytest.approx(0.25)
        np.testing.assert_allclose(normalized.evaluate([0.0, 3.0]), [0.25, 0.25])

    def test_negative_pdf(self):
        """Test that a density negative anywhere is rejected."""
        with pytest.raises(InvalidDistribution, match="negative"):
            normalize(DensityFunction(math.sin, 0.0, 10.0))

    def test_negative_at_single_point(self):
        """Test that a small negative dip is caught by the grid scan."""

        def dip(x):
            return -1e-3 if 4.0 <= x <= 4.01 else 1.0

        with pytest.raises(InvalidDistribution):
            normalize(DensityFunction(dip, 0.0, 10.0))

    def test_zero_pdf(self):
        """Test that a density with zero integral cannot be normalized."""
        with pytest.raises(InvalidDistribution, match="cannot be normalized"):
            normalize(DensityFunction(lambda x: 0.0, 0.0, 10.0))

    def test_non_finite_pdf(self):
        """Test that NaN values are rejected."""
        with pytest.raises(InvalidDistribution, match="not finite"):
            normalize(DensityFunction(lambda x: math.nan, 0.0, 1.0))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
