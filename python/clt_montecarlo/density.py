"""Probability density functions and their normalization.

A ``DensityFunction`` wraps any non-negative callable of one real variable
over a bounded domain. ``normalize`` integrates it with adaptive quadrature,
checks that it never goes negative and rescales it so that the total
probability is 1.

Example:
    >>> from clt_montecarlo.density import DensityFunction, normalize
    >>> density = DensityFunction(lambda x: x * x, 0.0, 10.0)
    >>> normalized = normalize(density)
    >>> round(normalized.integral, 6)
    333.333333
"""

import logging
import math
from typing import Callable, Dict, Optional

import numpy as np
from scipy import integrate

from .exceptions import InvalidDistribution

logger = logging.getLogger(__name__)

DEFAULT_XMIN = 0.0
DEFAULT_XMAX = 10.0

# Grid used to look for negative values before normalizing
DEFAULT_CHECK_POINTS = 10001

QUAD_EPSREL = 1e-8
QUAD_LIMIT = 200


# ============================================================================
# Presets
# ============================================================================


def _normal(x: float) -> float:
    # mean 5, stdev 2
    return math.exp(-((x - 5.0) ** 2) / 8.0)


def _bimodal(x: float) -> float:
    return math.sin(x) + 10.0


def _parabolic(x: float) -> float:
    return x * x


def _uniform(x: float) -> float:
    return 1.0


def _step(x: float) -> float:
    if x < 1.0:
        return 0.0
    if x < 5.0:
        return 1.0
    return 0.0


def _lopsided(x: float) -> float:
    # Most probable value differs from the expectation value
    return math.exp(x) * math.exp(-((x - 3.0) ** 2) / 10.0)


PRESETS: Dict[str, Callable[[float], float]] = {
    "normal": _normal,
    "bimodal": _bimodal,
    "parabolic": _parabolic,
    "uniform": _uniform,
    "step": _step,
    "lopsided": _lopsided,
}


# ============================================================================
# PDF evaluator
# ============================================================================


class DensityFunction:
    """A user supplied density over the closed domain [xmin, xmax].

    The function does not need to be normalized, only non-negative.

    Args:
        pdf: Callable accepting a float and returning a float
        xmin: Lower bound of the domain
        xmax: Upper bound of the domain
        name: Optional label used in reports and plots

    Raises:
        TypeError: If pdf is not callable
        ValueError: If the bounds are not finite or xmin >= xmax
    """

    def __init__(
        self,
        pdf: Callable[[float], float],
        xmin: float = DEFAULT_XMIN,
        xmax: float = DEFAULT_XMAX,
        name: Optional[str] = None,
    ):
        if not callable(pdf):
            raise TypeError("pdf must be callable")

        xmin = float(xmin)
        xmax = float(xmax)
        if not (math.isfinite(xmin) and math.isfinite(xmax)):
            raise ValueError(f"Domain bounds must be finite, got [{xmin}, {xmax}]")
        if xmin >= xmax:
            raise ValueError(f"xmin must be less than xmax, got [{xmin}, {xmax}]")

        self._pdf = pdf
        self.xmin = xmin
        self.xmax = xmax
        self.name = name or getattr(pdf, "__name__", "pdf").lstrip("_")

    def __call__(self, x: float) -> float:
        return float(self._pdf(x))

    def __repr__(self):
        return f"DensityFunction(name={self.name!r}, xmin={self.xmin}, xmax={self.xmax})"

    @property
    def width(self) -> float:
        return self.xmax - self.xmin

    def evaluate(self, xs) -> np.ndarray:
        """Evaluate the density at every point of ``xs``."""
        return np.array([self._pdf(float(x)) for x in xs], dtype=np.float64)

    @staticmethod
    def from_preset(
        name: str, xmin: float = DEFAULT_XMIN, xmax: float = DEFAULT_XMAX
    ) -> "DensityFunction":
        """Create one of the built-in densities by name.

        Available names: normal, bimodal, parabolic, uniform, step, lopsided.

        Raises:
            ValueError: If the name is unknown
        """
        try:
            pdf = PRESETS[name]
        except KeyError:
            raise ValueError(
                f"Unknown preset {name!r}. Available: {', '.join(sorted(PRESETS))}"
            ) from None
        return DensityFunction(pdf, xmin, xmax, name=name)


# ============================================================================
# Normalizer
# ============================================================================


class NormalizedDensity:
    """A density rescaled so that it integrates to 1 over its domain."""

    def __init__(self, density: DensityFunction, integral: float):
        self._density = density
        self._integral = float(integral)
        self._norm_const = 1.0 / self._integral

    def __call__(self, x: float) -> float:
        return self._norm_const * self._density(x)

    def __repr__(self):
        return (
            f"NormalizedDensity(name={self.name!r}, "
            f"norm_const={self._norm_const:.6g})"
        )

    @property
    def density(self) -> DensityFunction:
        return self._density

    @property
    def integral(self) -> float:
        """Integral of the raw density over the domain."""
        return self._integral

    @property
    def norm_const(self) -> float:
        return self._norm_const

    @property
    def name(self) -> str:
        return self._density.name

    @property
    def xmin(self) -> float:
        return self._density.xmin

    @property
    def xmax(self) -> float:
        return self._density.xmax

    def evaluate(self, xs) -> np.ndarray:
        return self._norm_const * self._density.evaluate(xs)


def integrate_over_domain(
    func: Callable[[float], float], xmin: float, xmax: float
) -> float:
    """Adaptive quadrature of ``func`` over [xmin, xmax]."""
    value, abserr = integrate.quad(
        func, xmin, xmax, epsrel=QUAD_EPSREL, limit=QUAD_LIMIT
    )
    logger.debug("quad over [%g, %g] = %.12g (abserr %.3g)", xmin, xmax, value, abserr)
    return value


def check_non_negative(
    density: DensityFunction, check_points: int = DEFAULT_CHECK_POINTS
) -> float:
    """Scan the density on a uniform grid and return its minimum.

    Raises:
        InvalidDistribution: If any grid value is negative or not finite
    """
    grid = np.linspace(density.xmin, density.xmax, max(int(check_points), 2))
    values = density.evaluate(grid)

    if not np.all(np.isfinite(values)):
        bad = grid[~np.isfinite(values)][0]
        raise InvalidDistribution(
            f"Probability density {density.name!r} is not finite at x={bad:.6g}"
        )

    minimum = float(values.min())
    if minimum < 0.0:
        where = float(grid[int(values.argmin())])
        raise InvalidDistribution(
            f"Probability density {density.name!r} must never be negative, "
            f"got {minimum:.6g} at x={where:.6g}"
        )
    return minimum


def normalize(
    density: DensityFunction, check_points: int = DEFAULT_CHECK_POINTS
) -> NormalizedDensity:
    """Validate a density and rescale it to unit total probability.

    Args:
        density: The density to normalize
        check_points: Number of grid points for the non-negativity check

    Returns:
        NormalizedDensity with ``norm_const = 1 / integral``

    Raises:
        InvalidDistribution: If the density is negative anywhere on the grid,
            or its integral is zero, negative or not finite
    """
    check_non_negative(density, check_points)

    total = integrate_over_domain(density, density.xmin, density.xmax)
    if not math.isfinite(total) or total <= 0.0:
        raise InvalidDistribution(
            f"Probability density {density.name!r} has integral {total!r} over "
            f"[{density.xmin}, {density.xmax}]; it cannot be normalized"
        )

    normalized = NormalizedDensity(density, total)
    logger.debug(
        "Normalized %r: integral=%.12g norm_const=%.12g",
        density.name,
        total,
        normalized.norm_const,
    )
    return normalized
