"""Discrete approximation of the cumulative distribution function."""

import logging
from typing import List, Tuple

import numpy as np

from .density import NormalizedDensity
from .exceptions import InvalidDistribution

logger = logging.getLogger(__name__)


class DiscreteCDF:
    """Ordered (x, F(x)) table of a cumulative distribution function.

    The table is built once and is read-only afterwards, so it can be shared
    freely between trials and worker processes.

    Args:
        x: Strictly increasing grid points
        y: Non-decreasing cumulative probabilities, same length as x

    Raises:
        ValueError: If the arrays are not 1D, differ in length, hold fewer
            than 2 points, or violate the ordering invariants
    """

    def __init__(self, x, y):
        x_arr = np.array(x, dtype=np.float64)
        y_arr = np.array(y, dtype=np.float64)

        if x_arr.ndim != 1 or y_arr.ndim != 1:
            raise ValueError("x and y must be 1D arrays")
        if len(x_arr) != len(y_arr):
            raise ValueError("x and y must have the same length")
        if len(x_arr) < 2:
            raise ValueError("A discrete CDF needs at least 2 points")
        if not np.all(np.diff(x_arr) > 0):
            raise ValueError("x must be strictly increasing")
        if not np.all(np.diff(y_arr) >= 0):
            raise ValueError("y must be non-decreasing")

        x_arr.flags.writeable = False
        y_arr.flags.writeable = False
        self._x = x_arr
        self._y = y_arr

    def __len__(self):
        return len(self._x)

    def __repr__(self):
        return (
            f"DiscreteCDF(numpoints={len(self)}, xmin={self.xmin}, "
            f"total={self.total:.6f})"
        )

    @property
    def x(self) -> np.ndarray:
        return self._x

    @property
    def y(self) -> np.ndarray:
        return self._y

    @property
    def xmin(self) -> float:
        return float(self._x[0])

    @property
    def xmax(self) -> float:
        return float(self._x[-1])

    @property
    def dx(self) -> float:
        """Spacing of the grid (assumes a uniform grid)."""
        return float(self._x[1] - self._x[0])

    @property
    def total(self) -> float:
        """Last cumulative value; close to 1 up to discretization error."""
        return float(self._y[-1])

    def points(self) -> List[Tuple[float, float]]:
        """(x, y) pairs for curve rendering."""
        return list(zip(self._x.tolist(), self._y.tolist()))

    def inverse(self) -> Tuple[np.ndarray, np.ndarray]:
        """The inverse CDF as (probability, x) arrays."""
        return self._y, self._x


def build_cdf(normalized: NormalizedDensity, numpoints: int = 1000) -> DiscreteCDF:
    """Integrate a normalized density with a left Riemann sum.

    Starting at xmin with step dx = (xmax - xmin) / numpoints, each point
    accumulates ``pdf(x) * dx`` and records ``(x, area)``. The final area is
    1 up to O(dx) discretization error, which is left uncorrected.

    Args:
        normalized: Density returned by ``normalize``
        numpoints: Number of table points, at least 2

    Returns:
        DiscreteCDF with ``numpoints`` entries

    Raises:
        ValueError: If numpoints < 2
        InvalidDistribution: If the density is negative at a grid point
    """
    numpoints = int(numpoints)
    if numpoints < 2:
        raise ValueError(f"numpoints must be >= 2, got {numpoints}")

    dx = (normalized.xmax - normalized.xmin) / numpoints
    x_grid = normalized.xmin + dx * np.arange(numpoints, dtype=np.float64)
    pdf_values = normalized.evaluate(x_grid)
    if np.any(pdf_values < 0) or not np.all(np.isfinite(pdf_values)):
        raise InvalidDistribution(
            f"Probability density {normalized.name!r} is negative or not finite "
            "on the CDF grid"
        )
    area = np.cumsum(pdf_values * dx)

    cdf = DiscreteCDF(x_grid, area)
    logger.debug(
        "Built discrete CDF for %r: numpoints=%d dx=%.6g total=%.9f",
        normalized.name,
        numpoints,
        dx,
        cdf.total,
    )
    return cdf
