"""Predicted statistics of the batch-mean distribution.

By the central limit theorem the mean of ``num_iterations`` independent draws
of X is approximately normal with mean E[X] and standard deviation
``sqrt(Var[X] / num_iterations)``. The moments are obtained by adaptive
quadrature of x·pdf(x) and x²·pdf(x) against the normalized density.
"""

import logging
import math

from .density import NormalizedDensity, integrate_over_domain
from .exceptions import NegativeVariance

logger = logging.getLogger(__name__)

# Relative tolerance below zero before a variance is rejected
VARIANCE_TOLERANCE = 1e-9


class MomentEstimates:
    """First and second moments of a density plus the CLT prediction.

    Attributes:
        mean: E[X], also the predicted mean of the batch means
        second_moment: E[X²]
        variance: E[X²] - E[X]²
        num_iterations: Batch size the prediction refers to
    """

    def __init__(
        self,
        mean: float,
        second_moment: float,
        variance: float,
        num_iterations: int,
    ):
        self.mean = float(mean)
        self.second_moment = float(second_moment)
        self.variance = float(variance)
        self.num_iterations = int(num_iterations)

    def __repr__(self):
        return (
            f"MomentEstimates(mean={self.mean:.6g}, variance={self.variance:.6g}, "
            f"predicted_stdev={self.predicted_stdev:.6g})"
        )

    @property
    def stdev(self) -> float:
        """Standard deviation of X itself."""
        return math.sqrt(self.variance)

    @property
    def predicted_mean(self) -> float:
        return self.mean

    @property
    def predicted_variance(self) -> float:
        """Variance of the batch means."""
        return self.variance / self.num_iterations

    @property
    def predicted_stdev(self) -> float:
        """Standard deviation of the batch means."""
        return math.sqrt(self.predicted_variance)


def analyze_moments(
    normalized: NormalizedDensity, num_iterations: int = 100
) -> MomentEstimates:
    """Compute E[X], E[X²] and the predicted spread of batch means.

    Args:
        normalized: Density returned by ``normalize``
        num_iterations: Number of samples averaged per batch

    Returns:
        MomentEstimates for the given batch size

    Raises:
        ValueError: If num_iterations < 1
        NegativeVariance: If E[X²] - E[X]² is negative beyond tolerance
    """
    if num_iterations < 1:
        raise ValueError(f"num_iterations must be >= 1, got {num_iterations}")

    xmin, xmax = normalized.xmin, normalized.xmax
    mean = integrate_over_domain(lambda x: x * normalized(x), xmin, xmax)
    second_moment = integrate_over_domain(lambda x: x * x * normalized(x), xmin, xmax)

    variance = second_moment - mean * mean
    if variance < 0.0:
        if variance < -VARIANCE_TOLERANCE * max(1.0, abs(second_moment)):
            raise NegativeVariance(variance, mean, second_moment)
        variance = 0.0

    estimates = MomentEstimates(mean, second_moment, variance, num_iterations)
    logger.debug("Moments of %r: %r", normalized.name, estimates)
    return estimates
