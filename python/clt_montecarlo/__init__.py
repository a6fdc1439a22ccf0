"""CLT Monte Carlo - a numerical demonstration of the central limit theorem.

A user defined probability density is normalized, turned into a discrete
CDF and sampled by inverse transform sampling. Batches of samples are
averaged over and over, and the distribution of those batch means is
compared with the normal distribution predicted from the density's first
two moments.

Example:
    >>> from clt_montecarlo import run_experiment
    >>>
    >>> result = run_experiment(lambda x: x * x, 0.0, 10.0, seed=1234)
    >>> print(f"mean  {result.predicted_mean:.4f} vs {result.empirical_mean:.4f}")
    >>> print(f"stdev {result.predicted_stdev:.4f} vs {result.empirical_stdev:.4f}")

Example (presets and configuration):
    >>> from clt_montecarlo import CentralLimitExperiment, ExperimentConfig
    >>>
    >>> config = ExperimentConfig(pdf="bimodal", num_iterations=50)
    >>> result = CentralLimitExperiment(config).run()
    >>> result.statistics()
"""

import logging
from typing import Callable, Dict, Optional, Union

from .cdf import DiscreteCDF, build_cdf
from .config import ExperimentConfig
from .density import PRESETS, DensityFunction, NormalizedDensity, normalize
from .exceptions import CLTError, InvalidDistribution, NegativeVariance, SampleOutOfRange
from .experiment import EmpiricalDistribution, ExperimentRunner
from .moments import MomentEstimates, analyze_moments
from .sampling import InverseSampler, OutOfRangePolicy

logger = logging.getLogger(__name__)

__version__ = "0.1.0"

__all__ = [
    "CentralLimitExperiment",
    "ExperimentResult",
    "run_experiment",
    "ExperimentConfig",
    "DensityFunction",
    "NormalizedDensity",
    "PRESETS",
    "normalize",
    "DiscreteCDF",
    "build_cdf",
    "InverseSampler",
    "OutOfRangePolicy",
    "ExperimentRunner",
    "EmpiricalDistribution",
    "MomentEstimates",
    "analyze_moments",
    "CLTError",
    "InvalidDistribution",
    "NegativeVariance",
    "SampleOutOfRange",
]


# ============================================================================
# Orchestration
# ============================================================================


class ExperimentResult:
    """Everything an experiment hands to reporting and plotting.

    Attributes:
        cdf: The discrete CDF (curve points)
        empirical: The batch means (histogram values)
        moments: Moments of the density and the CLT prediction
        config: The configuration that produced this result
        normalized: The normalized density, for drawing the PDF
    """

    def __init__(
        self,
        cdf: DiscreteCDF,
        empirical: EmpiricalDistribution,
        moments: MomentEstimates,
        config: ExperimentConfig,
        normalized: Optional[NormalizedDensity] = None,
    ):
        self.cdf = cdf
        self.empirical = empirical
        self.moments = moments
        self.config = config
        self.normalized = normalized

    def __repr__(self):
        return (
            f"ExperimentResult(predicted=({self.predicted_mean:.4f}, "
            f"{self.predicted_stdev:.4f}), empirical=({self.empirical_mean:.4f}, "
            f"{self.empirical_stdev:.4f}))"
        )

    @property
    def predicted_mean(self) -> float:
        return self.moments.predicted_mean

    @property
    def predicted_stdev(self) -> float:
        return self.moments.predicted_stdev

    @property
    def empirical_mean(self) -> float:
        return self.empirical.mean

    @property
    def empirical_stdev(self) -> float:
        return self.empirical.stdev

    def statistics(self) -> Dict[str, float]:
        """The four summary scalars."""
        return {
            "predicted_mean": self.predicted_mean,
            "predicted_stdev": self.predicted_stdev,
            "empirical_mean": self.empirical_mean,
            "empirical_stdev": self.empirical_stdev,
        }


class CentralLimitExperiment:
    """Run the full pipeline for one configuration.

    normalize -> build_cdf -> ExperimentRunner gives the empirical side;
    normalize -> analyze_moments gives the prediction. Intermediate results
    are computed on first access and cached. A density that is negative
    anywhere fails in ``normalized`` before any sampling takes place.

    Args:
        config: Experiment configuration
    """

    def __init__(self, config: Optional[ExperimentConfig] = None):
        self.config = config if config is not None else ExperimentConfig()
        self._normalized = None
        self._cdf = None
        self._moments = None

    @property
    def normalized(self) -> NormalizedDensity:
        if self._normalized is None:
            self._normalized = normalize(self.config.density())
        return self._normalized

    @property
    def cdf(self) -> DiscreteCDF:
        if self._cdf is None:
            self._cdf = build_cdf(self.normalized, self.config.numpoints)
        return self._cdf

    @property
    def moments(self) -> MomentEstimates:
        if self._moments is None:
            self._moments = analyze_moments(self.normalized, self.config.num_iterations)
        return self._moments

    def sampler(self) -> InverseSampler:
        return InverseSampler(self.cdf, policy=self.config.policy)

    def run(self) -> ExperimentResult:
        """Sample, average and compare.

        Raises:
            InvalidDistribution: If the density cannot be used
            NegativeVariance: If the moment integrals are inconsistent
            SampleOutOfRange: If redraws never land inside the CDF table
        """
        config = self.config
        logger.info(
            "Running %r on [%g, %g]: numpoints=%d num_iterations=%d num_means=%d seed=%d",
            config.pdf_name,
            config.xmin,
            config.xmax,
            config.numpoints,
            config.num_iterations,
            config.num_means,
            config.seed,
        )

        # both sides are validated before the (expensive) sampling loop
        moments = self.moments
        runner = ExperimentRunner(
            self.sampler(),
            num_iterations=config.num_iterations,
            num_means=config.num_means,
            seed=config.seed,
            streams=config.streams,
            n_workers=config.n_workers,
        )
        empirical = runner.run()

        result = ExperimentResult(self.cdf, empirical, moments, config, self.normalized)
        logger.info("%r", result)
        return result


def run_experiment(
    pdf: Union[str, Callable[[float], float]],
    xmin: float = 0.0,
    xmax: float = 10.0,
    **kwargs,
) -> ExperimentResult:
    """Convenience function for a single experiment.

    This is a shorthand for building an ``ExperimentConfig`` and calling
    ``CentralLimitExperiment(config).run()``.

    Args:
        pdf: Preset name or non-negative callable
        xmin, xmax: Domain of the density
        **kwargs: Any other ``ExperimentConfig`` field

    Returns:
        ExperimentResult
    """
    config = ExperimentConfig(pdf=pdf, xmin=xmin, xmax=xmax, **kwargs)
    return CentralLimitExperiment(config).run()
