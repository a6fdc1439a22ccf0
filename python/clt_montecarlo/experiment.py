"""Repeated batch averaging: the empirical side of the experiment.

Each trial draws ``num_iterations`` samples through an ``InverseSampler`` and
reduces them to their arithmetic mean. Collecting ``num_means`` of these
batch means gives the empirical distribution that the central limit theorem
says is approximately normal.
"""

import logging
import multiprocessing as mp
import time
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .sampling import InverseSampler

logger = logging.getLogger(__name__)

DEFAULT_SEED = 1234

# numpy seeds must be non-negative; any integer is mapped onto [0, 2**64)
SEED_MODULUS = 2**64

SHARED_STREAM = "shared"
PER_TRIAL_STREAMS = "per_trial"
STREAM_MODES = (SHARED_STREAM, PER_TRIAL_STREAMS)

# Fraction of out-of-range draws above which a warning is logged
OUT_OF_RANGE_WARN_FRACTION = 0.01


class EmpiricalDistribution:
    """The collected batch means of one experiment.

    Attributes:
        means: Read-only array of batch means, ordered by trial index
        num_iterations: Samples averaged per batch
        out_of_range: Uniform draws that missed the CDF table
    """

    def __init__(self, means, num_iterations: int, out_of_range: int = 0):
        means = np.array(means, dtype=np.float64)
        if means.ndim != 1 or len(means) == 0:
            raise ValueError("means must be a non-empty 1D array")
        means.flags.writeable = False
        self.means = means
        self.num_iterations = int(num_iterations)
        self.out_of_range = int(out_of_range)

    def __len__(self):
        return len(self.means)

    def __repr__(self):
        return (
            f"EmpiricalDistribution(num_means={len(self)}, mean={self.mean:.6g}, "
            f"stdev={self.stdev:.6g})"
        )

    @property
    def num_means(self) -> int:
        return len(self.means)

    @property
    def mean(self) -> float:
        return float(self.means.mean())

    @property
    def stdev(self) -> float:
        """Population standard deviation of the batch means."""
        return float(self.means.std())

    @property
    def standard_error(self) -> float:
        """Standard error of ``mean``."""
        return self.stdev / np.sqrt(len(self.means))

    @property
    def total_draws(self) -> int:
        """Samples that entered the batch means."""
        return len(self.means) * self.num_iterations

    def histogram(
        self, bins: int = 100, range: Optional[Tuple[float, float]] = None
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Bin the batch means. Returns ``(counts, edges)`` like numpy."""
        return np.histogram(self.means, bins=bins, range=range)


def _run_trials(
    sampler: InverseSampler,
    num_iterations: int,
    trials: Sequence[Tuple[int, np.random.SeedSequence]],
) -> Tuple[List[int], List[float], int]:
    """Run trials that each own an independent random stream.

    Module level so that it can be sent to a process pool.
    """
    indices = []
    means = []
    events = 0
    for index, seed_seq in trials:
        rng = np.random.default_rng(seed_seq)
        samples, missed = sampler.draw(rng, num_iterations)
        indices.append(index)
        means.append(float(samples.mean()))
        events += missed
    return indices, means, events


class ExperimentRunner:
    """Draw batches from a sampler and collect their means.

    Args:
        sampler: Inverse sampler over the discrete CDF
        num_iterations: Samples per batch (>= 1)
        num_means: Number of batches (>= 1)
        seed: Seed of the random source; any integer, negative ones are
            folded onto [0, 2**64)
        streams: ``"shared"`` uses one generator for every draw, trial after
            trial. ``"per_trial"`` gives trial i its own generator spawned from
            ``SeedSequence(seed)``, which makes the result independent of the
            number of workers.
        n_workers: Worker processes; values above 1 need ``"per_trial"``

    Raises:
        ValueError: On invalid counts, an unknown stream mode, or a shared
            stream combined with several workers

    Example:
        >>> runner = ExperimentRunner(sampler, num_iterations=100, num_means=10000)
        >>> empirical = runner.run()
        >>> empirical.mean, empirical.stdev
    """

    def __init__(
        self,
        sampler: InverseSampler,
        num_iterations: int = 100,
        num_means: int = 10000,
        seed: int = DEFAULT_SEED,
        streams: str = SHARED_STREAM,
        n_workers: int = 1,
    ):
        if num_iterations < 1:
            raise ValueError(f"num_iterations must be >= 1, got {num_iterations}")
        if num_means < 1:
            raise ValueError(f"num_means must be >= 1, got {num_means}")
        if streams not in STREAM_MODES:
            raise ValueError(
                f"Unknown stream mode {streams!r}. Available: {', '.join(STREAM_MODES)}"
            )
        if n_workers < 1:
            raise ValueError(f"n_workers must be >= 1, got {n_workers}")
        if n_workers > 1 and streams != PER_TRIAL_STREAMS:
            raise ValueError(
                "Several workers need independent random streams; "
                f"use streams={PER_TRIAL_STREAMS!r}"
            )

        self.sampler = sampler
        self.num_iterations = int(num_iterations)
        self.num_means = int(num_means)
        self.seed = int(seed)
        self.streams = streams
        self.n_workers = int(n_workers)

    @property
    def entropy(self) -> int:
        """The seed folded onto numpy's non-negative seed range."""
        return self.seed % SEED_MODULUS

    def run(self) -> EmpiricalDistribution:
        """Run every trial and return the distribution of batch means."""
        start = time.perf_counter()

        if self.streams == SHARED_STREAM:
            means, events = self._run_shared()
        else:
            means, events = self._run_per_trial()

        empirical = EmpiricalDistribution(means, self.num_iterations, events)
        logger.debug(
            "Ran %d trials x %d iterations in %.3f s (%d out-of-range draws)",
            self.num_means,
            self.num_iterations,
            time.perf_counter() - start,
            events,
        )

        fraction = events / (self.num_means * self.num_iterations)
        if fraction > OUT_OF_RANGE_WARN_FRACTION:
            logger.warning(
                "%.2f%% of uniform draws fell outside the discrete CDF "
                "(policy %s); consider a larger numpoints",
                100.0 * fraction,
                self.sampler.policy.value,
            )
        return empirical

    def _run_shared(self) -> Tuple[np.ndarray, int]:
        rng = np.random.default_rng(self.entropy)
        means = np.empty(self.num_means, dtype=np.float64)
        events = 0
        for i in range(self.num_means):
            samples, missed = self.sampler.draw(rng, self.num_iterations)
            means[i] = samples.mean()
            events += missed
        return means, events

    def _run_per_trial(self) -> Tuple[np.ndarray, int]:
        children = np.random.SeedSequence(self.entropy).spawn(self.num_means)
        trials = list(enumerate(children))
        means = np.empty(self.num_means, dtype=np.float64)

        if self.n_workers == 1:
            chunks = [trials]
        else:
            chunk_size = -(-self.num_means // self.n_workers)
            chunks = [
                trials[i : i + chunk_size]
                for i in range(0, self.num_means, chunk_size)
            ]

        if len(chunks) == 1:
            results = [_run_trials(self.sampler, self.num_iterations, chunks[0])]
        else:
            args = [(self.sampler, self.num_iterations, chunk) for chunk in chunks]
            with mp.Pool(processes=self.n_workers) as pool:
                results = pool.starmap(_run_trials, args)

        events = 0
        for indices, chunk_means, missed in results:
            means[indices] = chunk_means
            events += missed
        return means, events
