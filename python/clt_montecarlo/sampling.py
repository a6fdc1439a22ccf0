"""Inverse transform sampling from a discrete CDF."""

import logging
from enum import Enum
from typing import Tuple

import numpy as np

from .cdf import DiscreteCDF
from .exceptions import SampleOutOfRange

logger = logging.getLogger(__name__)

DEFAULT_MAX_REDRAW_ROUNDS = 100


class OutOfRangePolicy(Enum):
    """What to do with a uniform draw outside [F_0, F_last] of the table.

    The left Riemann sum never reaches exactly 1, so a draw above the last
    cumulative value has no bracket. Draws below the first value have none
    either. Both policies keep every batch at its full size.
    """

    REDRAW = "redraw"
    CLAMP = "clamp"

    @classmethod
    def parse(cls, value) -> "OutOfRangePolicy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            choices = ", ".join(p.value for p in cls)
            raise ValueError(
                f"Unknown out-of-range policy {value!r}. Available: {choices}"
            ) from None


class InverseSampler:
    """Map uniform draws in [0, 1) to x-values through a ``DiscreteCDF``.

    For a draw u the sampler finds the earliest index k with
    ``y[k] <= u <= y[k+1]`` and returns ``x[k]``. The table is sorted, so the
    bracket is located by binary search.

    Args:
        cdf: The discrete CDF to invert
        policy: Handling of draws outside the table range
        max_redraw_rounds: Give up after this many redraw rounds in one batch

    Example:
        >>> sampler = InverseSampler(cdf)
        >>> rng = np.random.default_rng(1234)
        >>> samples, events = sampler.draw(rng, 100)
    """

    def __init__(
        self,
        cdf: DiscreteCDF,
        policy=OutOfRangePolicy.REDRAW,
        max_redraw_rounds: int = DEFAULT_MAX_REDRAW_ROUNDS,
    ):
        if max_redraw_rounds < 1:
            raise ValueError(
                f"max_redraw_rounds must be >= 1, got {max_redraw_rounds}"
            )
        self.cdf = cdf
        self.policy = OutOfRangePolicy.parse(policy)
        self.max_redraw_rounds = int(max_redraw_rounds)

    def __repr__(self):
        return f"InverseSampler(cdf={self.cdf!r}, policy={self.policy.value!r})"

    @property
    def low(self) -> float:
        return float(self.cdf.y[0])

    @property
    def high(self) -> float:
        return float(self.cdf.y[-1])

    def invert(self, u: float) -> float:
        """Invert a single draw.

        Raises:
            SampleOutOfRange: If u is outside [y[0], y[-1]]
        """
        values, in_range = self.invert_many(np.array([u], dtype=np.float64))
        if not in_range[0]:
            raise SampleOutOfRange(float(u), self.low, self.high)
        return float(values[0])

    def invert_many(self, u: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """Invert an array of draws.

        Returns:
            (values, in_range): values holds NaN where ``in_range`` is False
        """
        u = np.asarray(u, dtype=np.float64)
        y = self.cdf.y

        in_range = (u >= y[0]) & (u <= y[-1])
        # first j with y[j] >= u, so y[j-1] < u <= y[j]
        k = np.searchsorted(y, u, side="left") - 1
        k = np.clip(k, 0, len(y) - 2)

        values = np.where(in_range, self.cdf.x[k], np.nan)
        return values, in_range

    def draw(self, rng: np.random.Generator, n: int) -> Tuple[np.ndarray, int]:
        """Draw exactly ``n`` samples from ``rng``.

        The first ``n`` uniforms are consumed in order. Under ``REDRAW`` the
        replacements for out-of-range draws are consumed afterwards.

        Returns:
            (samples, out_of_range): the samples and the number of draws that
            fell outside the table

        Raises:
            SampleOutOfRange: If redraws keep missing for
                ``max_redraw_rounds`` rounds
        """
        u = rng.random(n)
        values, in_range = self.invert_many(u)
        missed = ~in_range
        events = int(missed.sum())

        if not events:
            return values, 0

        if self.policy is OutOfRangePolicy.CLAMP:
            values[u < self.low] = self.cdf.x[0]
            values[u > self.high] = self.cdf.x[-1]
            return values, events

        rounds = 0
        while missed.any():
            rounds += 1
            if rounds > self.max_redraw_rounds:
                raise SampleOutOfRange(float(u[missed][0]), self.low, self.high)
            idx = np.flatnonzero(missed)
            u[idx] = rng.random(len(idx))
            values[idx], ok = self.invert_many(u[idx])
            missed[idx] = ~ok
            events += int((~ok).sum())

        return values, events
