"""Errors raised by the sampling and statistics engine."""


class CLTError(Exception):
    """Base class for central limit experiment errors."""

    pass


class InvalidDistribution(CLTError):
    """The PDF is negative somewhere on its domain, or cannot be normalized."""

    pass


class NegativeVariance(CLTError):
    """E[X²] - E[X]² came out negative beyond numerical tolerance.

    Never happens for a valid PDF; it points at an integration problem.
    """

    def __init__(self, variance: float, mean: float, second_moment: float):
        self.variance = variance
        self.mean = mean
        self.second_moment = second_moment
        super().__init__(
            f"Negative variance {variance:.6g} "
            f"(E[X]={mean:.6g}, E[X^2]={second_moment:.6g})"
        )


class SampleOutOfRange(CLTError):
    """A uniform draw fell outside the range covered by the discrete CDF."""

    def __init__(self, value: float, low: float, high: float):
        self.value = value
        self.low = low
        self.high = high
        super().__init__(
            f"Uniform draw {value!r} is outside the CDF range [{low!r}, {high!r}]"
        )
