"""Experiment configuration, fixed before anything is sampled."""

import json
import math
import numbers
from dataclasses import dataclass, fields
from typing import Any, Callable, Mapping, Union

from .density import DEFAULT_XMAX, DEFAULT_XMIN, PRESETS, DensityFunction
from .experiment import DEFAULT_SEED, PER_TRIAL_STREAMS, SHARED_STREAM, STREAM_MODES
from .sampling import OutOfRangePolicy

DEFAULT_PRESET = "lopsided"
INTEGER_FIELDS = ("numpoints", "num_iterations", "num_means", "seed", "n_workers")


@dataclass(frozen=True)
class ExperimentConfig:
    """All inputs of a central limit experiment.

    ``pdf`` is either the name of a preset (see ``PRESETS``) or a callable.
    Defaults reproduce the classic demonstration: the lopsided density on
    [0, 10], 1000 CDF points, batches of 100 and 10000 batch means.

    Raises:
        ValueError: If any field violates its constraint
    """

    pdf: Union[str, Callable[[float], float]] = DEFAULT_PRESET
    xmin: float = DEFAULT_XMIN
    xmax: float = DEFAULT_XMAX
    numpoints: int = 1000
    num_iterations: int = 100
    num_means: int = 10000
    seed: int = DEFAULT_SEED
    policy: str = OutOfRangePolicy.REDRAW.value
    streams: str = SHARED_STREAM
    n_workers: int = 1

    def __post_init__(self):
        if isinstance(self.pdf, str):
            if self.pdf not in PRESETS:
                raise ValueError(
                    f"Unknown preset {self.pdf!r}. "
                    f"Available: {', '.join(sorted(PRESETS))}"
                )
        elif not callable(self.pdf):
            raise ValueError("pdf must be a preset name or a callable")

        for name in INTEGER_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise ValueError(f"{name} must be an integer, got {value!r}")

        if not (math.isfinite(self.xmin) and math.isfinite(self.xmax)):
            raise ValueError("xmin and xmax must be finite")
        if self.xmin >= self.xmax:
            raise ValueError(f"xmin must be less than xmax, got [{self.xmin}, {self.xmax}]")
        if self.numpoints < 2:
            raise ValueError(f"numpoints must be >= 2, got {self.numpoints}")
        if self.num_iterations < 1:
            raise ValueError(f"num_iterations must be >= 1, got {self.num_iterations}")
        if self.num_means < 1:
            raise ValueError(f"num_means must be >= 1, got {self.num_means}")
        if self.n_workers < 1:
            raise ValueError(f"n_workers must be >= 1, got {self.n_workers}")
        if self.streams not in STREAM_MODES:
            raise ValueError(
                f"Unknown stream mode {self.streams!r}. "
                f"Available: {', '.join(STREAM_MODES)}"
            )
        if self.n_workers > 1 and self.streams != PER_TRIAL_STREAMS:
            raise ValueError(
                f"n_workers > 1 requires streams={PER_TRIAL_STREAMS!r}"
            )
        # normalizes the spelling, raises ValueError on unknown names
        object.__setattr__(self, "policy", OutOfRangePolicy.parse(self.policy).value)

    @property
    def pdf_name(self) -> str:
        if isinstance(self.pdf, str):
            return self.pdf
        return getattr(self.pdf, "__name__", "pdf")

    def density(self) -> DensityFunction:
        """Build the configured ``DensityFunction``."""
        if isinstance(self.pdf, str):
            return DensityFunction.from_preset(self.pdf, self.xmin, self.xmax)
        return DensityFunction(self.pdf, self.xmin, self.xmax)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ExperimentConfig":
        """Create a config from a dict such as parsed JSON.

        Raises:
            ValueError: On unknown keys or invalid values
        """
        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(data) - set(known))
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")

        kwargs = {}
        for key, value in data.items():
            if key in ("xmin", "xmax"):
                value = float(value)
            elif key in INTEGER_FIELDS:
                value = _as_integer(key, value)
            kwargs[key] = value
        return cls(**kwargs)

    @classmethod
    def from_json(cls, path: str) -> "ExperimentConfig":
        """Load a config from a JSON file holding a single object."""
        with open(path, "r") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a JSON object, got {type(data).__name__}")
        return cls.from_mapping(data)

    def replace(self, **changes) -> "ExperimentConfig":
        """Return a copy with some fields changed (validated again)."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values.update(changes)
        return type(self)(**values)


def _as_integer(key: str, value: Any) -> int:
    """Coerce JSON numbers and numeric strings without truncating fractions."""
    if isinstance(value, str):
        value = float(value) if any(c in value for c in ".eE") else int(value)
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{key} must be an integer, got {value!r}")
        value = int(value)
    return value
