"""Run configuration for the knockout optimizer.

All settings are scalar constants fixed at the start of a run. They can be
given directly or loaded from a plain mapping (e.g. a parsed config file).
"""

from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields
from typing import Any

from knockout_pareto.dedup import MAX_SIG_DIGITS


@dataclass(frozen=True)
class OptimizerConfig:
    """Scalar configuration of one optimization run.

    Attributes:
        pop_size: Target number of survivors per generation.
        n_generations: Number of generations to run. No early stopping is
            applied beyond an optional callback.
        mutation_prob: Per-gene probability of flipping the activation state.
        sig_digits: Significant figures fitness values are rounded to before
            deduplication and ranking, at most 15.

    Example:
        >>> config = OptimizerConfig(pop_size=20, n_generations=10)
        >>> config.mutation_prob
        0.02
    """

    pop_size: int = 50
    n_generations: int = 50
    mutation_prob: float = 0.02
    sig_digits: int = 6

    def __post_init__(self) -> None:
        """Validate ranges.

        Raises:
            TypeError: If an integer setting is not an integer.
            ValueError: If a setting is out of range.
        """
        for name in ("pop_size", "n_generations", "sig_digits"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"{name} must be an integer, got {type(value).__name__}")

        if self.pop_size <= 0:
            raise ValueError(f"pop_size must be positive, got {self.pop_size}")
        if self.n_generations < 0:
            raise ValueError(f"n_generations must be non-negative, got {self.n_generations}")
        if not 0.0 <= self.mutation_prob <= 1.0:
            raise ValueError(f"mutation_prob must be in [0, 1], got {self.mutation_prob}")
        if self.sig_digits <= 0:
            raise ValueError(f"sig_digits must be positive, got {self.sig_digits}")
        if self.sig_digits > MAX_SIG_DIGITS:
            raise ValueError(f"sig_digits must be at most {MAX_SIG_DIGITS}, got {self.sig_digits}")

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "OptimizerConfig":
        """Build a config from a mapping, rejecting unknown keys.

        Raises:
            KeyError: If the mapping contains keys that are not settings.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(mapping) - known)
        if unknown:
            raise KeyError(f"Unknown settings: {', '.join(unknown)}. Available settings: {', '.join(sorted(known))}")
        return cls(**mapping)

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)
