"""Run configuration for bootstrap stability analyses."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal, Self


DEFAULT_SEED = 5437854


@dataclass(frozen=True)
class StabilityConfig:
    """Settings shared by the bootstrap driver and the downstream analyzers.

    Attributes:
        n_bootstrap: Number of bootstrap resamples ``B``.
        seed: Root seed; every iteration derives its own stream from it.
        alpha: Significance level for pairwise inclusion flags.
        criterion: Information criterion driving backward elimination.
        threshold: Minimum criterion improvement required to drop a term.
        n_jobs: Worker threads for bootstrap iterations (1 = sequential loop).
        max_models: Maximum rows of the model-frequency table.
        cum_percent_cutoff: Model-frequency rows are kept while the cumulative
            percentage stays at or below this value.
        percentiles: Lower and upper bootstrap percentile (as fractions).
    """

    n_bootstrap: int = 1000
    seed: int | None = DEFAULT_SEED
    alpha: float = 0.01
    criterion: Literal["aic", "bic"] = "aic"
    threshold: float = 0.0
    n_jobs: int = 1
    max_models: int = 20
    cum_percent_cutoff: float = 80.0
    percentiles: tuple[float, float] = (0.025, 0.975)

    def __post_init__(self) -> None:
        if self.n_bootstrap < 1:
            raise ValueError(f"n_bootstrap must be >= 1, got {self.n_bootstrap}")
        if not 0.0 < self.alpha < 1.0:
            raise ValueError(f"alpha must lie in (0, 1), got {self.alpha}")
        if self.criterion not in {"aic", "bic"}:
            raise ValueError("criterion must be one of: aic, bic")
        if self.threshold < 0:
            raise ValueError("threshold must be non-negative")
        if self.n_jobs < 1:
            raise ValueError(f"n_jobs must be >= 1, got {self.n_jobs}")
        if self.max_models < 1:
            raise ValueError(f"max_models must be >= 1, got {self.max_models}")
        if not 0.0 < self.cum_percent_cutoff <= 100.0:
            raise ValueError("cum_percent_cutoff must lie in (0, 100]")
        lower, upper = self.percentiles
        if not 0.0 <= lower < upper <= 1.0:
            raise ValueError(f"percentiles must satisfy 0 <= lower < upper <= 1, got {self.percentiles}")

    def replace(self, **changes: object) -> Self:
        """Return a copy with selected fields overridden (validated again)."""
        return replace(self, **changes)


DEFAULT_CONFIG = StabilityConfig()


__all__ = ["DEFAULT_CONFIG", "DEFAULT_SEED", "StabilityConfig"]
