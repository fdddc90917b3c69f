"""Exception types raised by the bootstrap stability toolbox."""

from __future__ import annotations


class BootstabError(Exception):
    """Base class for all toolbox errors."""


class DataContractError(BootstabError, ValueError):
    """Input data does not satisfy the dataset contract (missing or non-numeric fields)."""


class ModelFitError(BootstabError, RuntimeError):
    """A regression fit failed.

    Attributes:
        stage: Pipeline stage that failed, e.g. ``"full-model"`` or ``"bootstrap"``.
        iteration: 0-based bootstrap iteration index, ``None`` outside the bootstrap loop.
    """

    def __init__(self, message: str, *, stage: str, iteration: int | None = None) -> None:
        self.stage = stage
        self.iteration = iteration
        location = f"stage '{stage}'" if iteration is None else f"stage '{stage}', iteration {iteration}"
        super().__init__(f"{message} ({location})")


class BootstrapIterationError(ModelFitError):
    """Fit failure inside a single bootstrap iteration; aborts the whole run."""

    def __init__(self, message: str, *, iteration: int, seed: int | None) -> None:
        self.seed = seed
        super().__init__(f"{message}; rerun with seed={seed} to reproduce", stage="bootstrap", iteration=iteration)


class DegenerateStatisticError(BootstabError, ValueError):
    """A statistic is undefined for the given input (e.g. a zero-variance indicator column)."""


__all__ = [
    "BootstabError",
    "BootstrapIterationError",
    "DataContractError",
    "DegenerateStatisticError",
    "ModelFitError",
]
