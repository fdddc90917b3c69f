"""Bootstrap resampling and repeated model selection.

The driver refits the selection procedure on ``B`` resamples of the data
drawn with replacement and records, for every resample, the estimate and
standard error of each predictor in two dense ``B x P`` matrices. Columns are
``Intercept``, the forced predictors and the candidate predictors in that
order; a predictor eliminated in a resample is stored as exactly 0.

Each iteration ``i`` draws its rows from its own random stream, spawned from
the root seed by :class:`numpy.random.SeedSequence`. Results therefore depend
only on ``(seed, i)`` and are identical for sequential and threaded runs.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Self

import numpy as np
import pandas as pd

from bootstab.data.base_dataset import validate_fields
from bootstab.errors import BootstrapIterationError
from bootstab.utils.config import DEFAULT_SEED

from .base_analyser import BaseAnalyser
from .model_selection import BackwardEliminationFitter, ModelFitter
from .ols_helper import INTERCEPT


logger = logging.getLogger(__name__)

_QUALITY_COLS = ("adj_r2", "sigma", "aic", "n_terms")


def iteration_seeds(seed: int | None, n_iterations: int) -> tuple[int, list[np.random.SeedSequence]]:
    """Spawn one independent seed sequence per bootstrap iteration.

    Returns:
        The root entropy (equal to ``seed`` when given, freshly drawn otherwise)
        and the child sequences, ordered by iteration index.
    """
    root = np.random.SeedSequence(seed)
    return int(root.entropy), root.spawn(n_iterations)


def bootstrap_indices(n_obs: int, seed_sequence: np.random.SeedSequence | int) -> np.ndarray:
    """Draw ``n_obs`` row indices uniformly with replacement."""
    if n_obs < 1:
        raise ValueError("Cannot resample an empty dataset.")
    rng = np.random.default_rng(seed_sequence)
    return rng.integers(0, n_obs, size=n_obs)


@dataclass(frozen=True)
class BootstrapEnsemble:
    """Per-iteration estimates and standard errors of a bootstrap run.

    The underlying arrays are read-only; the DataFrame accessors return copies.
    """

    estimate_values: np.ndarray = field(repr=False)
    std_error_values: np.ndarray = field(repr=False)
    names: tuple[str, ...]
    """Column order: ``Intercept``, forced predictors, candidate predictors."""
    forced: tuple[str, ...]
    candidates: tuple[str, ...]
    seed: int
    fit_quality: pd.DataFrame = field(repr=False)
    """Per-iteration adjusted R², residual scale, AIC and number of selected terms."""

    def __post_init__(self) -> None:
        expected = (self.estimate_values.shape[0], len(self.names))
        if self.estimate_values.shape != expected or self.std_error_values.shape != expected:
            raise ValueError(f"Ensemble matrices must have shape {expected}")
        self.estimate_values.setflags(write=False)
        self.std_error_values.setflags(write=False)

    @property
    def n_iterations(self) -> int:
        return int(self.estimate_values.shape[0])

    @property
    def predictors(self) -> list[str]:
        """Predictor names without the intercept."""
        return [name for name in self.names if name != INTERCEPT]

    @property
    def estimates(self) -> pd.DataFrame:
        """``B x P`` bootstrap estimates (0 where a predictor was eliminated)."""
        return pd.DataFrame(self.estimate_values, columns=list(self.names), copy=True).rename_axis("iteration")

    @property
    def std_errors(self) -> pd.DataFrame:
        """``B x P`` bootstrap standard errors (0 where a predictor was eliminated)."""
        return pd.DataFrame(self.std_error_values, columns=list(self.names), copy=True).rename_axis("iteration")

    @property
    def inclusion(self) -> pd.DataFrame:
        """Boolean inclusion indicators, ``estimates != 0``."""
        return self.estimates.ne(0)


class BootstrapDriver(BaseAnalyser):
    """Run model selection on ``B`` bootstrap resamples.

    Example:
        >>> driver = BootstrapDriver(df, outcome="y", forced=["f1"], candidates=["x1", "x2"], n_bootstrap=200, seed=42)
        >>> ensemble = driver.run()
        >>> ensemble.inclusion.mean() * 100
    """

    def __init__(
        self,
        data: pd.DataFrame,
        *,
        outcome: str,
        forced: Sequence[str],
        candidates: Sequence[str],
        n_bootstrap: int = 1000,
        seed: int | None = DEFAULT_SEED,
        fitter: ModelFitter | None = None,
        n_jobs: int = 1,
    ) -> None:
        """Initialize the driver.

        Args:
            data: Original dataset (read, never modified).
            outcome: Response column.
            forced: Predictors always retained.
            candidates: Predictors subject to elimination.
            n_bootstrap: Number of resamples ``B``.
            seed: Root seed; ``None`` draws fresh entropy (recorded in the result).
            fitter: Selection strategy, AIC backward elimination by default.
            n_jobs: Worker threads; 1 runs a plain sequential loop.

        Raises:
            DataContractError: If a field is missing, non-numeric or incomplete.
        """
        overlap = set(forced) & set(candidates)
        if overlap:
            raise ValueError(f"Predictors cannot be both forced and candidate: {sorted(overlap)}")
        validate_fields(data, outcome, [*forced, *candidates])
        if n_bootstrap < 1:
            raise ValueError(f"n_bootstrap must be >= 1, got {n_bootstrap}")
        if n_jobs < 1:
            raise ValueError(f"n_jobs must be >= 1, got {n_jobs}")

        self._data = data.reset_index(drop=True)
        self._outcome = outcome
        self._forced = list(forced)
        self._candidates = list(candidates)
        self._n_bootstrap = n_bootstrap
        self._seed = seed
        self._fitter: ModelFitter = fitter or BackwardEliminationFitter()
        self._n_jobs = n_jobs
        self._ensemble: BootstrapEnsemble | None = None

    @property
    def names(self) -> list[str]:
        return [INTERCEPT, *self._forced, *self._candidates]

    def _run_iteration(
        self,
        iteration: int,
        seed_sequence: np.random.SeedSequence,
        root_seed: int,
    ) -> tuple[np.ndarray, np.ndarray, tuple[float, float, float, int]]:
        rows = bootstrap_indices(len(self._data), seed_sequence)
        sample = self._data.iloc[rows].reset_index(drop=True)
        try:
            model = self._fitter.fit(sample, self._outcome, self._candidates, self._forced, stage="bootstrap")
            est, se = model.dense(self.names)
        except Exception as exc:
            raise BootstrapIterationError(str(exc), iteration=iteration, seed=root_seed) from exc
        logger.debug("Bootstrap iteration %d selected %d terms", iteration, len(model.terms))
        return est, se, (model.adj_r2, model.sigma, model.aic, len(model.terms))

    def fit(self) -> Self:
        """Run all bootstrap iterations and populate the ensemble matrices."""
        n_iter, n_cols = self._n_bootstrap, len(self.names)
        root_seed, seeds = iteration_seeds(self._seed, n_iter)

        estimates = np.zeros((n_iter, n_cols), dtype=float)
        std_errors = np.zeros((n_iter, n_cols), dtype=float)
        quality = np.zeros((n_iter, len(_QUALITY_COLS)), dtype=float)

        logger.info(
            "Starting %d bootstrap iterations (seed=%d, %d predictors, n_jobs=%d)",
            n_iter,
            root_seed,
            n_cols - 1,
            self._n_jobs,
        )
        if self._n_jobs == 1:
            for i, seed_sequence in enumerate(seeds):
                estimates[i], std_errors[i], quality[i] = self._run_iteration(i, seed_sequence, root_seed)
        else:
            with ThreadPoolExecutor(max_workers=self._n_jobs) as executor:
                futures = {
                    executor.submit(self._run_iteration, i, seed_sequence, root_seed): i
                    for i, seed_sequence in enumerate(seeds)
                }
                for future in as_completed(futures):
                    i = futures[future]
                    try:
                        estimates[i], std_errors[i], quality[i] = future.result()
                    except BootstrapIterationError:
                        executor.shutdown(wait=False, cancel_futures=True)
                        raise
        logger.info("Finished %d bootstrap iterations", n_iter)

        fit_quality = pd.DataFrame(quality, columns=list(_QUALITY_COLS)).astype({"n_terms": int})
        self._ensemble = BootstrapEnsemble(
            estimate_values=estimates,
            std_error_values=std_errors,
            names=tuple(self.names),
            forced=tuple(self._forced),
            candidates=tuple(self._candidates),
            seed=root_seed,
            fit_quality=fit_quality.rename_axis("iteration"),
        )
        return self

    def result(self) -> BootstrapEnsemble:
        if self._ensemble is None:
            raise ValueError("Call fit() first")
        return self._ensemble

    def run(self) -> BootstrapEnsemble:
        """Shortcut for ``fit().result()``."""
        return self.fit().result()


__all__ = ["BootstrapDriver", "BootstrapEnsemble", "bootstrap_indices", "iteration_seeds"]
