"""Backward elimination for OLS regression with forced-in predictors."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Literal, Protocol, runtime_checkable

import pandas as pd

from .ols_helper import FittedModel, fit_ols


@dataclass(frozen=True)
class SelectionStep:
    """Single step in a backward elimination path.

    Stores the fitted model for a particular term set together with the term
    removed to reach it (``None`` for the starting model).
    """

    step: int
    terms: list[str]
    model: FittedModel
    dropped: str | None = None


@dataclass(frozen=True)
class SelectionPathResult:
    """Results from a backward elimination path.

    Each step removes the single term whose deletion improves the criterion
    most. Because selection is data-adaptive, in-sample criteria of the final
    model are optimistic and do not reflect selection uncertainty; the
    bootstrap analyzers quantify that uncertainty.
    """

    steps: list[SelectionStep]
    criterion: str

    @property
    def final(self) -> SelectionStep:
        """Last accepted step (the selected model)."""
        return self.steps[-1]

    def summary_table(self) -> pd.DataFrame:
        """Return a tidy summary table of the path."""
        rows: list[dict[str, float | int | str | None]] = []
        for step in self.steps:
            rows.append(
                {
                    "step": step.step,
                    "dropped": step.dropped,
                    "n_terms": len(step.terms),
                    "aic": step.model.aic,
                    "bic": step.model.bic,
                    "adj_r2": step.model.adj_r2,
                    "sigma": step.model.sigma,
                },
            )
        return pd.DataFrame(rows).set_index("step")


def selection_path(
    data: pd.DataFrame,
    *,
    target_col: str,
    forced: Sequence[str] | None,
    candidates: Sequence[str],
    criterion: Literal["aic", "bic"] = "aic",
    threshold: float = 0.0,
    stage: str = "selection",
) -> SelectionPathResult:
    """Run backward elimination from the full model and return the path.

    Args:
        data: DataFrame containing the outcome and all predictors.
        target_col: Name of the response variable.
        forced: Terms that are always included (lower bound of the search).
        candidates: Terms that may be removed.
        criterion: "aic" or "bic"; lower is better.
        threshold: Minimum improvement required to accept a removal.
        stage: Pipeline stage reported when a fit fails.

    Returns:
        SelectionPathResult containing all accepted steps.

    Notes:
        Ties between equally good removals are broken by candidate order.
        The search is greedy and does not guarantee a global optimum.
    """
    criterion = criterion.lower()
    if criterion not in {"aic", "bic"}:
        raise ValueError("criterion must be one of: aic, bic")

    forced = list(forced or [])
    forced_set = set(forced)
    candidates = [term for term in candidates if term not in forced_set]

    def build_step(terms: list[str], dropped: str | None) -> SelectionStep:
        model = fit_ols(data, target_col=target_col, terms=terms, stage=stage)
        return SelectionStep(step=-1, terms=terms, model=model, dropped=dropped)

    current_terms = [*forced, *candidates]
    steps = [replace(build_step(current_terms, None), step=0)]

    while True:
        removable = [term for term in current_terms if term not in forced_set]
        if not removable:
            break
        trials = [build_step([t for t in current_terms if t != term], term) for term in removable]
        best_trial = min(trials, key=lambda s: s.model.criterion(criterion))

        if best_trial.model.criterion(criterion) < steps[-1].model.criterion(criterion) - threshold:
            current_terms = best_trial.terms
            steps.append(replace(best_trial, step=len(steps)))
        else:
            break

    return SelectionPathResult(steps=steps, criterion=criterion)


@runtime_checkable
class ModelFitter(Protocol):
    """Model-selection strategy used by the bootstrap driver.

    Implementations must return a :class:`FittedModel` that always contains
    every forced term. Predictors dropped from the final model are simply
    absent from ``params``; :meth:`FittedModel.dense` zero-fills them.
    """

    def fit(
        self,
        data: pd.DataFrame,
        outcome: str,
        candidates: Sequence[str],
        forced: Sequence[str],
        *,
        stage: str = "fit",
    ) -> FittedModel: ...


@dataclass(frozen=True)
class BackwardEliminationFitter:
    """Backward elimination by AIC (or BIC) with a forced-in lower bound."""

    criterion: Literal["aic", "bic"] = "aic"
    threshold: float = 0.0

    def path(
        self,
        data: pd.DataFrame,
        outcome: str,
        candidates: Sequence[str],
        forced: Sequence[str],
        *,
        stage: str = "fit",
    ) -> SelectionPathResult:
        """Return the full elimination path instead of only the final model."""
        return selection_path(
            data,
            target_col=outcome,
            forced=forced,
            candidates=candidates,
            criterion=self.criterion,
            threshold=self.threshold,
            stage=stage,
        )

    def fit(
        self,
        data: pd.DataFrame,
        outcome: str,
        candidates: Sequence[str],
        forced: Sequence[str],
        *,
        stage: str = "fit",
    ) -> FittedModel:
        return self.path(data, outcome, candidates, forced, stage=stage).final.model


@dataclass(frozen=True)
class FullModelFitter:
    """Fits forced and candidate terms without any selection."""

    def fit(
        self,
        data: pd.DataFrame,
        outcome: str,
        candidates: Sequence[str],
        forced: Sequence[str],
        *,
        stage: str = "fit",
    ) -> FittedModel:
        return fit_ols(data, target_col=outcome, terms=[*forced, *candidates], stage=stage)


__all__ = [
    "BackwardEliminationFitter",
    "FullModelFitter",
    "ModelFitter",
    "SelectionPathResult",
    "SelectionStep",
    "selection_path",
]
