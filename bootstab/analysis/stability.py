"""End-to-end bootstrap stability analysis of backward elimination.

Example:
    >>> from bootstab.data import simulate_regression_data
    >>> from bootstab.utils import StabilityConfig
    >>> ds = simulate_regression_data(n_obs=50, n_forced=3, n_candidates=5, seed=42)
    >>> res = ds.make_stability_analyzer(config=StabilityConfig(n_bootstrap=200, seed=42)).fit().result()
    >>> res.overview
    >>> res.pairwise
    >>> res.model_frequencies
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Self

import pandas as pd

from bootstab.data.base_dataset import validate_fields
from bootstab.data.views import DatasetView
from bootstab.utils.config import DEFAULT_CONFIG, StabilityConfig

from .base_analyser import BaseAnalyser
from .bias import BiasEstimator, BiasResult
from .bootstrap import BootstrapDriver, BootstrapEnsemble
from .inclusion import InclusionAnalyzer, InclusionResult
from .model_selection import BackwardEliminationFitter, ModelFitter
from .ols_helper import FittedModel, compare_models, fit_ols
from .overview import assemble_overview, export_tables
from .shrinkage import ShrinkageResult, shrink


if TYPE_CHECKING:
    from pathlib import Path

    from matplotlib.figure import Figure

    from bootstab.data.base_dataset import BaseDataset


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StabilityResult:
    """All outputs of a stability analysis.

    Attributes:
        overview: One row per predictor (intercept included), sorted by
            bootstrap inclusion frequency.
        inclusion: Inclusion frequencies, pairwise table and model frequencies.
        bias: RMSD ratio, relative conditional bias and bootstrap percentiles.
        ensemble: Raw bootstrap estimates and standard errors.
        full_model: Fit with all forced and candidate predictors.
        selected_model: Backward elimination result on the original data.
        shrinkage_global: Global shrinkage of the selected model, ``None`` if
            the selected model has no predictors.
        shrinkage_parameterwise: Parameterwise shrinkage of the selected model.
        epv: Observations per candidate-or-forced predictor.
        config: Configuration the run used.
    """

    overview: pd.DataFrame
    inclusion: InclusionResult
    bias: BiasResult
    ensemble: BootstrapEnsemble
    full_model: FittedModel
    selected_model: FittedModel
    shrinkage_global: ShrinkageResult | None
    shrinkage_parameterwise: ShrinkageResult | None
    epv: float
    config: StabilityConfig

    @property
    def pairwise(self) -> pd.DataFrame:
        return self.inclusion.pairwise

    @property
    def model_frequencies(self) -> pd.DataFrame:
        return self.inclusion.model_frequencies

    @property
    def selected_model_frequency(self) -> float | None:
        return self.inclusion.selected_model_frequency

    def model_comparison(self) -> pd.DataFrame:
        """Information criteria of the full and the selected model."""
        return compare_models({"full": self.full_model, "selected": self.selected_model})

    def tables(self) -> dict[str, pd.DataFrame]:
        """Named result tables for reporting and export."""
        tables = {
            "overview": self.overview,
            "pairwise_inclusion": self.inclusion.pairwise,
            "pairs": self.inclusion.pairs,
            "model_frequencies": self.inclusion.model_frequencies,
            "model_comparison": self.model_comparison(),
        }
        if self.shrinkage_global is not None:
            tables["shrinkage_global"] = self.shrinkage_global.table()
        if self.shrinkage_parameterwise is not None:
            tables["shrinkage_parameterwise"] = self.shrinkage_parameterwise.table()
        return tables

    def export(self, directory: str | Path) -> list[Path]:
        """Write all tables as CSV files into ``directory``."""
        return export_tables(self.tables(), directory)

    # ------------------------------------------------------------------ plotting shortcuts
    def plot_inclusion(self, **kwargs: object) -> Figure:
        """Bar chart of bootstrap inclusion frequencies."""
        from bootstab.plotting.stability_plots import plot_inclusion_frequencies  # noqa: PLC0415

        return plot_inclusion_frequencies(self, **kwargs)

    def plot_pairwise(self, **kwargs: object) -> Figure:
        """Heatmap of pairwise joint inclusion frequencies."""
        from bootstab.plotting.stability_plots import plot_pairwise_inclusion  # noqa: PLC0415

        return plot_pairwise_inclusion(self, **kwargs)

    def plot_distributions(self, predictors: Sequence[str] | None = None, **kwargs: object) -> Figure:
        """Histograms of bootstrap estimates with the full-model estimate marked."""
        from bootstab.plotting.stability_plots import plot_bootstrap_distributions  # noqa: PLC0415

        return plot_bootstrap_distributions(self, predictors=predictors, **kwargs)


class StabilityAnalyzer(BaseAnalyser):
    """Quantify the instability of backward elimination by bootstrap resampling.

    Stages, in order: full-model fit, selection on the original data,
    ``B`` bootstrap selections, inclusion statistics, bias statistics,
    shrinkage of the selected model, overview table. A failing fit in any
    stage aborts the analysis with :class:`~bootstab.errors.ModelFitError`
    naming the stage (and bootstrap iteration).
    Data-contract violations raise :class:`~bootstab.errors.DataContractError`
    at construction, before anything is fitted.
    """

    def __init__(
        self,
        view: DatasetView,
        *,
        forced: Sequence[str],
        candidates: Sequence[str],
        config: StabilityConfig | None = None,
        fitter: ModelFitter | None = None,
    ) -> None:
        if not view.target_col:
            raise ValueError("Dataset view has no target column configured.")
        overlap = set(forced) & set(candidates)
        if overlap:
            raise ValueError(f"Predictors cannot be both forced and candidate: {sorted(overlap)}")
        validate_fields(view.df, view.target_col, [*forced, *candidates])

        self._view = view
        self._outcome: str = view.target_col
        self._forced = list(forced)
        self._candidates = list(candidates)
        self._config = config or DEFAULT_CONFIG
        self._fitter: ModelFitter = fitter or BackwardEliminationFitter(
            criterion=self._config.criterion,
            threshold=self._config.threshold,
        )
        self._result: StabilityResult | None = None

    def fit(self) -> Self:
        cfg = self._config
        df = self._view.df
        outcome = self._outcome

        full_model = fit_ols(df, target_col=outcome, terms=[*self._forced, *self._candidates], stage="full-model")
        logger.info("Full model: %d terms, AIC=%.3f", len(full_model.terms), full_model.aic)
        selected_model = self._fitter.fit(df, outcome, self._candidates, self._forced, stage="selected-model")
        logger.info("Selected model: %s", ", ".join(selected_model.terms) or "(intercept only)")

        ensemble = BootstrapDriver(
            df,
            outcome=outcome,
            forced=self._forced,
            candidates=self._candidates,
            n_bootstrap=cfg.n_bootstrap,
            seed=cfg.seed,
            fitter=self._fitter,
            n_jobs=cfg.n_jobs,
        ).run()

        inclusion = InclusionAnalyzer(
            ensemble,
            selected_model=selected_model,
            alpha=cfg.alpha,
            max_models=cfg.max_models,
            cum_percent_cutoff=cfg.cum_percent_cutoff,
        ).fit().result()
        bias = BiasEstimator(ensemble, full_model, inclusion.frequencies, percentiles=cfg.percentiles).fit().result()

        shrink_global = shrink_param = None
        if selected_model.terms:
            shrink_global = shrink(selected_model, df, outcome, mode="global")
            shrink_param = shrink(selected_model, df, outcome, mode="parameterwise")

        overview = assemble_overview(full_model, selected_model, inclusion.frequencies, bias, shrinkage=shrink_param)

        self._result = StabilityResult(
            overview=overview,
            inclusion=inclusion,
            bias=bias,
            ensemble=ensemble,
            full_model=full_model,
            selected_model=selected_model,
            shrinkage_global=shrink_global,
            shrinkage_parameterwise=shrink_param,
            epv=len(df) / max(len(self._forced) + len(self._candidates), 1),
            config=cfg,
        )
        return self

    def result(self) -> StabilityResult:
        if self._result is None:
            raise ValueError("Call fit() first")
        return self._result


def run_stability_analysis(
    data: pd.DataFrame | BaseDataset,
    *,
    outcome: str | None = None,
    forced: Sequence[str] | None = None,
    candidates: Sequence[str] | None = None,
    config: StabilityConfig | None = None,
    fitter: ModelFitter | None = None,
    **overrides: object,
) -> StabilityResult:
    """Validate inputs and run a complete stability analysis.

    Args:
        data: DataFrame or dataset object.
        outcome: Response column (required for DataFrames).
        forced: Predictors always retained.
        candidates: Predictors subject to elimination (defaults to all other
            numeric columns).
        config: Base configuration.
        fitter: Model-selection strategy.
        **overrides: Fields overriding ``config`` (e.g. ``n_bootstrap=200``).
    """
    from bootstab.data.base_dataset import BaseDataset  # noqa: PLC0415
    from bootstab.data.tabular_dataset import TabularDataset  # noqa: PLC0415

    config = (config or DEFAULT_CONFIG).replace(**overrides) if overrides else (config or DEFAULT_CONFIG)
    if isinstance(data, BaseDataset):
        dataset = data
    else:
        if outcome is None:
            raise ValueError("outcome is required when passing a DataFrame.")
        dataset = TabularDataset(data, target_col=outcome, forced_cols=forced or ())
    if outcome is not None and outcome != dataset.target_col:
        raise ValueError(f"outcome '{outcome}' does not match dataset target '{dataset.target_col}'")

    return dataset.make_stability_analyzer(forced, candidates, config=config, fitter=fitter).fit().result()


__all__ = ["StabilityAnalyzer", "StabilityResult", "run_stability_analysis"]
