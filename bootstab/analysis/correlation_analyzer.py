"""Correlation structure of candidate predictors."""

from dataclasses import dataclass
from typing import Self

import numpy as np
import pandas as pd
import statsmodels.api as sm
from statsmodels.stats.outliers_influence import variance_inflation_factor

from bootstab.data.views import DatasetView

from .base_analyser import BaseAnalyser


@dataclass(frozen=True)
class CorrelationResult:
    """Correlation structure of the predictors in a dataset view.

    Attributes:
        matrix: Pearson correlation matrix of predictors (outcome excluded).
        pretty_by_col: Mapping from raw column names to presentation labels.
        feature_pairs: Columns ``feature_a``, ``feature_b``, ``correlation``,
            ``abs_correlation``; sorted by strongest absolute correlation.
        target_correlations: Correlation of each predictor with the outcome,
            ``None`` when the view has no outcome.
        vif: Variance inflation factor per predictor from statsmodels'
            auxiliary regressions.
    """

    matrix: pd.DataFrame
    pretty_by_col: dict[str, str]
    feature_pairs: pd.DataFrame
    target_correlations: pd.Series | None
    vif: pd.Series

    def plot_heatmap(self, **kwargs: object):
        """Plot the correlation heatmap."""
        from bootstab.plotting.correlation_plots import plot_correlation_heatmap  # noqa: PLC0415

        return plot_correlation_heatmap(self, **kwargs)


class CorrelationAnalyzer(BaseAnalyser):
    """Pearson correlations among predictors and with the outcome.

    Strongly correlated predictors compete for selection, which is the main
    source of the instability quantified by the bootstrap analyzers.
    """

    def __init__(self, view: DatasetView):
        self._view = view
        self._corr_all: pd.DataFrame | None = None

    def _correlations(self) -> pd.DataFrame:
        if self._corr_all is None:
            self._corr_all = self._view.df.corr(numeric_only=True)
        return self._corr_all

    def get_correlation_matrix(self) -> pd.DataFrame:
        """Predictor-by-predictor correlation matrix (outcome removed)."""
        corr = self._correlations()
        target = self._view.target_col
        if target and target in corr.index:
            corr = corr.drop(index=target, columns=target)
        return corr

    def get_top_correlated_pairs(self, n: int | None = 20) -> pd.DataFrame:
        """Return the strongest absolute correlations between predictor pairs.

        The upper triangle (diagonal excluded) is selected with :func:`np.triu`
        and melted into long format before sorting.
        """
        corr_matrix = self.get_correlation_matrix()
        mask = np.triu(np.ones(corr_matrix.shape, dtype=bool), k=1)
        pairs = (
            corr_matrix.where(mask)
            .melt(ignore_index=False, var_name="feature_b", value_name="correlation")
            .dropna()
            .reset_index(names="feature_a")
            .assign(abs_correlation=lambda d: d.correlation.abs())
            .sort_values("abs_correlation", ascending=False, kind="stable")
            .reset_index(drop=True)
        )
        return pairs if n is None else pairs.head(n)

    def get_target_correlations(self) -> pd.Series:
        """Correlation of each predictor with the outcome, sorted descending."""
        target = self._view.target_col
        corr = self._correlations()
        if not target or target not in corr.index:
            raise ValueError("Dataset view has no target column configured.")
        return corr.loc[target].drop(target).sort_values(ascending=False).rename("correlation")

    def get_vif(self) -> pd.Series:
        r"""Variance inflation factors, :math:`VIF_j = 1/(1 - R_j^2)`.

        :math:`R_j^2` comes from regressing predictor :math:`j` on the other
        predictors plus an intercept (complete rows only). A single predictor
        has VIF 1.0.
        """
        features = self._view.features.dropna()
        if features.shape[1] == 0:
            return pd.Series(dtype=float, name="vif")
        if features.shape[1] == 1:
            return pd.Series({features.columns[0]: 1.0}, name="vif")
        x = sm.add_constant(features.astype(float), has_constant="add")
        return pd.Series(
            {col: float(variance_inflation_factor(x.values, idx)) for idx, col in enumerate(x.columns) if idx > 0},
            name="vif",
        )

    def fit(self) -> Self:
        self._correlations()
        return self

    def result(self, *, top_n_pairs: int | None = 20) -> CorrelationResult:
        if self._corr_all is None:
            raise ValueError("Call fit() first")
        target = self._view.target_col
        return CorrelationResult(
            matrix=self.get_correlation_matrix(),
            pretty_by_col=dict(self._view.pretty_by_col),
            feature_pairs=self.get_top_correlated_pairs(n=top_n_pairs),
            target_correlations=self.get_target_correlations() if target and target in self._view.df else None,
            vif=self.get_vif(),
        )
