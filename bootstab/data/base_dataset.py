"""Base dataset class for all dataset implementations."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

import pandas as pd
from pandas.api.types import is_bool_dtype, is_numeric_dtype
from sklearn.preprocessing import StandardScaler

from bootstab.errors import DataContractError

from .views import DatasetView


if TYPE_CHECKING:
    from bootstab.analysis.correlation_analyzer import CorrelationAnalyzer
    from bootstab.analysis.model_selection import ModelFitter
    from bootstab.analysis.stability import StabilityAnalyzer
    from bootstab.utils.config import StabilityConfig

    from .base_columns import BaseColumn


logger = logging.getLogger(__name__)


def validate_fields(df: pd.DataFrame, outcome: str, predictors: Sequence[str]) -> None:
    """Check that every named field exists, is numeric and has no missing values.

    Raises:
        DataContractError: On the first violated requirement.
    """
    missing = [col for col in [outcome, *predictors] if col not in df.columns]
    if missing:
        raise DataContractError(f"Fields not found in dataset: {missing}")
    for col in [outcome, *predictors]:
        series = df[col]
        if not is_numeric_dtype(series) or is_bool_dtype(series):
            raise DataContractError(f"Field '{col}' must be numeric, got dtype {series.dtype}")
        n_missing = int(series.isna().sum())
        if n_missing:
            raise DataContractError(f"Field '{col}' has {n_missing} missing value(s)")
    if len(df) == 0:
        raise DataContractError("Dataset has no rows")


class BaseDataset(ABC):
    """Abstract base class for regression datasets used by the analyzers.

    A dataset is an ordered collection of rows sharing the same named numeric
    fields, one of which is the regression outcome. Subclasses either bind a
    column enum via ``Col`` or provide ``target_col``/``forced_cols`` directly.
    """

    Col: type[BaseColumn] | None = None

    def __init__(self, df: pd.DataFrame | None = None) -> None:
        """Initialize the base dataset.

        Args:
            df: Pre-loaded and cleaned DataFrame (optional)
        """
        self._df: pd.DataFrame | None = df
        self._scaler: StandardScaler | None = None
        self._df_standardized: pd.DataFrame | None = None

    @classmethod
    @abstractmethod
    def from_csv(cls, filepath: str | Path, **kwargs: object) -> BaseDataset:
        """Load dataset from a delimited text file.

        Args:
            filepath: Path to the file
            **kwargs: Additional loading parameters

        Returns:
            Dataset instance with loaded data
        """
        ...

    @property
    def df(self) -> pd.DataFrame:
        """Get the raw/cleaned DataFrame.

        Raises:
            ValueError: If dataset not loaded
        """
        if self._df is None:
            raise ValueError("Dataset not loaded. Use from_csv() to load data.")
        return self._df

    @property
    def target_col(self) -> str | None:
        """Name of the regression outcome."""
        return str(self.Col.TARGET) if self.Col is not None else None

    @property
    def forced_cols(self) -> list[str]:
        """Predictors that variable selection must always retain."""
        return [str(col) for col in self.Col.forced_columns()] if self.Col is not None else []

    @property
    def numeric_cols(self) -> pd.Index:
        """Get numeric column names (booleans excluded)."""
        return pd.Index([c for c in self.df.columns if is_numeric_dtype(self.df[c]) and not is_bool_dtype(self.df[c])])

    def feature_columns(self, extra_exclude: Iterable[str] | None = None) -> list[str]:
        """Return numeric predictor columns, excluding identifiers and the outcome."""
        exclude = {str(col) for col in self.Col.identifier_columns()} if self.Col is not None else set()
        if extra_exclude:
            exclude.update(extra_exclude)
        if self.target_col:
            exclude.add(self.target_col)
        return [col for col in self.numeric_cols if col not in exclude]

    def candidate_columns(self) -> list[str]:
        """Predictors subject to elimination (features minus forced)."""
        forced = set(self.forced_cols)
        return [col for col in self.feature_columns() if col not in forced]

    def validate(self, outcome: str, predictors: Sequence[str]) -> None:
        """Check the data contract before any fitting begins.

        Raises:
            DataContractError: On the first violated requirement.
        """
        validate_fields(self.df, outcome, predictors)

    @property
    def df_standardized(self) -> pd.DataFrame:
        """Get the standardized DataFrame.

        X <- (X - E[X]) / sd(X)
        """
        if self._df_standardized is None:
            self._df_standardized = self.standardize()
        return self._df_standardized

    def standardize(self, df: pd.DataFrame | None = None) -> pd.DataFrame:
        """Standardize numeric columns with scikit-learn's ``StandardScaler``.

        Returns:
            DataFrame with numeric columns scaled to mean=0, std=1
        """
        if df is None:
            df = self.df

        self._scaler = StandardScaler()
        scaled_data = self._scaler.fit_transform(df[self.numeric_cols])

        return pd.DataFrame(
            scaled_data,
            columns=self.numeric_cols,
            index=df.index,
        )

    def get_pretty_name(self, column_name: str) -> str:
        """Convert column name to a presentation label."""
        if self.Col is None:
            return column_name.replace("_", " ").title()
        try:
            col_enum = self.Col(column_name)
        except ValueError:
            return column_name.replace("_", " ").title()
        else:
            return str(col_enum.pretty_name)

    def view(
        self,
        columns: Iterable[str] | None = None,
        standardized: bool = False,
        target_col: str | None = None,
    ) -> DatasetView:
        """Build an immutable dataset view for analyzers and plotting layers.

        Args:
            columns: Columns to include in the view (defaults to outcome + features)
            standardized: Use standardized dataframe
            target_col: Outcome column (defaults to the dataset's target)

        Returns:
            DatasetView containing selected data and metadata
        """
        frame = self.df_standardized if standardized else self.df
        target_col = target_col or self.target_col

        if columns is None:
            selected_cols = [*([target_col] if target_col else []), *self.feature_columns()]
        else:
            selected_cols = list(columns)
            if target_col and target_col not in selected_cols:
                selected_cols.insert(0, target_col)

        missing = [col for col in selected_cols if col not in frame.columns]
        if missing:
            raise DataContractError(f"Fields not found in dataset: {missing}")

        return DatasetView(
            df=frame.loc[:, selected_cols].reset_index(drop=True),
            pretty_by_col={col: self.get_pretty_name(col) for col in selected_cols},
            numeric_cols=[col for col in selected_cols if col in self.numeric_cols],
            target_col=target_col,
            is_standardized=standardized,
        )

    def events_per_variable(self, predictors: Sequence[str] | None = None) -> float:
        """Rows per candidate predictor, a rough sample-size adequacy measure.

        Values well below 10-25 indicate that selected models are likely to be
        unstable.
        """
        predictors = list(predictors) if predictors is not None else self.feature_columns()
        if not predictors:
            raise ValueError("At least one predictor is required to compute EPV.")
        return len(self.df) / len(predictors)

    def make_correlation_analyzer(
        self,
        columns: Iterable[str] | None = None,
        standardized: bool = False,
    ) -> CorrelationAnalyzer:
        """Instantiate a correlation analyzer configured for this dataset."""
        from bootstab.analysis.correlation_analyzer import CorrelationAnalyzer

        return CorrelationAnalyzer(self.view(columns=columns, standardized=standardized))

    def make_stability_analyzer(
        self,
        forced: Sequence[str] | None = None,
        candidates: Sequence[str] | None = None,
        *,
        config: StabilityConfig | None = None,
        fitter: ModelFitter | None = None,
        standardized: bool = False,
    ) -> StabilityAnalyzer:
        """Instantiate a bootstrap stability analyzer for this dataset.

        Args:
            forced: Predictors never eliminated (defaults to the dataset's forced columns).
            candidates: Predictors subject to elimination (defaults to all other features).
            config: Run configuration (defaults to :data:`DEFAULT_CONFIG`).
            fitter: Model-selection strategy (defaults to AIC backward elimination).
            standardized: Fit on standardized columns.

        Example:
            >>> from bootstab.data import simulate_regression_data
            >>> ds = simulate_regression_data(n_obs=50, n_forced=3, n_candidates=5, seed=42)
            >>> res = ds.make_stability_analyzer(config=StabilityConfig(n_bootstrap=200, seed=42)).fit().result()
            >>> res.overview.head()
        """
        from bootstab.analysis.stability import StabilityAnalyzer

        if self.target_col is None:
            raise ValueError("Dataset has no target column configured.")
        forced = list(forced) if forced is not None else list(self.forced_cols)
        if candidates is None:
            candidates = [col for col in self.feature_columns() if col not in set(forced)]
        candidates = list(candidates)
        self.validate(self.target_col, [*forced, *candidates])
        logger.debug("Stability analyzer for %s: forced=%s candidates=%s", self.target_col, forced, candidates)

        return StabilityAnalyzer(
            self.view(columns=[*forced, *candidates], standardized=standardized),
            forced=forced,
            candidates=candidates,
            config=config,
            fitter=fitter,
        )
