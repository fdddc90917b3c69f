"""Task-specific views over dataset content."""

from collections.abc import Mapping
from dataclasses import dataclass

import pandas as pd


@dataclass(frozen=True)
class DatasetView:
    """Immutable snapshot of regression data and related metadata.

    Attributes:
        df: Dataframe slice containing outcome and predictor columns.
        pretty_by_col: Mapping from column names to display-friendly labels.
        numeric_cols: Ordered list of numeric column names present in ``df``.
        target_col: Name of the regression outcome.
        is_standardized: Indicates if numeric columns were standardized (zero mean, unit variance).
    """

    df: pd.DataFrame
    """Dataframe slice containing outcome and predictor columns."""
    pretty_by_col: Mapping[str, str]
    """Mapping from column names to display-friendly labels."""
    numeric_cols: list[str]
    target_col: str | None = None
    is_standardized: bool | None = None

    @property
    def features(self) -> pd.DataFrame:
        """Return view over numeric predictor columns (outcome excluded)."""
        cols = [c for c in (self.numeric_cols or self.df.columns.tolist()) if c != self.target_col]
        return self.df.loc[:, cols]

    @property
    def n_obs(self) -> int:
        """Number of rows in the view."""
        return len(self.df)
