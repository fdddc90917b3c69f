"""Generic dataset for arbitrary tabular regression data."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path

import pandas as pd

from bootstab.errors import DataContractError

from .base_dataset import BaseDataset


class TabularDataset(BaseDataset):
    """Dataset over any DataFrame with a designated outcome column.

    Example:
        >>> ds = TabularDataset(df, target_col="y", forced_cols=["x1"])
        >>> ds.candidate_columns()
    """

    def __init__(
        self,
        df: pd.DataFrame,
        *,
        target_col: str,
        forced_cols: Sequence[str] = (),
        pretty_by_col: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(df=df)
        if target_col not in df.columns:
            raise DataContractError(f"Outcome field '{target_col}' not found in dataset")
        unknown = [col for col in forced_cols if col not in df.columns]
        if unknown:
            raise DataContractError(f"Forced fields not found in dataset: {unknown}")
        self._target_col = target_col
        self._forced_cols = list(forced_cols)
        self._pretty_by_col = dict(pretty_by_col or {})

    @classmethod
    def from_records(
        cls,
        records: Sequence[Mapping[str, float]],
        *,
        target_col: str,
        forced_cols: Sequence[str] = (),
    ) -> TabularDataset:
        """Build a dataset from row mappings; all rows must share the same fields."""
        if not records:
            raise DataContractError("No records given")
        fields = set(records[0])
        for idx, record in enumerate(records):
            if set(record) != fields:
                raise DataContractError(f"Record {idx} has fields {sorted(record)}, expected {sorted(fields)}")
        return cls(pd.DataFrame.from_records(records), target_col=target_col, forced_cols=forced_cols)

    @classmethod
    def from_csv(
        cls,
        filepath: str | Path,
        *,
        target_col: str,
        forced_cols: Sequence[str] = (),
        sep: str = ",",
    ) -> TabularDataset:
        """Load a delimited file with a header row."""
        filepath = Path(filepath)
        if not filepath.exists():
            raise FileNotFoundError(f"Data file not found at: {filepath}")
        return cls(pd.read_csv(filepath, sep=sep), target_col=target_col, forced_cols=forced_cols)

    @property
    def target_col(self) -> str:
        return self._target_col

    @property
    def forced_cols(self) -> list[str]:
        return list(self._forced_cols)

    def get_pretty_name(self, column_name: str) -> str:
        return self._pretty_by_col.get(column_name) or super().get_pretty_name(column_name)
