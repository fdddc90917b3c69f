"""Dataset loader for the body fat case study."""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from bootstab.errors import DataContractError

from .base_dataset import BaseDataset
from .bodyfat_columns import BodyfatColumn as Col


class BodyfatDataset(BaseDataset):
    """Body fat data with thirteen anthropometric candidate predictors."""

    Col = Col

    @classmethod
    def from_csv(cls, filepath: str | Path, *, sep: str = ";") -> BodyfatDataset:
        """Load the semicolon-separated body fat table.

        Args:
            filepath: Path to the data file.
            sep: Field delimiter.
        """
        filepath = Path(filepath)
        if not filepath.exists():
            raise FileNotFoundError(f"Data file not found at: {filepath}")

        raw = pd.read_csv(filepath, sep=sep).rename(columns=str.lower)
        expected = [str(Col.TARGET), *Col.feature_columns()]
        missing = [col for col in expected if col not in raw.columns]
        if missing:
            raise DataContractError(f"Body fat file lacks columns: {missing}")

        df = raw.loc[:, [c for c in [str(col) for col in Col] if c in raw.columns]]
        return cls(df=df.assign(**{col: pd.to_numeric(df[col], errors="raise") for col in expected}))
