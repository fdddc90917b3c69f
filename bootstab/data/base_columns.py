"""Base column definitions and metadata structures."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


@dataclass(frozen=True)
class ColumnMetadata:
    """Metadata for a dataset column.

    Attributes:
        cleaned_name: Standardized column name used in DataFrames.
        dtype: Expected Python/pandas data type as a string.
        pretty_name: Human-readable name for tables and plots.
        unit: Optional measurement unit shown next to the pretty name.
    """

    original_name: str
    """Column name as it appears in the raw file."""
    cleaned_name: str
    dtype: str
    pretty_name: str
    unit: str | None = None


class BaseColumn(StrEnum):
    """Base class for dataset column enums.

    Derived enums define a ``TARGET`` member (the regression outcome) and
    implement :meth:`metadata`. Predictors that must never be eliminated by
    variable selection are listed by :meth:`forced_columns`.
    """

    TARGET: str

    def metadata(self) -> ColumnMetadata:
        """Get metadata for this column.

        Raises:
            NotImplementedError: If not implemented by subclass.
        """
        raise NotImplementedError(f"{self.__class__.__name__} must implement metadata() method")

    @classmethod
    def numeric_columns(cls) -> list[str]:
        """Get all numeric column names (outcome included)."""
        return [str(col) for col in cls if col.metadata().dtype in {"float", "int"}]

    @classmethod
    def identifier_columns(cls) -> list[str]:
        """Get identifier column names (never used as predictors)."""
        return []

    @classmethod
    def forced_columns(cls) -> list[str]:
        """Get predictors that are always retained during selection."""
        return []

    @classmethod
    def feature_columns(cls, *, exclude_target: bool = True) -> list[str]:
        """Get all predictor column names in declaration order."""
        exclude = {str(col) for col in cls.identifier_columns()}
        if exclude_target:
            exclude.add(str(cls.TARGET))
        return [col for col in cls.numeric_columns() if col not in exclude]

    @classmethod
    def candidate_columns(cls) -> list[str]:
        """Get predictors that are subject to elimination."""
        forced = {str(col) for col in cls.forced_columns()}
        return [col for col in cls.feature_columns() if col not in forced]

    @property
    def pretty_name(self) -> str:
        """Get the human-readable name for tables and plots."""
        meta = self.metadata()
        return f"{meta.pretty_name} [{meta.unit}]" if meta.unit else meta.pretty_name
