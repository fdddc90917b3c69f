"""Assemble per-predictor summary tables and export them."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

import pandas as pd

from .bias import BiasResult
from .ols_helper import FittedModel
from .shrinkage import ShrinkageResult


logger = logging.getLogger(__name__)


def assemble_overview(
    full_model: FittedModel,
    selected_model: FittedModel,
    inclusion_freq: pd.Series,
    bias: BiasResult,
    *,
    shrinkage: ShrinkageResult | None = None,
    decimals: int | None = None,
) -> pd.DataFrame:
    """Join full-model, selected-model and bootstrap statistics per predictor.

    Rows follow the column order of ``inclusion_freq`` (intercept first) and
    are then stably sorted by bootstrap inclusion frequency, descending.

    Args:
        full_model: Fit with all predictors.
        selected_model: Fit selected on the original data.
        inclusion_freq: Bootstrap inclusion frequency (%) per predictor.
        bias: Output of :class:`~bootstab.analysis.bias.BiasEstimator`.
        shrinkage: Optional parameterwise shrinkage; adds ``shrinkage_factor``
            (NaN for predictors without a factor).
        decimals: Round all numeric columns when given.

    Returns:
        DataFrame indexed by predictor with columns ``full_est``, ``full_se``,
        ``boot_inclusion``, ``sel_est``, ``sel_se``, ``rmsd_ratio``,
        ``rel_bias``, ``boot_median`` and the two percentile columns.
    """
    names = list(inclusion_freq.index)
    full_est, full_se = full_model.dense(names)
    sel_est, sel_se = selected_model.dense(names)
    pct_cols = [col for col in bias.table.columns if col.startswith("boot_") and col not in {"boot_mean", "boot_median"}]

    overview = pd.DataFrame(
        {
            "full_est": full_est,
            "full_se": full_se,
            "boot_inclusion": inclusion_freq.to_numpy(dtype=float),
            "sel_est": sel_est,
            "sel_se": sel_se,
        },
        index=pd.Index(names, name="predictor"),
    ).join(bias.table.loc[names, ["rmsd_ratio", "rel_bias", "boot_median", *pct_cols]])

    if shrinkage is not None:
        overview = overview.join(shrinkage.factors.rename("shrinkage_factor"))

    overview = overview.sort_values("boot_inclusion", ascending=False, kind="stable")
    return overview.round(decimals) if decimals is not None else overview


def export_tables(tables: Mapping[str, pd.DataFrame], directory: str | Path) -> list[Path]:
    """Write named tables to ``<directory>/<name>.csv``.

    Returns:
        The written paths.
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for name, table in tables.items():
        path = directory / f"{name}.csv"
        table.to_csv(path)
        written.append(path)
        logger.info("Wrote %s (%d rows)", path, len(table))
    return written


__all__ = ["assemble_overview", "export_tables"]
