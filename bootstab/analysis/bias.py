r"""Bias and uncertainty of selected estimates relative to the full model.

For predictor :math:`j` with full-model estimate :math:`\hat\beta_j`, standard
error :math:`se_j`, bootstrap estimates :math:`\hat\beta_j^{(b)}` (0 if the
predictor was eliminated in resample :math:`b`) and inclusion frequency
:math:`\pi_j` (in %):

- RMSD ratio :math:`\sqrt{\frac{1}{B}\sum_b (\hat\beta_j^{(b)} - \hat\beta_j)^2} / se_j`,
  taken over all rows so that elimination counts as deviation;
- relative conditional bias
  :math:`\left(\frac{\bar\beta_j / \hat\beta_j}{\pi_j / 100} - 1\right) \cdot 100`,
  the mean over all rows rescaled by the inclusion rate;
- bootstrap median and percentiles over all rows, zeros included, so that
  rarely selected predictors get intervals reaching zero.

Undefined ratios are reported as NaN (or ``inf``), never as 0.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Self

import numpy as np
import pandas as pd

from .base_analyser import BaseAnalyser
from .bootstrap import BootstrapEnsemble
from .ols_helper import FittedModel


_ZERO_TOL = 1e-12


def rmsd_ratio(estimates: pd.DataFrame, full_est: pd.Series, full_se: pd.Series) -> pd.Series:
    """Root mean squared deviation from the full-model estimate, in units of its SE."""
    full_est = full_est.reindex(estimates.columns)
    full_se = full_se.reindex(estimates.columns)
    rmsd = np.sqrt(((estimates - full_est) ** 2).mean(axis=0))
    with np.errstate(divide="ignore", invalid="ignore"):
        return (rmsd / full_se).astype(float).rename("rmsd_ratio")


def relative_conditional_bias(
    estimates: pd.DataFrame,
    full_est: pd.Series,
    inclusion_freq: pd.Series,
) -> pd.Series:
    """Relative conditional bias (%) of bootstrap estimates.

    NaN where the full-model estimate is (numerically) zero or the predictor
    was never included.
    """
    full_est = full_est.reindex(estimates.columns).astype(float)
    rate = inclusion_freq.reindex(estimates.columns).astype(float) / 100
    boot_mean = estimates.mean(axis=0)

    undefined = (full_est.abs() <= _ZERO_TOL) | (rate <= 0)
    with np.errstate(divide="ignore", invalid="ignore"):
        bias = (boot_mean / full_est / rate - 1) * 100
    return bias.mask(undefined, np.nan).astype(float).rename("rel_bias")


def bootstrap_percentiles(
    estimates: pd.DataFrame,
    percentiles: tuple[float, float] = (0.025, 0.975),
) -> pd.DataFrame:
    """Median and lower/upper percentiles per column (linear interpolation)."""
    lower, upper = percentiles
    values = estimates.to_numpy(dtype=float)
    qs = np.quantile(values, [0.5, lower, upper], axis=0)
    return pd.DataFrame(
        {
            "boot_median": qs[0],
            f"boot_{_pct_label(lower)}": qs[1],
            f"boot_{_pct_label(upper)}": qs[2],
        },
        index=estimates.columns,
    )


def _pct_label(q: float) -> str:
    """Column suffix for a percentile fraction: 0.025 -> "025", 0.975 -> "975", 0.1 -> "100"."""
    return f"{round(q * 1000):03d}"


@dataclass(frozen=True)
class BiasResult:
    """Per-predictor bias and uncertainty measures.

    Attributes:
        table: Columns ``rmsd_ratio``, ``rel_bias``, ``boot_mean``,
            ``boot_median`` and the two percentile columns, indexed by predictor
            (intercept included).
        percentiles: Percentile fractions used for the interval columns.
    """

    table: pd.DataFrame
    percentiles: tuple[float, float]

    @property
    def rmsd_ratio(self) -> pd.Series:
        return self.table["rmsd_ratio"]

    @property
    def rel_bias(self) -> pd.Series:
        return self.table["rel_bias"]


class BiasEstimator(BaseAnalyser):
    """Compare bootstrap estimates against the full-model fit."""

    def __init__(
        self,
        ensemble: BootstrapEnsemble,
        full_model: FittedModel,
        inclusion_freq: pd.Series,
        *,
        percentiles: tuple[float, float] = (0.025, 0.975),
    ) -> None:
        self._ensemble = ensemble
        self._full_model = full_model
        self._inclusion_freq = inclusion_freq
        self._percentiles = percentiles
        self._result: BiasResult | None = None

    def fit(self) -> Self:
        estimates = self._ensemble.estimates
        full_est, full_se = self._full_model.dense(estimates.columns)
        full_est = pd.Series(full_est, index=estimates.columns)
        full_se = pd.Series(full_se, index=estimates.columns)

        table = pd.concat(
            [
                rmsd_ratio(estimates, full_est, full_se),
                relative_conditional_bias(estimates, full_est, self._inclusion_freq),
                estimates.mean(axis=0).rename("boot_mean"),
                bootstrap_percentiles(estimates, self._percentiles),
            ],
            axis=1,
        )
        self._result = BiasResult(table=table.rename_axis("predictor"), percentiles=self._percentiles)
        return self

    def result(self) -> BiasResult:
        if self._result is None:
            raise ValueError("Call fit() first")
        return self._result


__all__ = [
    "BiasEstimator",
    "BiasResult",
    "bootstrap_percentiles",
    "relative_conditional_bias",
    "rmsd_ratio",
]
