"""Inclusion frequencies and co-selection patterns of bootstrap ensembles.

All statistics here are derived from the boolean inclusion matrix
(``estimates != 0``) of a :class:`~bootstab.analysis.bootstrap.BootstrapEnsemble`:

- bootstrap inclusion frequency per predictor (in %),
- pairwise joint inclusion frequency with a chi-squared flag marking pairs
  selected together more (``+``, "rope team") or less (``-``, "competitors")
  often than expected under independence,
- frequencies of distinct selected models, and how often the model selected
  on the original data is reproduced.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass
from itertools import combinations
from typing import Self

import numpy as np
import pandas as pd
from scipy import stats

from bootstab.errors import DegenerateStatisticError

from .base_analyser import BaseAnalyser
from .bootstrap import BootstrapEnsemble
from .ols_helper import INTERCEPT, FittedModel


logger = logging.getLogger(__name__)

POSITIVE_FLAG = "+"
NEGATIVE_FLAG = "-"
NO_FLAG = ""


def inclusion_frequencies(inclusion: pd.DataFrame) -> pd.Series:
    """Percentage of bootstrap rows in which each predictor is included."""
    n_rows = len(inclusion)
    if n_rows == 0:
        raise ValueError("Inclusion matrix has no rows.")
    return (inclusion.sum(axis=0) / n_rows * 100).astype(float).rename("boot_inclusion")


def independence_expectation(freq_a: float, freq_b: float) -> float:
    """Expected joint inclusion (%) of two predictors selected independently.

    Both inputs are percentages; the product is rescaled once by 100, so 80 %
    and 50 % give 40 %.
    """
    return freq_a * freq_b / 100


def chi_squared_pvalue(a: Sequence[bool] | np.ndarray, b: Sequence[bool] | np.ndarray) -> float:
    """P-value of Pearson's chi-squared test of independence of two indicators.

    Uses the 2x2 contingency table with Yates' continuity correction.

    Raises:
        DegenerateStatisticError: If either indicator is constant, in which
            case the test is undefined.
    """
    a = np.asarray(a, dtype=bool)
    b = np.asarray(b, dtype=bool)
    if a.shape != b.shape:
        raise ValueError("Indicator columns must have equal length.")
    for label, col in (("first", a), ("second", b)):
        if col.all() or not col.any():
            raise DegenerateStatisticError(f"The {label} indicator column is constant; chi-squared test undefined")

    table = np.array(
        [
            [np.sum(a & b), np.sum(a & ~b)],
            [np.sum(~a & b), np.sum(~a & ~b)],
        ],
    )
    _, p_value, _, _ = stats.chi2_contingency(table, correction=True)
    return float(p_value)


def inclusion_order(frequencies: pd.Series, *, drop_intercept: bool = True) -> list[str]:
    """Predictor names sorted by inclusion frequency (descending, ties keep input order)."""
    ordered = frequencies.sort_values(ascending=False, kind="stable").index.tolist()
    return [name for name in ordered if not (drop_intercept and name == INTERCEPT)]


def pairwise_inclusion(
    inclusion: pd.DataFrame,
    *,
    alpha: float = 0.01,
    order: Sequence[str] | None = None,
) -> tuple[pd.DataFrame, pd.DataFrame, pd.DataFrame]:
    """Joint inclusion frequencies and independence flags for all predictor pairs.

    Args:
        inclusion: Boolean ``B x P`` inclusion matrix.
        alpha: Significance level of the chi-squared test.
        order: Predictor order (defaults to descending inclusion frequency,
            intercept excluded).

    Returns:
        ``(table, joint, pairs)`` where ``table`` holds the joint frequency in
        the upper triangle, the flag (``"+"``, ``"-"``, ``""`` or ``None`` when
        the test is undefined) in the lower triangle and the univariate
        inclusion frequency on the diagonal; ``joint`` is the symmetric
        numeric matrix of joint frequencies; ``pairs`` lists every pair with
        observed and expected joint frequency, p-value and flag.
    """
    freqs = inclusion_frequencies(inclusion)
    order = list(order) if order is not None else inclusion_order(freqs)
    n_rows = len(inclusion)
    values = inclusion.loc[:, order].to_numpy(dtype=bool)

    joint_counts = values.T.astype(int) @ values.astype(int)
    joint = pd.DataFrame(joint_counts / n_rows * 100, index=order, columns=order)

    table = pd.DataFrame(None, index=order, columns=order, dtype=object)
    rows: list[dict[str, object]] = []
    for (i, name_a), (j, name_b) in combinations(enumerate(order), 2):
        observed = float(joint.iat[i, j])
        expected = independence_expectation(float(freqs[name_a]), float(freqs[name_b]))
        try:
            p_value: float | None = chi_squared_pvalue(values[:, i], values[:, j])
        except DegenerateStatisticError:
            p_value = None

        if p_value is None:
            flag = None
        elif p_value > alpha:
            flag = NO_FLAG
        else:
            flag = NEGATIVE_FLAG if observed < expected else POSITIVE_FLAG

        table.iat[i, j] = observed
        table.iat[j, i] = flag
        rows.append(
            {
                "predictor_a": name_a,
                "predictor_b": name_b,
                "joint": observed,
                "expected": expected,
                "p_value": np.nan if p_value is None else p_value,
                "flag": flag,
            },
        )
    for i, name in enumerate(order):
        table.iat[i, i] = float(freqs[name])

    pairs = pd.DataFrame(rows, columns=["predictor_a", "predictor_b", "joint", "expected", "p_value", "flag"])
    # object dtype keeps None apart from the empty-string flag
    pairs["flag"] = pd.Series([row["flag"] for row in rows], index=pairs.index, dtype=object)
    return table, joint, pairs


def model_frequencies(
    inclusion: pd.DataFrame,
    *,
    order: Sequence[str] | None = None,
    max_models: int = 20,
    cum_percent_cutoff: float = 80.0,
) -> pd.DataFrame:
    """Frequencies of distinct selected models across bootstrap rows.

    Models are identified by their exact inclusion vector. Rows are sorted by
    count, kept while the cumulative percentage does not exceed
    ``cum_percent_cutoff`` and then truncated to ``max_models`` rows.

    Models with equal counts keep the order in which they first appear in
    the bootstrap sequence. R's ``aggregate`` followed by ``order`` would
    instead keep its grouping order (sorted by inclusion pattern), so tied
    rows may be listed differently from the R workflow.

    Returns:
        DataFrame with columns ``predictors`` (space-separated names of the
        included predictors), one 0/1 column per predictor, ``count``,
        ``percent`` and ``cum_percent``.
    """
    freqs = inclusion_frequencies(inclusion)
    order = list(order) if order is not None else inclusion_order(freqs)
    n_rows = len(inclusion)

    counts = Counter(tuple(row) for row in inclusion.loc[:, order].to_numpy(dtype=bool))
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)

    records: list[dict[str, object]] = []
    cum_count = 0
    for combination, count in ranked:
        cum_count += count
        if cum_count * 100 > cum_percent_cutoff * n_rows:
            break
        record: dict[str, object] = {
            "predictors": " ".join(name for name, flag in zip(order, combination, strict=True) if flag),
        }
        record.update({name: int(flag) for name, flag in zip(order, combination, strict=True)})
        record.update(count=count, percent=count / n_rows * 100, cum_percent=cum_count / n_rows * 100)
        records.append(record)
        if len(records) >= max_models:
            break

    columns = ["predictors", *order, "count", "percent", "cum_percent"]
    return pd.DataFrame(records, columns=columns)


def selected_model_frequency(inclusion: pd.DataFrame, selected: pd.Series | Sequence[bool]) -> float:
    """Percentage of bootstrap rows reproducing the selected model exactly.

    Args:
        inclusion: Boolean ``B x P`` inclusion matrix.
        selected: Inclusion vector of the model selected on the original data,
            either a boolean Series indexed by predictor names or a sequence
            aligned with the columns of ``inclusion``.
    """
    if isinstance(selected, pd.Series):
        selected = selected.reindex(inclusion.columns)
        if selected.isna().any():
            raise KeyError("Selected-model vector does not cover all ensemble columns.")
    target = np.asarray(selected, dtype=bool)
    if target.shape != (inclusion.shape[1],):
        raise ValueError(f"Selected-model vector must have length {inclusion.shape[1]}")
    matches = (inclusion.to_numpy(dtype=bool) == target).all(axis=1)
    return float(matches.sum() / len(inclusion) * 100)


@dataclass(frozen=True)
class InclusionResult:
    """Inclusion statistics of a bootstrap ensemble.

    Attributes:
        frequencies: Bootstrap inclusion frequency (%) per column, intercept included.
        order: Predictors sorted by descending inclusion frequency (no intercept).
        pairwise: Mixed table: joint % (upper), flags (lower), inclusion % (diagonal).
        joint: Symmetric joint inclusion % with inclusion % on the diagonal.
        pairs: One row per predictor pair with expectation, p-value and flag.
        model_frequencies: Most frequent selected models.
        selected_model_frequency: % of rows reproducing the originally selected
            model, ``None`` when no selected model was given.
        alpha: Significance level used for the flags.
    """

    frequencies: pd.Series
    order: list[str]
    pairwise: pd.DataFrame
    joint: pd.DataFrame
    pairs: pd.DataFrame
    model_frequencies: pd.DataFrame
    selected_model_frequency: float | None
    alpha: float

    def rope_teams(self) -> pd.DataFrame:
        """Pairs selected together significantly more often than expected."""
        return self.pairs.loc[self.pairs["flag"] == POSITIVE_FLAG].reset_index(drop=True)

    def competitors(self) -> pd.DataFrame:
        """Pairs selected together significantly less often than expected."""
        return self.pairs.loc[self.pairs["flag"] == NEGATIVE_FLAG].reset_index(drop=True)


class InclusionAnalyzer(BaseAnalyser):
    """Derive inclusion and co-inclusion statistics from a bootstrap ensemble."""

    def __init__(
        self,
        ensemble: BootstrapEnsemble,
        *,
        selected_model: FittedModel | None = None,
        alpha: float = 0.01,
        max_models: int = 20,
        cum_percent_cutoff: float = 80.0,
    ) -> None:
        self._ensemble = ensemble
        self._selected_model = selected_model
        self._alpha = alpha
        self._max_models = max_models
        self._cum_percent_cutoff = cum_percent_cutoff
        self._result: InclusionResult | None = None

    def fit(self) -> Self:
        inclusion = self._ensemble.inclusion
        freqs = inclusion_frequencies(inclusion)
        order = inclusion_order(freqs)
        table, joint, pairs = pairwise_inclusion(inclusion, alpha=self._alpha, order=order)
        models = model_frequencies(
            inclusion,
            order=order,
            max_models=self._max_models,
            cum_percent_cutoff=self._cum_percent_cutoff,
        )

        sel_freq = None
        if self._selected_model is not None:
            selected = pd.Series(self._selected_model.included(inclusion.columns), index=inclusion.columns)
            sel_freq = selected_model_frequency(inclusion, selected)
            logger.info("Selected model reproduced in %.1f%% of bootstrap resamples", sel_freq)

        self._result = InclusionResult(
            frequencies=freqs,
            order=order,
            pairwise=table,
            joint=joint,
            pairs=pairs,
            model_frequencies=models,
            selected_model_frequency=sel_freq,
            alpha=self._alpha,
        )
        return self

    def result(self) -> InclusionResult:
        if self._result is None:
            raise ValueError("Call fit() first")
        return self._result


__all__ = [
    "InclusionAnalyzer",
    "InclusionResult",
    "chi_squared_pvalue",
    "inclusion_frequencies",
    "inclusion_order",
    "independence_expectation",
    "model_frequencies",
    "pairwise_inclusion",
    "selected_model_frequency",
]
