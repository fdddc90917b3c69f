"""Figures for bootstrap stability results."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns
from matplotlib.figure import Figure

from bootstab.analysis.ols_helper import INTERCEPT
from bootstab.utils.plotting_config import DEFAULT_PLOT_CFG, PlottingConfig


if TYPE_CHECKING:
    from bootstab.analysis.stability import StabilityResult


def plot_inclusion_frequencies(
    result: StabilityResult,
    figsize: tuple[int, int] = (8, 6),
    *,
    config: PlottingConfig = DEFAULT_PLOT_CFG,
) -> Figure:
    """Horizontal bars of bootstrap inclusion frequency per predictor.

    Forced predictors are drawn in a separate color; they are included in
    every resample by construction.
    """
    freqs = result.inclusion.frequencies.drop(INTERCEPT, errors="ignore")
    freqs = freqs.loc[result.inclusion.order]
    forced = set(result.ensemble.forced)
    data = pd.DataFrame(
        {
            "predictor": freqs.index,
            "inclusion": freqs.to_numpy(),
            "role": ["forced" if name in forced else "candidate" for name in freqs.index],
        },
    )

    with config.apply():
        fig, ax = plt.subplots(figsize=figsize)
        sns.barplot(data=data, x="inclusion", y="predictor", hue="role", dodge=False, ax=ax)
        ax.set_xlim(0, 100)
        ax.set_xlabel("Bootstrap inclusion frequency [%]")
        ax.set_ylabel("")
        ax.set_title(f"Inclusion over {result.ensemble.n_iterations} bootstrap resamples")
        fig.tight_layout()
    return fig


def plot_pairwise_inclusion(
    result: StabilityResult,
    figsize: tuple[int, int] = (9, 8),
    *,
    config: PlottingConfig = DEFAULT_PLOT_CFG,
) -> Figure:
    """Heatmap of joint inclusion frequencies annotated with independence flags.

    Cells show the joint inclusion percentage; ``+`` and ``-`` mark pairs
    selected together significantly more or less often than expected under
    independence.
    """
    joint = result.inclusion.joint
    pairs = result.inclusion.pairs
    annot = joint.map(lambda v: f"{v:.0f}")
    for row in pairs.itertuples(index=False):
        if isinstance(row.flag, str) and row.flag:
            annot.loc[row.predictor_a, row.predictor_b] += row.flag
            annot.loc[row.predictor_b, row.predictor_a] += row.flag

    with config.apply():
        fig, ax = plt.subplots(figsize=figsize)
        sns.heatmap(
            joint,
            annot=annot.to_numpy(),
            fmt="",
            cmap=config.sequential_cmap,
            vmin=0,
            vmax=100,
            square=True,
            cbar_kws={"shrink": 0.8, "label": "Joint inclusion [%]"},
            ax=ax,
        )
        ax.set_title(f"Pairwise inclusion (alpha={result.inclusion.alpha})")
        fig.tight_layout()
    return fig


def plot_bootstrap_distributions(
    result: StabilityResult,
    predictors: Sequence[str] | None = None,
    *,
    max_cols: int = 3,
    bins: int = 30,
    config: PlottingConfig = DEFAULT_PLOT_CFG,
) -> Figure:
    """Histograms of bootstrap estimates per predictor.

    The full-model estimate is drawn as a solid line and the bootstrap
    percentile interval as dashed lines. The spike at zero collects the
    resamples in which the predictor was eliminated.
    """
    predictors = list(predictors) if predictors is not None else result.inclusion.order
    unknown = [p for p in predictors if p not in result.overview.index]
    if unknown:
        raise KeyError(f"Unknown predictors: {unknown}")

    estimates = result.ensemble.estimates
    pct_cols = [c for c in result.overview.columns if c.startswith("boot_0") or c.startswith("boot_9")]
    n_cols = max(1, min(max_cols, len(predictors)))
    n_rows = int(np.ceil(len(predictors) / n_cols))

    with config.apply():
        fig, axes = plt.subplots(n_rows, n_cols, figsize=(4 * n_cols, 3 * n_rows), squeeze=False)
        axes_list = axes.ravel()
        for ax, name in zip(axes_list, predictors, strict=False):
            sns.histplot(estimates[name], bins=bins, ax=ax, color="tab:blue")
            ax.axvline(result.overview.at[name, "full_est"], color="tab:red", linewidth=2)
            for col in pct_cols:
                ax.axvline(result.overview.at[name, col], color="tab:gray", linestyle="--")
            ax.set_title(f"{name} ({result.overview.at[name, 'boot_inclusion']:.0f}%)")
            ax.set_xlabel("Estimate")
        for ax in axes_list[len(predictors) :]:
            ax.set_visible(False)
        fig.tight_layout()
    return fig


__all__ = ["plot_bootstrap_distributions", "plot_inclusion_frequencies", "plot_pairwise_inclusion"]
