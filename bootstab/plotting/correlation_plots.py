"""Correlation structure visualization."""

import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns
from matplotlib.axes import Axes
from matplotlib.figure import Figure

from bootstab.analysis.correlation_analyzer import CorrelationResult
from bootstab.utils.plotting_config import DEFAULT_PLOT_CFG, PlottingConfig


def plot_correlation_heatmap(
    result: CorrelationResult,
    figsize: tuple[int, int] = (10, 9),
    *,
    lower_only: bool = True,
    ax: Axes | None = None,
    config: PlottingConfig = DEFAULT_PLOT_CFG,
    **kwargs: object,
) -> Figure:
    """Plot the predictor correlation matrix as an annotated heatmap.

    Args:
        result: CorrelationResult from CorrelationAnalyzer.
        figsize: Figure size when ``ax`` is not given.
        lower_only: Mask the redundant upper triangle.
        ax: Optional axes to draw on.
        config: Plotting style.
        **kwargs: Forwarded to :func:`seaborn.heatmap`.
    """
    label_map = {col: result.pretty_by_col.get(col, col) for col in result.matrix.columns}
    matrix = result.matrix.rename(index=label_map, columns=label_map)
    mask = np.triu(np.ones(matrix.shape, dtype=bool), k=1) if lower_only else None

    with config.apply():
        if ax is None:
            fig, ax = plt.subplots(figsize=figsize)
        else:
            fig = ax.figure
        sns.heatmap(
            matrix,
            mask=mask,
            annot=True,
            fmt=".2f",
            cmap=config.diverging_cmap,
            vmin=-1,
            vmax=1,
            ax=ax,
            square=True,
            cbar_kws={"shrink": 0.8},
            **kwargs,  # type: ignore[arg-type]
        )
        ax.set_xticklabels(ax.get_xticklabels(), rotation=45, ha="right", rotation_mode="anchor")
        ax.tick_params(axis="y", rotation=0)
        ax.set_title("Predictor Correlation Heatmap")
        fig.tight_layout()

    return fig
