"""Plotting utilities for stability results."""

from .correlation_plots import plot_correlation_heatmap
from .stability_plots import plot_bootstrap_distributions, plot_inclusion_frequencies, plot_pairwise_inclusion


__all__ = [
    "plot_bootstrap_distributions",
    "plot_correlation_heatmap",
    "plot_inclusion_frequencies",
    "plot_pairwise_inclusion",
]
