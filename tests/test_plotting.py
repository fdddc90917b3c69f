"""Smoke tests for plotting utilities."""

import matplotlib as mpl
import matplotlib.pyplot as plt
import pytest

from bootstab.plotting import (
    plot_bootstrap_distributions,
    plot_correlation_heatmap,
    plot_inclusion_frequencies,
    plot_pairwise_inclusion,
)
from bootstab.utils.plotting_config import PlottingConfig


def test_inclusion_plot(stability_result) -> None:
    fig = plot_inclusion_frequencies(stability_result, figsize=(6, 4))

    assert fig.axes
    assert fig.axes[0].get_xlim() == (0.0, 100.0)
    plt.close(fig)


def test_pairwise_plot(stability_result) -> None:
    fig = plot_pairwise_inclusion(stability_result, figsize=(6, 6))

    # heatmap plus colorbar
    assert len(fig.axes) == 2
    plt.close(fig)


def test_pairwise_annotations_skip_undefined_flags(stability_result) -> None:
    fig = plot_pairwise_inclusion(stability_result)

    labels = [text.get_text() for text in fig.axes[0].texts]
    assert len(labels) == stability_result.inclusion.joint.size
    assert all(label.rstrip("+-").isdigit() for label in labels)
    plt.close(fig)


def test_distribution_plot_hides_unused_axes(stability_result) -> None:
    fig = plot_bootstrap_distributions(stability_result, predictors=["f1", "x1", "x2", "x5"], max_cols=3)

    visible = [ax for ax in fig.axes if ax.get_visible()]
    assert len(fig.axes) == 6
    assert len(visible) == 4
    plt.close(fig)


def test_distribution_plot_unknown_predictor(stability_result) -> None:
    with pytest.raises(KeyError):
        plot_bootstrap_distributions(stability_result, predictors=["nope"])


def test_result_shortcuts(stability_result) -> None:
    for fig in (
        stability_result.plot_inclusion(),
        stability_result.plot_pairwise(),
        stability_result.plot_distributions(["f1"]),
    ):
        assert fig.axes
        plt.close(fig)


def test_correlation_heatmap(simulated_dataset) -> None:
    corr_result = simulated_dataset.make_correlation_analyzer().fit().result()

    fig = corr_result.plot_heatmap(figsize=(6, 6))
    direct = plot_correlation_heatmap(corr_result, lower_only=False)

    assert fig.axes
    assert direct.axes
    plt.close(fig)
    plt.close(direct)


def test_plotting_config_restores_rcparams() -> None:
    before = mpl.rcParams["axes.titlesize"]

    with PlottingConfig(title_size=31).apply():
        assert mpl.rcParams["axes.titlesize"] == 31

    assert mpl.rcParams["axes.titlesize"] == before
