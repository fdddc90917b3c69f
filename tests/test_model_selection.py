"""Tests for backward elimination with forced-in predictors."""

import numpy as np
import pandas as pd
import pytest

from bootstab.analysis.model_selection import (
    BackwardEliminationFitter,
    FullModelFitter,
    ModelFitter,
    selection_path,
)
from bootstab.analysis.ols_helper import fit_ols


@pytest.fixture(scope="module")
def selection_df() -> pd.DataFrame:
    """Strong effects for f and x1, pure noise for n1..n3."""
    rng = np.random.default_rng(7)
    n = 150
    cols = {name: rng.normal(size=n) for name in ["f", "x1", "n1", "n2", "n3"]}
    y = 0.5 + 1.5 * cols["f"] + 2.0 * cols["x1"] + rng.normal(size=n)
    return pd.DataFrame({"y": y, **cols})


class TestSelectionPath:
    def test_starts_from_full_model(self, selection_df: pd.DataFrame) -> None:
        path = selection_path(selection_df, target_col="y", forced=["f"], candidates=["x1", "n1", "n2", "n3"])

        assert path.steps[0].terms == ["f", "x1", "n1", "n2", "n3"]
        assert path.steps[0].dropped is None
        assert path.criterion == "aic"

    def test_keeps_forced_and_strong_terms(self, selection_df: pd.DataFrame) -> None:
        path = selection_path(selection_df, target_col="y", forced=["f"], candidates=["x1", "n1", "n2", "n3"])

        final_terms = path.final.terms
        assert "f" in final_terms
        assert "x1" in final_terms

    def test_criterion_strictly_decreases_along_path(self, selection_df: pd.DataFrame) -> None:
        path = selection_path(selection_df, target_col="y", forced=["f"], candidates=["x1", "n1", "n2", "n3"])

        aics = [step.model.aic for step in path.steps]
        assert all(later < earlier for earlier, later in zip(aics, aics[1:], strict=False))
        assert [step.step for step in path.steps] == list(range(len(path.steps)))

    def test_final_model_is_local_optimum(self, selection_df: pd.DataFrame) -> None:
        path = selection_path(selection_df, target_col="y", forced=["f"], candidates=["x1", "n1", "n2", "n3"])
        final = path.final

        for term in [t for t in final.terms if t != "f"]:
            reduced = fit_ols(selection_df, target_col="y", terms=[t for t in final.terms if t != term])
            assert reduced.aic >= final.model.aic

    def test_large_threshold_prevents_any_removal(self, selection_df: pd.DataFrame) -> None:
        path = selection_path(
            selection_df,
            target_col="y",
            forced=["f"],
            candidates=["x1", "n1", "n2", "n3"],
            threshold=1e6,
        )

        assert len(path.steps) == 1

    def test_forced_only_never_drops(self, selection_df: pd.DataFrame) -> None:
        path = selection_path(selection_df, target_col="y", forced=["f", "n1"], candidates=[])

        assert path.final.terms == ["f", "n1"]

    def test_candidate_overlapping_forced_is_ignored(self, selection_df: pd.DataFrame) -> None:
        path = selection_path(selection_df, target_col="y", forced=["f"], candidates=["f", "x1"])

        assert path.steps[0].terms == ["f", "x1"]

    def test_invalid_criterion(self, selection_df: pd.DataFrame) -> None:
        with pytest.raises(ValueError, match="criterion"):
            selection_path(selection_df, target_col="y", forced=[], candidates=["x1"], criterion="cp")  # type: ignore[arg-type]

    def test_summary_table(self, selection_df: pd.DataFrame) -> None:
        path = selection_path(selection_df, target_col="y", forced=["f"], candidates=["x1", "n1", "n2", "n3"])

        table = path.summary_table()

        assert table.index.name == "step"
        assert {"dropped", "n_terms", "aic", "bic", "adj_r2", "sigma"}.issubset(table.columns)
        assert len(table) == len(path.steps)


class TestFitters:
    def test_backward_fitter_matches_path(self, selection_df: pd.DataFrame) -> None:
        fitter = BackwardEliminationFitter()

        model = fitter.fit(selection_df, "y", ["x1", "n1", "n2", "n3"], ["f"])
        path = fitter.path(selection_df, "y", ["x1", "n1", "n2", "n3"], ["f"])

        assert model.terms == tuple(path.final.terms)
        assert isinstance(fitter, ModelFitter)

    def test_bic_is_at_least_as_sparse_as_aic(self, selection_df: pd.DataFrame) -> None:
        aic_model = BackwardEliminationFitter("aic").fit(selection_df, "y", ["x1", "n1", "n2", "n3"], ["f"])
        bic_model = BackwardEliminationFitter("bic").fit(selection_df, "y", ["x1", "n1", "n2", "n3"], ["f"])

        assert len(bic_model.terms) <= len(aic_model.terms)

    def test_full_model_fitter_keeps_everything(self, selection_df: pd.DataFrame) -> None:
        model = FullModelFitter().fit(selection_df, "y", ["x1", "n1"], ["f"])

        assert model.terms == ("f", "x1", "n1")
        assert isinstance(FullModelFitter(), ModelFitter)
