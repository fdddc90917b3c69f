"""Tests for inclusion frequencies, pairwise co-inclusion and model frequencies."""

import numpy as np
import pandas as pd
import pytest

from bootstab.analysis.inclusion import (
    NEGATIVE_FLAG,
    NO_FLAG,
    POSITIVE_FLAG,
    InclusionAnalyzer,
    chi_squared_pvalue,
    inclusion_frequencies,
    inclusion_order,
    independence_expectation,
    model_frequencies,
    pairwise_inclusion,
    selected_model_frequency,
)
from bootstab.analysis.ols_helper import INTERCEPT
from bootstab.errors import DegenerateStatisticError


def _model_rows(combos: list[tuple[tuple[bool, ...], int]], columns: list[str]) -> pd.DataFrame:
    rows = [combo for combo, count in combos for _ in range(count)]
    return pd.DataFrame(rows, columns=columns)


@pytest.fixture
def five_three_two() -> pd.DataFrame:
    """10 rows: model {a,b} five times, {a} three times, {b,c} twice."""
    return _model_rows(
        [
            ((True, True, False), 5),
            ((True, False, False), 3),
            ((False, True, True), 2),
        ],
        ["a", "b", "c"],
    )


class TestInclusionFrequencies:
    def test_percentages(self, five_three_two: pd.DataFrame) -> None:
        freqs = inclusion_frequencies(five_three_two)

        assert freqs.name == "boot_inclusion"
        assert freqs.to_dict() == pytest.approx({"a": 80.0, "b": 70.0, "c": 20.0})

    def test_bounds(self) -> None:
        rng = np.random.default_rng(3)
        inclusion = pd.DataFrame(rng.random((30, 4)) > 0.4, columns=list("abcd"))

        freqs = inclusion_frequencies(inclusion)

        assert ((freqs >= 0) & (freqs <= 100)).all()

    def test_empty_matrix_rejected(self) -> None:
        with pytest.raises(ValueError):
            inclusion_frequencies(pd.DataFrame(columns=["a"], dtype=bool))

    def test_order_is_descending_and_stable(self) -> None:
        freqs = pd.Series({INTERCEPT: 100.0, "a": 40.0, "b": 90.0, "c": 40.0})

        assert inclusion_order(freqs) == ["b", "a", "c"]
        assert inclusion_order(freqs, drop_intercept=False) == [INTERCEPT, "b", "a", "c"]


class TestIndependence:
    def test_expectation_rescaled_once(self) -> None:
        assert independence_expectation(80, 50) == 40

    def test_identical_columns_flagged_positive(self) -> None:
        a = np.array([True] * 10 + [False] * 10)
        inclusion = pd.DataFrame({"a": a, "b": a})

        _, _, pairs = pairwise_inclusion(inclusion, alpha=0.01)

        assert pairs.loc[0, "flag"] == POSITIVE_FLAG
        assert pairs.loc[0, "joint"] == 50.0
        assert pairs.loc[0, "expected"] == 25.0

    def test_complementary_columns_flagged_negative(self) -> None:
        a = np.array([True] * 10 + [False] * 10)
        inclusion = pd.DataFrame({"a": a, "b": ~a})

        _, _, pairs = pairwise_inclusion(inclusion, alpha=0.01)

        assert pairs.loc[0, "flag"] == NEGATIVE_FLAG
        assert pairs.loc[0, "joint"] == 0.0

    def test_independent_columns_not_flagged(self) -> None:
        a = np.array([True, True, False, False] * 10)
        b = np.array([True, False, True, False] * 10)

        assert chi_squared_pvalue(a, b) == pytest.approx(1.0)
        _, _, pairs = pairwise_inclusion(pd.DataFrame({"a": a, "b": b}), alpha=0.01)
        assert pairs.loc[0, "flag"] == NO_FLAG

    def test_constant_column_is_degenerate(self) -> None:
        a = np.array([True, False, True, False])
        always = np.ones(4, dtype=bool)

        with pytest.raises(DegenerateStatisticError):
            chi_squared_pvalue(a, always)
        with pytest.raises(DegenerateStatisticError):
            chi_squared_pvalue(~always, a)

    def test_degenerate_pair_has_no_flag(self) -> None:
        inclusion = pd.DataFrame({"a": [True, False, True, False], "forced": [True] * 4})

        table, _, pairs = pairwise_inclusion(inclusion, alpha=0.01)

        assert pairs.loc[0, "flag"] is None
        assert np.isnan(pairs.loc[0, "p_value"])
        assert table.loc["a", "forced"] is None

    def test_undefined_flags_stay_none_next_to_string_flags(self) -> None:
        a = np.array([True] * 10 + [False] * 10)
        inclusion = pd.DataFrame({"forced": [True] * 20, "a": a, "b": a, "c": [True, False] * 10})

        _, _, pairs = pairwise_inclusion(inclusion, alpha=0.01)

        assert pairs["flag"].dtype == object
        assert all(flag is None or isinstance(flag, str) for flag in pairs["flag"])
        assert pairs["flag"].tolist() == [None, None, None, POSITIVE_FLAG, NO_FLAG, NO_FLAG]

    def test_length_mismatch(self) -> None:
        with pytest.raises(ValueError):
            chi_squared_pvalue([True, False], [True, False, True])


class TestPairwiseTable:
    def test_layout(self, five_three_two: pd.DataFrame) -> None:
        table, joint, pairs = pairwise_inclusion(five_three_two)

        assert table.index.tolist() == ["a", "b", "c"]
        # diagonal: univariate inclusion
        assert [table.iat[i, i] for i in range(3)] == pytest.approx([80.0, 70.0, 20.0])
        # upper: joint frequency
        assert table.loc["a", "b"] == 50.0
        assert table.loc["a", "c"] == 0.0
        assert table.loc["b", "c"] == pytest.approx(20.0)
        # lower: flags
        assert table.loc["b", "a"] in {POSITIVE_FLAG, NEGATIVE_FLAG, NO_FLAG}
        assert len(pairs) == 3

    def test_joint_matrix_symmetric_with_inclusion_diagonal(self, five_three_two: pd.DataFrame) -> None:
        _, joint, _ = pairwise_inclusion(five_three_two)

        assert np.allclose(joint.to_numpy(), joint.to_numpy().T)
        assert np.allclose(np.diag(joint.to_numpy()), [80.0, 70.0, 20.0])

    def test_joint_never_exceeds_marginals(self) -> None:
        rng = np.random.default_rng(11)
        inclusion = pd.DataFrame(rng.random((60, 4)) > 0.5, columns=list("abcd"))

        _, joint, _ = pairwise_inclusion(inclusion)

        diag = np.diag(joint.to_numpy())
        assert (joint.to_numpy() <= np.minimum.outer(diag, diag) + 1e-12).all()

    def test_explicit_order(self, five_three_two: pd.DataFrame) -> None:
        table, _, _ = pairwise_inclusion(five_three_two, order=["c", "a", "b"])

        assert table.columns.tolist() == ["c", "a", "b"]


class TestModelFrequencies:
    def test_cumulative_cutoff(self, five_three_two: pd.DataFrame) -> None:
        table = model_frequencies(five_three_two, cum_percent_cutoff=80.0)

        assert len(table) == 2
        assert table["predictors"].tolist() == ["a b", "a"]
        assert table["count"].tolist() == [5, 3]
        assert table["percent"].tolist() == pytest.approx([50.0, 30.0])
        assert table["cum_percent"].tolist() == pytest.approx([50.0, 80.0])
        assert table.columns.tolist() == ["predictors", "a", "b", "c", "count", "percent", "cum_percent"]
        assert table.loc[0, ["a", "b", "c"]].tolist() == [1, 1, 0]

    def test_full_cutoff_lists_every_model(self, five_three_two: pd.DataFrame) -> None:
        table = model_frequencies(five_three_two, cum_percent_cutoff=100.0)

        assert table["count"].sum() == 10
        assert table["cum_percent"].iloc[-1] == pytest.approx(100.0)

    def test_max_models_truncates(self, five_three_two: pd.DataFrame) -> None:
        table = model_frequencies(five_three_two, max_models=1, cum_percent_cutoff=100.0)

        assert len(table) == 1

    def test_dominant_model_above_cutoff_gives_empty_table(self) -> None:
        inclusion = _model_rows([((True, False), 9), ((False, True), 1)], ["a", "b"])

        table = model_frequencies(inclusion, cum_percent_cutoff=80.0)

        assert table.empty

    def test_ties_keep_first_appearance(self) -> None:
        inclusion = _model_rows([((False, True), 2), ((True, False), 2)], ["a", "b"])

        table = model_frequencies(inclusion, order=["a", "b"], cum_percent_cutoff=100.0)

        assert table["predictors"].tolist() == ["b", "a"]


class TestSelectedModelFrequency:
    def test_exact_match_rate(self, five_three_two: pd.DataFrame) -> None:
        selected = pd.Series({"a": True, "b": True, "c": False})

        assert selected_model_frequency(five_three_two, selected) == 50.0

    def test_no_match_is_zero(self, five_three_two: pd.DataFrame) -> None:
        assert selected_model_frequency(five_three_two, [True, True, True]) == 0.0

    def test_series_must_cover_columns(self, five_three_two: pd.DataFrame) -> None:
        with pytest.raises(KeyError):
            selected_model_frequency(five_three_two, pd.Series({"a": True}))

    def test_wrong_length(self, five_three_two: pd.DataFrame) -> None:
        with pytest.raises(ValueError):
            selected_model_frequency(five_three_two, [True, False])


class TestInclusionAnalyzer:
    def test_result_before_fit(self, stability_result) -> None:
        with pytest.raises(ValueError, match="fit"):
            InclusionAnalyzer(stability_result.ensemble).result()

    def test_result_matches_ensemble(self, stability_result) -> None:
        ensemble = stability_result.ensemble
        res = InclusionAnalyzer(ensemble, selected_model=stability_result.selected_model, alpha=0.01).fit().result()

        assert res.frequencies[INTERCEPT] == 100.0
        assert INTERCEPT not in res.order
        assert res.order == stability_result.inclusion.order
        assert res.selected_model_frequency == stability_result.selected_model_frequency
        assert 0.0 <= res.selected_model_frequency <= 100.0

    def test_rope_teams_and_competitors_partition_flags(self, stability_result) -> None:
        res = stability_result.inclusion

        assert (res.rope_teams()["flag"] == POSITIVE_FLAG).all()
        assert (res.competitors()["flag"] == NEGATIVE_FLAG).all()
        n_flagged = res.pairs["flag"].isin([POSITIVE_FLAG, NEGATIVE_FLAG]).sum()
        assert len(res.rope_teams()) + len(res.competitors()) == n_flagged

    def test_without_selected_model(self, stability_result) -> None:
        res = InclusionAnalyzer(stability_result.ensemble).fit().result()

        assert res.selected_model_frequency is None
