"""Tests for run configuration and error types."""

import pytest

from bootstab.errors import (
    BootstabError,
    BootstrapIterationError,
    DataContractError,
    DegenerateStatisticError,
    ModelFitError,
)
from bootstab.utils.config import DEFAULT_CONFIG, DEFAULT_SEED, StabilityConfig


class TestStabilityConfig:
    def test_defaults(self) -> None:
        assert DEFAULT_CONFIG.n_bootstrap == 1000
        assert DEFAULT_CONFIG.seed == DEFAULT_SEED
        assert DEFAULT_CONFIG.alpha == 0.01
        assert DEFAULT_CONFIG.criterion == "aic"
        assert DEFAULT_CONFIG.percentiles == (0.025, 0.975)

    def test_replace_returns_new_instance(self) -> None:
        cfg = DEFAULT_CONFIG.replace(n_bootstrap=50, seed=None)

        assert cfg.n_bootstrap == 50
        assert cfg.seed is None
        assert DEFAULT_CONFIG.n_bootstrap == 1000

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            DEFAULT_CONFIG.alpha = 0.5  # type: ignore[misc]

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"n_bootstrap": 0},
            {"alpha": 0.0},
            {"alpha": 1.5},
            {"criterion": "cp"},
            {"threshold": -1.0},
            {"n_jobs": 0},
            {"max_models": 0},
            {"cum_percent_cutoff": 0.0},
            {"cum_percent_cutoff": 120.0},
            {"percentiles": (0.9, 0.1)},
        ],
    )
    def test_invalid_values(self, kwargs) -> None:
        with pytest.raises(ValueError):
            StabilityConfig(**kwargs)

    def test_replace_validates(self) -> None:
        with pytest.raises(ValueError):
            DEFAULT_CONFIG.replace(alpha=2.0)


class TestErrors:
    def test_hierarchy(self) -> None:
        assert issubclass(DataContractError, BootstabError)
        assert issubclass(DataContractError, ValueError)
        assert issubclass(BootstrapIterationError, ModelFitError)
        assert issubclass(DegenerateStatisticError, BootstabError)

    def test_model_fit_error_message(self) -> None:
        err = ModelFitError("singular", stage="full-model")

        assert err.stage == "full-model"
        assert err.iteration is None
        assert str(err) == "singular (stage 'full-model')"

    def test_bootstrap_iteration_error_message(self) -> None:
        err = BootstrapIterationError("singular", iteration=7, seed=42)

        assert err.stage == "bootstrap"
        assert err.iteration == 7
        assert err.seed == 42
        assert "iteration 7" in str(err)
        assert "seed=42" in str(err)
