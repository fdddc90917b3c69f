"""Analysis modules: model fitting, bootstrap selection and derived statistics."""

from .bias import BiasEstimator, BiasResult
from .bootstrap import BootstrapDriver, BootstrapEnsemble, bootstrap_indices, iteration_seeds
from .correlation_analyzer import CorrelationAnalyzer, CorrelationResult
from .inclusion import (
    InclusionAnalyzer,
    InclusionResult,
    chi_squared_pvalue,
    independence_expectation,
    model_frequencies,
    pairwise_inclusion,
    selected_model_frequency,
)
from .model_selection import BackwardEliminationFitter, FullModelFitter, ModelFitter, selection_path
from .ols_helper import INTERCEPT, FittedModel, compare_models, fit_ols
from .overview import assemble_overview, export_tables
from .shrinkage import ShrinkageResult, shrink
from .stability import StabilityAnalyzer, StabilityResult, run_stability_analysis


__all__ = [
    "INTERCEPT",
    "BackwardEliminationFitter",
    "BiasEstimator",
    "BiasResult",
    "BootstrapDriver",
    "BootstrapEnsemble",
    "CorrelationAnalyzer",
    "CorrelationResult",
    "FittedModel",
    "FullModelFitter",
    "InclusionAnalyzer",
    "InclusionResult",
    "ModelFitter",
    "ShrinkageResult",
    "StabilityAnalyzer",
    "StabilityResult",
    "assemble_overview",
    "bootstrap_indices",
    "chi_squared_pvalue",
    "compare_models",
    "export_tables",
    "fit_ols",
    "independence_expectation",
    "iteration_seeds",
    "model_frequencies",
    "pairwise_inclusion",
    "run_stability_analysis",
    "selected_model_frequency",
    "selection_path",
    "shrink",
]
