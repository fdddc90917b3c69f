"""Test configuration for the bootstrap stability toolbox."""

from pathlib import Path
import sys

import matplotlib
import pytest


matplotlib.use("Agg")

# Ensure the local package is importable when the repo isn't installed.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture(scope="session")
def simulated_dataset():
    """50 rows, 3 forced and 5 candidate predictors, fixed seed."""
    from bootstab.data import simulate_regression_data

    return simulate_regression_data(n_obs=50, n_forced=3, n_candidates=5, seed=42)


@pytest.fixture(scope="session")
def stability_config():
    """Configuration of the reference scenario (B=200, seed 42)."""
    from bootstab.utils.config import StabilityConfig

    return StabilityConfig(n_bootstrap=200, seed=42)


@pytest.fixture(scope="session")
def stability_result(simulated_dataset, stability_config):
    """Stability analysis of the simulated dataset, computed once per session."""
    return simulated_dataset.make_stability_analyzer(config=stability_config).fit().result()
