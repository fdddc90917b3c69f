"""Bootstrap stability analysis of stepwise variable selection for linear regression."""

from .analysis.stability import StabilityAnalyzer, StabilityResult, run_stability_analysis
from .utils.config import StabilityConfig


__version__ = "0.1.0"

__all__ = ["StabilityAnalyzer", "StabilityConfig", "StabilityResult", "__version__", "run_stability_analysis"]
