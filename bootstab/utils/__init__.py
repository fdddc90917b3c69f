from .config import DEFAULT_CONFIG, StabilityConfig
from .plotting_config import DEFAULT_PLOT_CFG, PlottingConfig


__all__ = [
    "DEFAULT_CONFIG",
    "DEFAULT_PLOT_CFG",
    "PlottingConfig",
    "StabilityConfig",
]
