"""Data module for dataset classes."""

from .base_dataset import BaseDataset
from .bodyfat_columns import BodyfatColumn as BFCol
from .bodyfat_dataset import BodyfatDataset
from .simulation import simulate_regression_data
from .tabular_dataset import TabularDataset
from .views import DatasetView


__all__ = [
    "BFCol",
    "BaseDataset",
    "BodyfatDataset",
    "DatasetView",
    "TabularDataset",
    "simulate_regression_data",
]
