"""Synthetic regression data with correlated predictors."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
import pandas as pd

from .tabular_dataset import TabularDataset


def simulate_regression_data(
    n_obs: int = 50,
    n_forced: int = 3,
    n_candidates: int = 5,
    *,
    rho: float = 0.5,
    coefficients: Sequence[float] | None = None,
    intercept: float = 1.0,
    noise_sd: float = 1.0,
    seed: int | None = None,
    target_col: str = "y",
) -> TabularDataset:
    r"""Draw a linear-regression dataset with equicorrelated Gaussian predictors.

    Predictors follow :math:`X \sim N(0, \Sigma)` with unit variances and
    pairwise correlation ``rho``; the outcome is
    :math:`y = \beta_0 + X\beta + \varepsilon`, :math:`\varepsilon \sim N(0, \sigma^2)`.

    Forced predictors are named ``f1..fk`` and candidates ``x1..xm``. By default
    forced predictors carry effect 1.0, the first half of the candidates 0.5
    and the remaining candidates no effect, which produces a realistic mix of
    stable and unstable selections.

    Args:
        n_obs: Number of rows.
        n_forced: Number of predictors retained in every model.
        n_candidates: Number of predictors subject to elimination.
        rho: Common pairwise correlation, must keep :math:`\Sigma` positive definite.
        coefficients: Optional effects for ``[forced..., candidates...]``.
        intercept: True intercept.
        noise_sd: Residual standard deviation.
        seed: Seed for :func:`numpy.random.default_rng`.
        target_col: Outcome column name.

    Returns:
        TabularDataset with forced predictors registered.
    """
    n_pred = n_forced + n_candidates
    if n_pred < 1:
        raise ValueError("At least one predictor is required.")
    if not -1.0 / max(n_pred - 1, 1) < rho < 1.0:
        raise ValueError(f"rho={rho} does not yield a positive definite correlation matrix")

    if coefficients is None:
        n_active = (n_candidates + 1) // 2
        beta = np.r_[np.ones(n_forced), np.full(n_active, 0.5), np.zeros(n_candidates - n_active)]
    else:
        beta = np.asarray(coefficients, dtype=float)
        if beta.shape != (n_pred,):
            raise ValueError(f"coefficients must have length {n_pred}, got {beta.shape[0]}")

    rng = np.random.default_rng(seed)
    cov = np.full((n_pred, n_pred), rho) + np.eye(n_pred) * (1.0 - rho)
    x = rng.multivariate_normal(np.zeros(n_pred), cov, size=n_obs)
    y = intercept + x @ beta + rng.normal(scale=noise_sd, size=n_obs)

    forced = [f"f{i + 1}" for i in range(n_forced)]
    candidates = [f"x{i + 1}" for i in range(n_candidates)]
    df = pd.DataFrame(x, columns=[*forced, *candidates]).assign(**{target_col: y})
    return TabularDataset(df[[target_col, *forced, *candidates]], target_col=target_col, forced_cols=forced)


__all__ = ["simulate_regression_data"]
