"""OLS fitting helpers producing dense, name-aligned coefficient vectors.

Every fit in the toolbox goes through :func:`fit_ols`, which wraps
``statsmodels`` OLS on an explicit design matrix (constant + named
predictors). The result is packaged in :class:`FittedModel`, whose
:meth:`FittedModel.dense` converts the possibly reduced set of selected terms
into a fixed-order vector over the full predictor list, with exact zeros for
predictors that are not in the model. Downstream statistics rely on that
convention: a zero estimate means "not selected".
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

import numpy as np
import pandas as pd
import statsmodels.api as sm

from bootstab.errors import ModelFitError


INTERCEPT = "Intercept"


@dataclass(frozen=True)
class FittedModel:
    r"""Coefficients, standard errors and fit quality of one OLS fit.

    Information criteria follow statsmodels' definitions,
    :math:`\text{AIC} = 2k - 2\log L` and :math:`\text{BIC} = k\log n - 2\log L`,
    where :math:`k` counts all mean parameters including the intercept.
    """

    params: pd.Series
    """Estimates indexed by ``Intercept`` followed by the model's terms."""

    bse: pd.Series
    """Standard errors aligned with :attr:`params`."""

    terms: tuple[str, ...]
    """Predictors contained in the model (intercept excluded)."""

    aic: float
    bic: float
    adj_r2: float
    sigma: float
    """Residual standard error :math:`\\hat\\sigma = \\sqrt{RSS/(n-k)}`."""

    n_obs: int
    results: sm.regression.linear_model.RegressionResultsWrapper | None = field(default=None, repr=False)

    @classmethod
    def from_results(
        cls,
        results: sm.regression.linear_model.RegressionResultsWrapper,
        terms: Sequence[str],
    ) -> FittedModel:
        """Package a fitted statsmodels OLS result."""
        return cls(
            params=pd.Series(results.params, copy=True),
            bse=pd.Series(results.bse, copy=True),
            terms=tuple(terms),
            aic=float(results.aic),
            bic=float(results.bic),
            adj_r2=float(results.rsquared_adj),
            sigma=float(np.sqrt(results.mse_resid)),
            n_obs=int(results.nobs),
            results=results,
        )

    def criterion(self, name: str) -> float:
        """Return the information criterion ``name`` ("aic" or "bic")."""
        if name == "aic":
            return self.aic
        if name == "bic":
            return self.bic
        raise ValueError(f"Unsupported criterion '{name}'.")

    def dense(self, names: Sequence[str]) -> tuple[np.ndarray, np.ndarray]:
        """Return estimates and standard errors aligned to ``names``.

        Names absent from the model are filled with exactly 0.0.

        Raises:
            KeyError: If the model contains a term that is not in ``names``.
        """
        unknown = [name for name in self.params.index if name not in names]
        if unknown:
            raise KeyError(f"Model terms {unknown} are not part of the predictor list")
        est = self.params.reindex(list(names), fill_value=0.0).to_numpy(dtype=float)
        se = self.bse.reindex(list(names), fill_value=0.0).to_numpy(dtype=float)
        return est, se

    def included(self, names: Sequence[str]) -> np.ndarray:
        """Boolean inclusion vector over ``names`` (nonzero estimate = included)."""
        est, _ = self.dense(names)
        return est != 0

    def summary_frame(self, names: Sequence[str] | None = None) -> pd.DataFrame:
        """Estimates and standard errors as a two-column DataFrame."""
        names = list(names) if names is not None else list(self.params.index)
        est, se = self.dense(names)
        return pd.DataFrame({"estimate": est, "std_error": se}, index=pd.Index(names, name="predictor"))


def design_matrix(df: pd.DataFrame, terms: Sequence[str]) -> pd.DataFrame:
    """Constant column named ``Intercept`` followed by the named predictors."""
    x_matrix = df.loc[:, list(terms)].astype(float)
    x_matrix.insert(0, INTERCEPT, 1.0)
    return x_matrix


def fit_ols(
    df: pd.DataFrame,
    *,
    target_col: str,
    terms: Sequence[str],
    stage: str = "fit",
) -> FittedModel:
    """Fit OLS of ``target_col`` on ``terms`` plus an intercept.

    Args:
        df: DataFrame holding the outcome and all terms.
        target_col: Outcome column.
        terms: Predictor columns (order is preserved in the result).
        stage: Pipeline stage reported in error messages.

    Raises:
        ModelFitError: If the design is rank deficient, has no residual
            degrees of freedom, or the fit yields non-finite estimates.
    """
    x_matrix = design_matrix(df, terms)
    y = df[target_col].astype(float)
    n_obs, n_params = x_matrix.shape

    if n_obs <= n_params:
        raise ModelFitError(f"{n_obs} observations cannot identify {n_params} parameters", stage=stage)
    rank = int(np.linalg.matrix_rank(x_matrix.to_numpy()))
    if rank < n_params:
        raise ModelFitError(f"Singular design matrix (rank {rank} < {n_params} columns)", stage=stage)

    results = sm.OLS(y, x_matrix).fit()
    if not (np.all(np.isfinite(results.params)) and np.all(np.isfinite(results.bse))):
        raise ModelFitError("OLS produced non-finite estimates", stage=stage)
    return FittedModel.from_results(results, terms)


def compare_models(models: Mapping[str, FittedModel]) -> pd.DataFrame:
    """Tabulate AIC/BIC, adj R², residual scale and size for fitted models.

    Information criteria are most meaningful for comparing models fit to the
    same response on the same data; lower values indicate a better trade-off of
    fit and complexity.
    """
    rows = []
    for name, model in models.items():
        rows.append(
            {
                "model": name,
                "n_terms": len(model.terms),
                "aic": model.aic,
                "bic": model.bic,
                "adj_r2": model.adj_r2,
                "sigma": model.sigma,
            },
        )
    return pd.DataFrame(rows).sort_values("aic").reset_index(drop=True)


__all__ = ["INTERCEPT", "FittedModel", "compare_models", "design_matrix", "fit_ols"]
