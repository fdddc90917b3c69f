r"""Post-selection shrinkage factors from leave-one-out (DFBETA) estimates.

For a linear model with design :math:`X` (intercept in the first column),
the coefficients without observation :math:`i` are

:math:`\hat\beta_{(-i)} = \hat\beta - (X'X)^{-1} x_i \frac{e_i}{1 - h_{ii}}`,

with residual :math:`e_i` and leverage :math:`h_{ii}`. Shrinkage factors are
obtained by regressing the outcome on leave-one-out predictions:

- global: :math:`y_i = a + c \sum_{j \ge 1} x_{ij} \hat\beta_{(-i)j}`, one factor :math:`c`;
- parameterwise: :math:`y_i = a + \sum_{j \ge 1} c_j\, x_{ij} \hat\beta_{(-i)j}`,
  one factor per predictor with the covariance of the :math:`c_j`.

Factors below 1 indicate that selected effects are overestimated
(Sauerbrei 1999; Dunkler, Sauerbrei & Heinze 2016).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

import numpy as np
import pandas as pd
import statsmodels.api as sm

from bootstab.errors import ModelFitError

from .ols_helper import INTERCEPT, FittedModel, design_matrix


ShrinkageMode = Literal["global", "parameterwise"]
GLOBAL = "global"


@dataclass(frozen=True)
class ShrinkageResult:
    """Shrinkage factors and their covariance.

    Attributes:
        mode: "global" or "parameterwise".
        factors: Factor per predictor (parameterwise) or a single entry
            labelled ``"global"``.
        covariance: Covariance matrix of the factors (calibration intercept excluded).
        intercept: Intercept of the calibration regression.
    """

    mode: ShrinkageMode
    factors: pd.Series
    covariance: pd.DataFrame
    intercept: float

    @property
    def se(self) -> pd.Series:
        """Standard errors of the shrinkage factors."""
        return pd.Series(np.sqrt(np.diag(self.covariance.to_numpy())), index=self.factors.index, name="se")

    @property
    def correlation(self) -> pd.DataFrame:
        """Correlation matrix of the shrinkage factors."""
        se = self.se.to_numpy()
        corr = self.covariance.to_numpy() / np.outer(se, se)
        return pd.DataFrame(corr, index=self.factors.index, columns=self.factors.index)

    def table(self, decimals: int | None = None) -> pd.DataFrame:
        """Factors, their standard errors and (parameterwise) correlations."""
        out = pd.concat([self.factors.rename("shrinkage_factor"), self.se], axis=1)
        if self.mode == "parameterwise":
            out = out.join(self.correlation.add_prefix("corr_"))
        out = out.rename_axis("predictor")
        return out.round(decimals) if decimals is not None else out

    def shrunken_params(self, model: FittedModel, data: pd.DataFrame, outcome: str) -> pd.Series:
        """Apply the factors to ``model`` and re-estimate the intercept.

        The intercept is set so that the shrunken model reproduces the mean
        outcome at the mean of the predictors.
        """
        terms = list(model.terms)
        slopes = model.params.loc[terms]
        factors = self.factors.loc[terms] if self.mode == "parameterwise" else float(self.factors.iloc[0])
        shrunk = slopes * factors
        intercept = float(data[outcome].mean() - data.loc[:, terms].mean() @ shrunk)
        return pd.concat([pd.Series({INTERCEPT: intercept}), shrunk]).rename("shrunken_est")


def leave_one_out_params(model: FittedModel, data: pd.DataFrame, outcome: str) -> pd.DataFrame:
    """Coefficients re-estimated without each observation (rows = observations).

    Uses the DFBETA of statsmodels' influence measures on the stored fit; the
    model is refitted on ``data`` when no matching fit is attached.
    """
    x_frame = design_matrix(data, model.terms)
    results = model.results
    if results is None or int(results.nobs) != len(data):
        results = sm.OLS(data[outcome].astype(float), x_frame).fit()

    influence = results.get_influence()
    leverage = influence.hat_matrix_diag
    if np.any(leverage >= 1 - 1e-10):
        raise ModelFitError("Observation with leverage 1; leave-one-out estimates undefined", stage="shrinkage")
    beta = np.asarray(results.params, dtype=float)
    return pd.DataFrame(beta - influence.dfbeta, columns=x_frame.columns, index=data.index)


def shrink(
    model: FittedModel,
    data: pd.DataFrame,
    outcome: str,
    *,
    mode: ShrinkageMode = "global",
) -> ShrinkageResult:
    """Estimate global or parameterwise shrinkage factors for a fitted model.

    Args:
        model: Model whose coefficients are shrunk (usually the selected model).
        data: Data the model was fitted on.
        outcome: Response column.
        mode: "global" (one factor) or "parameterwise" (one factor per predictor).

    Raises:
        ValueError: If the model has no predictors or ``mode`` is unknown.
    """
    if mode not in {"global", "parameterwise"}:
        raise ValueError("mode must be one of: global, parameterwise")
    terms = list(model.terms)
    if not terms:
        raise ValueError("Shrinkage requires at least one predictor besides the intercept.")

    loo = leave_one_out_params(model, data, outcome)
    contributions = data.loc[:, terms].astype(float) * loo.loc[:, terms]
    if mode == GLOBAL:
        regressors = contributions.sum(axis=1).to_frame(GLOBAL)
    else:
        regressors = contributions

    y = data[outcome].astype(float)
    calibration = sm.OLS(y, sm.add_constant(regressors, has_constant="add")).fit()
    names = list(regressors.columns)
    cov = calibration.cov_params().loc[names, names]
    return ShrinkageResult(
        mode=mode,
        factors=pd.Series(calibration.params.loc[names], name="shrinkage_factor"),
        covariance=cov,
        intercept=float(calibration.params["const"]),
    )


__all__ = ["ShrinkageResult", "leave_one_out_params", "shrink"]
