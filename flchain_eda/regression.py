"""
regression.py
Illustrative linear model of group death rate on group mean FLC.

The model is fitted on the group aggregate table (one row per flc_group) and
checked against a random sample of subjects: the sample's mean FLC is fed to
the fitted line and the prediction is compared with the sample's observed
death fraction. This is a sanity check, not a train/test split.
"""

import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd
import statsmodels.api as sm

from .errors import DegenerateRegressionError, SchemaError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeathRateFit:
    intercept: float
    slope: float
    r_squared: float
    residual_std_error: float
    n_groups: int

    def predict(self, flc_mean):
        return self.intercept + self.slope * flc_mean


@dataclass(frozen=True)
class SampleEvaluation:
    sample_size: int
    mean_flc: float
    observed_death_rate: float
    predicted_death_rate: float

    @property
    def absolute_error(self) -> float:
        return abs(self.predicted_death_rate - self.observed_death_rate)


def fit_death_rate_model(aggregate: pd.DataFrame) -> DeathRateFit:
    """Fit death_rate = intercept + slope * flc_mean by ordinary least squares."""
    missing = [c for c in ("flc_mean", "death_rate") if c not in aggregate.columns]
    if missing:
        raise SchemaError(f"Group aggregate is missing columns: {missing}", missing)

    table = aggregate[["flc_mean", "death_rate"]].dropna()
    n = len(table)
    if n < 2:
        raise DegenerateRegressionError(f"Regression needs at least 2 groups, got {n}")
    if table["flc_mean"].nunique() < 2:
        raise DegenerateRegressionError("flc_mean is constant across groups; slope is not identifiable")

    result = sm.OLS(table["death_rate"], sm.add_constant(table["flc_mean"])).fit()

    if result.df_resid > 0:
        rse = float(np.sqrt(result.scale))
    else:
        # two points: the line is exact and the residual error has no degrees of freedom
        logger.warning("Only %d groups; residual standard error is undefined", n)
        rse = float("nan")

    fit = DeathRateFit(
        intercept=float(result.params["const"]),
        slope=float(result.params["flc_mean"]),
        r_squared=float(result.rsquared),
        residual_std_error=rse,
        n_groups=n,
    )
    logger.info("Fitted death_rate ~ flc_mean on %d groups: slope=%.4f R2=%.4f", n, fit.slope, fit.r_squared)
    return fit


def evaluate_on_sample(df: pd.DataFrame, fit: DeathRateFit, sample_size: int, rng: np.random.Generator) -> SampleEvaluation:
    if not 1 <= sample_size <= len(df):
        raise ValueError(f"sample_size must be between 1 and {len(df)}, got {sample_size}")

    positions = np.sort(rng.choice(len(df), size=sample_size, replace=False))
    sample = df.iloc[positions]
    mean_flc = float(sample["flc"].mean())
    evaluation = SampleEvaluation(
        sample_size=sample_size,
        mean_flc=mean_flc,
        observed_death_rate=float((sample["death"] == "dead").mean()),
        predicted_death_rate=float(fit.predict(mean_flc)),
    )
    logger.info(
        "Sample of %d: predicted death rate %.4f vs observed %.4f",
        sample_size, evaluation.predicted_death_rate, evaluation.observed_death_rate,
    )
    return evaluation
