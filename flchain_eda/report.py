"""Run the analysis stages once and render their tables and narrative."""

import logging
import os
from dataclasses import dataclass
from typing import Dict, List

import numpy as np
import pandas as pd

from .aggregate import correlation_table, creatinine_summary, group_aggregate, pearson, rate_by
from .config import EVAL_SAMPLE_SIZE, RATE_COLUMNS, SEED
from .regression import DeathRateFit, SampleEvaluation, evaluate_on_sample, fit_death_rate_model
from .transform import transform
from .utils import ensure_dir, structure_text

logger = logging.getLogger(__name__)

CORRELATION_COLUMNS = ["age", "kappa", "lambda", "flc", "creatinine"]


@dataclass(frozen=True)
class AnalysisBundle:
    data: pd.DataFrame
    aggregate: pd.DataFrame
    rates: Dict[str, pd.DataFrame]
    chapter_counts: pd.DataFrame
    creatinine: pd.DataFrame
    correlations: pd.DataFrame
    group_correlation: Dict[str, float]
    kappa_lambda_correlation: Dict[str, float]
    fit: DeathRateFit
    evaluation: SampleEvaluation


def run_analysis(raw: pd.DataFrame, seed: int = SEED, sample_size: int = EVAL_SAMPLE_SIZE,
                 on_zero_lambda: str = "flag") -> AnalysisBundle:
    data = transform(raw, on_zero_lambda=on_zero_lambda)
    aggregate = group_aggregate(data)
    fit = fit_death_rate_model(aggregate)
    evaluation = evaluate_on_sample(data, fit, sample_size, np.random.default_rng(seed))

    return AnalysisBundle(
        data=data,
        aggregate=aggregate,
        rates={col: rate_by(data, col) for col in RATE_COLUMNS},
        chapter_counts=rate_by(data, "chapter", with_death_rate=False),
        creatinine=creatinine_summary(data, by="flc_group"),
        correlations=correlation_table(data, CORRELATION_COLUMNS),
        group_correlation=pearson(aggregate["flc_mean"], aggregate["death_rate"]),
        kappa_lambda_correlation=pearson(data["kappa"], data["lambda"]),
        fit=fit,
        evaluation=evaluation,
    )


def _section(label: str, body: str) -> str:
    return f"===== {label} =====\n{body}\n"


def format_summary(bundle: AnalysisBundle, head_rows: int = 6) -> str:
    fit, ev = bundle.fit, bundle.evaluation
    gc, kl = bundle.group_correlation, bundle.kappa_lambda_correlation
    parts = [
        _section("First rows", bundle.data.head(head_rows).to_string()),
        _section("Structure", structure_text(bundle.data)),
        _section("Summary", bundle.data.describe(include="all").to_string()),
        _section("Group aggregate by flc_group", bundle.aggregate.to_string(index=False)),
    ]
    for col, table in bundle.rates.items():
        parts.append(_section(f"Death rate by {col}", table.to_string(index=False)))
    parts.append(_section("Cause of death (dead subjects only)", bundle.chapter_counts.to_string(index=False)))
    parts += [
        _section("Creatinine by flc_group (missing excluded)", bundle.creatinine.to_string(index=False)),
        _section("Correlation matrix (pairwise complete)", bundle.correlations.round(3).to_string()),
        _section(
            "Correlation scalars",
            f"cor(flc_mean, death_rate) = {gc['r']:.4f} (p={gc['p_value']:.3g}, n={gc['n']})\n"
            f"cor(kappa, lambda)        = {kl['r']:.4f} (p={kl['p_value']:.3g}, n={kl['n']})",
        ),
        _section(
            "Linear model: death_rate ~ flc_mean",
            f"intercept            = {fit.intercept:.6f}\n"
            f"slope                = {fit.slope:.6f}\n"
            f"R-squared            = {fit.r_squared:.4f} ({fit.r_squared * 100:.2f}%)\n"
            f"residual std. error  = {fit.residual_std_error:.6f} on {fit.n_groups - 2} df",
        ),
        _section(
            f"Random sample check (n={ev.sample_size})",
            f"mean flc             = {ev.mean_flc:.4f}\n"
            f"predicted death rate = {ev.predicted_death_rate:.4f}\n"
            f"observed death rate  = {ev.observed_death_rate:.4f}\n"
            f"absolute error       = {ev.absolute_error:.4f}",
        ),
    ]
    return "\n".join(parts)


def observations(bundle: AnalysisBundle) -> List[str]:
    """Short narrative lines built from the computed numbers."""
    data, agg, fit, ev = bundle.data, bundle.aggregate, bundle.fit, bundle.evaluation
    dead_share = float((data["death"] == "dead").mean())
    lowest, highest = agg.iloc[0], agg.iloc[-1]
    by_sex = bundle.rates["sex"].set_index("sex")["death_rate"]
    by_mgus = bundle.rates["mgus"].set_index("mgus")["n"]
    creat_missing = int(bundle.creatinine["n_missing"].sum())
    n_undefined = int((~data["flc_ratio_defined"]).sum())

    lines = [
        f"Dataset: {len(data)} subjects, {dead_share:.1%} died during follow-up.",
        f"Age ranges from {data['age'].min()} to {data['age'].max()} (median {data['age'].median():.0f}).",
        "Death rate by sex: " + ", ".join(f"{k} {v:.1%}" for k, v in by_sex.items()) + ".",
        "MGUS diagnoses: " + ", ".join(f"{k} {v}" for k, v in by_mgus.items()) + ".",
        f"kappa and lambda are strongly related (r = {bundle.kappa_lambda_correlation['r']:.3f}).",
        f"Death rate rises from {lowest['death_rate']:.1%} in flc_group {lowest['flc_group']} "
        f"to {highest['death_rate']:.1%} in flc_group {highest['flc_group']}.",
        f"Group mean FLC and death rate correlate at r = {bundle.group_correlation['r']:.3f}; "
        f"the linear fit explains {fit.r_squared:.2%} of the between-group variation "
        f"(slope {fit.slope:.4f} per unit FLC).",
        f"On a random sample of {ev.sample_size} subjects the model predicts a death rate of "
        f"{ev.predicted_death_rate:.1%} against an observed {ev.observed_death_rate:.1%}.",
        f"creatinine is missing for {creat_missing} subjects; they are left out of creatinine summaries.",
    ]
    if n_undefined:
        lines.append(f"flc_ratio is undefined for {n_undefined} subjects with lambda == 0.")
    return lines


def save_tables(bundle: AnalysisBundle, outdir: str) -> List[str]:
    ensure_dir(outdir)
    tables = {
        "group_aggregate.csv": bundle.aggregate,
        "creatinine_by_flc_group.csv": bundle.creatinine,
        "chapter_counts.csv": bundle.chapter_counts,
        "correlations.csv": bundle.correlations.reset_index().rename(columns={"index": "column"}),
        "model_fit.csv": pd.DataFrame([vars(bundle.fit)]),
        "sample_evaluation.csv": pd.DataFrame([{
            **vars(bundle.evaluation), "absolute_error": bundle.evaluation.absolute_error,
        }]),
    }
    for col, table in bundle.rates.items():
        tables[f"death_rate_by_{col}.csv"] = table

    saved = []
    for name, table in tables.items():
        path = os.path.join(outdir, name)
        table.to_csv(path, index=False)
        saved.append(path)
    logger.info("Saved %d tables to %s", len(saved), outdir)
    return saved
