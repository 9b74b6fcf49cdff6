import logging
from typing import Dict, List, Sequence

import pandas as pd
import scipy.stats as stats

from .errors import AssumptionError, SchemaError

logger = logging.getLogger(__name__)


def _require_columns(df: pd.DataFrame, columns: Sequence[str]):
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise SchemaError(f"Expected columns missing: {missing}", missing)


def _with_dead_flag(df: pd.DataFrame) -> pd.DataFrame:
    unknown = int(df["death"].isna().sum())
    if unknown:
        raise AssumptionError(f"{unknown} row(s) have no death status; they cannot be counted as alive or dead")
    return df.assign(_dead=(df["death"] == "dead").astype(int))


def group_aggregate(df: pd.DataFrame, group_col: str = "flc_group") -> pd.DataFrame:
    """
    One row per observed level of group_col (in level order) with the FLC range,
    mean FLC and the fraction of dead subjects.
    """
    _require_columns(df, [group_col, "flc", "death"])
    unassigned = int(df[group_col].isna().sum())
    if unassigned:
        raise AssumptionError(f"{unassigned} row(s) have no {group_col}")

    grouped = _with_dead_flag(df).groupby(group_col, observed=True, sort=True)
    table = grouped.agg(
        n=("_dead", "size"),
        n_dead=("_dead", "sum"),
        flc_min=("flc", "min"),
        flc_max=("flc", "max"),
        flc_mean=("flc", "mean"),
    ).reset_index()
    table["death_rate"] = table["n_dead"] / table["n"]
    logger.info("Aggregated %d rows into %d %s levels", len(df), len(table), group_col)
    return table


def rate_by(df: pd.DataFrame, column: str, with_death_rate: bool = True) -> pd.DataFrame:
    """
    Counts, share of rows and death rate per level of a categorical column.
    Pass with_death_rate=False for columns only recorded for dead subjects (chapter).
    """
    _require_columns(df, [column, "death"])
    table = (
        _with_dead_flag(df)
        .groupby(column, observed=True, sort=True)
        .agg(n=("_dead", "size"), n_dead=("_dead", "sum"))
        .reset_index()
    )
    table["share"] = table["n"] / table["n"].sum()
    if not with_death_rate:
        return table.drop(columns=["n_dead"])
    table["death_rate"] = table["n_dead"] / table["n"]
    return table


def creatinine_summary(df: pd.DataFrame, by: str = "flc_group") -> pd.DataFrame:
    """Creatinine per group over recorded values only; n_missing counts the rows left out."""
    _require_columns(df, [by, "creatinine"])
    present = df["creatinine"].notna()

    summary = (
        df.loc[present]
        .groupby(by, observed=True, sort=True)["creatinine"]
        .agg(n="count", mean="mean", median="median", min="min", max="max")
    )
    missing = (~present).groupby(df[by], observed=True, sort=True).sum().rename("n_missing")

    summary = summary.reindex(missing.index)
    summary["n"] = summary["n"].fillna(0).astype(int)
    summary["n_missing"] = missing.astype(int)
    logger.info("creatinine missing for %d of %d rows; excluded from summaries", int((~present).sum()), len(df))
    return summary.reset_index()


def correlation_table(df: pd.DataFrame, columns: List[str]) -> pd.DataFrame:
    _require_columns(df, columns)
    return df[columns].corr(method="pearson")


def pearson(x: pd.Series, y: pd.Series) -> Dict[str, float]:
    """Pearson r and p-value over the rows where both x and y are present."""
    paired = pd.concat([x, y], axis=1).dropna()
    n = len(paired)
    if n < 2:
        raise AssumptionError(f"Correlation needs at least 2 complete pairs, got {n}")
    r, p_value = stats.pearsonr(paired.iloc[:, 0], paired.iloc[:, 1])
    return {"r": float(r), "p_value": float(p_value), "n": n}
