"""
transform.py
Turns the raw flchain table into the tidy Subject Record table used by every
later report section:
- consistent column names (sample_year, flc_group)
- categorical columns with fixed, declared levels
- verified integer columns (age, sample_year, futime)
- derived columns: recruits, flc, flc_ratio, flc_ratio_range, flc_ratio_defined
The input frame is never modified; transform() always returns a new frame.
"""

import logging
from typing import Dict, Iterable, List, Optional

import numpy as np
import pandas as pd

from .config import (
    BINARY_LABELS,
    CATEGORY_LEVELS,
    CHAPTER_OTHER,
    CHAPTER_REFERENCE,
    CHAPTER_THRESHOLD,
    FLC_RATIO_BINS,
    FLC_RATIO_LABELS,
    INTEGRAL_COLUMNS,
    ORDERED_CATEGORIES,
    RAW_COLUMNS,
    RECRUIT_BINS,
    RECRUIT_LABELS,
    RENAME_MAP,
    SEX_LABELS,
)
from .errors import AssumptionError, IntegralityError, SchemaError, UndefinedRatioError

logger = logging.getLogger(__name__)

ZERO_LAMBDA_POLICIES = ("raise", "flag")


def _category_dtype(column: str) -> pd.CategoricalDtype:
    return pd.CategoricalDtype(CATEGORY_LEVELS[column], ordered=column in ORDERED_CATEGORIES)


def _require_columns(df: pd.DataFrame, columns: Iterable[str]):
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise SchemaError(f"Expected columns missing: {missing}", missing)


def _recode(series: pd.Series, labels: Dict, column: str) -> pd.Series:
    """Map raw codes to labels; a missing code or one outside the mapping is a schema error."""
    if series.isna().any():
        n_missing = int(series.isna().sum())
        raise SchemaError(f"Column '{column}' has {n_missing} missing value(s)", [column])
    mapped = series.map(labels)
    unknown = series.notna() & mapped.isna()
    if unknown.any():
        codes = sorted(series[unknown].astype(str).unique())
        raise SchemaError(f"Unexpected codes in column '{column}': {codes}", [column])
    return mapped.astype(_category_dtype(column))


def cast_integral(df: pd.DataFrame, columns: List[str] = INTEGRAL_COLUMNS) -> pd.DataFrame:
    """Cast columns to int64 after checking every value is already a whole number."""
    _require_columns(df, columns)
    out = df.copy()
    for col in columns:
        s = out[col]
        if not pd.api.types.is_numeric_dtype(s):
            raise SchemaError(f"Column '{col}' must be numeric to be cast to integer", [col])
        bad = s.isna() | (s % 1 != 0)
        if bad.any():
            raise IntegralityError(col, s[bad].tolist())
        out[col] = s.astype("int64")
    return out


def collapse_chapter(
    chapter: pd.Series,
    reference: List[str] = CHAPTER_REFERENCE,
    threshold: float = CHAPTER_THRESHOLD,
) -> pd.Series:
    """
    Keep the reference causes of death that make up at least `threshold` of the
    non-missing values and relabel everything else as "Others". Missing values
    (subjects still alive) stay missing.
    """
    values = chapter.astype("object")
    shares = values.dropna().value_counts(normalize=True)
    kept = [label for label in reference if shares.get(label, 0.0) >= threshold]

    collapsed = values.where(values.isna() | values.isin(kept), CHAPTER_OTHER)
    folded = sorted(set(shares.index) - set(kept) - {CHAPTER_OTHER})
    if folded:
        logger.info("Collapsed %d chapter label(s) into '%s'", len(folded), CHAPTER_OTHER)
        logger.debug("Collapsed chapter labels: %s", folded)
    return collapsed.astype(pd.CategoricalDtype(list(reference) + [CHAPTER_OTHER]))


def bucket_recruits(sample_year: pd.Series) -> pd.Series:
    recruits = pd.cut(sample_year, bins=RECRUIT_BINS, labels=RECRUIT_LABELS, right=True)
    outside = recruits.isna()
    if outside.any():
        years = sorted(sample_year[outside].unique().tolist())
        raise AssumptionError(
            f"sample_year outside ({RECRUIT_BINS[0]}, {RECRUIT_BINS[-1]}] cannot be bucketed: {years}"
        )
    return recruits.astype(_category_dtype("recruits"))


def add_flc_columns(df: pd.DataFrame, on_zero_lambda: str = "flag") -> pd.DataFrame:
    """Add flc = kappa + lambda and flc_ratio = kappa / lambda, guarding lambda == 0."""
    if on_zero_lambda not in ZERO_LAMBDA_POLICIES:
        raise ValueError(f"on_zero_lambda must be one of {ZERO_LAMBDA_POLICIES}, got {on_zero_lambda!r}")
    _require_columns(df, ["kappa", "lambda"])

    out = df.copy()
    negative = (out["kappa"] < 0) | (out["lambda"] < 0)
    if negative.any():
        raise AssumptionError(f"{int(negative.sum())} row(s) have negative kappa or lambda")

    zero = out["lambda"] == 0
    n_zero = int(zero.sum())
    if n_zero:
        if on_zero_lambda == "raise":
            raise UndefinedRatioError(n_zero)
        logger.warning("lambda == 0 for %d row(s); flc_ratio left undefined and flagged", n_zero)

    out["flc"] = out["kappa"] + out["lambda"]
    out["flc_ratio"] = out["kappa"] / out["lambda"].where(~zero)
    out["flc_ratio_defined"] = out["flc_ratio"].notna()
    return out


def bucket_flc_ratio(flc_ratio: pd.Series) -> pd.Series:
    """low below the reference interval, normal inside it (inclusive), high above it."""
    lower, upper = FLC_RATIO_BINS
    labels = np.select([flc_ratio < lower, flc_ratio <= upper], FLC_RATIO_LABELS[:2], default=FLC_RATIO_LABELS[2])
    ranged = pd.Series(labels, index=flc_ratio.index).where(flc_ratio.notna())
    return ranged.astype(_category_dtype("flc_ratio_range"))


def transform(raw: pd.DataFrame, on_zero_lambda: str = "flag", chapter_reference: Optional[List[str]] = None) -> pd.DataFrame:
    _require_columns(raw, RAW_COLUMNS)
    df = raw[RAW_COLUMNS].rename(columns=RENAME_MAP)

    df = cast_integral(df, INTEGRAL_COLUMNS + ["flc_group"])
    df["sex"] = _recode(df["sex"], SEX_LABELS, "sex")
    df["flc_group"] = _recode(df["flc_group"], {g: g for g in CATEGORY_LEVELS["flc_group"]}, "flc_group")
    for col, labels in BINARY_LABELS.items():
        df[col] = _recode(df[col], labels, col)
    df["chapter"] = collapse_chapter(df["chapter"], reference=chapter_reference or CHAPTER_REFERENCE)

    df["recruits"] = bucket_recruits(df["sample_year"])
    df = add_flc_columns(df, on_zero_lambda=on_zero_lambda)
    df["flc_ratio_range"] = bucket_flc_ratio(df["flc_ratio"])

    logger.info("Transformed %d rows into %d columns", df.shape[0], df.shape[1])
    return df
