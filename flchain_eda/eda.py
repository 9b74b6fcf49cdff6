"""
eda.py
Functions to create and save the report figures:
- histograms and frequency polygons
- boxplots (optionally split by a categorical column)
- qqplots
- jittered strip plots and scatter plots
- correlation heatmap
- countplots
- pairplot (subset)
- group-level death rate against mean FLC with the fitted line
Each plotting function saves a PNG into the provided outdir and returns the filepath.
"""

import os
from typing import List, Sequence, Optional

import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns
import pandas as pd
import scipy.stats as stats

from .utils import ensure_dir

sns.set(style="whitegrid", context="talk")


def _save_fig(fig, filepath: str):
    """Tighten, save and close a Matplotlib figure to avoid memory leaks."""
    fig.tight_layout()
    fig.savefig(filepath, dpi=150)
    plt.close(fig)
    return filepath


def _levels(df: pd.DataFrame, col: str) -> list:
    if isinstance(df[col].dtype, pd.CategoricalDtype):
        observed = set(df[col].dropna().unique())
        return [c for c in df[col].cat.categories if c in observed]
    return sorted(df[col].dropna().unique())


def _suffix(hue: Optional[str]) -> str:
    return f"_by_{hue}" if hue else ""


def plot_histograms(df: pd.DataFrame, cols: Sequence[str], outdir: str, hue: Optional[str] = None) -> List[str]:
    """Create and save one histogram per column in cols. Returns list of filepaths."""
    ensure_dir(outdir)
    saved = []
    for col in cols:
        fig, ax = plt.subplots(figsize=(6, 4))
        if hue:
            sns.histplot(data=df, x=col, hue=hue, kde=True, ax=ax)
        else:
            sns.histplot(df[col].dropna(), kde=True, ax=ax, color="#2b8cbe")
        ax.set_title(f"Histogram of {col}")
        ax.set_xlabel(col)
        ax.set_ylabel("Count")
        path = os.path.join(outdir, f"hist_{col}{_suffix(hue)}.png")
        saved.append(_save_fig(fig, path))
    return saved


def plot_freqpoly(df: pd.DataFrame, col: str, outdir: str, hue: Optional[str] = None, bins: int = 30) -> str:
    """Frequency polygon of col, one density-scaled line per hue level."""
    ensure_dir(outdir)
    fig, ax = plt.subplots(figsize=(7, 4))
    sns.histplot(
        data=df, x=col, hue=hue, bins=bins, element="poly", fill=False,
        stat="density", common_norm=False, ax=ax,
    )
    ax.set_title(f"Frequency polygon of {col}" + (f" by {hue}" if hue else ""))
    path = os.path.join(outdir, f"freqpoly_{col}{_suffix(hue)}.png")
    return _save_fig(fig, path)


def plot_boxplots(df: pd.DataFrame, cols: Sequence[str], outdir: str, by: Optional[str] = None) -> List[str]:
    """Create and save boxplot per column in cols, split by `by` when given. Returns list of filepaths."""
    ensure_dir(outdir)
    saved = []
    for col in cols:
        fig, ax = plt.subplots(figsize=(7, 4))
        if by:
            sns.boxplot(data=df, x=by, y=col, order=_levels(df, by), color="#f03b20", ax=ax)
            ax.set_title(f"{col} by {by}")
        else:
            sns.boxplot(x=df[col], color="#f03b20", ax=ax)
            ax.set_title(f"Boxplot of {col}")
            ax.set_xlabel(col)
        path = os.path.join(outdir, f"box_{col}{_suffix(by)}.png")
        saved.append(_save_fig(fig, path))
    return saved


def plot_qq(df: pd.DataFrame, col: str, outdir: str) -> str:
    """Create and save a Q-Q plot for a single column and return filepath."""
    ensure_dir(outdir)
    fig = plt.figure(figsize=(6, 6))
    ax = fig.add_subplot(111)
    stats.probplot(df[col].dropna(), dist="norm", plot=ax)
    ax.set_title(f"Q-Q plot of {col}")
    path = os.path.join(outdir, f"qq_{col}.png")
    return _save_fig(fig, path)


def plot_jitter(df: pd.DataFrame, x: str, y: str, outdir: str, hue: Optional[str] = None, jitter: float = 0.3) -> str:
    """Jittered strip plot of numeric y against categorical x."""
    ensure_dir(outdir)
    fig, ax = plt.subplots(figsize=(8, 5))
    sns.stripplot(
        data=df, x=x, y=y, hue=hue, order=_levels(df, x), jitter=jitter,
        size=2, alpha=0.4, ax=ax,
    )
    ax.set_title(f"{y} by {x}" + (f", coloured by {hue}" if hue else ""))
    path = os.path.join(outdir, f"jitter_{y}_{x}{_suffix(hue)}.png")
    return _save_fig(fig, path)


def plot_scatter(df: pd.DataFrame, x: str, y: str, outdir: str, hue: Optional[str] = None, log: bool = False) -> str:
    ensure_dir(outdir)
    fig, ax = plt.subplots(figsize=(7, 6))
    sns.scatterplot(data=df, x=x, y=y, hue=hue, s=10, alpha=0.5, linewidth=0, ax=ax)
    if log:
        ax.set_xscale("log")
        ax.set_yscale("log")
    ax.set_title(f"{y} vs {x}")
    path = os.path.join(outdir, f"scatter_{y}_{x}{_suffix(hue)}.png")
    return _save_fig(fig, path)


def plot_corr_heatmap(df: pd.DataFrame, cols: Sequence[str], outdir: str, annot: bool = True) -> str:
    """Compute correlation matrix over cols, plot heatmap, save and return filepath."""
    ensure_dir(outdir)
    corr = df[list(cols)].corr()
    fig, ax = plt.subplots(figsize=(8, 6))
    sns.heatmap(corr, annot=annot, fmt=".2f", cmap="vlag", center=0, ax=ax)
    ax.set_title("Correlation heatmap")
    path = os.path.join(outdir, "corr_heatmap.png")
    return _save_fig(fig, path)


def plot_countplots(df: pd.DataFrame, cols: Sequence[str], outdir: str, hue: Optional[str] = None) -> List[str]:
    """Create vertical countplots for given categorical cols and save them."""
    ensure_dir(outdir)
    saved = []
    for col in cols:
        fig, ax = plt.subplots(figsize=(7, 4))
        if hue:
            sns.countplot(data=df, x=col, hue=hue, order=_levels(df, col), ax=ax)
        else:
            sns.countplot(data=df, x=col, order=_levels(df, col), color="#2b8cbe", ax=ax)
        ax.set_title(f"Countplot of {col}")
        ax.set_xlabel(col)
        ax.set_ylabel("Count")
        ax.tick_params(axis="x", labelrotation=30)
        path = os.path.join(outdir, f"count_{col}{_suffix(hue)}.png")
        saved.append(_save_fig(fig, path))
    return saved


def plot_pairplot(df: pd.DataFrame, cols: Sequence[str], outdir: str, hue: Optional[str] = None) -> str:
    """
    Create and save a seaborn pairplot for a subset of columns.
    Use sparingly for a small number of features to avoid performance issues.
    """
    ensure_dir(outdir)
    pp = sns.pairplot(df[list(cols) + ([hue] if hue else [])].dropna(), hue=hue, diag_kind="kde", palette="crest")
    path = os.path.join(outdir, "pairplot_subset.png")
    # PairGrid manages its own figure
    pp.savefig(path)
    plt.close("all")
    return path


def plot_group_fit(aggregate: pd.DataFrame, fit, outdir: str) -> str:
    """Group death rate against group mean FLC, labelled by group, with the fitted line."""
    ensure_dir(outdir)
    fig, ax = plt.subplots(figsize=(7, 5))
    sns.scatterplot(data=aggregate, x="flc_mean", y="death_rate", s=60, ax=ax)
    for row in aggregate.itertuples(index=False):
        ax.annotate(str(row.flc_group), (row.flc_mean, row.death_rate), textcoords="offset points", xytext=(4, 4), fontsize=9)
    grid = np.linspace(aggregate["flc_mean"].min(), aggregate["flc_mean"].max(), 50)
    ax.plot(grid, fit.predict(grid), color="#f03b20", label=f"OLS, R2={fit.r_squared:.3f}")
    ax.set_xlabel("Mean FLC in group")
    ax.set_ylabel("Death rate")
    ax.set_title("Death rate vs mean FLC by flc_group")
    ax.legend()
    path = os.path.join(outdir, "group_death_rate_fit.png")
    return _save_fig(fig, path)
