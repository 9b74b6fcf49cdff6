import io
import logging
import os

import pandas as pd

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def configure_logging(level=None):
    level = level or os.environ.get("FLCHAIN_LOG_LEVEL", "INFO")
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def ensure_dir(path):
    os.makedirs(path, exist_ok=True)


def save_text(path, text):
    ensure_dir(os.path.dirname(path) or ".")
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)


def structure_text(df):
    buf = io.StringIO()
    df.info(buf=buf)
    return buf.getvalue()


def class_distribution(df, target_col="death"):
    counts = df[target_col].value_counts(dropna=False, sort=False)
    return pd.DataFrame({
        "count": counts,
        "percent": (counts / counts.sum() * 100).round(2),
    })


def save_initial_audit(df, outdir, target_col="death", prefix=""):
    """Write head, structure, describe and target distribution text files; returns their paths."""
    ensure_dir(outdir)
    paths = {}

    def _write(name, text):
        path = os.path.join(outdir, f"{prefix}{name}.txt")
        save_text(path, text)
        paths[name] = path

    _write("head", df.head(10).to_csv(index=False))
    _write("info", structure_text(df))
    _write("describe", df.describe(include="all").to_string())

    if target_col in df.columns:
        _write("class_distribution", class_distribution(df, target_col).to_string())
    else:
        _write(
            "class_distribution",
            f"Target column '{target_col}' not found in DataFrame columns: {list(df.columns)}",
        )
    return paths
