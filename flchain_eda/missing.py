import os
import pandas as pd

from .utils import ensure_dir

def missing_table(df: pd.DataFrame) -> pd.DataFrame:

    counts = df.isna().sum()
    table = pd.DataFrame({
        "column": counts.index,
        "missing_count": counts.values.astype(int),
        "missing_percent": (counts.values / max(len(df), 1) * 100).round(3),
    })
    return table.sort_values("missing_percent", ascending=False, kind="stable").reset_index(drop=True)

def missing_by_group(df: pd.DataFrame, column: str, by: str) -> pd.DataFrame:
    """Share of rows missing `column` within each level of `by`."""
    flag = df[column].isna()
    table = flag.groupby(df[by], observed=True).agg(["size", "sum"]).rename(columns={"size": "n", "sum": "n_missing"})
    table["missing_percent"] = (table["n_missing"] / table["n"] * 100).round(3)
    return table.reset_index()

def save_missing_report(df: pd.DataFrame, outdir: str, filename: str = "missing_report.csv"):

    ensure_dir(outdir)
    table = missing_table(df)
    csv_path = os.path.join(outdir, filename)
    txt_path = os.path.join(outdir, filename.replace(".csv", ".txt"))

    table.to_csv(csv_path, index=False)

    with open(txt_path, "w", encoding="utf-8") as f:
        f.write("column,missing_count,missing_percent\n")
        for row in table.itertuples(index=False):
            f.write(f"{row.column},{row.missing_count},{row.missing_percent}%\n")

    return csv_path

def heuristic_missingness_assessment(df: pd.DataFrame, target_col: str = "death", threshold_pct: float = 5.0) -> str:

    table = missing_table(df)
    # chapter is only recorded for subjects who died, so it is not a data gap
    table = table[(table["column"] != "chapter") & (table["missing_count"] > 0)]
    if table.empty:
        return "No missing values detected outside chapter."

    if target_col in df.columns:
        notes = []
        for col in table["column"]:
            by_target = missing_by_group(df, col, target_col)
            parts = "; ".join(f"{row[target_col]}:{row['missing_percent']}%" for _, row in by_target.iterrows())
            notes.append(f"{col} missing by {target_col}: {parts}")
        target_note = " ".join(notes)
    else:
        target_note = "Target column not found; cannot compare missingness by class."

    high = table[table["missing_percent"] > threshold_pct]
    if high.empty:
        return f"Missing values present but all columns <= {threshold_pct}% missing (likely low or random). {target_note}"
    cols = ", ".join(high["column"].tolist())
    return (
        f"Missingness above {threshold_pct}% in: {cols}. Rows missing these values are excluded "
        f"from any summary that uses them. {target_note}"
    )
