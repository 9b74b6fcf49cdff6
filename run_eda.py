"""
run_eda.py
Runs the figure section of the report on the transformed dataset and writes
short observations built from the computed numbers.
Run from project root.
"""
import logging

import flchain_eda.eda as eda
from flchain_eda.config import CATEGORICAL, EDA_SUMMARY, FIGS_DIR, NUMERICAL, RAW_CSV
from flchain_eda.load_data import load_data
from flchain_eda.report import CORRELATION_COLUMNS, observations, run_analysis
from flchain_eda.utils import configure_logging, save_text

logger = logging.getLogger(__name__)

def main():
    configure_logging()
    bundle = run_analysis(load_data(RAW_CSV, fetch=True))
    df = bundle.data

    # Univariate
    eda.plot_histograms(df, ["age", "kappa", "lambda", "flc", "creatinine"], FIGS_DIR)
    eda.plot_histograms(df, ["age"], FIGS_DIR, hue="sex")
    eda.plot_boxplots(df, NUMERICAL, FIGS_DIR)
    eda.plot_qq(df, "flc", FIGS_DIR)
    eda.plot_qq(df, "creatinine", FIGS_DIR)
    eda.plot_countplots(df, CATEGORICAL, FIGS_DIR)

    # Bivariate
    eda.plot_freqpoly(df, "age", FIGS_DIR, hue="death")
    eda.plot_boxplots(df, ["flc"], FIGS_DIR, by="death")
    eda.plot_boxplots(df, ["creatinine"], FIGS_DIR, by="flc_group")
    eda.plot_countplots(df, ["recruits", "flc_ratio_range"], FIGS_DIR, hue="death")
    eda.plot_jitter(df, "flc_group", "age", FIGS_DIR, hue="death")
    eda.plot_scatter(df, "kappa", "lambda", FIGS_DIR, hue="mgus", log=True)

    # Multivariate
    eda.plot_corr_heatmap(df, CORRELATION_COLUMNS, FIGS_DIR, annot=True)
    try:
        eda.plot_pairplot(df, ["kappa", "lambda", "creatinine"], FIGS_DIR, hue="death")
    except (ValueError, MemoryError) as exc:
        logger.warning("Pairplot skipped: %s", exc)
    eda.plot_group_fit(bundle.aggregate, bundle.fit, FIGS_DIR)

    save_text(EDA_SUMMARY, "\n".join(observations(bundle)) + "\n")
    print("EDA finished. Figures saved to:", FIGS_DIR)
    print("EDA summary saved to:", EDA_SUMMARY)

if __name__ == "__main__":
    main()
