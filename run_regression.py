"""
run_regression.py
Group aggregate, death rate ~ mean FLC fit and the random-sample check.
Prints the tabular summary and saves it with the result tables.
"""

from flchain_eda.config import ANALYSIS_SUMMARY, RAW_CSV, RESULTS_DIR, SEED, EVAL_SAMPLE_SIZE
from flchain_eda.load_data import load_data
from flchain_eda.report import format_summary, run_analysis, save_tables
from flchain_eda.utils import configure_logging, save_text

def main():
    configure_logging()
    bundle = run_analysis(load_data(RAW_CSV, fetch=True), seed=SEED, sample_size=EVAL_SAMPLE_SIZE)
    summary = format_summary(bundle)
    print(summary)
    save_text(ANALYSIS_SUMMARY, summary)
    paths = save_tables(bundle, RESULTS_DIR)
    print("Analysis summary saved to:", ANALYSIS_SUMMARY)
    print(f"{len(paths)} tables saved to:", RESULTS_DIR)

if __name__ == "__main__":
    main()
