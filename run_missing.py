"""
run_missing.py
Run only the missing-value report and heuristic assessment.
"""

import os

from flchain_eda.config import RAW_CSV, REPORTS_DIR
from flchain_eda.load_data import load_data
from flchain_eda.missing import save_missing_report, heuristic_missingness_assessment
from flchain_eda.transform import transform
from flchain_eda.utils import configure_logging, save_text

def main():
    configure_logging()
    df = transform(load_data(RAW_CSV, fetch=True))
    csv_path = save_missing_report(df, REPORTS_DIR)
    note = heuristic_missingness_assessment(df, target_col="death", threshold_pct=5.0)
    save_text(os.path.join(REPORTS_DIR, "missing_assessment.txt"), note + "\n")
    print("Missing report saved to:", csv_path)
    print("Missingness assessment:", note)

if __name__ == "__main__":
    main()
