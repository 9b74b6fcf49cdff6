"""
run_audit.py
Fetch the dataset if needed and save initial audit outputs for the raw and the
transformed table (head, info, describe, class distribution).
"""
from flchain_eda.config import RAW_CSV, REPORTS_DIR
from flchain_eda.load_data import load_data
from flchain_eda.transform import transform
from flchain_eda.utils import configure_logging, save_initial_audit

def main():
    configure_logging()
    df_raw = load_data(RAW_CSV, fetch=True)
    save_initial_audit(df_raw, REPORTS_DIR, target_col="death", prefix="raw_")

    df = transform(df_raw)
    save_initial_audit(df, REPORTS_DIR, target_col="death")
    print(f"Initial audit saved to {REPORTS_DIR}/ (head, info, describe, class_distribution; raw_ prefix for the raw table)")

if __name__ == "__main__":
    main()
