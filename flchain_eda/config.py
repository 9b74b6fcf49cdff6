import os

# Reproducibility
SEED = 42
EVAL_SAMPLE_SIZE = 1000

# File locations
RAW_CSV = os.environ.get("FLCHAIN_CSV", os.path.join("data", "raw", "flchain.csv"))
REPORTS_DIR = "reports"
FIGS_DIR = os.path.join(REPORTS_DIR, "figs")
RESULTS_DIR = os.path.join(REPORTS_DIR, "results")
EDA_SUMMARY = os.path.join(REPORTS_DIR, "eda_summary.txt")
ANALYSIS_SUMMARY = os.path.join(REPORTS_DIR, "analysis_summary.txt")

# Rdatasets location of the source table
RDATASET_NAME = "flchain"
RDATASET_PACKAGE = "survival"

# Raw schema, as distributed
RAW_COLUMNS = [
    "age", "sex", "sample.yr", "kappa", "lambda", "flc.grp",
    "creatinine", "mgus", "futime", "death", "chapter",
]
RAW_NUMERIC = ["age", "sample.yr", "kappa", "lambda", "flc.grp", "creatinine", "mgus", "futime", "death"]

RENAME_MAP = {"sample.yr": "sample_year", "flc.grp": "flc_group"}

SEX_LABELS = {"F": "Female", "M": "Male"}
BINARY_LABELS = {
    "mgus": {0: "non-mgus", 1: "mgus"},
    "death": {0: "alive", 1: "dead"},
}
INTEGRAL_COLUMNS = ["age", "sample_year", "futime"]

# Enrollment year buckets, right-closed: (1994, 1997], (1997, 2000], (2000, 2003]
RECRUIT_BINS = [1994, 1997, 2000, 2003]
RECRUIT_LABELS = ["early", "middle", "late"]

# Cause of death: labels kept when at least CHAPTER_THRESHOLD of non-missing values
CHAPTER_REFERENCE = ["Circulatory", "Neoplasms", "Respiratory", "Mental", "Nervous"]
CHAPTER_THRESHOLD = 0.05
CHAPTER_OTHER = "Others"

# kappa/lambda reference interval 0.26 - 1.65
FLC_RATIO_BINS = [0.26, 1.65]
FLC_RATIO_LABELS = ["low", "normal", "high"]

FLC_GROUP_LEVELS = list(range(1, 11))

CATEGORY_LEVELS = {
    "sex": ["Female", "Male"],
    "flc_group": FLC_GROUP_LEVELS,
    "mgus": ["non-mgus", "mgus"],
    "death": ["alive", "dead"],
    "chapter": CHAPTER_REFERENCE + [CHAPTER_OTHER],
    "recruits": RECRUIT_LABELS,
    "flc_ratio_range": FLC_RATIO_LABELS,
}
ORDERED_CATEGORIES = ["flc_group", "recruits", "flc_ratio_range"]

# Columns used by the report sections
NUMERICAL = ["age", "kappa", "lambda", "flc", "flc_ratio", "creatinine"]
CATEGORICAL = ["sex", "recruits", "mgus", "death", "chapter", "flc_ratio_range"]
RATE_COLUMNS = ["sex", "recruits", "mgus", "flc_ratio_range"]
