import logging
import os

import pandas as pd
from statsmodels.datasets import get_rdataset

from .config import RAW_COLUMNS, RAW_NUMERIC, RDATASET_NAME, RDATASET_PACKAGE
from .errors import SchemaError

logger = logging.getLogger(__name__)


def fetch_flchain(csv_path):
    """Download the flchain table from Rdatasets and cache it at csv_path."""
    logger.info("Fetching %s/%s from Rdatasets", RDATASET_PACKAGE, RDATASET_NAME)
    df = get_rdataset(RDATASET_NAME, RDATASET_PACKAGE).data
    df = df.drop(columns=["rownames"], errors="ignore")
    os.makedirs(os.path.dirname(csv_path) or ".", exist_ok=True)
    df.to_csv(csv_path, index=False)
    logger.info("Cached %d rows to %s", len(df), csv_path)
    return csv_path


def validate_schema(df):
    missing = [c for c in RAW_COLUMNS if c not in df.columns]
    if missing:
        raise SchemaError(f"Expected columns missing from dataset: {missing}", missing)

    wrong_type = [c for c in RAW_NUMERIC if not pd.api.types.is_numeric_dtype(df[c])]
    if wrong_type:
        raise SchemaError(f"Expected numeric columns have non-numeric dtype: {wrong_type}", wrong_type)
    return df


def load_data(csv_path, fetch=False):
    if not os.path.isfile(csv_path):
        if not fetch:
            raise FileNotFoundError(f"CSV not found at: {csv_path}")
        fetch_flchain(csv_path)

    df = pd.read_csv(csv_path)
    df = df.drop(columns=["rownames", "Unnamed: 0"], errors="ignore")
    validate_schema(df)
    logger.info("Loaded %d rows x %d columns from %s", df.shape[0], df.shape[1], csv_path)

    df_raw = df.copy()

    return df_raw
