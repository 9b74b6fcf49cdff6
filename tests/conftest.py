import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

CHAPTERS = ["Circulatory", "Neoplasms", "Respiratory", "Circulatory", "Mental",
            "Nervous", "Digestive", "Circulatory", "Neoplasms", "Injury and Poisoning"]


def make_raw(n_per_group=40, seed=0):
    """
    Synthetic table with the raw flchain schema: 10 flc groups of equal size,
    FLC rising with the group and death rate rising with the group
    (3 * group dead subjects out of n_per_group).
    """
    rng = np.random.default_rng(seed)
    n = 10 * n_per_group
    group = np.resize(np.arange(1, 11), n)
    position = np.arange(n) // 10
    dead = (position < 3 * group * n_per_group // 40).astype(int)

    chapter = pd.Series(np.resize(CHAPTERS, n), dtype="object")
    chapter[dead == 0] = np.nan

    creatinine = np.round(rng.uniform(0.6, 2.0, n), 1)
    creatinine[::7] = np.nan

    return pd.DataFrame({
        "age": rng.integers(50, 100, n).astype(float),
        "sex": np.resize(["F", "M"], n),
        "sample.yr": np.resize(np.arange(1995, 2004), n),
        "kappa": np.round(0.5 + 0.15 * group + rng.uniform(0, 0.1, n), 3),
        "lambda": np.round(0.6 + 0.2 * group + rng.uniform(0, 0.1, n), 3),
        "flc.grp": group,
        "creatinine": creatinine,
        "mgus": (np.arange(n) % 15 == 0).astype(int),
        "futime": rng.integers(1, 5000, n),
        "death": dead,
        "chapter": chapter,
    })


def make_row(**overrides):
    row = {
        "age": 70, "sex": "F", "sample.yr": 1996, "kappa": 1.2, "lambda": 0.8,
        "flc.grp": 3, "creatinine": 1.0, "mgus": 0, "futime": 100, "death": 0,
        "chapter": np.nan,
    }
    row.update(overrides)
    return pd.DataFrame([row])


@pytest.fixture
def raw():
    return make_raw()


@pytest.fixture
def transformed(raw):
    from flchain_eda.transform import transform
    return transform(raw)
