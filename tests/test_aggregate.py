import numpy as np
import pandas as pd
import pytest

from flchain_eda.aggregate import correlation_table, creatinine_summary, group_aggregate, pearson, rate_by
from flchain_eda.errors import AssumptionError, SchemaError


def test_group_aggregate_columns_and_bounds(transformed):
    agg = group_aggregate(transformed)
    assert list(agg.columns) == ["flc_group", "n", "n_dead", "flc_min", "flc_max", "flc_mean", "death_rate"]
    assert len(agg) == 10
    assert agg["death_rate"].between(0, 1).all()
    assert agg["n"].sum() == len(transformed)
    assert (agg["flc_min"] <= agg["flc_mean"]).all()
    assert (agg["flc_mean"] <= agg["flc_max"]).all()


def test_group_aggregate_values(transformed):
    agg = group_aggregate(transformed).set_index("flc_group")
    g3 = transformed[transformed["flc_group"] == 3]
    assert agg.loc[3, "n"] == len(g3)
    assert agg.loc[3, "flc_mean"] == pytest.approx(g3["flc"].mean())
    assert agg.loc[3, "death_rate"] == pytest.approx(9 / 40)


def test_group_order_follows_levels_not_rows(transformed):
    shuffled = transformed.sample(frac=1.0, random_state=3)
    agg = group_aggregate(shuffled)
    assert agg["flc_group"].tolist() == list(range(1, 11))


def test_empty_groups_are_omitted(transformed):
    subset = transformed[~transformed["flc_group"].isin([4, 7])]
    agg = group_aggregate(subset)
    assert agg["flc_group"].tolist() == [1, 2, 3, 5, 6, 8, 9, 10]
    assert agg["n"].sum() == len(subset)


def test_group_aggregate_is_deterministic(raw):
    from flchain_eda.transform import transform

    first = group_aggregate(transform(raw)).to_csv(index=False)
    second = group_aggregate(transform(raw.copy())).to_csv(index=False)
    assert first == second


def test_group_aggregate_requires_columns(transformed):
    with pytest.raises(SchemaError):
        group_aggregate(transformed.drop(columns=["flc"]))


def test_rate_by_sex(transformed):
    table = rate_by(transformed, "sex")
    assert table["sex"].tolist() == ["Female", "Male"]
    assert table["n"].sum() == len(transformed)
    assert table["share"].sum() == pytest.approx(1.0)
    assert table["n_dead"].sum() == (transformed["death"] == "dead").sum()


def test_rate_by_without_death_rate(transformed):
    dead = transformed[transformed["death"] == "dead"]
    table = rate_by(dead, "chapter", with_death_rate=False)
    assert list(table.columns) == ["chapter", "n", "share"]
    assert table["n"].sum() == len(dead)
    assert table["share"].sum() == pytest.approx(1.0)


def test_unknown_death_status_is_not_counted_as_alive(transformed):
    df = transformed.copy()
    df.loc[:39, "death"] = np.nan
    with pytest.raises(AssumptionError, match="40 row"):
        group_aggregate(df)
    with pytest.raises(AssumptionError, match="death status"):
        rate_by(df, "sex")


def test_creatinine_summary_excludes_missing(transformed):
    summary = creatinine_summary(transformed, by="flc_group")
    sizes = transformed.groupby("flc_group", observed=True).size()
    assert (summary["n"] + summary["n_missing"]).tolist() == sizes.tolist()
    assert summary["n_missing"].sum() == transformed["creatinine"].isna().sum()
    g1 = transformed.loc[transformed["flc_group"] == 1, "creatinine"].dropna()
    assert summary.loc[0, "mean"] == pytest.approx(g1.mean())
    assert summary["mean"].notna().all()


def test_creatinine_summary_keeps_group_with_nothing_recorded(transformed):
    df = transformed.copy()
    df.loc[df["flc_group"] == 2, "creatinine"] = np.nan
    summary = creatinine_summary(df).set_index("flc_group")
    assert summary.loc[2, "n"] == 0
    assert summary.loc[2, "n_missing"] == 40
    assert np.isnan(summary.loc[2, "mean"])


def test_correlation_table_is_symmetric(transformed):
    corr = correlation_table(transformed, ["kappa", "lambda", "flc", "creatinine"])
    np.testing.assert_allclose(corr.values, corr.values.T)
    np.testing.assert_allclose(np.diag(corr.values), 1.0)


def test_pearson_drops_incomplete_pairs():
    x = pd.Series([1.0, 2.0, 3.0, np.nan, 5.0])
    y = pd.Series([2.0, 4.0, 6.0, 8.0, np.nan])
    result = pearson(x, y)
    assert result["n"] == 3
    assert result["r"] == pytest.approx(1.0)


def test_pearson_needs_two_pairs():
    with pytest.raises(AssumptionError):
        pearson(pd.Series([1.0, np.nan]), pd.Series([np.nan, 1.0]))
