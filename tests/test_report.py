import os

import pandas as pd

from flchain_eda.report import format_summary, observations, run_analysis, save_tables


def test_run_analysis_is_deterministic(raw):
    first = run_analysis(raw, seed=7, sample_size=100)
    second = run_analysis(raw.copy(), seed=7, sample_size=100)
    assert first.aggregate.to_csv(index=False) == second.aggregate.to_csv(index=False)
    assert first.fit == second.fit
    assert first.evaluation == second.evaluation


def test_different_seed_draws_a_different_sample(raw):
    a = run_analysis(raw, seed=1, sample_size=50)
    b = run_analysis(raw, seed=2, sample_size=50)
    assert a.fit == b.fit
    assert a.evaluation.mean_flc != b.evaluation.mean_flc


def test_bundle_contents(raw):
    bundle = run_analysis(raw, sample_size=100)
    assert set(bundle.rates) == {"sex", "recruits", "mgus", "flc_ratio_range"}
    assert "death_rate" not in bundle.chapter_counts.columns
    assert bundle.chapter_counts["n"].sum() == (bundle.data["death"] == "dead").sum()
    assert bundle.group_correlation["n"] == 10
    assert bundle.group_correlation["r"] > 0.9
    assert bundle.kappa_lambda_correlation["n"] == len(raw)
    assert list(bundle.correlations.columns) == ["age", "kappa", "lambda", "flc", "creatinine"]


def test_format_summary_sections(raw):
    text = format_summary(run_analysis(raw, sample_size=100))
    for label in ("First rows", "Structure", "Group aggregate by flc_group", "Death rate by sex", "Cause of death (dead subjects only)",
                  "Creatinine by flc_group (missing excluded)", "Linear model: death_rate ~ flc_mean",
                  "Random sample check (n=100)", "R-squared"):
        assert label in text


def test_observations_mention_key_numbers(raw):
    bundle = run_analysis(raw, sample_size=100)
    lines = observations(bundle)
    assert lines[0].startswith(f"Dataset: {len(raw)} subjects")
    assert any("creatinine is missing" in line for line in lines)
    assert not any("undefined" in line for line in lines)


def test_save_tables(raw, tmp_path):
    bundle = run_analysis(raw, sample_size=100)
    paths = save_tables(bundle, str(tmp_path))
    assert all(os.path.isfile(p) for p in paths)
    agg = pd.read_csv(tmp_path / "group_aggregate.csv")
    assert len(agg) == 10
    fit = pd.read_csv(tmp_path / "model_fit.csv")
    assert list(fit.columns) == ["intercept", "slope", "r_squared", "residual_std_error", "n_groups"]
    chapter = pd.read_csv(tmp_path / "chapter_counts.csv")
    assert list(chapter.columns) == ["chapter", "n", "share"]
    assert not (tmp_path / "death_rate_by_chapter.csv").exists()
