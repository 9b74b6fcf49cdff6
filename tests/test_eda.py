import os

import pytest

import flchain_eda.eda as eda
from flchain_eda.aggregate import group_aggregate
from flchain_eda.regression import fit_death_rate_model


def _exists(paths):
    return all(os.path.isfile(p) for p in paths)


def test_histograms_and_boxplots(transformed, tmp_path):
    out = str(tmp_path)
    assert _exists(eda.plot_histograms(transformed, ["age", "flc"], out))
    assert _exists(eda.plot_histograms(transformed, ["age"], out, hue="sex"))
    paths = eda.plot_boxplots(transformed, ["creatinine"], out, by="flc_group")
    assert _exists(paths)
    assert os.path.basename(paths[0]) == "box_creatinine_by_flc_group.png"


def test_categorical_plots(transformed, tmp_path):
    out = str(tmp_path)
    assert _exists(eda.plot_countplots(transformed, ["recruits", "chapter"], out))
    assert _exists(eda.plot_countplots(transformed, ["recruits"], out, hue="death"))
    assert os.path.isfile(eda.plot_jitter(transformed, "flc_group", "age", out, hue="death"))
    assert os.path.isfile(eda.plot_freqpoly(transformed, "age", out, hue="death"))


@pytest.mark.parametrize("col", ["flc", "creatinine"])
def test_qq(transformed, tmp_path, col):
    assert os.path.isfile(eda.plot_qq(transformed, col, str(tmp_path)))


def test_plots_create_nested_output_dir(transformed, tmp_path):
    out = str(tmp_path / "figs" / "nested")
    path = eda.plot_qq(transformed, "flc", out)
    assert os.path.dirname(path) == out
    assert os.path.isfile(path)


def test_multivariate_plots(transformed, tmp_path):
    out = str(tmp_path)
    assert os.path.isfile(eda.plot_scatter(transformed, "kappa", "lambda", out, hue="mgus", log=True))
    assert os.path.isfile(eda.plot_corr_heatmap(transformed, ["age", "kappa", "lambda", "creatinine"], out))
    agg = group_aggregate(transformed)
    path = eda.plot_group_fit(agg, fit_death_rate_model(agg), out)
    assert os.path.basename(path) == "group_death_rate_fit.png"
    assert os.path.isfile(path)


def test_pairplot(transformed, tmp_path):
    path = eda.plot_pairplot(transformed, ["kappa", "lambda"], str(tmp_path), hue="death")
    assert os.path.isfile(path)
