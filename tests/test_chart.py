import matplotlib.pyplot as plt
import numpy as np
import pytest

from musicvenn.chart import DEFAULT_TITLE, ZOOMED_TITLE, ChartStyle, VennChart, draw_venn
from musicvenn.errors import RenderSurfaceMissing
from musicvenn.regions import NamedCollection, aggregate

LABELS = ("Personal", "Country", "World")


@pytest.fixture
def ax():
    fig, ax = plt.subplots()
    yield ax
    plt.close(fig)


def test_three_sets(ax, scenario_collections):
    chart = VennChart(ax, LABELS)
    circles = chart.render(aggregate(scenario_collections))
    assert [c.label for c in circles] == list(LABELS)
    assert all(c.radius > 0 for c in circles)
    assert chart.circles == circles
    assert ax.get_title() == DEFAULT_TITLE


def test_two_sets_keep_declared_order(ax, scenario_collections):
    chart = VennChart(ax, LABELS)
    decomposition = aggregate([scenario_collections[2], scenario_collections[0]])
    circles = chart.update(decomposition, title=ZOOMED_TITLE)
    assert [c.label for c in circles] == ["Personal", "World"]
    assert ax.get_title() == ZOOMED_TITLE


def test_single_set(ax):
    chart = VennChart(ax, LABELS)
    circles = chart.render(aggregate([NamedCollection("Country", ("B", "C"))]))
    assert len(circles) == 1
    circle = circles[0]
    assert circle.label == "Country"
    assert (circle.center_x, circle.center_y) == (0.0, 0.0)
    assert circle.radius == pytest.approx(np.sqrt(1 / np.pi))


def test_nothing_to_draw(ax):
    chart = VennChart(ax, LABELS)
    assert chart.render({}) == []
    assert chart.render(aggregate([NamedCollection("World", ())])) == []


def test_redraw_replaces_previous_drawing(ax, scenario_collections):
    chart = VennChart(ax, LABELS)
    chart.render(aggregate(scenario_collections))
    circles = chart.update(aggregate(scenario_collections[:1]))
    assert [c.label for c in circles] == ["Personal"]
    assert len(ax.patches) == 2


def test_disjoint_sets_still_get_circles(ax):
    chart = VennChart(ax, LABELS)
    circles = chart.render(aggregate([
        NamedCollection("Personal", ("A",)),
        NamedCollection("World", ("Z",)),
    ]))
    assert [c.label for c in circles] == ["Personal", "World"]


def test_missing_axes():
    chart = VennChart(None, LABELS)
    with pytest.raises(RenderSurfaceMissing):
        chart.render({})


def test_style_without_counts(ax, scenario_collections):
    chart = VennChart(ax, LABELS, ChartStyle(show_counts=False, color_mixing="average", title=None))
    chart.render(aggregate(scenario_collections))
    assert ax.get_title() == ""
    texts = [t.get_text() for t in ax.texts]
    assert "Personal" in texts
    assert not any(t.isdigit() for t in texts)


def test_draw_venn_saves(tmp_path, scenario_collections):
    outfile = tmp_path / "venn.png"
    result = draw_venn(aggregate(scenario_collections), LABELS, outfile=str(outfile))
    assert result is None
    assert outfile.stat().st_size > 0


def test_draw_venn_returns_figure(scenario_collections):
    fig = draw_venn(aggregate(scenario_collections), LABELS, title="Mine")
    try:
        assert fig.axes[0].get_title() == "Mine"
    finally:
        plt.close(fig)
