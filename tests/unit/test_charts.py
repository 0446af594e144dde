"""Unit tests for investplan.ui.components.charts."""

import pytest

from investplan.application.services.aggregator import project_strategy
from investplan.domain.models import Projection, Strategy
from investplan.ui.components.charts import (
    build_growth_figure,
    build_split_figure,
    schedule_frame,
)


@pytest.fixture
def projection(sample_strategy):
    return project_strategy(sample_strategy)


@pytest.fixture
def empty_projection():
    return Projection(strategy_name="Empty", currency="INR", mode="lumpsum", duration_years=5)


class TestScheduleFrame:
    def test_one_row_per_allocation_year(self, projection):
        df = schedule_frame(projection)
        assert len(df) == 20
        assert set(df["Category"]) == {"Stocks", "Bonds"}
        assert df["Year"].max() == 10

    def test_empty(self, empty_projection):
        df = schedule_frame(empty_projection)
        assert df.empty
        assert "Balance" in df.columns


class TestFigures:
    def test_growth_figure(self, projection):
        fig = build_growth_figure(projection)
        assert fig is not None
        assert fig.layout.title.text == "Projected Balance"
        assert len(fig.data) == 2

    def test_growth_figure_real_title(self, sample_strategy_data):
        sample_strategy_data["normalize_mode"] = True
        fig = build_growth_figure(project_strategy(Strategy(**sample_strategy_data)))
        assert fig.layout.title.text == "Projected Balance (real)"

    def test_split_figure(self, projection):
        fig = build_split_figure(projection)
        assert list(fig.data[0].labels) == ["Stocks", "Bonds"]
        assert list(fig.data[0].values) == [60, 40]

    def test_empty_projection_has_no_figures(self, empty_projection):
        assert build_growth_figure(empty_projection) is None
        assert build_split_figure(empty_projection) is None
