#!/usr/bin/env python3
"""Tests for the analytics dashboard renderer."""

import pandas as pd
import pytest

from splitcheck.analysis.aggregator import AnalyticsAggregator
from splitcheck.analysis.dashboard import (
    DashboardConfig,
    DashboardRenderer,
    location_frame,
    member_spending_frame,
    monthly_trend_frame,
)


@pytest.fixture
def analytics(history_sessions):
    return AnalyticsAggregator().generate_session_analytics(history_sessions)


class TestDashboardConfig:
    def test_defaults(self):
        config = DashboardConfig()

        assert config.trend_months == 12
        assert config.top_members == 10
        assert config.top_locations == 8
        assert config.figure_size == (16, 12)
        assert config.dpi == 150
        assert config.output_format == "png"


class TestFrames:
    """Test the DataFrames behind each panel."""

    @pytest.mark.analytics
    def test_monthly_trend_frame(self, analytics):
        df = monthly_trend_frame(analytics)

        assert list(df.index) == [pd.Timestamp("2024-01-01"), pd.Timestamp("2024-02-01")]
        assert list(df["Sessions"]) == [1, 2]
        assert list(df["Cost"]) == [100000, 370000]

    @pytest.mark.analytics
    def test_monthly_trend_frame_keeps_last_months(self, analytics):
        df = monthly_trend_frame(analytics, months=1)

        assert list(df.index) == [pd.Timestamp("2024-02-01")]

    @pytest.mark.analytics
    def test_member_spending_frame(self, analytics):
        df = member_spending_frame(analytics, top=2)

        assert list(df["Member"]) == ["Bob", "alice"]
        assert df["Share"].sum() == pytest.approx(100)

    @pytest.mark.analytics
    def test_location_frame(self, analytics):
        df = location_frame(analytics)

        assert list(df["Location"]) == ["Pho 24", "BBQ House"]
        assert list(df["Visits"]) == [2, 1]

    @pytest.mark.analytics
    def test_empty_frames(self):
        empty = AnalyticsAggregator().generate_session_analytics([])

        assert monthly_trend_frame(empty).empty
        assert member_spending_frame(empty).empty
        assert location_frame(empty).empty


class TestDashboardRenderer:
    """Test image generation."""

    @pytest.mark.analytics
    def test_generate_dashboard(self, analytics, temp_dir):
        output_file = DashboardRenderer().generate_dashboard(analytics, temp_dir / "charts")

        assert output_file.exists()
        assert output_file.parent == temp_dir / "charts"
        assert output_file.name.endswith("_spending_dashboard.png")
        assert output_file.stat().st_size > 0

    @pytest.mark.analytics
    def test_output_format(self, analytics, temp_dir):
        renderer = DashboardRenderer(config=DashboardConfig(output_format="svg", dpi=72))

        output_file = renderer.generate_dashboard(analytics, temp_dir)

        assert output_file.suffix == ".svg"
        assert output_file.read_text(encoding="utf-8").lstrip().startswith("<?xml")

    @pytest.mark.analytics
    def test_empty_analytics_still_renders(self, temp_dir):
        empty = AnalyticsAggregator().generate_session_analytics([])

        output_file = DashboardRenderer().generate_dashboard(empty, temp_dir)

        assert output_file.exists()
