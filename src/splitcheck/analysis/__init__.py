"""
Spending Analysis Package

Aggregates past sessions into overview statistics, calendar trends, member,
location and item rollups, a cost histogram and insights, and renders them as a
dashboard image.
"""

from .aggregator import (
    AnalyticsAggregator,
    CostAnalytics,
    DistributionBucket,
    Insight,
    ItemStats,
    LocationStats,
    MemberStats,
    Overview,
    SessionAnalytics,
    TrendBucket,
    Trends,
)
from .dashboard import DashboardConfig, DashboardRenderer

__all__ = [
    "AnalyticsAggregator",
    "CostAnalytics",
    "DashboardConfig",
    "DashboardRenderer",
    "DistributionBucket",
    "Insight",
    "ItemStats",
    "LocationStats",
    "MemberStats",
    "Overview",
    "SessionAnalytics",
    "TrendBucket",
    "Trends",
]
