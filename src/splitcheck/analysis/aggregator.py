#!/usr/bin/env python3
"""
Session Analytics Aggregator

Aggregates a collection of past sessions into spending statistics.

Sections:
- overview: session count, total and average spend, unique members, locations,
  time range
- trends: session count and cost per month, week (Sunday start) and day
- members / locations / items: rollups keyed by name
- costs: total, average, median, min, max and an equal-width histogram
- insights: short human-readable observations derived from the above

Everything is recomputed from scratch on each call. Sessions that were saved
with a totals block use it; the rest are settled on the fly.
"""

import csv
import io
import json
import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from ..core.config import EngineSettings
from ..core.currency import format_currency
from ..core.dates import SessionDate
from ..core.json_utils import format_json, json_default
from ..core.models import Session
from ..settlement.engine import SettlementEngine

logger = logging.getLogger(__name__)

MAX_DISTRIBUTION_BUCKETS = 10

# Month-over-month change (in percent) that counts as a trend
TREND_THRESHOLD_PERCENT = 5


@dataclass
class TrendBucket:
    """Sessions and cost accumulated for one calendar period."""

    sessions: int = 0
    cost: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {"sessions": self.sessions, "cost": self.cost}


@dataclass
class Trends:
    """Trend buckets keyed by period (YYYY-MM, week-start date, date)."""

    monthly: dict[str, TrendBucket] = field(default_factory=dict)
    weekly: dict[str, TrendBucket] = field(default_factory=dict)
    daily: dict[str, TrendBucket] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "monthly": {k: v.to_dict() for k, v in sorted(self.monthly.items())},
            "weekly": {k: v.to_dict() for k, v in sorted(self.weekly.items())},
            "daily": {k: v.to_dict() for k, v in sorted(self.daily.items())},
        }


@dataclass
class Overview:
    """Headline numbers across all sessions."""

    total_sessions: int = 0
    total_spent: float = 0.0
    average_per_session: float = 0.0
    unique_members: int = 0
    popular_locations: dict[str, int] = field(default_factory=dict)
    start: SessionDate | None = None
    end: SessionDate | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalSessions": self.total_sessions,
            "totalSpent": self.total_spent,
            "averagePerSession": self.average_per_session,
            "uniqueMembers": self.unique_members,
            "popularLocations": dict(self.popular_locations),
            "timeRange": {
                "start": str(self.start) if self.start else None,
                "end": str(self.end) if self.end else None,
            },
        }


@dataclass
class MemberStats:
    sessions: int = 0
    total_spent: float = 0.0
    total_advance: float = 0.0
    items: int = 0

    @property
    def average_per_session(self) -> float:
        return self.total_spent / self.sessions if self.sessions else 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "sessions": self.sessions,
            "totalSpent": self.total_spent,
            "totalAdvance": self.total_advance,
            "items": self.items,
            "averagePerSession": self.average_per_session,
        }


@dataclass
class LocationStats:
    visits: int = 0
    total_spent: float = 0.0
    member_count: int = 0
    last_visit: SessionDate | None = None

    @property
    def average_per_visit(self) -> float:
        return self.total_spent / self.visits if self.visits else 0.0

    @property
    def average_members_per_visit(self) -> float:
        return self.member_count / self.visits if self.visits else 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "visits": self.visits,
            "totalSpent": self.total_spent,
            "averagePerVisit": self.average_per_visit,
            "memberCount": self.member_count,
            "averageMembersPerVisit": self.average_members_per_visit,
            "lastVisit": str(self.last_visit) if self.last_visit else None,
        }


@dataclass
class ItemStats:
    count: int = 0
    total_cost: float = 0.0
    min_cost: float = math.inf
    max_cost: float = 0.0
    session_keys: set[str] = field(default_factory=set)

    @property
    def average_cost(self) -> float:
        return self.total_cost / self.count if self.count else 0.0

    @property
    def session_count(self) -> int:
        return len(self.session_keys)

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "totalCost": self.total_cost,
            "averageCost": self.average_cost,
            "minCost": self.min_cost if self.count else 0.0,
            "maxCost": self.max_cost,
            "sessionCount": self.session_count,
        }


@dataclass(frozen=True)
class DistributionBucket:
    """One histogram bucket over [low, high) (the top bucket includes high)."""

    low: float
    high: float
    count: int
    percentage: float
    label: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "range": self.label,
            "min": self.low,
            "max": self.high,
            "count": self.count,
            "percentage": self.percentage,
        }


@dataclass
class CostAnalytics:
    """Statistics over positive session costs."""

    total: float = 0.0
    average: float = 0.0
    median: float = 0.0
    min: float = 0.0
    max: float = 0.0
    distribution: list[DistributionBucket] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "average": self.average,
            "median": self.median,
            "min": self.min,
            "max": self.max,
            "distribution": [b.to_dict() for b in self.distribution],
        }


@dataclass(frozen=True)
class Insight:
    type: str
    title: str
    value: str
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "title": self.title, "value": self.value, "description": self.description}


@dataclass
class SessionAnalytics:
    """Complete analytics for a collection of sessions."""

    overview: Overview
    trends: Trends
    members: dict[str, MemberStats]
    locations: dict[str, LocationStats]
    items: dict[str, ItemStats]
    costs: CostAnalytics

    def to_dict(self) -> dict[str, Any]:
        return {
            "overview": self.overview.to_dict(),
            "trends": self.trends.to_dict(),
            "members": {k: v.to_dict() for k, v in self.members.items()},
            "locations": {k: v.to_dict() for k, v in self.locations.items()},
            "items": {k: v.to_dict() for k, v in self.items.items()},
            "costs": self.costs.to_dict(),
        }


class AnalyticsAggregator:
    """
    Builds SessionAnalytics from stored sessions.

    Item prices and advances are evaluated with the same expression rules and
    rounding policy as the settlement engine.
    """

    def __init__(self, settings: EngineSettings | None = None, engine: SettlementEngine | None = None):
        self.settings = settings or EngineSettings()
        self.engine = engine or SettlementEngine(self.settings)

    def money(self, amount: float) -> str:
        return format_currency(amount, self.settings.currency, self.settings.precision, self.settings.rounding_method)

    def session_cost(self, session: Session) -> float:
        """Total cost from the stored totals block, settling the session if absent."""
        if session.totals is not None:
            return session.totals.total_cost
        return self.engine.calculate_session(session).totals.total_cost

    def generate_session_analytics(self, sessions: list[Session]) -> SessionAnalytics:
        """Aggregate every analytics section for the given sessions."""
        costs = [self.session_cost(s) for s in sessions]

        analytics = SessionAnalytics(
            overview=self.generate_overview(sessions, costs),
            trends=self.generate_trends(sessions, costs),
            members=self.generate_member_analytics(sessions),
            locations=self.generate_location_analytics(sessions, costs),
            items=self.generate_item_analytics(sessions),
            costs=self.generate_cost_analytics(costs),
        )
        logger.info(
            "Aggregated %d sessions: %d members, %d locations, %d distinct items",
            len(sessions),
            len(analytics.members),
            len(analytics.locations),
            len(analytics.items),
        )
        return analytics

    def _costs_for(self, sessions: list[Session], costs: list[float] | None) -> list[float]:
        return costs if costs is not None else [self.session_cost(s) for s in sessions]

    def generate_overview(self, sessions: list[Session], costs: list[float] | None = None) -> Overview:
        costs = self._costs_for(sessions, costs)
        overview = Overview(total_sessions=len(sessions))
        member_names: set[str] = set()
        locations: dict[str, int] = defaultdict(int)

        for session, cost in zip(sessions, costs):
            overview.total_spent += cost

            for member in session.members:
                member_names.add(member.name.lower())

            if session.location:
                locations[session.location] += 1

            session_date = session.session_date
            if session_date is not None:
                if overview.start is None or session_date < overview.start:
                    overview.start = session_date
                if overview.end is None or session_date > overview.end:
                    overview.end = session_date

        overview.total_spent = self.engine.round(overview.total_spent)
        overview.average_per_session = (
            self.engine.round(overview.total_spent / len(sessions)) if sessions else 0.0
        )
        overview.unique_members = len(member_names)
        overview.popular_locations = dict(locations)
        return overview

    def generate_trends(self, sessions: list[Session], costs: list[float] | None = None) -> Trends:
        costs = self._costs_for(sessions, costs)
        monthly: dict[str, TrendBucket] = defaultdict(TrendBucket)
        weekly: dict[str, TrendBucket] = defaultdict(TrendBucket)
        daily: dict[str, TrendBucket] = defaultdict(TrendBucket)

        for session, cost in zip(sessions, costs):
            session_date = session.session_date
            if session_date is None:
                logger.debug("Session %s has no date; left out of trends", session.id or "<unnamed>")
                continue

            for buckets, key in (
                (monthly, session_date.month_key()),
                (weekly, session_date.week_key()),
                (daily, session_date.day_key()),
            ):
                buckets[key].sessions += 1
                buckets[key].cost += cost

        return Trends(monthly=dict(monthly), weekly=dict(weekly), daily=dict(daily))

    def generate_member_analytics(self, sessions: list[Session]) -> dict[str, MemberStats]:
        stats: dict[str, MemberStats] = defaultdict(MemberStats)

        for session in sessions:
            for member in session.members:
                member_stats = stats[member.name]
                member_stats.sessions += 1
                for item in member.items:
                    member_stats.total_spent += self.engine.evaluate(item.price)
                    member_stats.items += 1
                member_stats.total_advance += self.engine.evaluate(member.advance)

        return dict(stats)

    def generate_location_analytics(
        self, sessions: list[Session], costs: list[float] | None = None
    ) -> dict[str, LocationStats]:
        costs = self._costs_for(sessions, costs)
        stats: dict[str, LocationStats] = defaultdict(LocationStats)

        for session, cost in zip(sessions, costs):
            if not session.location:
                continue

            location_stats = stats[session.location]
            location_stats.visits += 1
            location_stats.total_spent += cost
            location_stats.member_count += len(session.members)

            visit = session.session_date
            if visit is not None and (location_stats.last_visit is None or visit > location_stats.last_visit):
                location_stats.last_visit = visit

        return dict(stats)

    def generate_item_analytics(self, sessions: list[Session]) -> dict[str, ItemStats]:
        stats: dict[str, ItemStats] = defaultdict(ItemStats)

        for index, session in enumerate(sessions):
            session_key = session.id or f"#{index}"
            for member in session.members:
                for item in member.items:
                    price = self.engine.evaluate(item.price)
                    item_stats = stats[item.name]
                    item_stats.count += 1
                    item_stats.total_cost += price
                    item_stats.min_cost = min(item_stats.min_cost, price)
                    item_stats.max_cost = max(item_stats.max_cost, price)
                    item_stats.session_keys.add(session_key)

        return dict(stats)

    def generate_cost_analytics(self, costs: list[float]) -> CostAnalytics:
        """Statistics over positive costs; zero-cost sessions are ignored."""
        positive = sorted(c for c in costs if c > 0)
        if not positive:
            return CostAnalytics()

        total = sum(positive)
        return CostAnalytics(
            total=self.engine.round(total),
            average=self.engine.round(total / len(positive)),
            median=positive[len(positive) // 2],
            min=positive[0],
            max=positive[-1],
            distribution=self.generate_cost_distribution(positive),
        )

    def generate_cost_distribution(self, costs: list[float]) -> list[DistributionBucket]:
        """
        Histogram of costs over at most 10 equal-width buckets spanning [min, max].

        Returns an empty list for no costs and a single bucket when every cost is
        the same value.
        """
        if not costs:
            return []

        low = min(costs)
        high = max(costs)
        total_count = len(costs)

        if high == low:
            return [DistributionBucket(low, high, total_count, 100.0, self._bucket_label(low, high))]

        bucket_count = min(MAX_DISTRIBUTION_BUCKETS, total_count)
        width = (high - low) / bucket_count
        counts = [0] * bucket_count

        for cost in costs:
            index = min(int((cost - low) / width), bucket_count - 1)
            counts[index] += 1

        buckets = []
        for i, count in enumerate(counts):
            bucket_low = low + i * width
            bucket_high = high if i == bucket_count - 1 else low + (i + 1) * width
            buckets.append(
                DistributionBucket(
                    low=bucket_low,
                    high=bucket_high,
                    count=count,
                    percentage=count / total_count * 100,
                    label=self._bucket_label(bucket_low, bucket_high),
                )
            )
        return buckets

    def _bucket_label(self, low: float, high: float) -> str:
        return f"{self.money(low)} - {self.money(high)}"

    def generate_insights(self, analytics: SessionAnalytics) -> list[Insight]:
        """Short observations: average cost, top spender, favourite place, trend."""
        insights = []
        overview = analytics.overview

        if overview.total_sessions > 0:
            average = self.money(overview.average_per_session)
            insights.append(
                Insight(
                    type="spending",
                    title="Average Session Cost",
                    value=average,
                    description=f"You spend an average of {average} per session",
                )
            )

        if analytics.members:
            name, stats = max(analytics.members.items(), key=lambda kv: kv[1].total_spent)
            insights.append(
                Insight(
                    type="member",
                    title="Top Spender",
                    value=name,
                    description=(
                        f"{name} has spent {self.money(stats.total_spent)} across {stats.sessions} sessions"
                    ),
                )
            )

        if analytics.locations:
            name, stats = max(analytics.locations.items(), key=lambda kv: kv[1].visits)
            insights.append(
                Insight(
                    type="location",
                    title="Favorite Location",
                    value=name,
                    description=f"You've visited {name} {stats.visits} times",
                )
            )

        trend = self._spending_trend(analytics.trends)
        if trend is not None:
            insights.append(trend)

        return insights

    def _spending_trend(self, trends: Trends) -> Insight | None:
        """Compare the last three months of spend with the three before them."""
        if len(trends.monthly) < 2:
            return None

        monthly = [bucket.cost for _, bucket in sorted(trends.monthly.items())]
        recent = monthly[-3:]
        previous = monthly[-6:-3]
        if not previous:
            return None

        avg_recent = sum(recent) / len(recent)
        avg_previous = sum(previous) / len(previous)
        if avg_previous <= 0:
            return None

        change = (avg_recent - avg_previous) / avg_previous * 100
        if change > TREND_THRESHOLD_PERCENT:
            direction = "increasing"
        elif change < -TREND_THRESHOLD_PERCENT:
            direction = "decreasing"
        else:
            direction = "stable"

        return Insight(
            type="trend",
            title="Spending Trend",
            value=f"{abs(change):.1f}% {'increase' if change > 0 else 'decrease'}",
            description=f"Your spending is {direction} compared to previous months",
        )

    def export_analytics(self, analytics: SessionAnalytics, format: str = "json") -> str:
        """
        Export headline analytics as JSON or a Metric,Value CSV.

        Unknown formats produce compact JSON.
        """
        overview = analytics.overview
        summary = {
            "totalSessions": overview.total_sessions,
            "totalSpent": overview.total_spent,
            "uniqueMembers": overview.unique_members,
            "uniqueLocations": len(analytics.locations),
            "averagePerSession": overview.average_per_session,
        }

        if format == "csv":
            buffer = io.StringIO()
            writer = csv.writer(buffer, lineterminator="\n")
            writer.writerow(["Metric", "Value"])
            writer.writerow(["Total Sessions", summary["totalSessions"]])
            writer.writerow(["Total Spent", summary["totalSpent"]])
            writer.writerow(["Unique Members", summary["uniqueMembers"]])
            writer.writerow(["Unique Locations", summary["uniqueLocations"]])
            writer.writerow(["Average Per Session", summary["averagePerSession"]])
            return buffer.getvalue()

        export_data = {
            "generatedAt": datetime.now(timezone.utc).isoformat(),
            "overview": overview.to_dict(),
            "insights": [i.to_dict() for i in self.generate_insights(analytics)],
            "summary": summary,
        }
        if format == "json":
            return format_json(export_data)

        logger.warning("Unknown analytics export format %r, using compact JSON", format)
        return json.dumps(export_data, ensure_ascii=False, default=json_default)
