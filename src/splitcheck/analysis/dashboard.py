#!/usr/bin/env python3
"""
Analytics Dashboard

Renders a three-panel spending dashboard from SessionAnalytics:

1. Spending trend: monthly cost (line) and session count (bars), last 12 months
2. Top spenders: share of spending for the top 10 members
3. Popular locations: visits and spending for the top 8 locations
"""

import matplotlib
import pandas as pd

matplotlib.use("Agg")  # Use non-interactive backend
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import matplotlib.pyplot as plt

from ..core.config import EngineSettings
from ..core.currency import format_currency
from .aggregator import SessionAnalytics

PALETTE = ["#2563eb", "#dc2626", "#16a34a", "#f59e0b", "#8b5cf6", "#06b6d4", "#f97316", "#84cc16"]


@dataclass
class DashboardConfig:
    """Chart limits and output settings."""

    trend_months: int = 12
    top_members: int = 10
    top_locations: int = 8
    max_label_length: int = 20
    figure_size: tuple[int, int] = (16, 12)
    dpi: int = 150
    output_format: str = "png"


def monthly_trend_frame(analytics: SessionAnalytics, months: int = 12) -> pd.DataFrame:
    """Monthly sessions and cost as a DataFrame indexed by month start, last N months."""
    rows = [
        {"Month": pd.Period(key, freq="M").to_timestamp(), "Sessions": bucket.sessions, "Cost": bucket.cost}
        for key, bucket in analytics.trends.monthly.items()
    ]
    if not rows:
        return pd.DataFrame(columns=["Sessions", "Cost"], index=pd.DatetimeIndex([], name="Month"))

    df = pd.DataFrame(rows).set_index("Month").sort_index()
    return df.tail(months)


def member_spending_frame(analytics: SessionAnalytics, top: int = 10) -> pd.DataFrame:
    """Top members by total spent with their share of the shown total."""
    df = pd.DataFrame(
        [{"Member": name, "TotalSpent": stats.total_spent} for name, stats in analytics.members.items()],
        columns=["Member", "TotalSpent"],
    )
    df = df.sort_values("TotalSpent", ascending=False, kind="stable").head(top).reset_index(drop=True)
    shown_total = df["TotalSpent"].sum()
    df["Share"] = df["TotalSpent"] / shown_total * 100 if shown_total > 0 else 0.0
    return df


def location_frame(analytics: SessionAnalytics, top: int = 8) -> pd.DataFrame:
    """Top locations by visit count."""
    df = pd.DataFrame(
        [
            {"Location": name, "Visits": stats.visits, "TotalSpent": stats.total_spent}
            for name, stats in analytics.locations.items()
        ],
        columns=["Location", "Visits", "TotalSpent"],
    )
    return df.sort_values("Visits", ascending=False, kind="stable").head(top).reset_index(drop=True)


class DashboardRenderer:
    """Draws analytics charts to an image file."""

    def __init__(self, settings: EngineSettings | None = None, config: DashboardConfig | None = None):
        self.settings = settings or EngineSettings()
        self.config = config or DashboardConfig()

    def money(self, amount: float) -> str:
        return format_currency(amount, self.settings.currency, 0)

    def generate_dashboard(self, analytics: SessionAnalytics, output_dir: Path) -> Path:
        """
        Render the dashboard.

        Returns:
            Path to the generated image
        """
        output_dir.mkdir(parents=True, exist_ok=True)

        fig = plt.figure(figsize=self.config.figure_size)
        self._create_trend_panel(fig.add_subplot(2, 2, (1, 2)), analytics)
        self._create_member_panel(fig.add_subplot(2, 2, 3), analytics)
        self._create_location_panel(fig.add_subplot(2, 2, 4), analytics)

        fig.suptitle("Spending Analytics Dashboard", fontsize=14, fontweight="bold", y=0.98)
        fig.tight_layout()

        timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        output_file = output_dir / f"{timestamp}_spending_dashboard.{self.config.output_format}"

        fig.savefig(output_file, dpi=self.config.dpi, bbox_inches="tight")
        plt.close(fig)

        return output_file

    def _create_trend_panel(self, ax, analytics: SessionAnalytics) -> None:
        df = monthly_trend_frame(analytics, self.config.trend_months)
        ax.set_title("Spending Trends", fontsize=12, fontweight="bold")

        if df.empty:
            ax.text(0.5, 0.5, "No dated sessions", ha="center", va="center", transform=ax.transAxes)
            return

        labels = [month.strftime("%b %y") for month in df.index]
        positions = range(len(labels))

        ax.plot(positions, df["Cost"], color=PALETTE[0], marker="o", linewidth=2, label="Total Spending")
        ax.fill_between(positions, df["Cost"], color=PALETTE[0], alpha=0.12)
        ax.set_ylabel("Amount", fontsize=10)
        ax.yaxis.set_major_formatter(plt.FuncFormatter(lambda x, p: self.money(x)))
        ax.set_xticks(list(positions))
        ax.set_xticklabels(labels)
        ax.grid(True, alpha=0.3)

        sessions_ax = ax.twinx()
        sessions_ax.bar(positions, df["Sessions"], color=PALETTE[1], alpha=0.3, label="Sessions")
        sessions_ax.set_ylabel("Sessions", fontsize=10)

        lines, line_labels = ax.get_legend_handles_labels()
        bars, bar_labels = sessions_ax.get_legend_handles_labels()
        ax.legend(lines + bars, line_labels + bar_labels, loc="upper left", fontsize=8)

    def _create_member_panel(self, ax, analytics: SessionAnalytics) -> None:
        df = member_spending_frame(analytics, self.config.top_members)
        ax.set_title("Top Spenders", fontsize=12, fontweight="bold")

        if df.empty or df["TotalSpent"].sum() <= 0:
            ax.text(0.5, 0.5, "No member spending", ha="center", va="center", transform=ax.transAxes)
            ax.axis("off")
            return

        colors = [PALETTE[i % len(PALETTE)] for i in range(len(df))]
        ax.pie(
            df["TotalSpent"],
            labels=[f"{name} ({share:.1f}%)" for name, share in zip(df["Member"], df["Share"])],
            colors=colors,
            wedgeprops={"width": 0.45, "edgecolor": "white", "linewidth": 2},
            textprops={"fontsize": 8},
        )
        ax.axis("equal")

    def _create_location_panel(self, ax, analytics: SessionAnalytics) -> None:
        df = location_frame(analytics, self.config.top_locations)
        ax.set_title("Popular Locations", fontsize=12, fontweight="bold")

        if df.empty:
            ax.text(0.5, 0.5, "No locations", ha="center", va="center", transform=ax.transAxes)
            return

        limit = self.config.max_label_length
        labels = [name if len(name) <= limit else name[: limit - 3] + "..." for name in df["Location"]]
        positions = list(range(len(labels)))
        width = 0.4

        ax.bar([p - width / 2 for p in positions], df["Visits"], width, color=PALETTE[0], label="Visits")
        ax.set_ylabel("Visits", fontsize=10)
        ax.set_xticks(positions)
        ax.set_xticklabels(labels, rotation=30, ha="right", fontsize=8)

        spend_ax = ax.twinx()
        spend_ax.bar(
            [p + width / 2 for p in positions], df["TotalSpent"], width, color=PALETTE[1], label="Total Spent"
        )
        spend_ax.set_ylabel("Spending", fontsize=10)
        spend_ax.yaxis.set_major_formatter(plt.FuncFormatter(lambda x, p: self.money(x)))

        bars, bar_labels = ax.get_legend_handles_labels()
        spend_bars, spend_labels = spend_ax.get_legend_handles_labels()
        ax.legend(bars + spend_bars, bar_labels + spend_labels, loc="upper right", fontsize=8)
