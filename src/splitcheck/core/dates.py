#!/usr/bin/env python3
"""
SessionDate Primitive Type

Immutable date wrapper used to place sessions on a calendar and derive the
day/week/month bucket keys used by trend analytics.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta


@dataclass(frozen=True)
class SessionDate:
    """Immutable session date with bucket-key helpers."""

    date: date

    @classmethod
    def from_string(cls, date_str: str) -> "SessionDate":
        """
        Parse an ISO date or timestamp.

        Accepts "2024-08-15", "2024-08-15T10:30:00" and the JavaScript
        "2024-08-15T10:30:00.000Z" form written by browser exports.

        Args:
            date_str: Date or timestamp string

        Returns:
            SessionDate object

        Raises:
            ValueError: If the string is not an ISO date
        """
        text = date_str.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        if "T" in text or " " in text:
            return cls(date=datetime.fromisoformat(text).date())
        return cls(date=date.fromisoformat(text))

    @classmethod
    def today(cls) -> "SessionDate":
        """Get today's date."""
        return cls(date=date.today())

    def to_iso_string(self) -> str:
        """Format as YYYY-MM-DD."""
        return self.date.isoformat()

    def day_key(self) -> str:
        """Daily bucket key (YYYY-MM-DD)."""
        return self.to_iso_string()

    def week_key(self) -> str:
        """Weekly bucket key: the Sunday that starts this date's week."""
        # weekday(): Monday=0 ... Sunday=6
        days_since_sunday = (self.date.weekday() + 1) % 7
        return (self.date - timedelta(days=days_since_sunday)).isoformat()

    def month_key(self) -> str:
        """Monthly bucket key (YYYY-MM)."""
        return f"{self.date.year:04d}-{self.date.month:02d}"

    def __str__(self) -> str:
        """String representation."""
        return self.to_iso_string()

    def __lt__(self, other: "SessionDate") -> bool:
        """Less than comparison."""
        return self.date < other.date

    def __le__(self, other: "SessionDate") -> bool:
        """Less than or equal comparison."""
        return self.date <= other.date

    def __gt__(self, other: "SessionDate") -> bool:
        """Greater than comparison."""
        return self.date > other.date

    def __ge__(self, other: "SessionDate") -> bool:
        """Greater than or equal comparison."""
        return self.date >= other.date
