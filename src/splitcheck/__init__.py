"""
SplitCheck - Bill Splitting Calculator

Members enter shared expenses and advance payments; SplitCheck computes who owes
what, who is refunded, who should pay whom, and spending analytics across past
sessions.

Key Features:
- Money input as arithmetic expressions ("2*25000"), evaluated safely
- Configurable rounding (round/floor/ceil) and precision
- Equal split, custom percentage split and tip distribution
- Greedy payment suggestions
- Summary, detailed, CSV and JSON exports
- Trend, member, location, item and cost analytics with a dashboard image

Domain Packages:
- core: expressions, rounding, currency formatting, models, configuration
- settlement: settlement engine, split strategies, transfers, export, loading
- analysis: analytics aggregation and dashboard rendering
- cli: command-line interface

Example Usage:
    from splitcheck import Session, compute_settlement, suggest_transfers

    result = compute_settlement(Session.from_dict(data))
    for transfer in suggest_transfers(result):
        print(transfer.from_name, "->", transfer.to_name, transfer.amount)
"""

__version__ = "0.1.0"
__author__ = "SplitCheck Contributors"

from .api import (
    aggregate_analytics,
    compute_custom_split,
    compute_settlement,
    compute_with_tip,
    evaluate_expression,
    export_calculations,
    suggest_transfers,
)
from .core.config import EngineSettings
from .core.currency import format_currency
from .core.models import Item, Member, MemberStatus, Session, TipMode
from .settlement.strategies import SplitValidationError

__all__ = [
    "EngineSettings",
    "Item",
    "Member",
    "MemberStatus",
    "Session",
    "SplitValidationError",
    "TipMode",
    "aggregate_analytics",
    "compute_custom_split",
    "compute_settlement",
    "compute_with_tip",
    "evaluate_expression",
    "export_calculations",
    "format_currency",
    "suggest_transfers",
]
