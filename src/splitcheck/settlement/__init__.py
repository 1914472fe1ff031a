"""
Settlement Package

Turns a session of members, items and advances into balances and payments.

Key Components:
- engine: equal-split settlement (member costs, totals, final amounts, summary)
- strategies: custom percentage split and tip distribution
- transfers: greedy who-pays-whom suggestions
- export: summary, detailed, CSV and JSON renderings
- loader: session files and data export bundles
"""

from .engine import EVEN_TOLERANCE, SettlementEngine
from .export import ExportFormat, SettlementExporter
from .loader import SessionLoadError, load_session, load_sessions, parse_sessions, save_sessions
from .strategies import SplitValidationError, calculate_custom_split, calculate_with_tip
from .transfers import suggest_transfers

__all__ = [
    "EVEN_TOLERANCE",
    "ExportFormat",
    "SessionLoadError",
    "SettlementEngine",
    "SettlementExporter",
    "SplitValidationError",
    "calculate_custom_split",
    "calculate_with_tip",
    "load_session",
    "load_sessions",
    "parse_sessions",
    "save_sessions",
    "suggest_transfers",
]
