"""
Core Utilities Package

Shared building blocks for settlement and analytics.

This package provides:
- Restricted arithmetic evaluation for money input ("2*25000")
- Rounding policy and currency display formatting
- Session input models and derived settlement result models
- Configuration management for environment-specific settings
"""

from .config import Config, EngineSettings, Environment, get_config, reload_config
from .currency import format_currency, format_number, format_percentage
from .dates import SessionDate
from .expression import ExpressionEvaluator, evaluate_expression
from .models import (
    BankInfo,
    DateRange,
    Item,
    Member,
    MemberCalculation,
    MemberStatus,
    Session,
    SessionMetadata,
    SessionSettings,
    SessionTotals,
    SettlementResult,
    SettlementSummary,
    SummaryEntry,
    TipMode,
    TransferSuggestion,
    ValidationReport,
)
from .rounding import Rounder, RoundingMethod, round_amount

__all__ = [
    "BankInfo",
    # Configuration
    "Config",
    "DateRange",
    "EngineSettings",
    "Environment",
    # Expressions and rounding
    "ExpressionEvaluator",
    # Data models
    "Item",
    "Member",
    "MemberCalculation",
    "MemberStatus",
    "Rounder",
    "RoundingMethod",
    "Session",
    "SessionDate",
    "SessionMetadata",
    "SessionSettings",
    "SessionTotals",
    "SettlementResult",
    "SettlementSummary",
    "SummaryEntry",
    "TipMode",
    "TransferSuggestion",
    "ValidationReport",
    "evaluate_expression",
    # Formatting
    "format_currency",
    "format_number",
    "format_percentage",
    "get_config",
    "reload_config",
    "round_amount",
]
