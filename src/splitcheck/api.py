#!/usr/bin/env python3
"""
Function Interface

One-call entry points for callers that do not need to hold engine objects. Each
function builds its collaborators from explicit settings, so calls share no state.

When no settings are passed, a session's own settings (currency, precision) are
used with half-up rounding. A session precision outside the supported range is
clamped to it.
"""

import logging

from .analysis.aggregator import AnalyticsAggregator, SessionAnalytics
from .core.config import EngineSettings
from .core.expression import ExpressionEvaluator
from .core.models import Amount, Session, SettlementResult, TipMode, TransferSuggestion
from .core.rounding import DEFAULT_PRECISION, clamp_precision
from .settlement.engine import SettlementEngine
from .settlement.export import SettlementExporter
from .settlement.strategies import calculate_custom_split, calculate_with_tip
from .settlement.transfers import suggest_transfers as _suggest_transfers

logger = logging.getLogger(__name__)


def settings_for_session(session: Session | None, settings: EngineSettings | None = None) -> EngineSettings:
    """Explicit settings win; otherwise derive them from the session."""
    if settings is not None:
        return settings
    if session is None:
        return EngineSettings()
    requested = DEFAULT_PRECISION if session.settings.precision is None else session.settings.precision
    precision = clamp_precision(requested)
    if precision != requested:
        logger.warning("Session %s precision %d out of range, using %d", session.id or "<unnamed>", requested, precision)
    return EngineSettings(
        precision=precision,
        currency=session.settings.currency.upper(),
    )


def evaluate_expression(text: Amount | None, settings: EngineSettings | None = None) -> float:
    """Evaluate money input text; returns 0 on any failure."""
    return ExpressionEvaluator((settings or EngineSettings()).rounder).evaluate(text)


def compute_settlement(session: Session | None, settings: EngineSettings | None = None) -> SettlementResult:
    """Equal-split settlement of a session."""
    return SettlementEngine(settings_for_session(session, settings)).calculate_session(session)


def compute_custom_split(
    session: Session | None,
    percentages: dict | None,
    settings: EngineSettings | None = None,
) -> SettlementResult:
    """Percentage-based settlement; raises SplitValidationError on bad input."""
    engine = SettlementEngine(settings_for_session(session, settings))
    return calculate_custom_split(engine, session, percentages)


def compute_with_tip(
    session: Session | None,
    tip_amount: Amount | None,
    mode: TipMode | str = TipMode.EQUAL,
    settings: EngineSettings | None = None,
) -> SettlementResult:
    """Settlement with a tip distributed equally or proportionally."""
    engine = SettlementEngine(settings_for_session(session, settings))
    return calculate_with_tip(engine, session, tip_amount, mode)


def suggest_transfers(result: SettlementResult, settings: EngineSettings | None = None) -> list[TransferSuggestion]:
    """Who pays whom to settle a result."""
    settings = settings or EngineSettings()
    return _suggest_transfers(result, settings.rounder, settings.currency)


def aggregate_analytics(sessions: list[Session], settings: EngineSettings | None = None) -> SessionAnalytics:
    """Analytics over a collection of sessions."""
    return AnalyticsAggregator(settings).generate_session_analytics(sessions)


def export_calculations(
    result: SettlementResult, format: str = "summary", settings: EngineSettings | None = None
) -> str:
    """Render a result as summary, detailed text, CSV or JSON."""
    return SettlementExporter(settings).export(result, format)
