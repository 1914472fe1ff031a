#!/usr/bin/env python3
"""Tests for the one-call function interface."""

import json
import logging

import pytest

import splitcheck
from splitcheck import (
    EngineSettings,
    Session,
    SplitValidationError,
    aggregate_analytics,
    compute_custom_split,
    compute_settlement,
    compute_with_tip,
    evaluate_expression,
    export_calculations,
    format_currency,
    suggest_transfers,
)
from splitcheck.api import settings_for_session
from splitcheck.core.rounding import RoundingMethod


class TestSettingsForSession:
    def test_explicit_settings_win(self, alice_bob_session):
        settings = EngineSettings(precision=0)

        assert settings_for_session(alice_bob_session, settings) is settings

    def test_derived_from_session(self):
        session = Session.from_dict({"members": [], "settings": {"currency": "usd", "precision": 1}})

        assert settings_for_session(session) == EngineSettings(precision=1, currency="USD")

    def test_defaults_without_session(self):
        assert settings_for_session(None) == EngineSettings()

    @pytest.mark.parametrize("precision,expected", [(400, 6), (-3, 0)])
    def test_out_of_range_precision_clamped(self, precision, expected, caplog):
        session = Session.from_dict({"id": "s1", "members": [], "settings": {"precision": precision}})

        with caplog.at_level(logging.WARNING, logger="splitcheck.api"):
            settings = settings_for_session(session)

        assert settings.precision == expected
        assert "out of range" in caplog.text

    @pytest.mark.settlement
    def test_huge_session_precision_still_settles(self):
        session = Session.from_dict(
            {
                "members": [
                    {"id": "a", "name": "A", "items": [{"name": "x", "price": "100"}]},
                    {"id": "b", "name": "B"},
                    {"id": "c", "name": "C"},
                ],
                "settings": {"precision": 400},
            }
        )

        result = compute_settlement(session)

        assert result.totals.cost_per_person == pytest.approx(33.333333)


class TestFunctionInterface:
    """Scenarios exercised through the top-level functions."""

    @pytest.mark.settlement
    def test_evaluate_expression(self):
        assert evaluate_expression("2*25000") == 50000
        assert evaluate_expression("1/0") == 0
        assert evaluate_expression("10/3", EngineSettings(precision=0, rounding_method=RoundingMethod.CEIL)) == 4

    @pytest.mark.settlement
    def test_settle_and_suggest(self, alice_bob_session):
        result = compute_settlement(alice_bob_session)
        transfers = suggest_transfers(result)

        assert [(t.from_name, t.to_name, t.amount) for t in transfers] == [("Alice", "Bob", 25000)]

    @pytest.mark.settlement
    def test_empty_session(self):
        result = compute_settlement(Session(members=[]))

        assert result.member_calculations == []
        assert result.totals.total_cost == 0

    @pytest.mark.settlement
    def test_custom_split_rejects_101_percent(self):
        session = Session.from_dict(
            {"members": [{"id": "a", "name": "A", "items": [{"name": "x", "price": "100"}]}, {"id": "b", "name": "B"}]}
        )

        with pytest.raises(SplitValidationError):
            compute_custom_split(session, {"a": 60, "b": 41})

        result = compute_custom_split(session, {"a": 60, "b": 40})
        assert [m.amount_per_person for m in result.member_calculations] == [60, 40]

    @pytest.mark.settlement
    def test_with_tip(self, alice_bob_session):
        result = compute_with_tip(alice_bob_session, 10000, mode="equal")

        assert result.totals.total_cost == 60000

    @pytest.mark.settlement
    def test_session_precision_used(self):
        session = Session.from_dict(
            {
                "members": [
                    {"id": "a", "name": "A", "items": [{"name": "x", "price": "100"}]},
                    {"id": "b", "name": "B"},
                    {"id": "c", "name": "C"},
                ],
                "settings": {"precision": 0},
            }
        )

        assert compute_settlement(session).totals.cost_per_person == 33

    @pytest.mark.analytics
    def test_aggregate_analytics(self, history_sessions):
        analytics = aggregate_analytics(history_sessions)

        assert analytics.overview.total_sessions == 4
        assert analytics.overview.unique_members == 3

    @pytest.mark.settlement
    def test_export_calculations(self, alice_bob_session):
        result = compute_settlement(alice_bob_session)

        assert json.loads(export_calculations(result, format="json"))["totals"]["totalCost"] == 50000
        assert export_calculations(result).startswith("BILL SPLITTING SUMMARY")
        assert "$50,000.00" in export_calculations(result, "summary", EngineSettings(currency="USD"))

    @pytest.mark.currency
    def test_format_currency_exported(self):
        assert format_currency(1250000, "VND") == "1.250.000 VND"

    def test_version(self):
        assert splitcheck.__version__ == "0.1.0"
