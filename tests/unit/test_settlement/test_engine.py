#!/usr/bin/env python3
"""Tests for the equal-split settlement engine."""

import copy
import logging

import pytest

from splitcheck.core.config import EngineSettings
from splitcheck.core.models import Item, Member, MemberStatus, Session, SummaryEntry
from splitcheck.core.rounding import RoundingMethod
from splitcheck.settlement.engine import SettlementEngine


def make_session(*members: Member) -> Session:
    return Session(id="test", members=list(members))


class TestScenarioAliceBob:
    """Alice spends 2*25000, Bob advances 60000."""

    @pytest.mark.settlement
    def test_totals(self, alice_bob_session):
        totals = SettlementEngine().calculate_session(alice_bob_session).totals

        assert totals.total_cost == 50000
        assert totals.total_advance == 60000
        assert totals.member_count == 2
        assert totals.total_items == 1
        assert totals.cost_per_person == 25000
        assert totals.average_spent == 25000
        assert totals.remaining_balance == -10000

    @pytest.mark.settlement
    def test_member_outcomes(self, alice_bob_session):
        result = SettlementEngine().calculate_session(alice_bob_session)
        alice, bob = result.member_calculations

        assert alice.total_spent == 50000
        assert alice.amount_per_person == 25000
        assert alice.final_amount == 25000
        assert alice.status == MemberStatus.NEEDS_TO_PAY

        assert bob.total_spent == 0
        assert bob.advance == 60000
        assert bob.final_amount == 35000
        assert bob.status == MemberStatus.GETS_REFUND
        assert bob.bank_info == alice_bob_session.members[1].bank_info

    @pytest.mark.settlement
    def test_summary(self, alice_bob_session):
        summary = SettlementEngine().calculate_session(alice_bob_session).summary

        assert summary.need_to_pay == [SummaryEntry("Alice", 25000)]
        assert summary.get_refund == [SummaryEntry("Bob", 35000)]
        assert summary.even == []
        assert summary.total_need_to_pay == 25000
        assert summary.total_refund == 35000
        assert summary.balance_check == -10000

    @pytest.mark.settlement
    def test_validation_reports_overfunded_session(self, alice_bob_session, caplog):
        with caplog.at_level(logging.WARNING, logger="splitcheck.settlement.engine"):
            validation = SettlementEngine().calculate_session(alice_bob_session).validation

        assert validation.total_cost == 50000
        assert validation.calculated_total == 85000
        assert validation.difference == 35000
        assert validation.balanced is False
        assert "Calculation validation failed" in caplog.text


class TestEmptySessions:
    """Sessions without members produce zeroed results."""

    @pytest.mark.settlement
    @pytest.mark.parametrize("session", [None, Session(), make_session()], ids=["none", "default", "no_members"])
    def test_empty_result(self, session):
        result = SettlementEngine().calculate_session(session)

        assert result.member_calculations == []
        assert result.totals.total_cost == 0
        assert result.totals.member_count == 0
        assert result.totals.cost_per_person == 0
        assert result.summary.need_to_pay == []
        assert result.summary.get_refund == []
        assert result.summary.even == []
        assert result.summary.balance_check == 0
        assert result.validation.balanced is True


class TestSettlementRules:
    """Status thresholds, rounding and malformed input."""

    @pytest.mark.settlement
    def test_even_members(self):
        session = make_session(
            Member("a", "A", [Item("x", "50000")], advance="50000"),
            Member("b", "B", [Item("y", "50000")], advance="50000"),
        )

        result = SettlementEngine().calculate_session(session)

        assert [m.status for m in result.member_calculations] == [MemberStatus.EVEN, MemberStatus.EVEN]
        assert [e.name for e in result.summary.even] == ["A", "B"]
        assert result.validation.balanced is True

    @pytest.mark.settlement
    def test_sub_tolerance_difference_is_even(self):
        session = make_session(Member("a", "A", [Item("x", "10.005")], advance="10"))

        calc = SettlementEngine(EngineSettings(precision=3)).calculate_session(session).member_calculations[0]

        assert calc.status == MemberStatus.EVEN
        assert calc.final_amount == 0

    @pytest.mark.settlement
    def test_uneven_three_way_split(self, three_way_session):
        result = SettlementEngine().calculate_session(three_way_session)
        an, binh, chi = result.member_calculations

        assert result.totals.total_cost == 320000
        assert result.totals.cost_per_person == pytest.approx(106666.67)
        assert an.final_amount == pytest.approx(6666.67)
        assert an.status == MemberStatus.NEEDS_TO_PAY
        assert binh.final_amount == pytest.approx(106666.67)
        assert chi.final_amount == pytest.approx(93333.33)
        assert chi.status == MemberStatus.GETS_REFUND

    @pytest.mark.settlement
    def test_precision_and_method(self, three_way_session):
        floor_engine = SettlementEngine(EngineSettings(precision=0, rounding_method=RoundingMethod.FLOOR))
        ceil_engine = SettlementEngine(EngineSettings(precision=0, rounding_method=RoundingMethod.CEIL))

        assert floor_engine.calculate_session(three_way_session).totals.cost_per_person == 106666
        assert ceil_engine.calculate_session(three_way_session).totals.cost_per_person == 106667

    @pytest.mark.settlement
    def test_malformed_price_counts_as_zero(self):
        session = make_session(
            Member("a", "A", [Item("ok", "100"), Item("bad", "(1+"), Item("div", "5/0")]),
            Member("b", "B", [Item("blank", "")]),
        )

        result = SettlementEngine().calculate_session(session)

        assert result.member_calculations[0].total_spent == 100
        assert result.member_calculations[0].item_count == 3
        assert result.totals.total_items == 4
        assert result.totals.total_cost == 100

    @pytest.mark.settlement
    def test_input_session_not_modified(self, three_way_session):
        before = copy.deepcopy(three_way_session)

        SettlementEngine().calculate_session(three_way_session)

        assert three_way_session == before

    @pytest.mark.settlement
    def test_calculation_items_are_not_aliased(self, alice_bob_session):
        calc = SettlementEngine().calculate_session(alice_bob_session).member_calculations[0]

        calc.items.append(Item("extra", "1"))
        calc.items[0].price = "999"

        assert len(alice_bob_session.members[0].items) == 1
        assert alice_bob_session.members[0].items[0].price == "2*25000"
        assert calc.items[0] is not alice_bob_session.members[0].items[0]


class TestSettlementProperties:
    """Invariants that hold for any session."""

    @pytest.mark.settlement
    def test_total_spent_sums_to_total_cost(self, three_way_session, alice_bob_session):
        for session in (three_way_session, alice_bob_session):
            result = SettlementEngine().calculate_session(session)
            spent = sum(m.total_spent for m in result.member_calculations)
            assert spent == pytest.approx(result.totals.total_cost, abs=0.01)

    @pytest.mark.settlement
    def test_net_balance_matches_remaining_balance(self, three_way_session, alice_bob_session):
        for session in (three_way_session, alice_bob_session):
            result = SettlementEngine().calculate_session(session)
            owed = sum(m.final_amount for m in result.by_status(MemberStatus.NEEDS_TO_PAY))
            refunded = sum(m.final_amount for m in result.by_status(MemberStatus.GETS_REFUND))
            tolerance = 0.01 * result.totals.member_count
            assert owed - refunded == pytest.approx(result.totals.remaining_balance, abs=tolerance)
