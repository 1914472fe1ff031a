#!/usr/bin/env python3
"""
Settlement Engine

Turns a Session into per-member costs, session totals, final balances and a
summary of who pays and who is refunded.

Calculation Steps (equal split):
1. Member costs: evaluate each item price and the advance, sum to total_spent
2. Session totals: total cost, advances, cost per person, remaining balance
3. Final amounts: cost per person minus advance, classified by status
4. Summary: members partitioned by status with running totals
5. Validation: advances plus amounts owed should reconcile to total cost

Every amount passes through the configured rounding policy. The engine holds only
its settings, so one instance can serve any number of sessions.
"""

import logging
from dataclasses import replace

from ..core.config import EngineSettings
from ..core.expression import ExpressionEvaluator
from ..core.models import (
    Amount,
    Member,
    MemberCalculation,
    MemberStatus,
    Session,
    SessionTotals,
    SettlementResult,
    SettlementSummary,
    SummaryEntry,
    ValidationReport,
)

logger = logging.getLogger(__name__)

# Amounts closer than this to zero count as settled
EVEN_TOLERANCE = 0.01


class SettlementEngine:
    """
    Equal-split settlement calculator.

    Example:
        >>> engine = SettlementEngine()
        >>> result = engine.calculate_session(session)
        >>> result.totals.cost_per_person
        25000.0
    """

    def __init__(self, settings: EngineSettings | None = None):
        """Initialize engine with calculation settings."""
        self.settings = settings or EngineSettings()
        self.round = self.settings.rounder
        self.evaluator = ExpressionEvaluator(self.round)

    def evaluate(self, value: Amount | None) -> float:
        """Evaluate a price or advance; malformed input counts as 0."""
        return self.evaluator.evaluate(value)

    def calculate_member_costs(self, members: list[Member]) -> list[MemberCalculation]:
        """Step 1: evaluate item prices and advances for every member."""
        calculations = []
        for member in members:
            items = [replace(item) for item in member.items]
            total_spent = sum((self.evaluate(item.price) for item in items), 0.0)

            calculations.append(
                MemberCalculation(
                    id=member.id,
                    name=member.name,
                    items=items,
                    advance=self.evaluate(member.advance),
                    total_spent=self.round(total_spent),
                    item_count=len(items),
                    bank_info=member.bank_info,
                )
            )
        return calculations

    def calculate_session_totals(self, calculations: list[MemberCalculation]) -> SessionTotals:
        """Step 2: aggregate member costs into session totals."""
        member_count = len(calculations)
        total_cost = sum((c.total_spent for c in calculations), 0.0)
        total_advance = sum((c.advance for c in calculations), 0.0)
        total_items = sum(c.item_count for c in calculations)

        cost_per_person = total_cost / member_count if member_count > 0 else 0.0

        return SessionTotals(
            total_cost=self.round(total_cost),
            total_advance=self.round(total_advance),
            member_count=member_count,
            total_items=total_items,
            average_spent=self.round(cost_per_person),
            cost_per_person=self.round(cost_per_person),
            remaining_balance=self.round(total_cost - total_advance),
        )

    def allocate(self, calculation: MemberCalculation, amount_per_person: float) -> MemberCalculation:
        """
        Derive final amount and status from a member's share of the cost.

        final = share - advance; within EVEN_TOLERANCE of zero the member is even,
        above it they need to pay, below it they get the absolute value refunded.
        """
        final_amount = amount_per_person - calculation.advance

        if abs(final_amount) < EVEN_TOLERANCE:
            status = MemberStatus.EVEN
            final_amount = 0.0
        elif final_amount > 0:
            status = MemberStatus.NEEDS_TO_PAY
        else:
            status = MemberStatus.GETS_REFUND
            final_amount = abs(final_amount)

        return replace(
            calculation,
            amount_per_person=self.round(amount_per_person),
            final_amount=self.round(final_amount),
            status=status,
        )

    def calculate_final_amounts(
        self, calculations: list[MemberCalculation], totals: SessionTotals
    ) -> list[MemberCalculation]:
        """Step 3: equal share for everyone, less what each member advanced."""
        return [self.allocate(c, totals.cost_per_person) for c in calculations]

    def generate_summary(self, calculations: list[MemberCalculation]) -> SettlementSummary:
        """Step 4: partition members by status and total each side."""
        need_to_pay: list[SummaryEntry] = []
        get_refund: list[SummaryEntry] = []
        even: list[SummaryEntry] = []

        for calc in calculations:
            if calc.status == MemberStatus.NEEDS_TO_PAY:
                need_to_pay.append(SummaryEntry(calc.name, calc.final_amount))
            elif calc.status == MemberStatus.GETS_REFUND:
                get_refund.append(SummaryEntry(calc.name, calc.final_amount))
            else:
                even.append(SummaryEntry(calc.name, 0.0))

        total_need_to_pay = self.round(sum((e.amount for e in need_to_pay), 0.0))
        total_refund = self.round(sum((e.amount for e in get_refund), 0.0))

        return SettlementSummary(
            need_to_pay=need_to_pay,
            get_refund=get_refund,
            even=even,
            total_need_to_pay=total_need_to_pay,
            total_refund=total_refund,
            balance_check=self.round(total_need_to_pay - total_refund),
        )

    def validate_calculations(
        self, calculations: list[MemberCalculation], totals: SessionTotals
    ) -> ValidationReport:
        """
        Step 5: check that advances plus amounts owed reconcile to total cost.

        Advisory only: a mismatch is logged and reported, never raised.
        """
        total_advances = sum((c.advance for c in calculations), 0.0)
        total_need_to_pay = sum(
            (c.final_amount for c in calculations if c.status == MemberStatus.NEEDS_TO_PAY), 0.0
        )

        calculated_total = total_advances + total_need_to_pay
        difference = abs(calculated_total - totals.total_cost)
        balanced = difference <= EVEN_TOLERANCE

        if not balanced:
            logger.warning(
                "Calculation validation failed: total cost %s, advances + owed %s, difference %s",
                totals.total_cost,
                self.round(calculated_total),
                self.round(difference),
            )

        return ValidationReport(
            total_cost=totals.total_cost,
            calculated_total=self.round(calculated_total),
            difference=self.round(difference),
            balanced=balanced,
        )

    def empty_result(self) -> SettlementResult:
        """Result for a session with no members."""
        return SettlementResult(
            member_calculations=[],
            totals=self.calculate_session_totals([]),
            summary=self.generate_summary([]),
            validation=ValidationReport(),
        )

    def calculate_session(self, session: Session | None) -> SettlementResult:
        """
        Run the full equal-split settlement for a session.

        Args:
            session: Session to settle (not modified)

        Returns:
            SettlementResult; zeroed when the session is absent or has no members
        """
        if session is None or not session.members:
            return self.empty_result()

        calculations = self.calculate_member_costs(session.members)
        totals = self.calculate_session_totals(calculations)
        final_calculations = self.calculate_final_amounts(calculations, totals)
        summary = self.generate_summary(final_calculations)
        validation = self.validate_calculations(final_calculations, totals)

        logger.debug(
            "Settled session %s: %d members, total %s, %s per person",
            session.id or "<unnamed>",
            totals.member_count,
            totals.total_cost,
            totals.cost_per_person,
        )

        return SettlementResult(
            member_calculations=final_calculations,
            totals=totals,
            summary=summary,
            validation=validation,
        )
