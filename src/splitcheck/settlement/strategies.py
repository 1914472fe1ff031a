#!/usr/bin/env python3
"""
Split Strategies

Alternatives to the default equal split. Each one re-weights the inputs and then
reuses the SettlementEngine aggregation:

- Custom percentage split: each member's share is a percentage of total cost
- Tip distribution: a tip is added as a line item per member (equally or in
  proportion to spending) on a copy of the session, then settled normally
"""

import copy
import logging
from typing import Any

from ..core.models import Amount, Item, MemberStatus, Session, SettlementResult, TipMode
from .engine import SettlementEngine

logger = logging.getLogger(__name__)

PERCENTAGE_TOLERANCE = 0.01

EQUAL_TIP_ITEM = "Tip (Equal Split)"
PROPORTIONAL_TIP_ITEM = "Tip (Proportional)"


class SplitValidationError(ValueError):
    """Raised when a split request violates its preconditions."""

    pass


def _normalize_percentages(percentages: dict[Any, Any]) -> dict[str, float]:
    """Key percentages by string member id and coerce values to float."""
    normalized: dict[str, float] = {}
    for member_id, value in percentages.items():
        try:
            normalized[str(member_id)] = float(value)
        except (TypeError, ValueError) as e:
            raise SplitValidationError(f"Percentage for member {member_id!r} is not a number: {value!r}") from e
    return normalized


def calculate_custom_split(
    engine: SettlementEngine,
    session: Session | None,
    percentages: dict[Any, Any] | None,
) -> SettlementResult:
    """
    Split total cost by caller-supplied percentages.

    Totals are computed exactly as in the equal split; only each member's share
    changes. Members without an entry get 0%.

    Args:
        engine: Engine providing rounding and aggregation
        session: Session to settle (not modified)
        percentages: Mapping of member id to percentage of total cost

    Returns:
        SettlementResult with amount_per_person = total_cost * pct / 100

    Raises:
        SplitValidationError: If session, members or percentages are missing, or
            the percentages do not sum to 100 (within 0.01)
    """
    if session is None or not session.members or not percentages:
        raise SplitValidationError("Invalid parameters for custom split")

    shares = _normalize_percentages(percentages)
    total_percentage = sum(shares.values())
    if abs(total_percentage - 100) > PERCENTAGE_TOLERANCE:
        raise SplitValidationError(f"Percentages must sum to 100%, got {total_percentage:g}%")

    unknown = set(shares) - {m.id for m in session.members}
    if unknown:
        logger.warning("Ignoring percentages for unknown members: %s", ", ".join(sorted(unknown)))

    calculations = engine.calculate_member_costs(session.members)
    totals = engine.calculate_session_totals(calculations)

    custom_calculations = [
        engine.allocate(calc, totals.total_cost * shares.get(calc.id, 0.0) / 100) for calc in calculations
    ]

    return SettlementResult(
        member_calculations=custom_calculations,
        totals=totals,
        summary=engine.generate_summary(custom_calculations),
        validation=engine.validate_calculations(custom_calculations, totals),
    )


def calculate_with_tip(
    engine: SettlementEngine,
    session: Session | None,
    tip_amount: Amount | None,
    mode: TipMode | str = TipMode.EQUAL,
) -> SettlementResult:
    """
    Add a tip to the bill and settle.

    The tip is appended as an item to each member of a deep copy of the session,
    so the caller's session is never modified.

    Args:
        engine: Engine used for the final settlement
        session: Session to settle
        tip_amount: Tip as a number or expression text (e.g. "0.1*350000")
        mode: "equal" (same amount per member) or "proportional" (by spending)

    Returns:
        SettlementResult including the tip items

    Raises:
        SplitValidationError: If the mode is unknown, or a positive tip is given
            for a missing or empty session
    """
    try:
        tip_mode = TipMode(mode.value if isinstance(mode, TipMode) else str(mode).lower())
    except ValueError as e:
        raise SplitValidationError(f"Unknown tip distribution mode: {mode!r}") from e

    tip_value = engine.evaluate(tip_amount)
    if tip_value <= 0:
        return engine.calculate_session(session)

    if session is None or not session.members:
        raise SplitValidationError("Cannot distribute a tip without members")

    session_with_tip = copy.deepcopy(session)

    if tip_mode == TipMode.EQUAL:
        tip_per_person = tip_value / len(session_with_tip.members)
        for member in session_with_tip.members:
            member.items.append(Item(name=EQUAL_TIP_ITEM, price=tip_per_person))
    else:
        calculations = engine.calculate_member_costs(session.members)
        total_spent = sum((c.total_spent for c in calculations), 0.0)

        if total_spent > 0:
            for member, calc in zip(session_with_tip.members, calculations):
                tip_for_member = (calc.total_spent / total_spent) * tip_value
                member.items.append(Item(name=PROPORTIONAL_TIP_ITEM, price=tip_for_member))
        else:
            logger.warning("Skipping proportional tip of %s: nobody has spent anything", tip_value)

    result = engine.calculate_session(session_with_tip)
    logger.debug(
        "Applied %s tip of %s; %d members now owe",
        tip_mode.value,
        tip_value,
        len(result.by_status(MemberStatus.NEEDS_TO_PAY)),
    )
    return result
