#!/usr/bin/env python3
"""
Payment Suggestions

Greedy debt settlement: pair the largest remaining debtor with the largest
remaining creditor until one side is exhausted.

The result is deterministic and needs at most payers + receivers - 1 transfers,
but it is not guaranteed to be the theoretical minimum for every distribution.
Ties keep member order (Python's sort is stable).
"""

from dataclasses import dataclass

from ..core.currency import format_currency
from ..core.models import MemberStatus, SettlementResult, TransferSuggestion
from ..core.rounding import Rounder
from .engine import EVEN_TOLERANCE


@dataclass
class _Balance:
    name: str
    remaining: float


def _balances(result: SettlementResult, status: MemberStatus) -> list[_Balance]:
    """Members with the given status, largest amount first."""
    balances = [_Balance(m.name, m.final_amount) for m in result.by_status(status)]
    return sorted(balances, key=lambda b: b.remaining, reverse=True)


def suggest_transfers(
    result: SettlementResult,
    rounder: Rounder | None = None,
    currency: str = "VND",
) -> list[TransferSuggestion]:
    """
    Suggest who should pay whom to settle all balances.

    Args:
        result: Settlement result to settle
        rounder: Rounding policy for transfer amounts (default: 2 decimals, half-up)
        currency: Currency code for the formatted amount

    Returns:
        List of TransferSuggestion in the order they were matched
    """
    rounder = rounder or Rounder()
    payers = _balances(result, MemberStatus.NEEDS_TO_PAY)
    receivers = _balances(result, MemberStatus.GETS_REFUND)

    suggestions: list[TransferSuggestion] = []
    p = r = 0

    while p < len(payers) and r < len(receivers):
        payer = payers[p]
        receiver = receivers[r]

        transfer = min(payer.remaining, receiver.remaining)

        if transfer > EVEN_TOLERANCE:
            amount = rounder(transfer)
            suggestions.append(
                TransferSuggestion(
                    from_name=payer.name,
                    to_name=receiver.name,
                    amount=amount,
                    formatted_amount=format_currency(amount, currency, rounder.precision, rounder.method),
                )
            )

        payer.remaining -= transfer
        receiver.remaining -= transfer

        if payer.remaining <= EVEN_TOLERANCE:
            p += 1
        if receiver.remaining <= EVEN_TOLERANCE:
            r += 1

    return suggestions
