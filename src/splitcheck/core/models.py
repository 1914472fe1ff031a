#!/usr/bin/env python3
"""
Core Data Models for SplitCheck

Session input structures (Session, Member, Item) and the derived settlement
structures (MemberCalculation, SessionTotals, SettlementSummary, SettlementResult,
TransferSuggestion).

Input models are plain mutable dataclasses owned by the caller. Derived models are
frozen: each calculation builds new values from the inputs and never aliases them.

Dictionary conversion uses the camelCase keys of the browser data export so that
exported session files can be loaded unchanged.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .dates import SessionDate

logger = logging.getLogger(__name__)

Amount = str | int | float


class MemberStatus(Enum):
    """Net position of a member after comparing owed share to advance paid."""

    NEEDS_TO_PAY = "needs_to_pay"
    GETS_REFUND = "gets_refund"
    EVEN = "even"


class TipMode(Enum):
    """How a tip is spread across members."""

    EQUAL = "equal"
    PROPORTIONAL = "proportional"


# ---------------------------------------------------------------------------
# Session input
# ---------------------------------------------------------------------------


@dataclass
class Item:
    """A purchased line item; price stays raw text until calculation time."""

    name: str
    price: Amount = ""

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "price": self.price}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Item":
        price = data.get("price", "")
        return cls(name=str(data.get("name", "")), price="" if price is None else price)


@dataclass
class BankInfo:
    """Where a member wants to receive refunds."""

    account_holder: str = ""
    bank_name: str = ""
    account_number: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "accountHolder": self.account_holder,
            "bankName": self.bank_name,
            "accountNumber": self.account_number,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BankInfo":
        return cls(
            account_holder=str(data.get("accountHolder") or ""),
            bank_name=str(data.get("bankName") or ""),
            account_number=str(data.get("accountNumber") or ""),
        )


@dataclass
class Member:
    """Session participant with their items and advance payment."""

    id: str
    name: str
    items: list[Item] = field(default_factory=list)
    advance: Amount = ""
    bank_info: BankInfo | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "items": [item.to_dict() for item in self.items],
            "advance": self.advance,
            "bankInfo": self.bank_info.to_dict() if self.bank_info else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Member":
        bank_info = data.get("bankInfo")
        advance = data.get("advance", "")
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            items=[Item.from_dict(item) for item in data.get("items") or []],
            advance="" if advance is None else advance,
            bank_info=BankInfo.from_dict(bank_info) if isinstance(bank_info, dict) else None,
        )


@dataclass
class DateRange:
    """Inclusive date range of a session (ISO date strings)."""

    start_date: str | None = None
    end_date: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"startDate": self.start_date, "endDate": self.end_date}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DateRange":
        return cls(start_date=data.get("startDate"), end_date=data.get("endDate"))


@dataclass
class SessionMetadata:
    """Timestamps and display name of a session."""

    created_at: str | None = None
    updated_at: str | None = None
    name: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"createdAt": self.created_at, "updatedAt": self.updated_at, "name": self.name}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionMetadata":
        return cls(
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
            name=str(data.get("name") or ""),
        )


@dataclass
class SessionSettings:
    """Per-session display settings."""

    currency: str = "VND"
    precision: int | None = None
    show_bank_info: bool = False

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"currency": self.currency, "showBankInfo": self.show_bank_info}
        if self.precision is not None:
            result["precision"] = self.precision
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionSettings":
        precision = data.get("precision")
        return cls(
            currency=str(data.get("currency") or "VND"),
            precision=int(precision) if precision is not None else None,
            show_bank_info=bool(data.get("showBankInfo", False)),
        )


@dataclass
class Session:
    """
    One bill-splitting event.

    Stored sessions may also carry the totals block computed when they were saved;
    analytics reads it instead of recomputing.
    """

    id: str = ""
    members: list[Member] = field(default_factory=list)
    location: str = ""
    date_range: DateRange = field(default_factory=DateRange)
    metadata: SessionMetadata = field(default_factory=SessionMetadata)
    settings: SessionSettings = field(default_factory=SessionSettings)
    totals: "SessionTotals | None" = None

    @property
    def session_date(self) -> SessionDate | None:
        """
        Calendar date used for analytics.

        Prefers creation time, then last update, then the start of the date range.
        """
        for candidate in (self.metadata.created_at, self.metadata.updated_at, self.date_range.start_date):
            if not candidate:
                continue
            try:
                return SessionDate.from_string(candidate)
            except ValueError:
                logger.warning("Session %s has unparseable date %r", self.id or "<unnamed>", candidate)
        return None

    def find_member(self, member_id: str) -> Member | None:
        """Look up a member by id."""
        return next((m for m in self.members if m.id == member_id), None)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "id": self.id,
            "metadata": self.metadata.to_dict(),
            "dateRange": self.date_range.to_dict(),
            "location": self.location,
            "members": [member.to_dict() for member in self.members],
            "settings": self.settings.to_dict(),
        }
        if self.totals is not None:
            result["totals"] = self.totals.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Session":
        """
        Create a Session from the browser export format.

        Older exports put createdAt/updatedAt at the top level instead of under
        metadata; both are accepted.
        """
        metadata = SessionMetadata.from_dict(data.get("metadata") or {})
        if metadata.created_at is None:
            metadata.created_at = data.get("createdAt")
        if metadata.updated_at is None:
            metadata.updated_at = data.get("updatedAt")

        totals = data.get("totals")
        return cls(
            id=str(data.get("id", "")),
            members=[Member.from_dict(m) for m in data.get("members") or []],
            location=str(data.get("location") or ""),
            date_range=DateRange.from_dict(data.get("dateRange") or {}),
            metadata=metadata,
            settings=SessionSettings.from_dict(data.get("settings") or {}),
            totals=SessionTotals.from_dict(totals) if isinstance(totals, dict) else None,
        )


# ---------------------------------------------------------------------------
# Derived settlement results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MemberCalculation:
    """
    Per-member settlement figures.

    Built in two stages: costs first (total_spent, advance, item_count), then the
    allocation fields (amount_per_person, final_amount, status) via
    dataclasses.replace().
    """

    id: str
    name: str
    items: list[Item]
    advance: float
    total_spent: float
    item_count: int
    bank_info: BankInfo | None = None
    amount_per_person: float = 0.0
    final_amount: float = 0.0
    status: MemberStatus = MemberStatus.EVEN

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "items": [item.to_dict() for item in self.items],
            "advance": self.advance,
            "bankInfo": self.bank_info.to_dict() if self.bank_info else None,
            "totalSpent": self.total_spent,
            "itemCount": self.item_count,
            "amountPerPerson": self.amount_per_person,
            "finalAmount": self.final_amount,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class SessionTotals:
    """Session-level aggregates; remaining_balance = total_cost - total_advance."""

    total_cost: float = 0.0
    total_advance: float = 0.0
    member_count: int = 0
    total_items: int = 0
    average_spent: float = 0.0
    cost_per_person: float = 0.0
    remaining_balance: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalCost": self.total_cost,
            "totalAdvance": self.total_advance,
            "memberCount": self.member_count,
            "totalItems": self.total_items,
            "averageSpent": self.average_spent,
            "costPerPerson": self.cost_per_person,
            "remainingBalance": self.remaining_balance,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionTotals":
        """Create from a stored totals block; missing fields default to zero."""
        return cls(
            total_cost=float(data.get("totalCost") or 0),
            total_advance=float(data.get("totalAdvance") or 0),
            member_count=int(data.get("memberCount") or 0),
            total_items=int(data.get("totalItems") or 0),
            average_spent=float(data.get("averageSpent") or 0),
            cost_per_person=float(data.get("costPerPerson") or 0),
            remaining_balance=float(data.get("remainingBalance") or 0),
        )


@dataclass(frozen=True)
class SummaryEntry:
    """Name and amount line of the settlement summary."""

    name: str
    amount: float

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "amount": self.amount}


@dataclass(frozen=True)
class SettlementSummary:
    """Members partitioned by status with the running totals of each side."""

    need_to_pay: list[SummaryEntry] = field(default_factory=list)
    get_refund: list[SummaryEntry] = field(default_factory=list)
    even: list[SummaryEntry] = field(default_factory=list)
    total_need_to_pay: float = 0.0
    total_refund: float = 0.0
    balance_check: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "needToPay": [e.to_dict() for e in self.need_to_pay],
            "getRefund": [e.to_dict() for e in self.get_refund],
            "even": [e.to_dict() for e in self.even],
            "totalNeedToPay": self.total_need_to_pay,
            "totalRefund": self.total_refund,
            "balanceCheck": self.balance_check,
        }


@dataclass(frozen=True)
class ValidationReport:
    """
    Reconciliation check: advances plus amounts still owed should equal total cost.

    A mismatch is advisory. Rounding at several stages can leave sub-cent drift,
    and unequal advances can leave the session under- or over-funded.
    """

    total_cost: float = 0.0
    calculated_total: float = 0.0
    difference: float = 0.0
    balanced: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalCost": self.total_cost,
            "calculatedTotal": self.calculated_total,
            "difference": self.difference,
            "balanced": self.balanced,
        }


@dataclass(frozen=True)
class SettlementResult:
    """Complete output of one settlement calculation."""

    member_calculations: list[MemberCalculation]
    totals: SessionTotals
    summary: SettlementSummary
    validation: ValidationReport = field(default_factory=ValidationReport)

    def by_status(self, status: MemberStatus) -> list[MemberCalculation]:
        """Member calculations with the given status, in member order."""
        return [m for m in self.member_calculations if m.status == status]

    def to_dict(self) -> dict[str, Any]:
        return {
            "memberCalculations": [m.to_dict() for m in self.member_calculations],
            "totals": self.totals.to_dict(),
            "summary": self.summary.to_dict(),
            "validation": self.validation.to_dict(),
        }


@dataclass(frozen=True)
class TransferSuggestion:
    """One suggested payment from a member who owes to a member who is owed."""

    from_name: str
    to_name: str
    amount: float
    formatted_amount: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "from": self.from_name,
            "to": self.to_name,
            "amount": self.amount,
            "formattedAmount": self.formatted_amount,
        }
