#!/usr/bin/env python3
"""
Settlement Export

Plain-text, CSV and JSON renderings of a SettlementResult.

Formats:
- summary: totals plus who pays, who is refunded and who is even
- detailed: summary plus every member's items and figures
- csv: one row per member
- json: the full result structure
"""

import csv
import io
import logging
from enum import Enum

from ..core.config import EngineSettings
from ..core.currency import format_currency
from ..core.expression import ExpressionEvaluator
from ..core.json_utils import format_json
from ..core.models import SettlementResult, TransferSuggestion

logger = logging.getLogger(__name__)

RULE = "=" * 30

CSV_HEADER = ["Name", "Items Count", "Total Spent", "Advance Paid", "Should Pay", "Final Amount", "Status"]


class ExportFormat(Enum):
    """Supported settlement export formats."""

    SUMMARY = "summary"
    DETAILED = "detailed"
    CSV = "csv"
    JSON = "json"


class SettlementExporter:
    """Formats settlement results using one set of display settings."""

    def __init__(self, settings: EngineSettings | None = None):
        self.settings = settings or EngineSettings()
        self.evaluator = ExpressionEvaluator(self.settings.rounder)

    def money(self, amount: float) -> str:
        return format_currency(amount, self.settings.currency, self.settings.precision, self.settings.rounding_method)

    def export(self, result: SettlementResult, format: ExportFormat | str = ExportFormat.SUMMARY) -> str:
        """
        Render a result in the requested format.

        Unknown format names fall back to the summary.
        """
        try:
            export_format = format if isinstance(format, ExportFormat) else ExportFormat(str(format).lower())
        except ValueError:
            logger.warning("Unknown export format %r, using summary", format)
            export_format = ExportFormat.SUMMARY

        if export_format == ExportFormat.DETAILED:
            return self.export_detailed(result)
        if export_format == ExportFormat.CSV:
            return self.export_csv(result)
        if export_format == ExportFormat.JSON:
            return format_json(result.to_dict())
        return self.export_summary(result)

    def export_summary(self, result: SettlementResult) -> str:
        totals = result.totals
        summary = result.summary

        lines = [
            "BILL SPLITTING SUMMARY",
            RULE,
            "",
            f"Total Cost: {self.money(totals.total_cost)}",
            f"Total Members: {totals.member_count}",
            f"Cost Per Person: {self.money(totals.cost_per_person)}",
            f"Total Advance: {self.money(totals.total_advance)}",
            "",
        ]

        if summary.need_to_pay:
            lines.append("NEED TO PAY:")
            lines.extend(f"  {e.name}: {self.money(e.amount)}" for e in summary.need_to_pay)
            lines.append("")

        if summary.get_refund:
            lines.append("GET REFUND:")
            lines.extend(f"  {e.name}: {self.money(e.amount)}" for e in summary.get_refund)
            lines.append("")

        if summary.even:
            lines.append("ALL EVEN:")
            lines.extend(f"  {e.name}" for e in summary.even)
            lines.append("")

        return "\n".join(lines)

    def export_detailed(self, result: SettlementResult) -> str:
        lines = [self.export_summary(result), "", "DETAILED BREAKDOWN:", RULE, ""]

        for member in result.member_calculations:
            lines.append(f"{member.name}:")
            lines.append(f"  Items ({member.item_count}):")
            for item in member.items:
                price = self.money(self.evaluator.evaluate(item.price))
                lines.append(f"    {item.name}: {price}")
            lines.append(f"  Total Spent: {self.money(member.total_spent)}")
            lines.append(f"  Advance Paid: {self.money(member.advance)}")
            lines.append(f"  Should Pay: {self.money(member.amount_per_person)}")
            lines.append(f"  Final Amount: {self.money(member.final_amount)} ({member.status.value})")
            lines.append("")

        return "\n".join(lines)

    def export_csv(self, result: SettlementResult) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for m in result.member_calculations:
            writer.writerow(
                [m.name, m.item_count, m.total_spent, m.advance, m.amount_per_person, m.final_amount, m.status.value]
            )
        return buffer.getvalue()

    def export_transfers(self, transfers: list[TransferSuggestion]) -> str:
        """Render payment suggestions as indented lines."""
        if not transfers:
            return "PAYMENT SUGGESTIONS:\n  Nothing to settle\n"
        lines = ["PAYMENT SUGGESTIONS:"]
        lines.extend(f"  {t.from_name} -> {t.to_name}: {self.money(t.amount)}" for t in transfers)
        return "\n".join(lines) + "\n"

