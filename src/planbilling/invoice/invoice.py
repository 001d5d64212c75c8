"""Invoice aggregate (CQRS) — a billing record for a date range of a plan.

``plan_id`` is the plan currently billed for the invoice and moves to the
successor when a plan is migrated. ``issued_plan_id`` is the plan the invoice
was created on and never changes, which keeps the predecessor's history
auditable.

State Machine:
    PENDING → PAID
"""

from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Date, DateTime, Identifier, String, Text

from planbilling.domain import billing
from planbilling.invoice.events import InvoiceGenerated, InvoicePaid, InvoiceReassigned
from planbilling.shared.money import non_negative_text, to_decimal


class InvoiceStatus(Enum):
    PENDING = "pending"
    PAID = "paid"


_VALID_TRANSITIONS = {
    InvoiceStatus.PENDING: {InvoiceStatus.PAID},
    InvoiceStatus.PAID: set(),  # Terminal
}


def _assert_valid_period(period_start: date | None, period_end: date | None) -> None:
    if period_start is not None and period_end is not None and period_start > period_end:
        raise ValidationError({"period_end": [f"Period end {period_end} precedes period start {period_start}"]})


@billing.aggregate
class Invoice:
    plan_id = Identifier(required=True)
    issued_plan_id = Identifier(required=True)
    description = Text()
    period_start = Date(required=True)
    period_end = Date(required=True)
    amount = String(required=True, max_length=40)
    status = String(
        choices=InvoiceStatus,
        default=InvoiceStatus.PENDING.value,
    )
    paid_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def period_must_not_be_reversed(self):
        _assert_valid_period(self.period_start, self.period_end)

    @invariant.post
    def amount_must_not_be_negative(self):
        if self.amount is not None and to_decimal(self.amount) < 0:
            raise ValidationError({"amount": ["must not be negative"]})

    def _assert_can_transition(self, target_status: InvoiceStatus) -> None:
        current = InvoiceStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    @classmethod
    def create(
        cls,
        plan_id: str,
        period_start: date,
        period_end: date,
        amount,
        description: str | None = None,
    ):
        """Create a pending invoice issued on ``plan_id``."""
        _assert_valid_period(period_start, period_end)
        now = datetime.now(UTC)
        invoice = cls(
            plan_id=plan_id,
            issued_plan_id=plan_id,
            description=description,
            period_start=period_start,
            period_end=period_end,
            amount=non_negative_text(amount, "amount"),
            created_at=now,
            updated_at=now,
        )
        invoice.raise_(
            InvoiceGenerated(
                invoice_id=str(invoice.id),
                plan_id=str(plan_id),
                period_start=period_start,
                period_end=period_end,
                amount=invoice.amount,
                generated_at=now,
            )
        )
        return invoice

    def amount_due(self) -> Decimal:
        return to_decimal(self.amount)

    def is_paid(self) -> bool:
        return InvoiceStatus(self.status) == InvoiceStatus.PAID

    def mark_paid(self) -> None:
        """Mark the invoice as paid. Paying a paid invoice changes nothing."""
        if self.is_paid():
            return
        self._assert_can_transition(InvoiceStatus.PAID)
        now = datetime.now(UTC)
        self.status = InvoiceStatus.PAID.value
        self.paid_at = now
        self.updated_at = now
        self.raise_(
            InvoicePaid(
                invoice_id=str(self.id),
                plan_id=str(self.plan_id),
                paid_at=now,
            )
        )

    def reassign_to(self, plan_id: str) -> None:
        """Move billing of this invoice to another plan."""
        if str(self.plan_id) == str(plan_id):
            return
        now = datetime.now(UTC)
        previous = str(self.plan_id)
        self.plan_id = plan_id
        self.updated_at = now
        self.raise_(
            InvoiceReassigned(
                invoice_id=str(self.id),
                from_plan_id=previous,
                to_plan_id=str(plan_id),
                reassigned_at=now,
            )
        )
