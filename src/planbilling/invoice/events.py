"""Domain events for the Invoice aggregate."""

from protean.fields import Date, DateTime, Identifier, String

from planbilling.domain import billing


@billing.event(part_of="Invoice")
class InvoiceGenerated:
    """A new invoice was issued for a plan."""

    __version__ = 1

    invoice_id = Identifier(required=True)
    plan_id = Identifier(required=True)
    period_start = Date(required=True)
    period_end = Date(required=True)
    amount = String(required=True)
    generated_at = DateTime(required=True)


@billing.event(part_of="Invoice")
class InvoicePaid:
    """An invoice was marked as paid."""

    __version__ = 1

    invoice_id = Identifier(required=True)
    plan_id = Identifier(required=True)
    paid_at = DateTime(required=True)


@billing.event(part_of="Invoice")
class InvoiceReassigned:
    """Billing of an invoice moved to a successor plan."""

    __version__ = 1

    invoice_id = Identifier(required=True)
    from_plan_id = Identifier(required=True)
    to_plan_id = Identifier(required=True)
    reassigned_at = DateTime(required=True)
