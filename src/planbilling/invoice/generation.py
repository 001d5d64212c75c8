"""Invoice generation and payment — commands and handlers."""

from protean import handle
from protean.fields import Date, Identifier, String, Text
from protean.utils.globals import current_domain

from planbilling.domain import billing
from planbilling.invoice import ledger
from planbilling.invoice.invoice import Invoice
from planbilling.plan.plan import Plan


@billing.command(part_of="Invoice")
class GenerateInvoice:
    """Generate an invoice for a plan. Every field but the plan is optional."""

    plan_id = Identifier(required=True)
    description = Text()
    period_start = Date()
    period_end = Date()
    amount = String(max_length=40)
    as_of = Date()  # Optional: defaults to today


@billing.command(part_of="Invoice")
class PayInvoice:
    invoice_id = Identifier(required=True)


@billing.command_handler(part_of=Invoice)
class InvoiceLedgerHandler:
    @handle(GenerateInvoice)
    def generate_invoice(self, command):
        plan = current_domain.repository_for(Plan).get(command.plan_id)
        invoice = ledger.create_invoice(
            plan,
            description=command.description,
            period_start=command.period_start,
            period_end=command.period_end,
            amount=command.amount,
            as_of=command.as_of,
        )
        return str(invoice.id)

    @handle(PayInvoice)
    def pay_invoice(self, command):
        invoice = current_domain.repository_for(Invoice).get(command.invoice_id)
        ledger.pay(invoice)
