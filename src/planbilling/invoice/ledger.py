"""Invoice ledger — issues, lists and pays invoices of a plan.

Amounts that are not supplied are prorated from the plan's monthly price over
the invoice period. The ledger does not de-duplicate invoices for a period:
callers check ``pending_invoices`` before creating one when retries are
possible.
"""

from datetime import date

import structlog
from protean.utils.globals import current_domain

from planbilling.invoice.invoice import Invoice
from planbilling.shared.proration import amount_for_period, default_period

logger = structlog.get_logger(__name__)


def _by_period(invoice: Invoice):
    return (invoice.period_start, invoice.period_end, invoice.created_at)


def _describe(plan, period_start: date, period_end: date) -> str:
    label = plan.name or "Plan"
    return f"{label} from {period_start.isoformat()} to {period_end.isoformat()}"


def build_invoice(
    plan,
    description: str | None = None,
    period_start: date | None = None,
    period_end: date | None = None,
    amount=None,
    as_of: date | None = None,
) -> Invoice:
    """Build an unsaved invoice for ``plan``, filling in defaults.

    The period defaults to tomorrow through the end of the current month.
    Without an explicit ``amount`` the plan's price is prorated over the
    resolved period; an explicit amount is kept as given.
    """
    today = as_of or date.today()
    default_start, default_end = default_period(today)
    start = period_start or default_start
    end = period_end or default_end

    if amount is None:
        # A reversed period is reported by Invoice.create
        amount = amount_for_period(plan.price, today, start, end) if start <= end else 0

    return Invoice.create(
        plan_id=str(plan.id),
        period_start=start,
        period_end=end,
        amount=amount,
        description=description if description is not None else _describe(plan, start, end),
    )


def create_invoice(plan, **overrides) -> Invoice:
    """Issue and persist an invoice for ``plan``. See ``build_invoice`` for overrides."""
    invoice = build_invoice(plan, **overrides)
    current_domain.repository_for(Invoice).add(invoice)
    logger.info(
        "Invoice created",
        invoice_id=str(invoice.id),
        plan_id=str(plan.id),
        period_start=invoice.period_start.isoformat(),
        period_end=invoice.period_end.isoformat(),
        amount=invoice.amount,
    )
    return invoice


def billed_invoices(plan) -> list[Invoice]:
    """Invoices currently billed to ``plan``, in period order."""
    repo = current_domain.repository_for(Invoice)
    invoices = repo._dao.query.filter(plan_id=str(plan.id)).all().items
    return sorted(invoices, key=_by_period)


def pending_invoices(plan) -> list[Invoice]:
    """Unpaid invoices billed to ``plan``, in period order."""
    return [invoice for invoice in billed_invoices(plan) if not invoice.is_paid()]


def invoices_of(plan) -> list[Invoice]:
    """Every invoice visible through ``plan``.

    That is the invoices issued on the plan or on any of its predecessors,
    plus the invoices currently billed to it. A predecessor therefore keeps
    its own history while its successor sees all of it.
    """
    from planbilling.plan.plan import Plan

    plan_repo = current_domain.repository_for(Plan)
    invoice_repo = current_domain.repository_for(Invoice)

    found = {str(invoice.id): invoice for invoice in billed_invoices(plan)}
    for member in plan_repo.lineage(plan):
        for invoice in invoice_repo._dao.query.filter(issued_plan_id=str(member.id)).all().items:
            found.setdefault(str(invoice.id), invoice)
    return sorted(found.values(), key=_by_period)


def pay(invoice: Invoice) -> Invoice:
    """Mark ``invoice`` paid and persist it. Settlement happens at the payment gateway."""
    already_paid = invoice.is_paid()
    invoice.mark_paid()
    if not already_paid:
        current_domain.repository_for(Invoice).add(invoice)
        logger.info("Invoice paid", invoice_id=str(invoice.id), plan_id=str(invoice.plan_id))
    return invoice
