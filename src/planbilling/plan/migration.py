"""Plan migration — replace a plan with a successor in one unit of work.

Migration creates the successor plan for the same user and billable entity,
moves billing of every invoice of the predecessor to the successor, links the
two plans, and charges the rest of the current month at the successor's price
when the predecessor already had paid invoices and the monthly price changes.

Everything is computed and validated in ``PlanMigration.prepare`` before the
first write, and the handler runs inside protean's UnitOfWork, so a failure
leaves plans and invoices exactly as they were.
"""

from datetime import date

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Date, Identifier, Integer, String
from protean.utils.globals import current_domain

from planbilling.domain import billing
from planbilling.exceptions import MigrationFailure
from planbilling.invoice import ledger
from planbilling.invoice.invoice import Invoice
from planbilling.plan.plan import Plan, PlanState, transition
from planbilling.utils.logging import add_context, clear_context

logger = structlog.get_logger(__name__)


class PlanMigration:
    """All changes of one migration, computed up front and written together."""

    def __init__(self, plan: Plan, successor: Plan, invoices: list[Invoice], adjustment: Invoice | None) -> None:
        self.plan = plan
        self.successor = successor
        self.invoices = invoices
        self.adjustment = adjustment

    @classmethod
    def prepare(
        cls,
        plan: Plan,
        price,
        yearly_price,
        members_limit,
        name: str | None = None,
        as_of: date | None = None,
    ) -> "PlanMigration":
        """Validate the migration and build the successor and adjustment invoice.

        Nothing is mutated or persisted here.
        """
        transition(plan.current_state(), PlanState.MIGRATED)

        successor = Plan.create(
            name=name,
            price=price,
            yearly_price=yearly_price,
            members_limit=members_limit,
            user_id=plan.user_id,
            billable_type=plan.billable_type,
            billable_id=plan.billable_id,
            changed_from_id=str(plan.id),
        )

        invoices = ledger.billed_invoices(plan)
        adjustment = None
        has_paid_invoices = any(invoice.is_paid() for invoice in invoices)
        # Downgrades are charged at the new rate too, never credited
        if has_paid_invoices and successor.monthly_price() != plan.monthly_price():
            today = as_of or date.today()
            adjustment = ledger.build_invoice(
                successor,
                description=f"Adjustment for migration to {successor.name or 'new plan'}",
                as_of=today,
            )

        return cls(plan, successor, invoices, adjustment)

    def apply(self) -> Plan:
        """Rewrite the predecessor, successor and invoices. Returns the successor."""
        plan_repo = current_domain.repository_for(Plan)
        invoice_repo = current_domain.repository_for(Invoice)

        for invoice in self.invoices:
            invoice.reassign_to(str(self.successor.id))
        self.plan.migrate(changed_to_id=str(self.successor.id))

        plan_repo.add(self.successor)
        plan_repo.add(self.plan)
        for invoice in self.invoices:
            invoice_repo.add(invoice)
        if self.adjustment is not None:
            invoice_repo.add(self.adjustment)

        return self.successor


@billing.command(part_of="Plan")
class MigratePlan:
    """Migrate an active plan to a successor with new attributes."""

    plan_id = Identifier(required=True)
    name = String(max_length=255)
    price = String(required=True, max_length=40)
    yearly_price = String(required=True, max_length=40)
    members_limit = Integer(required=True)
    as_of = Date()  # Optional: defaults to today


@billing.command_handler(part_of=Plan)
class MigratePlanHandler:
    @handle(MigratePlan)
    def migrate_plan(self, command):
        add_context(plan_id=str(command.plan_id))
        try:
            plan = current_domain.repository_for(Plan).get(command.plan_id)
            migration = PlanMigration.prepare(
                plan,
                name=command.name,
                price=command.price,
                yearly_price=command.yearly_price,
                members_limit=command.members_limit,
                as_of=command.as_of,
            )
            successor = migration.apply()
            logger.info(
                "Plan migrated",
                successor_id=str(successor.id),
                reassigned_invoices=len(migration.invoices),
                adjustment_invoice_id=str(migration.adjustment.id) if migration.adjustment else None,
            )
        except (ValidationError, ObjectNotFoundError):
            raise
        except Exception as exc:
            logger.error("Plan migration failed", error=str(exc))
            raise MigrationFailure(str(command.plan_id), str(exc)) from exc
        finally:
            clear_context()

        return str(successor.id)


def migrate_to(
    plan: Plan,
    price,
    yearly_price,
    members_limit,
    name: str | None = None,
    as_of: date | None = None,
) -> Plan:
    """Migrate a persisted ``plan`` and return the persisted successor.

    ``plan`` itself is left untouched; reload it from the repository to see
    its ``migrated`` state and ``changed_to_id``.
    """
    command = MigratePlan(
        plan_id=str(plan.id),
        name=name,
        price=str(price) if price is not None else None,
        yearly_price=str(yearly_price) if yearly_price is not None else None,
        members_limit=members_limit,
        as_of=as_of,
    )
    try:
        successor_id = current_domain.process(command, asynchronous=False)
    except (ValidationError, ObjectNotFoundError, MigrationFailure):
        raise
    except Exception as exc:
        raise MigrationFailure(str(plan.id), str(exc)) from exc
    return current_domain.repository_for(Plan).get(successor_id)
