"""Plan aggregate (CQRS) — a billable subscription configuration.

A Plan belongs to a user and bills a polymorphic billable entity (a course,
an environment, ...). Prices are monthly and yearly decimals stored as
canonical decimal text. Plans form a singly-linked migration chain through
``changed_from_id`` / ``changed_to_id``.

State Machine:
    ACTIVE → CLOSED
    ACTIVE → MIGRATED
"""

from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String

from planbilling.domain import billing
from planbilling.exceptions import InvalidTransition
from planbilling.plan.events import PlanClosed, PlanCreated, PlanMigrated
from planbilling.shared import proration
from planbilling.shared.money import non_negative_text, to_decimal


class PlanState(Enum):
    ACTIVE = "active"
    CLOSED = "closed"
    MIGRATED = "migrated"


_VALID_TRANSITIONS = {
    PlanState.ACTIVE: {PlanState.CLOSED, PlanState.MIGRATED},
    PlanState.CLOSED: set(),  # Terminal
    PlanState.MIGRATED: set(),  # Terminal
}


def transition(current: PlanState, target: PlanState) -> PlanState:
    """Return ``target`` if the lifecycle allows moving there from ``current``."""
    if target not in _VALID_TRANSITIONS.get(current, set()):
        raise InvalidTransition({"state": [f"Cannot transition from {current.value} to {target.value}"]})
    return target


def _price_text(value, field: str) -> str | None:
    # Missing values are left to the required-field validation
    if value is None or value == "":
        return None
    return non_negative_text(value, field)


@billing.aggregate
class Plan:
    name = String(max_length=255)
    price = String(required=True, max_length=40)
    yearly_price = String(required=True, max_length=40)
    members_limit = Integer(required=True, min_value=0)
    user_id = Identifier()
    billable_type = String(max_length=100)
    billable_id = Identifier()
    state = String(
        choices=PlanState,
        default=PlanState.ACTIVE.value,
    )
    changed_to_id = Identifier()
    changed_from_id = Identifier()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def prices_are_non_negative_decimals(self):
        for field in ("price", "yearly_price"):
            value = getattr(self, field)
            if value is not None and to_decimal(value, field) < 0:
                raise ValidationError({field: ["must not be negative"]})

    @invariant.post
    def plan_is_not_linked_to_itself(self):
        if self.changed_to_id is not None and str(self.changed_to_id) == str(self.id):
            raise ValidationError({"changed_to_id": ["A plan cannot be migrated into itself"]})
        if self.changed_from_id is not None and str(self.changed_from_id) == str(self.id):
            raise ValidationError({"changed_from_id": ["A plan cannot be migrated from itself"]})

    @classmethod
    def create(
        cls,
        price,
        yearly_price,
        members_limit,
        name: str | None = None,
        user_id: str | None = None,
        billable_type: str | None = None,
        billable_id: str | None = None,
        changed_from_id: str | None = None,
    ):
        """Create a new, active plan. The lifecycle state is never an input."""
        now = datetime.now(UTC)
        plan = cls(
            name=name,
            price=_price_text(price, "price"),
            yearly_price=_price_text(yearly_price, "yearly_price"),
            members_limit=members_limit,
            user_id=user_id,
            billable_type=billable_type,
            billable_id=billable_id,
            changed_from_id=changed_from_id,
            created_at=now,
            updated_at=now,
        )
        plan.raise_(
            PlanCreated(
                plan_id=str(plan.id),
                name=name,
                price=plan.price,
                yearly_price=plan.yearly_price,
                members_limit=plan.members_limit,
                user_id=str(user_id) if user_id else None,
                changed_from_id=str(changed_from_id) if changed_from_id else None,
                created_at=now,
            )
        )
        return plan

    def current_state(self) -> PlanState:
        return PlanState(self.state)

    def is_active(self) -> bool:
        return self.current_state() == PlanState.ACTIVE

    def monthly_price(self) -> Decimal:
        return to_decimal(self.price, "price")

    def close(self) -> None:
        """Close the plan. Only active plans can be closed."""
        target = transition(self.current_state(), PlanState.CLOSED)
        now = datetime.now(UTC)
        self.state = target.value
        self.updated_at = now
        self.raise_(PlanClosed(plan_id=str(self.id), closed_at=now))

    def migrate(self, changed_to_id: str | None = None) -> None:
        """Mark the plan as migrated, linking it to its successor when one is given.

        The successor link is set before the state so the plan is never seen
        as migrated without it.
        """
        if changed_to_id is not None and str(changed_to_id) == str(self.id):
            raise ValidationError({"changed_to_id": ["A plan cannot be migrated into itself"]})
        target = transition(self.current_state(), PlanState.MIGRATED)
        now = datetime.now(UTC)
        if changed_to_id is not None:
            self.changed_to_id = changed_to_id
        self.state = target.value
        self.updated_at = now
        self.raise_(
            PlanMigrated(
                plan_id=str(self.id),
                changed_to_id=str(changed_to_id) if changed_to_id else None,
                migrated_at=now,
            )
        )

    # ------------------------------------------------------------------
    # Proration bound to this plan's monthly price
    # ------------------------------------------------------------------
    def days_in_current_month(self, as_of: date | None = None) -> int:
        return proration.days_in_current_month(as_of or date.today())

    def amount_between(self, date_a: date, date_b: date, as_of: date | None = None) -> Decimal:
        return proration.amount_between(self.price, as_of or date.today(), date_a, date_b)

    def amount_until_next_month(self, as_of: date | None = None) -> Decimal:
        """Amount owed for the rest of the current month, starting tomorrow."""
        today = as_of or date.today()
        start, end = proration.default_period(today)
        return proration.amount_for_period(self.price, today, start, end)

    def create_invoice(self, **overrides):
        """Issue an invoice for this plan through the invoice ledger."""
        from planbilling.invoice.ledger import create_invoice

        return create_invoice(self, **overrides)
