"""Shared BDD fixtures and step definitions for the Billing domain."""

from datetime import date
from decimal import Decimal

import pytest
from planbilling.invoice import ledger
from planbilling.plan.events import PlanClosed, PlanCreated, PlanMigrated
from planbilling.plan.plan import Plan
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

# Map event name strings to classes for dynamic lookup
_PLAN_EVENT_CLASSES = {
    "PlanCreated": PlanCreated,
    "PlanClosed": PlanClosed,
    "PlanMigrated": PlanMigrated,
}


def _day(text):
    return date.fromisoformat(text)


# ---------------------------------------------------------------------------
# Plan Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse("a plan priced {price} per month"), target_fixture="plan")
def _new_plan(price):
    return Plan.create(
        name="Professor Standard",
        price=price,
        yearly_price="310.00",
        members_limit=20,
        user_id="user-001",
        billable_type="Course",
        billable_id="course-001",
    )


@given("a closed plan", target_fixture="plan")
def _closed_plan():
    plan = Plan.create(price="31.00", yearly_price="310.00", members_limit=20)
    plan.close()
    plan._events.clear()
    return plan


@given(parsers.cfparse("a stored plan priced {price} per month"), target_fixture="plan")
def _stored_plan(price):
    plan = _new_plan(price)
    current_domain.repository_for(Plan).add(plan)
    return current_domain.repository_for(Plan).get(plan.id)


@given(parsers.cfparse('the plan has an invoice from "{start}" to "{end}" of {amount}'))
def _plan_invoice(plan, start, end, amount):
    ledger.create_invoice(plan, period_start=_day(start), period_end=_day(end), amount=amount)


@given(parsers.cfparse('the plan has a paid invoice from "{start}" to "{end}" of {amount}'))
def _paid_plan_invoice(plan, start, end, amount):
    invoice = ledger.create_invoice(plan, period_start=_day(start), period_end=_day(end), amount=amount)
    ledger.pay(invoice)


# ---------------------------------------------------------------------------
# Plan Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the plan is "{state}"'))
def _plan_state(plan, state):
    assert plan.state == state


@then(parsers.cfparse("the plan costs {price} per month"))
def _plan_price(plan, price):
    assert plan.monthly_price() == Decimal(price)


@then(parsers.cfparse("the plan allows {count:d} members"))
def _plan_members(plan, count):
    assert plan.members_limit == count


@then(parsers.cfparse("a {event_type} plan event is raised"))
def _plan_event_raised(plan, event_type):
    event_cls = _PLAN_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in plan._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in plan._events]}"


@then("closing the plan fails with a validation error")
def _close_fails(plan):
    with pytest.raises(ValidationError):
        plan.close()
