"""Plan creation and closing — commands and handlers."""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from planbilling.domain import billing
from planbilling.plan.plan import Plan
from planbilling.plan.presets import from_preset

logger = structlog.get_logger(__name__)


@billing.command(part_of="Plan")
class CreatePlan:
    """Create a plan from explicit attributes. There is no state input."""

    name = String(max_length=255)
    price = String(required=True, max_length=40)
    yearly_price = String(required=True, max_length=40)
    members_limit = Integer(required=True)
    user_id = Identifier()
    billable_type = String(max_length=100)
    billable_id = Identifier()


@billing.command(part_of="Plan")
class CreatePlanFromPreset:
    preset = String(required=True, max_length=100)
    user_id = Identifier()
    billable_type = String(max_length=100)
    billable_id = Identifier()


@billing.command(part_of="Plan")
class ClosePlan:
    plan_id = Identifier(required=True)


@billing.command_handler(part_of=Plan)
class PlanLifecycleHandler:
    @handle(CreatePlan)
    def create_plan(self, command):
        plan = Plan.create(
            name=command.name,
            price=command.price,
            yearly_price=command.yearly_price,
            members_limit=command.members_limit,
            user_id=command.user_id,
            billable_type=command.billable_type,
            billable_id=command.billable_id,
        )
        current_domain.repository_for(Plan).add(plan)
        logger.info("Plan created", plan_id=str(plan.id), price=plan.price)
        return str(plan.id)

    @handle(CreatePlanFromPreset)
    def create_plan_from_preset(self, command):
        plan = from_preset(
            command.preset,
            user_id=command.user_id,
            billable_type=command.billable_type,
            billable_id=command.billable_id,
        )
        current_domain.repository_for(Plan).add(plan)
        logger.info("Plan created from preset", plan_id=str(plan.id), preset=command.preset)
        return str(plan.id)

    @handle(ClosePlan)
    def close_plan(self, command):
        repo = current_domain.repository_for(Plan)
        plan = repo.get(command.plan_id)
        plan.close()
        repo.add(plan)
        logger.info("Plan closed", plan_id=str(plan.id))
