"""Domain events for the Plan aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from planbilling.domain import billing


@billing.event(part_of="Plan")
class PlanCreated:
    """A new plan was created, either from scratch or as a migration successor."""

    __version__ = 1

    plan_id = Identifier(required=True)
    name = String(max_length=255)
    price = String(required=True)
    yearly_price = String(required=True)
    members_limit = Integer(required=True)
    user_id = Identifier()
    changed_from_id = Identifier()
    created_at = DateTime(required=True)


@billing.event(part_of="Plan")
class PlanClosed:
    """A plan was closed and will not be billed anymore."""

    __version__ = 1

    plan_id = Identifier(required=True)
    closed_at = DateTime(required=True)


@billing.event(part_of="Plan")
class PlanMigrated:
    """A plan was replaced by a successor plan."""

    __version__ = 1

    plan_id = Identifier(required=True)
    changed_to_id = Identifier()
    migrated_at = DateTime(required=True)
