"""Repository for the Plan aggregate, with migration chain lookups."""

from planbilling.domain import billing
from planbilling.plan.plan import Plan


@billing.repository(part_of=Plan)
class PlanRepository:
    """Plan repository.

    The base repository provides standard CRUD operations; the queries here
    cover listing a user's plans and walking the migration chain.
    """

    def for_user(self, user_id: str) -> list[Plan]:
        """All plans owned by a user, oldest first."""
        plans = self._dao.query.filter(user_id=str(user_id)).all().items
        return sorted(plans, key=lambda plan: plan.created_at)

    def successor_of(self, plan: Plan) -> Plan | None:
        if not plan.changed_to_id:
            return None
        return self.get(plan.changed_to_id)

    def predecessor_of(self, plan: Plan) -> Plan | None:
        if not plan.changed_from_id:
            return None
        return self.get(plan.changed_from_id)

    def lineage(self, plan: Plan) -> list[Plan]:
        """The plan followed by every predecessor, newest first."""
        chain = [plan]
        seen = {str(plan.id)}
        predecessor = self.predecessor_of(plan)
        while predecessor is not None and str(predecessor.id) not in seen:
            chain.append(predecessor)
            seen.add(str(predecessor.id))
            predecessor = self.predecessor_of(predecessor)
        return chain
