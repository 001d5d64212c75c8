"""Billing-specific exceptions.

Plain attribute validation uses ``protean.exceptions.ValidationError`` with a
``{field: [messages]}`` payload, like every other aggregate in the domain.
"""

from protean.exceptions import ValidationError


class InvalidTransition(ValidationError):
    """A lifecycle operation was attempted from a state that forbids it."""


class UnknownPreset(LookupError):
    """No preset is registered under the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown plan preset: {name!r}")
        self.name = name


class MigrationFailure(RuntimeError):
    """The plan migration unit of work failed and was rolled back."""

    def __init__(self, plan_id: str, reason: str) -> None:
        super().__init__(f"Migration of plan {plan_id} failed: {reason}")
        self.plan_id = plan_id
        self.reason = reason
