"""Preset catalog — named bundles of plan attributes.

The catalog is built once at import and is read-only afterwards.
"""

from types import MappingProxyType

from planbilling.exceptions import UnknownPreset
from planbilling.plan.plan import Plan

PRESETS = MappingProxyType(
    {
        "free": MappingProxyType(
            {
                "name": "Free",
                "price": "0.00",
                "yearly_price": "0.00",
                "members_limit": 5,
            }
        ),
        "professor_standard": MappingProxyType(
            {
                "name": "Professor Standard",
                "price": "29.90",
                "yearly_price": "299.00",
                "members_limit": 30,
            }
        ),
        "professor_plus": MappingProxyType(
            {
                "name": "Professor Plus",
                "price": "49.90",
                "yearly_price": "499.00",
                "members_limit": 60,
            }
        ),
        "institution_standard": MappingProxyType(
            {
                "name": "Institution Standard",
                "price": "199.90",
                "yearly_price": "1999.00",
                "members_limit": 500,
            }
        ),
    }
)


def preset_names() -> list[str]:
    return sorted(PRESETS)


def from_preset(name: str, **associations) -> Plan:
    """Build a valid, unsaved plan from a named preset.

    ``associations`` may carry ``user_id``, ``billable_type`` and
    ``billable_id`` for the plan being instantiated.
    """
    attributes = PRESETS.get(str(name))
    if attributes is None:
        raise UnknownPreset(str(name))
    return Plan.create(**attributes, **associations)
