"""Billing bounded context — Plans, Invoices and payment Orders.

Handles plan lifecycle (CQRS), day-based invoice proration, plan-to-plan
migration with invoice history transfer, and assembly of payment orders for
the external payment gateway.
"""

from protean.domain import Domain

from planbilling.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

# Domain Composition Root
billing = Domain(name="billing")
