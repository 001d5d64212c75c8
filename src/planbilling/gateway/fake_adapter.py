"""Configurable fake payment gateway for development and testing.

Simulates a payment provider without any external calls. It records every
order request it receives and can be configured at runtime to accept or
reject them.
"""

from typing import TYPE_CHECKING
from uuid import uuid4

from planbilling.gateway.port import OrderResult, PaymentGateway

if TYPE_CHECKING:
    from planbilling.order.order import Order


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Order rejected"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Order rejected") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def create_order(self, order: "Order") -> OrderResult:
        self.calls.append({"method": "create_order", "order": order.to_dict()})

        if self.should_succeed:
            gateway_order_id = f"fake_ord_{uuid4().hex[:12]}"
            return OrderResult(
                success=True,
                gateway_order_id=gateway_order_id,
                payment_url=f"https://payments.invalid/checkout/{gateway_order_id}",
            )
        return OrderResult(
            success=False,
            failure_reason=self.failure_reason,
        )
