"""Payment gateway factory.

``place_order`` hands every billing Order to the gateway returned by
get_gateway() unless a caller passes one explicitly. FakeGateway is the
default; production wires a real provider adapter with set_gateway() at
startup.
"""

from planbilling.gateway.fake_adapter import FakeGateway
from planbilling.gateway.port import PaymentGateway

_current_gateway: PaymentGateway | None = None


def get_gateway() -> PaymentGateway:
    """Return the gateway that receives payment orders. Defaults to FakeGateway."""
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = FakeGateway()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Route subsequent payment orders to ``gateway``."""
    global _current_gateway
    if not isinstance(gateway, PaymentGateway):
        raise TypeError(f"{type(gateway).__name__} does not implement PaymentGateway")
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
