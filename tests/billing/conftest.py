import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def billing_bed():
    from planbilling.domain import billing

    bed = DomainFixture(billing)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(billing_bed):
    with billing_bed.domain_context():
        yield

        from protean import current_domain

        # Clear all databases
        for _, provider in current_domain.providers.items():
            provider._data_reset()

        # Drain event stores
        current_domain.event_store.store._data_reset()


@pytest.fixture(autouse=True)
def _fake_gateway():
    from planbilling.gateway import reset_gateway

    reset_gateway()
    yield
    reset_gateway()
