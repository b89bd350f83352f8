import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def payments_bed():
    from payments.domain import payments

    bed = DomainFixture(payments)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(payments_bed):
    with payments_bed.domain_context():
        yield


@pytest.fixture()
def gateway():
    from payments.gateway import set_gateway
    from payments.gateway.fake_adapter import FakeGateway

    fake = FakeGateway()
    set_gateway(fake)
    return fake


@pytest.fixture()
def coordinator(gateway, settings, clock):
    from payments.handshake.coordinator import PaymentHandshakeCoordinator

    return PaymentHandshakeCoordinator(gateway, settings, clock)


@pytest.fixture()
def live_settings(settings):
    """Test credentials, except the key id is a production key."""
    from dataclasses import replace

    from shared.config import set_settings

    live = replace(settings, razorpay_key_id="rzp_live_rootstore")
    set_settings(live)
    return live
