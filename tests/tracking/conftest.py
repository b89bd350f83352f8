import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def tracking_bed():
    from tracking.domain import tracking

    bed = DomainFixture(tracking)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(tracking_bed):
    with tracking_bed.domain_context():
        yield


@pytest.fixture()
def carrier():
    from tracking.carrier import set_carrier_tracker
    from tracking.carrier.fake_adapter import FakeCarrierTracker

    tracker = FakeCarrierTracker()
    set_carrier_tracker(tracker)
    return tracker


@pytest.fixture()
def email():
    from notifications.channel import set_email_channel
    from notifications.channel.fake_email import FakeEmailAdapter

    channel = FakeEmailAdapter()
    set_email_channel(channel)
    return channel


@pytest.fixture()
def admin():
    from orders.admin import set_admin
    from orders.admin.fake_adapter import FakeAdmin

    fake = FakeAdmin()
    set_admin(fake)
    return fake


@pytest.fixture()
def orchestrator(carrier, email, admin, store, clock, settings):
    """Orchestrator wired to fakes and a frozen clock, registered as the default."""
    from notifications.seller import SellerNotifier
    from tracking.orchestrator import DeliveryTrackingOrchestrator, set_tracking_orchestrator

    orchestrator = DeliveryTrackingOrchestrator(
        carrier=carrier,
        store=store,
        clock=clock,
        notifier=SellerNotifier(channel=email, settings=settings, clock=clock),
        admin=admin,
        settings=settings,
    )
    set_tracking_orchestrator(orchestrator)
    return orchestrator


@pytest.fixture()
def placed_order(admin):
    """An order as the platform returns it right after checkout: paid, unfulfilled."""
    order = admin.create_order(
        {
            "order": {
                "email": "asha@example.com",
                "financial_status": "paid",
                "fulfillment_status": None,
                "line_items": [{"variant_id": 1001, "quantity": 2, "price": "4999.00"}],
            }
        }
    )
    return str(order["id"])
