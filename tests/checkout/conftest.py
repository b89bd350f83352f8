import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def checkout_bed():
    from checkout.domain import checkout

    bed = DomainFixture(checkout)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(checkout_bed):
    with checkout_bed.domain_context():
        yield


@pytest.fixture()
def storefront():
    from checkout.storefront import set_storefront
    from checkout.storefront.fake_adapter import FakeStorefront

    fake = FakeStorefront()
    set_storefront(fake)
    return fake


@pytest.fixture()
def manager(storefront, store):
    from checkout.session.manager import CheckoutSessionManager, set_session_manager

    manager = CheckoutSessionManager(storefront, store)
    set_session_manager(manager)
    return manager


@pytest.fixture()
def postal():
    from checkout.address import set_postal_lookup
    from checkout.address.fake_lookup import FakePostalLookup

    lookup = FakePostalLookup()
    set_postal_lookup(lookup)
    return lookup

