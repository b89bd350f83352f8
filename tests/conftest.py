import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Initialise every bounded context up front. Contexts import each other's
    elements (orders builds checkout snapshots, tracking reads orders), so
    all of them must be registered before any test pushes a domain context.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env

    from checkout.domain import checkout
    from orders.domain import orders
    from payments.domain import payments
    from tracking.domain import tracking

    for domain in (checkout, payments, orders, tracking):
        domain.init()


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


TEST_SETTINGS = dict(
    shop_domain="rootstore-test.myshopify.com",
    storefront_token="storefront-test-token",
    admin_token="shpat_test_token",
    razorpay_key_id="rzp_test_rootstore",
    razorpay_key_secret="test_key_secret",
    seller_email="seller@rootstore.example.com",
    store_name="Root Store",
)


def _reset_ports():
    from checkout.address import reset_postal_lookup
    from checkout.session.manager import reset_session_manager
    from checkout.storefront import reset_storefront
    from notifications.channel import reset_channels
    from orders.admin import reset_admin
    from payments.gateway import reset_gateway
    from shared.config import reset_settings
    from shared.store import reset_store
    from tracking.carrier import reset_carrier_tracker
    from tracking.orchestrator import reset_tracking_orchestrator

    reset_settings()
    reset_store()
    reset_storefront()
    reset_postal_lookup()
    reset_session_manager()
    reset_gateway()
    reset_admin()
    reset_channels()
    reset_carrier_tracker()
    reset_tracking_orchestrator()


@pytest.fixture(autouse=True)
def isolated_ports():
    """Every test starts with fresh fakes, an empty store and test credentials."""
    from shared.config import Settings, set_settings

    _reset_ports()
    set_settings(Settings(**TEST_SETTINGS))

    yield

    _reset_ports()


@pytest.fixture()
def settings():
    from shared.config import get_settings

    return get_settings()


@pytest.fixture()
def store():
    from shared.store import get_store

    return get_store()


@pytest.fixture()
def clock():
    from shared.clock import FrozenClock

    return FrozenClock()
