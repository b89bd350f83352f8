"""Fixtures for cross-context tests against the assembled FastAPI app.

The app pushes the matching domain context per URL prefix, so tests only
need every domain's storage set up once for the session.
"""

import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session", autouse=True)
def domain_beds():
    from checkout.domain import checkout
    from orders.domain import orders
    from payments.domain import payments
    from tracking.domain import tracking

    beds = [DomainFixture(domain) for domain in (checkout, payments, orders, tracking)]
    for bed in beds:
        bed.setup()
    yield beds
    for bed in reversed(beds):
        bed.teardown()


@pytest.fixture()
def client():
    from app import app
    from fastapi.testclient import TestClient

    return TestClient(app)
