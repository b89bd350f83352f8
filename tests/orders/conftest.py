import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def orders_bed():
    from orders.domain import orders

    bed = DomainFixture(orders)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(orders_bed):
    with orders_bed.domain_context():
        yield


@pytest.fixture()
def admin():
    from orders.admin import set_admin
    from orders.admin.fake_adapter import FakeAdmin

    fake = FakeAdmin()
    set_admin(fake)
    return fake


@pytest.fixture()
def service(admin, store, settings):
    from orders.submission.service import OrderFulfillmentService

    return OrderFulfillmentService(admin, store, settings)


@pytest.fixture()
def cart_items():
    return [
        {
            "id": "gid://shopify/CheckoutLineItem/1",
            "title": "Premium Leather Wallet",
            "quantity": 2,
            "variant": {
                "id": "gid://shopify/ProductVariant/1002",
                "title": "Midnight Black",
                "price": {"amount": "2499.00", "currencyCode": "INR"},
            },
            "custom_attributes": [{"key": "Engraving", "value": "ASHA"}],
        }
    ]


@pytest.fixture()
def shipping_address():
    return {
        "first_name": "Asha",
        "last_name": "Rao",
        "address1": "12 MG Road",
        "address2": "Flat 4B",
        "city": "Mumbai",
        "province": "Maharashtra",
        "zip": "400001",
        "country": "India",
    }


@pytest.fixture()
def buyer():
    return {"email": "asha@example.com", "phone": "9876543210"}
