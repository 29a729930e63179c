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

    Select the configuration overlay and initialize every domain. Each test
    package pushes the context of the domain it exercises.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env
    os.environ.setdefault("PROTEAN_NO_AUTO_LOGGING", "1")

    from shared.config import get_settings

    get_settings.cache_clear()

    from identity.domain import identity
    from inventory.domain import inventory
    from ordering.domain import ordering

    identity.init()
    inventory.init()
    ordering.init()


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        # Get the test file path relative to the tests directory
        test_path = Path(item.fspath)

        # Mark tests based on their directory
        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in str(test_path):
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


def _all_domains():
    from identity.domain import identity
    from inventory.domain import inventory
    from ordering.domain import ordering

    return identity, inventory, ordering


@pytest.fixture(scope="session", autouse=True)
def setup_db():
    from shared.db import drop_db, setup_db

    for domain in _all_domains():
        setup_db(domain)

    yield

    for domain in _all_domains():
        drop_db(domain)


@pytest.fixture(autouse=True)
def run_around_tests():
    """Fixture to automatically cleanup infrastructure after every test"""
    yield

    from identity.session import reset_session_store
    from notifications.channel import reset_channels

    for domain in _all_domains():
        with domain.domain_context():
            for _, provider in domain.providers.items():
                provider._data_reset()

            domain.event_store.store._data_reset()

    reset_channels()
    reset_session_store()


@pytest.fixture()
def email_channel():
    from notifications.channel import set_email_channel
    from notifications.channel.fake_email import FakeEmailAdapter

    channel = FakeEmailAdapter()
    set_email_channel(channel)
    return channel


@pytest.fixture()
def make_product():
    from inventory.domain import inventory
    from inventory.product import Product

    def _make(name="Widget", price_cents=1000, stock=10, **extra):
        product = Product(name=name, price_cents=price_cents, stock=stock, **extra)
        with inventory.domain_context():
            inventory.repository_for(Product).add(product)
        return product

    return _make


@pytest.fixture()
def make_user():
    from identity.authentication import register_user
    from identity.domain import identity
    from identity.roles import Role
    from identity.user import User

    def _make(email="jane@example.com", name="Jane Doe", password="secret-pass", admin=False, active=True):
        roles = (Role.USER, Role.ADMIN) if admin else (Role.USER,)
        with identity.domain_context():
            user = register_user(email, name, password, roles=roles)
            if not active:
                user.is_active = False
                identity.repository_for(User).add(user)
        return user

    return _make


@pytest.fixture()
def product_stock():
    """Read a product's stock as currently stored."""
    from inventory.domain import inventory
    from inventory.product import Product

    def _stock(product_id):
        with inventory.domain_context():
            return inventory.repository_for(Product).current_stock(product_id)

    return _stock


@pytest.fixture()
def web_session():
    from identity.session import Session, new_session_id

    return Session(new_session_id(), is_new=True)


@pytest.fixture()
def cart(web_session):
    from ordering.cart.cart import CartStore

    return CartStore(web_session)
