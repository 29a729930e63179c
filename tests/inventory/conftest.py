import pytest


@pytest.fixture(autouse=True)
def inventory_ctx():
    """Push the inventory domain context for each test."""
    from inventory.domain import inventory

    ctx = inventory.domain_context()
    ctx.push()

    yield inventory

    ctx.pop()
