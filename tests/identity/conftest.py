import pytest


@pytest.fixture(autouse=True)
def identity_ctx():
    """Push the identity domain context for each test."""
    from identity.domain import identity

    ctx = identity.domain_context()
    ctx.push()

    yield identity

    ctx.pop()
