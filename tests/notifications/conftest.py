import pytest


@pytest.fixture(autouse=True)
def ordering_ctx():
    """Orders are built in the ordering domain context."""
    from ordering.domain import ordering

    ctx = ordering.domain_context()
    ctx.push()

    yield ordering

    ctx.pop()
