"""Identity bounded context: user accounts, sessions and authorization.

Owns who a visitor is (login, logout, roles) and the server-side session
that carries the cart between requests.
"""

import structlog
from protean.domain import Domain

identity = Domain(name="identity")

logger = structlog.get_logger(__name__)
