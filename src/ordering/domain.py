"""Ordering bounded context: shopping cart, checkout and order history.

The cart lives in the visitor's session; checkout converts it into an
immutable order while drawing stock down through the inventory context.
"""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
