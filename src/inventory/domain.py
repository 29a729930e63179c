"""Inventory bounded context: the product catalogue and its stock levels."""

import structlog
from protean.domain import Domain

inventory = Domain(name="inventory")

logger = structlog.get_logger(__name__)
