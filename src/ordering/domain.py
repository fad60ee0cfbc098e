"""Ordering bounded context — order lifecycle for restaurant deliveries.

Owns orders, the menu items they are priced from, and the recipients
(customers, restaurants, delivery partners) that are notified as an order
moves from pending to delivered.
"""

from protean.domain import Domain

from ordering.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

ordering = Domain(name="ordering")
