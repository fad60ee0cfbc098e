"""Repository for the Order aggregate."""

from ordering.domain import ordering
from ordering.order.order import InvalidTransitionError, Order, OrderStatus
from ordering.utils.paging import iterate_all

ACTIVE_STATUSES = [OrderStatus.PENDING.value, OrderStatus.PREPARING.value, OrderStatus.READY.value]
RESTAURANT_HISTORY_STATUSES = [OrderStatus.DISPATCH.value, OrderStatus.REJECTED.value, OrderStatus.DELIVERED.value]
DELIVERY_PARTNER_STATUSES = [OrderStatus.DISPATCH.value, OrderStatus.DELIVERED.value]


@ordering.repository(part_of=Order)
class OrderRepository:
    """Order persistence with a conditional status write and per-party listings.

    Listings for a customer, restaurant or delivery partner are newest first.
    """

    def save_transition(self, order: Order, expected_status: str) -> Order:
        """Persist ``order`` only if the stored status is still ``expected_status``.

        Guards against two status updates racing from the same starting state.
        """
        stored = self._dao.get(order.id)
        if stored.status != expected_status:
            raise InvalidTransitionError(
                {"status": [f"Order status changed from {expected_status} to {stored.status} during update"]}
            )
        self.add(order)
        return order

    def _newest_first(self, **filters) -> list[Order]:
        return list(iterate_all(self._dao.query.filter(**filters).order_by("-placed_at")))

    def find_active(self) -> list[Order]:
        """Orders still with the restaurant: pending, preparing or ready."""
        return list(iterate_all(self._dao.query.filter(status__in=ACTIVE_STATUSES)))

    def find_available_for_pickup(self) -> list[Order]:
        """Orders that are ready or being prepared and have no delivery partner yet."""
        query = self._dao.query.filter(
            status__in=[OrderStatus.READY.value, OrderStatus.PREPARING.value],
        )
        return [order for order in iterate_all(query) if order.is_available_for_pickup]

    def find_by_customer(self, customer_id: str) -> list[Order]:
        return self._newest_first(customer_id=customer_id)

    def find_active_for_restaurant(self, restaurant_id: str) -> list[Order]:
        return self._newest_first(restaurant_id=restaurant_id, status__in=ACTIVE_STATUSES)

    def find_restaurant_history(self, restaurant_id: str) -> list[Order]:
        """Orders that have left the kitchen: dispatched, rejected or delivered."""
        return self._newest_first(restaurant_id=restaurant_id, status__in=RESTAURANT_HISTORY_STATUSES)

    def find_for_delivery_partner(self, delivery_partner_id: str) -> list[Order]:
        """Orders the partner is carrying or has delivered."""
        return self._newest_first(delivery_partner_id=delivery_partner_id, status__in=DELIVERY_PARTNER_STATUSES)
