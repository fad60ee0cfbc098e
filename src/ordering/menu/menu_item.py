"""MenuItem — a dish a restaurant sells, priced at order time."""

from protean.fields import Boolean, Float, Identifier, String

from ordering.domain import ordering


@ordering.aggregate
class MenuItem:
    restaurant_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    price = Float(required=True, min_value=0.0)
    discounted_price = Float(min_value=0.0)
    is_available = Boolean(default=True)

    @property
    def unit_price(self) -> float:
        """Price charged per unit: the discounted price when one is set."""
        return self.discounted_price or self.price
