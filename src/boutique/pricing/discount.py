"""Discount descriptor and effective price value objects."""

from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Float, String

from boutique.domain import boutique


class DiscountType(Enum):
    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"


@boutique.value_object
class Discount:
    """A promotional discount attached to a catalog item.

    ``percentage`` values are a share of the base price (1 to 100), while
    ``fixed_amount`` values are subtracted from it in the store currency.
    """

    discount_type: String(required=True, max_length=20, choices=DiscountType)
    value: Float(required=True)

    @invariant.post
    def percentage_must_be_within_bounds(self):
        if self.discount_type == DiscountType.PERCENTAGE.value and self.value > 100:
            raise ValidationError({"value": ["Percentage discount cannot exceed 100"]})


@boutique.value_object
class EffectivePrice:
    """The unit price a customer pays, with the pre-discount price when one applied."""

    unit_price: Float(required=True, min_value=0.0)
    original_unit_price: Float(min_value=0.0)

    @property
    def is_discounted(self) -> bool:
        return self.original_unit_price is not None

    @invariant.post
    def unit_price_cannot_exceed_original(self):
        if self.original_unit_price is not None and self.unit_price > self.original_unit_price:
            raise ValidationError({"unit_price": ["Discounted price cannot exceed the original price"]})
