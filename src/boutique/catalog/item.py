"""CatalogItem aggregate: sellable products and services with optional promotions.

Catalog items are maintained by staff. The cart reads them as a pricing
snapshot at the moment an item is added; it never keeps a reference to the
live catalog record.
"""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, String, Text, ValueObject

from boutique.catalog.events import CatalogItemAdded, CatalogItemPricingChanged
from boutique.domain import boutique
from boutique.pricing.calculator import compute_effective_price
from boutique.pricing.discount import Discount, DiscountType


@boutique.aggregate
class CatalogItem:
    name = String(required=True, max_length=255)
    description = Text()
    category = String(max_length=100)
    base_price = Float(required=True, min_value=0.0)
    is_on_sale = Boolean(default=False)
    discount = ValueObject(Discount)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def sale_requires_a_positive_discount(self):
        if not self.is_on_sale:
            return
        if self.discount is None or self.discount.value is None or self.discount.value <= 0:
            raise ValidationError({"discount": ["An item on sale needs a discount value greater than zero"]})
        if self.discount.discount_type == DiscountType.PERCENTAGE.value and not 1 <= self.discount.value <= 100:
            raise ValidationError({"discount": ["Percentage discounts must be between 1 and 100"]})

    @classmethod
    def create(cls, name, base_price, description=None, category=None, discount_type=None, discount_value=None):
        now = datetime.now(UTC)
        discount = None
        if discount_type is not None:
            discount = Discount(discount_type=discount_type, value=discount_value)

        item = cls(
            name=name,
            description=description,
            category=category,
            base_price=base_price,
            is_on_sale=discount is not None,
            discount=discount,
            created_at=now,
            updated_at=now,
        )
        item.raise_(
            CatalogItemAdded(
                item_id=str(item.id),
                name=name,
                base_price=base_price,
                created_at=now,
            )
        )
        return item

    @property
    def active_discount(self):
        """The discount to apply right now, or None when the item is not on sale."""
        return self.discount if self.is_on_sale else None

    def effective_price(self):
        return compute_effective_price(self.base_price, self.active_discount)

    # -------------------------------------------------------------------
    # Pricing changes
    # -------------------------------------------------------------------
    def change_price(self, base_price):
        if base_price is None or base_price < 0:
            raise ValidationError({"base_price": ["Base price must be zero or positive"]})
        self.base_price = base_price
        self._pricing_changed()

    def start_promotion(self, discount_type, value):
        discount = Discount(discount_type=discount_type, value=value)
        with atomic_change(self):
            self.discount = discount
            self.is_on_sale = True
        self._pricing_changed()

    def end_promotion(self):
        if not self.is_on_sale:
            raise ValidationError({"is_on_sale": ["Item is not on sale"]})
        with atomic_change(self):
            self.is_on_sale = False
            self.discount = None
        self._pricing_changed()

    def _pricing_changed(self):
        now = datetime.now(UTC)
        self.updated_at = now
        price = self.effective_price()
        self.raise_(
            CatalogItemPricingChanged(
                item_id=str(self.id),
                base_price=self.base_price,
                unit_price=price.unit_price,
                is_on_sale=self.is_on_sale,
                discount_type=self.discount.discount_type if self.is_on_sale else None,
                discount_value=self.discount.value if self.is_on_sale else None,
                changed_at=now,
            )
        )
