"""Shopping cart aggregate: per-session cart lines priced from the catalog.

A cart line stores the effective unit price at the time of the last add, and
the original price when a discount applied. Repeat adds of the same catalog
item merge into one line and re-price it from the catalog item's current
promotion state, so a line never mixes two pricing states.

Quantities below one are always rejected; removing a line is an explicit
operation.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from boutique.cart.events import (
    CartCheckedOut,
    CartCleared,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
)
from boutique.domain import boutique
from boutique.pricing.calculator import compute_effective_price, sum_line_totals


class CartStatus(Enum):
    ACTIVE = "Active"
    CHECKED_OUT = "CheckedOut"


@boutique.entity(part_of="ShoppingCart")
class CartLine:
    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    original_unit_price = Float(min_value=0.0)


@boutique.aggregate
class ShoppingCart:
    owner_id = String(max_length=255)  # None for guest carts
    session_id = String(max_length=255)
    lines = HasMany(CartLine)
    status = String(choices=CartStatus, default=CartStatus.ACTIVE.value)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def discounted_price_cannot_exceed_original(self):
        for line in self.lines or []:
            if line.original_unit_price is not None and line.unit_price > line.original_unit_price:
                raise ValidationError(
                    {"unit_price": [f"Line {line.product_id} is priced above its original price"]}
                )

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, owner_id=None, session_id=None):
        now = datetime.now(UTC)
        return cls(
            owner_id=owner_id,
            session_id=session_id,
            status=CartStatus.ACTIVE.value,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def line_for(self, product_id):
        return next((line for line in self.lines if str(line.product_id) == str(product_id)), None)

    def total(self) -> float:
        """Sum of unit price times quantity across all lines."""
        return sum_line_totals(self.lines)

    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    # -------------------------------------------------------------------
    # Line management
    # -------------------------------------------------------------------
    def _assert_active(self):
        if CartStatus(self.status) != CartStatus.ACTIVE:
            raise ValidationError({"status": ["Cart has already been checked out"]})

    def _find_line(self, product_id):
        line = self.line_for(product_id)
        if line is None:
            raise ValidationError({"product_id": [f"Item {product_id} is not in the cart"]})
        return line

    def add_item(self, catalog_item, quantity=1):
        """Add a catalog item, merging with and re-pricing an existing line."""
        self._assert_active()
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        price = compute_effective_price(catalog_item.base_price, catalog_item.active_discount)
        existing = self.line_for(catalog_item.id)

        if existing:
            with atomic_change(self):
                existing.quantity += quantity
                existing.name = catalog_item.name
                existing.original_unit_price = price.original_unit_price
                existing.unit_price = price.unit_price
            line = existing
        else:
            line = CartLine(
                product_id=catalog_item.id,
                name=catalog_item.name,
                quantity=quantity,
                unit_price=price.unit_price,
                original_unit_price=price.original_unit_price,
            )
            self.add_lines(line)

        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                product_id=str(catalog_item.id),
                quantity_added=quantity,
                new_quantity=line.quantity,
                unit_price=line.unit_price,
                original_unit_price=line.original_unit_price,
            )
        )

    def update_quantity(self, product_id, quantity):
        """Set the quantity of an existing line. Quantities below one are rejected."""
        self._assert_active()
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1; remove the item instead"]})

        line = self._find_line(product_id)
        previous_quantity = line.quantity
        line.quantity = quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                product_id=str(product_id),
                previous_quantity=previous_quantity,
                new_quantity=quantity,
            )
        )

    def remove_item(self, product_id):
        self._assert_active()
        line = self._find_line(product_id)
        self.remove_lines(line)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartItemRemoved(cart_id=str(self.id), product_id=str(product_id)))

    def clear(self):
        self._assert_active()
        now = datetime.now(UTC)
        for line in list(self.lines):
            self.remove_lines(line)
        self.updated_at = now

        self.raise_(CartCleared(cart_id=str(self.id), cleared_at=now))

    def check_out(self, order):
        """Close the cart once its lines have been frozen into ``order``."""
        self._assert_active()
        if not self.lines:
            raise ValidationError({"cart": ["Cannot check out an empty cart"]})

        now = datetime.now(UTC)
        with atomic_change(self):
            for line in list(self.lines):
                self.remove_lines(line)
            self.status = CartStatus.CHECKED_OUT.value
            self.updated_at = now

        self.raise_(
            CartCheckedOut(
                cart_id=str(self.id),
                order_id=str(order.id),
                order_number=order.order_number,
                checked_out_at=now,
            )
        )
