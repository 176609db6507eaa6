"""Domain events for the ShoppingCart aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from boutique.domain import boutique


@boutique.event(part_of="ShoppingCart")
class CartItemAdded:
    """A catalog item was added to the cart, or its quantity was increased by a repeat add."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity_added = Integer(required=True)
    new_quantity = Integer(required=True)
    unit_price = Float(required=True)
    original_unit_price = Float()


@boutique.event(part_of="ShoppingCart")
class CartQuantityUpdated:
    """The quantity of a cart line was set explicitly."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@boutique.event(part_of="ShoppingCart")
class CartItemRemoved:
    """A line was removed from the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)


@boutique.event(part_of="ShoppingCart")
class CartCleared:
    """All lines were removed from the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    cleared_at = DateTime(required=True)


@boutique.event(part_of="ShoppingCart")
class CartCheckedOut:
    """The cart contents were turned into an order."""

    __version__ = 1

    cart_id = Identifier(required=True)
    order_id = Identifier(required=True)
    order_number = String(required=True)
    checked_out_at = DateTime(required=True)
