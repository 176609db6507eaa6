"""Cart item management: commands and handler.

Adding an item looks up the catalog item at that moment and hands it to the
cart as a pricing snapshot.
"""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from boutique.cart.cart import ShoppingCart
from boutique.catalog.item import CatalogItem
from boutique.domain import boutique


@boutique.command(part_of="ShoppingCart")
class AddToCart:
    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(default=1)


@boutique.command(part_of="ShoppingCart")
class UpdateCartQuantity:
    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@boutique.command(part_of="ShoppingCart")
class RemoveFromCart:
    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)


@boutique.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        catalog_item = current_domain.repository_for(CatalogItem).get(command.product_id)
        cart.add_item(catalog_item, quantity=command.quantity if command.quantity is not None else 1)
        repo.add(cart)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.update_quantity(command.product_id, command.quantity)
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.remove_item(command.product_id)
        repo.add(cart)
