"""Cart management: creating and clearing carts."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from boutique.cart.cart import ShoppingCart
from boutique.domain import boutique


@boutique.command(part_of="ShoppingCart")
class CreateCart:
    """Create a new shopping cart for a signed-in user or a guest session."""

    owner_id = String(max_length=255)
    session_id = String(max_length=255)


@boutique.command(part_of="ShoppingCart")
class ClearCart:
    cart_id = Identifier(required=True)


@boutique.command_handler(part_of=ShoppingCart)
class ManageCartHandler:
    @handle(CreateCart)
    def create_cart(self, command):
        cart = ShoppingCart.create(
            owner_id=command.owner_id,
            session_id=command.session_id,
        )
        current_domain.repository_for(ShoppingCart).add(cart)
        return str(cart.id)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.clear()
        repo.add(cart)
