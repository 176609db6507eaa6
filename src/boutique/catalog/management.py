"""Catalog management: commands and handler for staff maintaining the catalog."""

from protean import handle
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from boutique.catalog.item import CatalogItem
from boutique.domain import boutique


@boutique.command(part_of="CatalogItem")
class AddCatalogItem:
    name = String(required=True, max_length=255)
    description = Text()
    category = String(max_length=100)
    base_price = Float(required=True, min_value=0.0)
    discount_type = String(max_length=20)
    discount_value = Float()


@boutique.command(part_of="CatalogItem")
class ChangeBasePrice:
    item_id = Identifier(required=True)
    base_price = Float(required=True)


@boutique.command(part_of="CatalogItem")
class StartPromotion:
    item_id = Identifier(required=True)
    discount_type = String(required=True, max_length=20)
    discount_value = Float(required=True)


@boutique.command(part_of="CatalogItem")
class EndPromotion:
    item_id = Identifier(required=True)


@boutique.command_handler(part_of=CatalogItem)
class ManageCatalogHandler:
    @handle(AddCatalogItem)
    def add_catalog_item(self, command):
        item = CatalogItem.create(
            name=command.name,
            description=command.description,
            category=command.category,
            base_price=command.base_price,
            discount_type=command.discount_type,
            discount_value=command.discount_value,
        )
        current_domain.repository_for(CatalogItem).add(item)
        return str(item.id)

    @handle(ChangeBasePrice)
    def change_base_price(self, command):
        repo = current_domain.repository_for(CatalogItem)
        item = repo.get(command.item_id)
        item.change_price(command.base_price)
        repo.add(item)

    @handle(StartPromotion)
    def start_promotion(self, command):
        repo = current_domain.repository_for(CatalogItem)
        item = repo.get(command.item_id)
        item.start_promotion(command.discount_type, command.discount_value)
        repo.add(item)

    @handle(EndPromotion)
    def end_promotion(self, command):
        repo = current_domain.repository_for(CatalogItem)
        item = repo.get(command.item_id)
        item.end_promotion()
        repo.add(item)
