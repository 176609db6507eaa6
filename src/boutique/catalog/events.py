"""Domain events for the CatalogItem aggregate."""

from protean.fields import Boolean, DateTime, Float, Identifier, String

from boutique.domain import boutique


@boutique.event(part_of="CatalogItem")
class CatalogItemAdded:
    """A new product or service was added to the catalog."""

    __version__ = 1

    item_id = Identifier(required=True)
    name = String(required=True)
    base_price = Float(required=True)
    created_at = DateTime(required=True)


@boutique.event(part_of="CatalogItem")
class CatalogItemPricingChanged:
    """The base price or the promotion of a catalog item changed."""

    __version__ = 1

    item_id = Identifier(required=True)
    base_price = Float(required=True)
    unit_price = Float(required=True)
    is_on_sale = Boolean(required=True)
    discount_type = String()
    discount_value = Float()
    changed_at = DateTime(required=True)
