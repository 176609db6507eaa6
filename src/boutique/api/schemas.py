"""Pydantic request/response schemas for the Boutique API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from boutique.order.lifecycle import ActorRole, OrderStatus
from boutique.order.order import PaymentMethod
from boutique.pricing.discount import DiscountType


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------
class Actor(BaseModel):
    """The trusted role/id pair supplied by the calling surface."""

    role: ActorRole
    id: str | None = None

    @property
    def is_staff(self) -> bool:
        return self.role in (ActorRole.MANAGER, ActorRole.ADMIN)


class StatusResponse(BaseModel):
    status: str = "ok"


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------
class AddCatalogItemRequest(BaseModel):
    name: str
    description: str | None = None
    category: str | None = None
    base_price: float = Field(ge=0)
    discount_type: DiscountType | None = None
    discount_value: float | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Boubou brodé",
                    "category": "Vêtements",
                    "base_price": 10000,
                    "discount_type": "percentage",
                    "discount_value": 15,
                }
            ]
        }
    }


class ChangeBasePriceRequest(BaseModel):
    base_price: float = Field(ge=0)


class StartPromotionRequest(BaseModel):
    discount_type: DiscountType
    discount_value: float = Field(gt=0)


class CatalogItemIdResponse(BaseModel):
    item_id: str


class CatalogItemResponse(BaseModel):
    item_id: str
    name: str
    category: str | None = None
    base_price: float
    is_on_sale: bool
    discount_type: str | None = None
    discount_value: float | None = None
    unit_price: float
    original_unit_price: float | None = None


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class CreateCartRequest(BaseModel):
    owner_id: str | None = None
    session_id: str | None = None


class CartIdResponse(BaseModel):
    cart_id: str


class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = 1


class UpdateCartQuantityRequest(BaseModel):
    quantity: int


class CartLineResponse(BaseModel):
    product_id: str
    name: str
    quantity: int
    unit_price: float
    original_unit_price: float | None = None
    line_total: float


class CartResponse(BaseModel):
    cart_id: str
    status: str
    lines: list[CartLineResponse]
    item_count: int
    total: float


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class CheckoutRequest(BaseModel):
    cart_id: str
    name: str
    phone: str
    email: str | None = None
    address: str | None = None
    payment_method: PaymentMethod = PaymentMethod.CASH_ON_DELIVERY
    notes: str | None = Field(default=None, max_length=200)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "cart_id": "cart-001",
                    "name": "Awa Ndiaye",
                    "phone": "+221 77 123 45 67",
                    "email": "awa@example.sn",
                    "address": "12 Rue Carnot, Dakar",
                    "payment_method": "Wave",
                }
            ]
        }
    }


class OrderPlacedResponse(BaseModel):
    order_id: str
    order_number: str


class ChangeStatusRequest(BaseModel):
    new_status: OrderStatus


class OrderLineResponse(BaseModel):
    product_id: str
    name: str
    quantity: int
    unit_price: float
    original_unit_price: float | None = None


class CustomerInfoResponse(BaseModel):
    name: str
    email: str | None = None
    phone: str
    address: str | None = None


class OrderResponse(BaseModel):
    order_id: str
    order_number: str
    user_id: str
    customer: CustomerInfoResponse
    lines: list[OrderLineResponse]
    total: float
    currency: str
    status: OrderStatus
    payment_method: str
    notes: str | None = None
    created_at: datetime
    updated_at: datetime
    invoiceable: bool


class OrderSummaryResponse(BaseModel):
    order_id: str
    order_number: str
    user_id: str
    customer_name: str | None = None
    item_count: int
    total: float
    currency: str
    status: OrderStatus
    payment_method: str | None = None
    created_at: datetime
    updated_at: datetime


class AllowedTransitionsResponse(BaseModel):
    current_status: OrderStatus
    allowed: list[OrderStatus]


# ---------------------------------------------------------------------------
# Invoices and alerts
# ---------------------------------------------------------------------------
class InvoiceLineResponse(BaseModel):
    product_id: str
    description: str
    quantity: int
    unit_price: float
    original_unit_price: float | None = None
    line_total: float


class InvoiceResponse(BaseModel):
    invoice_number: str
    order_id: str
    issued_on: str | None = None
    status: OrderStatus
    customer: CustomerInfoResponse
    lines: list[InvoiceLineResponse]
    total: float
    currency: str
    payment_method: str


class AlertResponse(BaseModel):
    alert_id: str
    kind: str
    order_id: str
    order_number: str
    status: str
    message: str | None = None
    created_at: datetime
