"""FastAPI routes for the Boutique API: catalog, carts, orders, invoices and alerts.

The acting role and user id travel in the ``X-Actor-Role`` and ``X-Actor-Id``
headers and are trusted as given; authorization decisions are taken by the
domain, not by the routes.
"""

from fastapi import APIRouter, Depends, Header, HTTPException
from protean.utils.globals import current_domain

from boutique.api.schemas import (
    Actor,
    AddCatalogItemRequest,
    AddToCartRequest,
    AlertResponse,
    AllowedTransitionsResponse,
    CartIdResponse,
    CartLineResponse,
    CartResponse,
    CatalogItemIdResponse,
    CatalogItemResponse,
    ChangeBasePriceRequest,
    ChangeStatusRequest,
    CheckoutRequest,
    CreateCartRequest,
    InvoiceResponse,
    OrderPlacedResponse,
    OrderResponse,
    OrderSummaryResponse,
    StartPromotionRequest,
    StatusResponse,
    UpdateCartQuantityRequest,
)
from boutique.cart.cart import ShoppingCart
from boutique.cart.items import AddToCart, RemoveFromCart, UpdateCartQuantity
from boutique.cart.management import ClearCart, CreateCart
from boutique.catalog.item import CatalogItem
from boutique.catalog.management import AddCatalogItem, ChangeBasePrice, EndPromotion, StartPromotion
from boutique.dashboard.alerts import AlertAudience, mark_alert_read, unread_alerts
from boutique.invoice.document import build_invoice
from boutique.invoice.eligibility import filter_invoiceable, is_invoiceable
from boutique.order.checkout import PlaceOrder
from boutique.order.lifecycle import ActorRole
from boutique.order.order import Order
from boutique.order.status import ChangeOrderStatus
from boutique.pricing.calculator import line_total
from boutique.projections.order_summary import list_order_summaries


def get_actor(
    x_actor_role: ActorRole = Header(...),
    x_actor_id: str | None = Header(None),
) -> Actor:
    return Actor(role=x_actor_role, id=x_actor_id)


def _require_staff(actor: Actor) -> None:
    if not actor.is_staff:
        raise HTTPException(status_code=403, detail="Only managers and admins can do this")


def _load_order_for(actor: Actor, order_id: str) -> Order:
    """Load an order the actor may see; customers only see their own."""
    order = current_domain.repository_for(Order).get(order_id)
    if not actor.is_staff and order.user_id != actor.id:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


def _order_response(order: Order) -> OrderResponse:
    return OrderResponse(
        order_id=str(order.id),
        order_number=order.order_number,
        user_id=order.user_id,
        customer={
            "name": order.customer.name,
            "email": order.customer.email,
            "phone": order.customer.phone,
            "address": order.customer.address,
        },
        lines=[line.snapshot() for line in order.lines],
        total=order.total,
        currency=order.currency,
        status=order.status,
        payment_method=order.payment_method,
        notes=order.notes,
        created_at=order.created_at,
        updated_at=order.updated_at,
        invoiceable=is_invoiceable(order),
    )


def _summary_response(summary) -> OrderSummaryResponse:
    return OrderSummaryResponse(
        order_id=str(summary.order_id),
        order_number=summary.order_number,
        user_id=summary.user_id,
        customer_name=summary.customer_name,
        item_count=summary.item_count or 0,
        total=summary.total or 0.0,
        currency=summary.currency,
        status=summary.status,
        payment_method=summary.payment_method,
        created_at=summary.created_at,
        updated_at=summary.updated_at,
    )


# ---------------------------------------------------------------------------
# Catalog Router
# ---------------------------------------------------------------------------
catalog_router = APIRouter(prefix="/catalog", tags=["catalog"])


def _catalog_item_response(item: CatalogItem) -> CatalogItemResponse:
    price = item.effective_price()
    return CatalogItemResponse(
        item_id=str(item.id),
        name=item.name,
        category=item.category,
        base_price=item.base_price,
        is_on_sale=bool(item.is_on_sale),
        discount_type=item.active_discount.discount_type if item.active_discount else None,
        discount_value=item.active_discount.value if item.active_discount else None,
        unit_price=price.unit_price,
        original_unit_price=price.original_unit_price,
    )


@catalog_router.post("", status_code=201, response_model=CatalogItemIdResponse)
async def add_catalog_item(body: AddCatalogItemRequest, actor: Actor = Depends(get_actor)) -> CatalogItemIdResponse:
    _require_staff(actor)
    command = AddCatalogItem(
        name=body.name,
        description=body.description,
        category=body.category,
        base_price=body.base_price,
        discount_type=body.discount_type.value if body.discount_type else None,
        discount_value=body.discount_value,
    )
    item_id = current_domain.process(command, asynchronous=False)
    return CatalogItemIdResponse(item_id=item_id)


@catalog_router.get("/{item_id}", response_model=CatalogItemResponse)
async def get_catalog_item(item_id: str) -> CatalogItemResponse:
    item = current_domain.repository_for(CatalogItem).get(item_id)
    return _catalog_item_response(item)


@catalog_router.put("/{item_id}/price", response_model=StatusResponse)
async def change_base_price(
    item_id: str, body: ChangeBasePriceRequest, actor: Actor = Depends(get_actor)
) -> StatusResponse:
    _require_staff(actor)
    current_domain.process(ChangeBasePrice(item_id=item_id, base_price=body.base_price), asynchronous=False)
    return StatusResponse()


@catalog_router.put("/{item_id}/promotion", response_model=StatusResponse)
async def start_promotion(
    item_id: str, body: StartPromotionRequest, actor: Actor = Depends(get_actor)
) -> StatusResponse:
    _require_staff(actor)
    command = StartPromotion(
        item_id=item_id,
        discount_type=body.discount_type.value,
        discount_value=body.discount_value,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@catalog_router.delete("/{item_id}/promotion", response_model=StatusResponse)
async def end_promotion(item_id: str, actor: Actor = Depends(get_actor)) -> StatusResponse:
    _require_staff(actor)
    current_domain.process(EndPromotion(item_id=item_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/carts", tags=["carts"])


@cart_router.post("", status_code=201, response_model=CartIdResponse)
async def create_cart(body: CreateCartRequest) -> CartIdResponse:
    command = CreateCart(owner_id=body.owner_id, session_id=body.session_id)
    cart_id = current_domain.process(command, asynchronous=False)
    return CartIdResponse(cart_id=cart_id)


@cart_router.get("/{cart_id}", response_model=CartResponse)
async def get_cart(cart_id: str) -> CartResponse:
    cart = current_domain.repository_for(ShoppingCart).get(cart_id)
    return CartResponse(
        cart_id=str(cart.id),
        status=cart.status,
        lines=[
            CartLineResponse(
                product_id=str(line.product_id),
                name=line.name,
                quantity=line.quantity,
                unit_price=line.unit_price,
                original_unit_price=line.original_unit_price,
                line_total=float(line_total(line.unit_price, line.quantity)),
            )
            for line in cart.lines
        ],
        item_count=cart.item_count(),
        total=cart.total(),
    )


@cart_router.post("/{cart_id}/items", response_model=StatusResponse)
async def add_cart_item(cart_id: str, body: AddToCartRequest) -> StatusResponse:
    command = AddToCart(cart_id=cart_id, product_id=body.product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.put("/{cart_id}/items/{product_id}", response_model=StatusResponse)
async def update_cart_item_quantity(
    cart_id: str, product_id: str, body: UpdateCartQuantityRequest
) -> StatusResponse:
    command = UpdateCartQuantity(cart_id=cart_id, product_id=product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/{cart_id}/items/{product_id}", response_model=StatusResponse)
async def remove_cart_item(cart_id: str, product_id: str) -> StatusResponse:
    current_domain.process(RemoveFromCart(cart_id=cart_id, product_id=product_id), asynchronous=False)
    return StatusResponse()


@cart_router.delete("/{cart_id}/items", response_model=StatusResponse)
async def clear_cart(cart_id: str) -> StatusResponse:
    current_domain.process(ClearCart(cart_id=cart_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderPlacedResponse)
async def place_order(body: CheckoutRequest, x_actor_id: str | None = Header(None)) -> OrderPlacedResponse:
    command = PlaceOrder(
        cart_id=body.cart_id,
        user_id=x_actor_id,
        name=body.name,
        phone=body.phone,
        email=body.email,
        address=body.address,
        payment_method=body.payment_method.value,
        notes=body.notes,
    )
    result = current_domain.process(command, asynchronous=False)
    return OrderPlacedResponse(**result)


@order_router.get("", response_model=list[OrderSummaryResponse])
async def list_orders(actor: Actor = Depends(get_actor)) -> list[OrderSummaryResponse]:
    summaries = list_order_summaries(user_id=None if actor.is_staff else actor.id or "")
    return [_summary_response(summary) for summary in summaries]


@order_router.get("/track/{order_number}", response_model=OrderSummaryResponse)
async def track_order(order_number: str) -> OrderSummaryResponse:
    order = current_domain.repository_for(Order).get_by_order_number(order_number)
    return OrderSummaryResponse(
        order_id=str(order.id),
        order_number=order.order_number,
        user_id=order.user_id,
        customer_name=order.customer.name,
        item_count=order.item_count(),
        total=order.total,
        currency=order.currency,
        status=order.status,
        payment_method=order.payment_method,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, actor: Actor = Depends(get_actor)) -> OrderResponse:
    return _order_response(_load_order_for(actor, order_id))


@order_router.get("/{order_id}/transitions", response_model=AllowedTransitionsResponse)
async def get_allowed_transitions(order_id: str, actor: Actor = Depends(get_actor)) -> AllowedTransitionsResponse:
    order = _load_order_for(actor, order_id)
    return AllowedTransitionsResponse(
        current_status=order.status,
        allowed=order.allowed_transitions(actor.role, actor.id),
    )


@order_router.put("/{order_id}/status", response_model=OrderResponse)
async def change_order_status(
    order_id: str, body: ChangeStatusRequest, actor: Actor = Depends(get_actor)
) -> OrderResponse:
    command = ChangeOrderStatus(
        order_id=order_id,
        new_status=body.new_status.value,
        actor_role=actor.role.value,
        actor_id=actor.id,
    )
    current_domain.process(command, asynchronous=False)
    return _order_response(current_domain.repository_for(Order).get(order_id))


# ---------------------------------------------------------------------------
# Invoice Router
# ---------------------------------------------------------------------------
invoice_router = APIRouter(prefix="/invoices", tags=["invoices"])


@invoice_router.get("", response_model=list[OrderSummaryResponse])
async def list_invoices(actor: Actor = Depends(get_actor)) -> list[OrderSummaryResponse]:
    summaries = list_order_summaries(user_id=None if actor.is_staff else actor.id or "")
    return [_summary_response(summary) for summary in filter_invoiceable(summaries)]


@invoice_router.get("/{order_id}", response_model=InvoiceResponse)
async def get_invoice(order_id: str, actor: Actor = Depends(get_actor)) -> InvoiceResponse:
    return InvoiceResponse(**build_invoice(_load_order_for(actor, order_id)))


# ---------------------------------------------------------------------------
# Dashboard Alerts Router
# ---------------------------------------------------------------------------
alert_router = APIRouter(prefix="/dashboard/alerts", tags=["dashboard"])


@alert_router.get("", response_model=list[AlertResponse])
async def list_alerts(actor: Actor = Depends(get_actor)) -> list[AlertResponse]:
    if actor.is_staff:
        alerts = unread_alerts(AlertAudience.STAFF)
    else:
        alerts = unread_alerts(AlertAudience.CUSTOMER, recipient_id=actor.id or "")
    return [
        AlertResponse(
            alert_id=str(alert.alert_id),
            kind=alert.kind,
            order_id=str(alert.order_id),
            order_number=alert.order_number,
            status=alert.status,
            message=alert.message,
            created_at=alert.created_at,
        )
        for alert in alerts
    ]


@alert_router.put("/{alert_id}/read", response_model=StatusResponse)
async def read_alert(alert_id: str, actor: Actor = Depends(get_actor)) -> StatusResponse:
    if actor.is_staff:
        mark_alert_read(alert_id, AlertAudience.STAFF)
    else:
        mark_alert_read(alert_id, AlertAudience.CUSTOMER, recipient_id=actor.id)
    return StatusResponse()
