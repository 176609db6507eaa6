"""Order aggregate: immutable lines, mutable status.

An order freezes the cart lines, their effective prices and the customer
contact details at checkout. Afterwards only ``status`` and ``updated_at``
change, and only through ``transition_to``, which enforces the role-based
authorization table in ``boutique.order.lifecycle``.

    PendingPayment → Paid → Processing → Shipped → OutForDelivery → Delivered
    Cancelled / Refunded (terminal, reachable per actor role)
"""

import json
import re
import secrets
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text, ValueObject

from boutique.domain import boutique
from boutique.errors import EmptyCartError
from boutique.order.events import OrderCreated, OrderStatusChanged
from boutique.order.lifecycle import (
    GUEST_USER_ID,
    OrderStatus,
    allowed_transitions,
    check_transition,
    parse_role,
    parse_status,
)
from boutique.pricing.calculator import round2, sum_line_totals

__all__ = ["CustomerInfo", "Order", "OrderLine", "OrderStatus", "PaymentMethod"]

_ORDER_NUMBER_ALPHABET = "ABCDEFGHJKMNPQRSTUVWXYZ23456789"
_ORDER_NUMBER_LENGTH = 6
_PHONE_PATTERN = re.compile(r"^\+?[0-9\s-]+$")
_DIGIT = re.compile(r"\d")
_EMAIL_PATTERN = re.compile(r"^[^@\s;,()<>\"\[\]\\:]+@[^@\s;,()<>\"\[\]\\:]+\.[^@\s;,()<>\"\[\]\\:.]+$")


class PaymentMethod(Enum):
    CASH_ON_DELIVERY = "CashOnDelivery"
    WAVE = "Wave"
    ORANGE_MONEY = "OrangeMoney"
    CARD = "Card"


def _custom_setting(key, default):
    custom = boutique.config.get("custom") or {}
    return custom.get(key, default)


def generate_order_number() -> str:
    """A short, human-readable order number such as ``SB-7KQ2MX``."""
    prefix = _custom_setting("order_number_prefix", "SB")
    suffix = "".join(secrets.choice(_ORDER_NUMBER_ALPHABET) for _ in range(_ORDER_NUMBER_LENGTH))
    return f"{prefix}-{suffix}"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@boutique.value_object(part_of="Order")
class CustomerInfo:
    """Contact details captured at checkout.

    The snapshot is kept as entered, independent of later profile changes.
    Email is optional; name and phone are required.
    """

    name = String(max_length=100)
    email = String(max_length=254)
    phone = String(max_length=30)
    address = String(max_length=500)

    @invariant.post
    def name_and_phone_are_required(self):
        errors = {}
        if not (self.name or "").strip():
            errors["name"] = ["Name is required"]
        if not (self.phone or "").strip():
            errors["phone"] = ["Phone is required"]
        elif not (_PHONE_PATTERN.match(self.phone.strip()) and _DIGIT.search(self.phone)):
            errors["phone"] = [f"Invalid phone number: {self.phone!r}"]
        if errors:
            raise ValidationError(errors)

    @invariant.post
    def email_is_blank_or_valid(self):
        email = (self.email or "").strip()
        if email and (".." in email or not _EMAIL_PATTERN.match(email)):
            raise ValidationError({"email": [f"Invalid email address: {self.email!r}"]})


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@boutique.entity(part_of="Order")
class OrderLine:
    """A cart line frozen into the order at checkout."""

    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    original_unit_price = Float(min_value=0.0)

    def snapshot(self):
        return {
            "product_id": str(self.product_id),
            "name": self.name,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "original_unit_price": self.original_unit_price,
        }


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@boutique.aggregate
class Order:
    order_number = String(required=True, max_length=20)
    user_id = String(max_length=255, default=GUEST_USER_ID)
    customer = ValueObject(CustomerInfo, required=True)
    lines = HasMany(OrderLine)
    total = Float(required=True, min_value=0.0)
    currency = String(max_length=3, default="XOF")
    status = String(choices=OrderStatus, default=OrderStatus.PENDING_PAYMENT.value)
    payment_method = String(required=True, choices=PaymentMethod)
    notes = Text()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_matches_lines(self):
        # Lines are frozen at checkout; adding or dropping one afterwards breaks the total
        if self.lines and round2(self.total) != round2(sum_line_totals(self.lines)):
            raise ValidationError({"lines": ["Order lines no longer add up to the order total"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_info, lines, payment_method, notes=None, user_id=None, order_number=None):
        """Create an order from checkout details and cart lines.

        Args:
            customer_info: Dict (or ``CustomerInfo``) with name, email, phone, address.
            lines: Cart lines, or dicts, exposing product_id, name, quantity,
                unit_price and original_unit_price.
            payment_method: One of ``PaymentMethod`` values.
            notes: Optional free text, at most 200 characters.
            user_id: The ordering user, or None for a guest checkout.
            order_number: A number already checked for uniqueness; a fresh
                one is generated when omitted.

        The total is recomputed from the lines; the status always starts at
        PendingPayment whatever the payment method.
        """
        lines = list(lines or [])
        if not lines:
            raise EmptyCartError({"cart": ["Cannot place an order with an empty cart"]})

        if notes and len(notes) > 200:
            raise ValidationError({"notes": ["Notes cannot exceed 200 characters"]})

        customer = customer_info if isinstance(customer_info, CustomerInfo) else CustomerInfo(**customer_info)
        order_lines = [
            OrderLine(**line) if isinstance(line, dict) else OrderLine(
                product_id=line.product_id,
                name=line.name,
                quantity=line.quantity,
                unit_price=line.unit_price,
                original_unit_price=line.original_unit_price,
            )
            for line in lines
        ]
        total = sum_line_totals(order_lines)
        payment_method = payment_method.value if isinstance(payment_method, PaymentMethod) else payment_method

        now = datetime.now(UTC)
        order = cls(
            order_number=order_number or generate_order_number(),
            user_id=str(user_id) if user_id else GUEST_USER_ID,
            customer=customer,
            lines=order_lines,
            total=total,
            currency=_custom_setting("currency", "XOF"),
            status=OrderStatus.PENDING_PAYMENT.value,
            payment_method=payment_method,
            notes=notes or "",
            created_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderCreated(
                order_id=str(order.id),
                order_number=order.order_number,
                user_id=order.user_id,
                customer=json.dumps(
                    {
                        "name": customer.name,
                        "email": customer.email or "",
                        "phone": customer.phone,
                        "address": customer.address or "",
                    }
                ),
                lines=json.dumps([line.snapshot() for line in order.lines]),
                total=order.total,
                currency=order.currency,
                status=order.status,
                payment_method=order.payment_method,
                notes=order.notes,
                created_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    def allowed_transitions(self, actor_role, actor_id=None) -> list[OrderStatus]:
        return allowed_transitions(self.status, actor_role, actor_id, self.user_id)

    # -------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------
    def transition_to(self, new_status, actor_role, actor_id=None):
        """Move the order to ``new_status`` on behalf of an actor.

        Requesting the current status is a successful no-op. Any rejected
        request leaves ``status`` and ``updated_at`` untouched.
        """
        target = parse_status(new_status)
        role = parse_role(actor_role)

        if not check_transition(self.status, target, role, actor_id, self.user_id):
            return self

        previous_status = self.status
        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_number=self.order_number,
                user_id=self.user_id,
                previous_status=previous_status,
                new_status=target.value,
                actor_role=role.value,
                actor_id=str(actor_id) if actor_id else None,
                changed_at=now,
            )
        )
        return self
