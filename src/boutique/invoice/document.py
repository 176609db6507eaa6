"""Invoice document: the data printed on a customer invoice.

Rendering (PDF, HTML) is left to the presentation layer; this module only
assembles what goes on the page, using the prices frozen on the order.
"""

from protean.exceptions import ValidationError

from boutique.invoice.eligibility import is_invoiceable
from boutique.pricing.calculator import line_total


def build_invoice(order) -> dict:
    """Assemble invoice data for an invoiceable order.

    Raises:
        ValidationError: the order's status does not allow invoicing.
    """
    if not is_invoiceable(order):
        raise ValidationError({"status": [f"Order {order.order_number} in status {order.status} cannot be invoiced"]})

    lines = [
        {
            "product_id": str(line.product_id),
            "description": line.name,
            "quantity": line.quantity,
            "unit_price": line.unit_price,
            "original_unit_price": line.original_unit_price,
            "line_total": float(line_total(line.unit_price, line.quantity)),
        }
        for line in order.lines
    ]

    return {
        "invoice_number": order.order_number,
        "order_id": str(order.id),
        "issued_on": order.created_at.date().isoformat() if order.created_at else None,
        "status": order.status,
        "customer": {
            "name": order.customer.name,
            "email": order.customer.email or "",
            "phone": order.customer.phone,
            "address": order.customer.address or "",
        },
        "lines": lines,
        "total": order.total,
        "currency": order.currency,
        "payment_method": order.payment_method,
    }
