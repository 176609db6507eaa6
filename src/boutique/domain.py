"""Boutique bounded context: catalog pricing, shopping cart and order lifecycle.

Handles the discount-aware pricing of catalog items, the per-session shopping
cart, checkout into immutable orders, and the role-gated order status
state machine that drives invoicing and staff dashboards.
"""

from protean.domain import Domain

from boutique.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

boutique = Domain(name="boutique")
