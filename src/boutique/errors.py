"""Error taxonomy for the boutique domain.

All errors carry a Protean-style ``messages`` dict keyed by the offending
field, so API handlers can render them uniformly.
"""

from protean.exceptions import InvalidOperationError, ValidationError

__all__ = [
    "EmptyCartError",
    "SelfActionError",
    "UnauthorizedTransitionError",
    "ValidationError",
]


class EmptyCartError(ValidationError):
    """Checkout was attempted with no cart lines."""


class UnauthorizedTransitionError(InvalidOperationError):
    """The acting role may not move the order from its current status to the requested one."""


class SelfActionError(InvalidOperationError):
    """The actor tried to change an order that is terminal or that they do not own."""
