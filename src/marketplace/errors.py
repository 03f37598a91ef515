"""Marketplace error hierarchy.

Input-shape problems are reported with ``protean.exceptions.ValidationError``.
Everything here signals a business outcome the HTTP layer translates to a
status code: missing or hidden resources, lost races and rule violations.
"""


class MarketplaceError(Exception):
    """Base class for marketplace business errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(MarketplaceError):
    status_code = 404


class OrderNotFoundError(NotFoundError):
    """Raised when an order is absent or the caller may not act on it.

    Ownership and state precondition failures are reported the same way as a
    missing order so callers cannot probe for other orders.
    """

    def __init__(self, message: str = "Order not found"):
        super().__init__(message)


class AuthorizationError(MarketplaceError):
    status_code = 403


class ConflictError(MarketplaceError):
    status_code = 409


class BusinessRuleError(MarketplaceError):
    status_code = 422


class EmptyCartError(BusinessRuleError):
    def __init__(self, message: str = "Cart is empty"):
        super().__init__(message)


class InsufficientWalletError(BusinessRuleError):
    def __init__(self, message: str = "Insufficient wallet balance"):
        super().__init__(message)


class MinimumOrderNotMetError(BusinessRuleError):
    def __init__(self, message: str = "Total amount must be at least 500 to use wallet points"):
        super().__init__(message)


class NoStoreAvailableError(BusinessRuleError):
    def __init__(self, message: str = "No nearby store found"):
        super().__init__(message)


class NoManagerAssignedError(BusinessRuleError):
    def __init__(self, message: str = "Nearest store has no assigned manager"):
        super().__init__(message)
