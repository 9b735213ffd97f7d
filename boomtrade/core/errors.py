"""Error taxonomy for gateway session operations."""


class GatewayError(Exception):
    """Base class for all classified gateway client failures."""

    pass


class NotReadyError(GatewayError):
    """Raised when a domain operation is attempted before the session is ready."""

    def __init__(self, state: str):
        self.state = state
        super().__init__(f"Gateway is not ready (state={state}). Connect or authenticate first.")


class GatewayTimeoutError(GatewayError):
    """Raised when a request or gateway bootstrap exceeded its time bound."""

    pass


class TransportError(GatewayError):
    """Raised on network or connection failures."""

    pass


class DecodeError(GatewayError):
    """Raised when a response does not match the expected schema."""

    pass


class ValidationError(GatewayError):
    """Raised when order input is malformed."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Invalid {field}: {message}")


class BackendRejectedError(GatewayError):
    """Raised when the gateway answered with a non-success status."""

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        if status_code is not None:
            super().__init__(f"Gateway rejected request (HTTP {status_code}): {message}")
        else:
            super().__init__(f"Gateway rejected request: {message}")


class OrderRejectedError(BackendRejectedError):
    """Raised when the gateway refused an order.

    Kept distinct from connectivity failures so callers never confuse
    "order rejected" with "not connected".
    """

    def __init__(self, message: str, status_code: int | None = None, response=None):
        super().__init__(message, status_code)
        self.response = response


class SessionBusyError(GatewayError):
    """Raised when a connect/authenticate is attempted while one is in flight or already done."""

    pass


class UnsupportedOperationError(GatewayError):
    """Raised when the selected backend profile has no endpoint for an operation."""

    pass
