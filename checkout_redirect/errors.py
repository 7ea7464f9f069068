from __future__ import annotations


class CheckoutError(RuntimeError):
    """Failure that maps directly to one error response."""

    status_code = 500

    def __init__(self, *, message: str, detail: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code


class ConfigurationError(CheckoutError):
    status_code = 500


class BadRequestError(CheckoutError):
    status_code = 400


class NotFoundError(CheckoutError):
    status_code = 404


class BadGatewayError(CheckoutError):
    status_code = 502


class ServerError(CheckoutError):
    status_code = 500


class UpstreamError(CheckoutError):
    """Upstream rejected a call; its status and raw body are passed through."""

    def __init__(self, *, status_code: int, body: bytes) -> None:
        super().__init__(
            message=f"BigCommerce API call failed ({status_code})",
            status_code=status_code,
        )
        self.body = body
