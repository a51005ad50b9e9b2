"""
Error taxonomy shared by services and the API boundary.

Services raise these; `apps.finance.api.exception_handler` maps them to HTTP
status codes and problem-details bodies.
"""


class FinanceTrackerError(Exception):
    """Base class for errors with a defined HTTP translation."""

    status_code = 500
    title = "An error occurred"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(FinanceTrackerError):
    status_code = 404
    title = "Resource not found"


class ConflictError(FinanceTrackerError):
    status_code = 409
    title = "Conflict"


class UnauthorizedError(FinanceTrackerError):
    status_code = 401
    title = "Unauthorized"


class ValidationError(FinanceTrackerError):
    """Carries every failed field at once: {field: [messages]}."""

    status_code = 400
    title = "One or more validation errors occurred"

    def __init__(self, errors: dict[str, list[str]], detail: str = "One or more validation errors occurred"):
        super().__init__(detail)
        self.errors = errors

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls({field: [message]}, detail=message)


class ExchangeRateUnavailableError(Exception):
    """
    Raised when the exchange-rate provider cannot supply a rate.

    Not a FinanceTrackerError: nothing recovers from it and the API answers
    with a generic 500.
    """
