"""Error kinds raised by the ledger engine and its repositories."""


class LedgerError(Exception):
    """Base class; ``message`` is safe to show to the operator."""

    status_code = 500
    default_message = "Unexpected ledger error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotAuthenticatedError(LedgerError):
    status_code = 401
    default_message = "No active user"


class NetworkOrServerError(LedgerError):
    """Transport failure or a non-success answer from the ledger server."""

    status_code = 502
    default_message = "Ledger server unavailable"


class ValidationFailedError(LedgerError):
    status_code = 400
    default_message = "Invalid input"


class NotFoundError(LedgerError):
    status_code = 404
    default_message = "Not found"
