# --- payrecon/errors.py ---
"""Failure kinds raised by the reconciliation core.

Every error is scoped to the request that raised it. ``status_code`` is what the
HTTP layer answers with; ``data`` carries the field or condition that failed.
"""


class ReconcileError(Exception):
    status_code = 400

    def __init__(self, message: str, data: dict | None = None):
        super().__init__(message)
        self.message = message
        self.data = data or {}


class ValidationError(ReconcileError):
    """Input is not a receipt or is malformed. The user can fix it."""
    status_code = 422


class DuplicateError(ReconcileError):
    """A receipt with the same fingerprint was already submitted."""
    status_code = 409


class NotFoundError(ReconcileError):
    status_code = 404


class AlreadyProcessedError(ReconcileError):
    """The receipt already left ``pending``."""
    status_code = 409


class InvalidTransitionError(ReconcileError):
    status_code = 400


class InvalidStatusError(InvalidTransitionError):
    """The requested fulfillment status does not exist."""


class PaymentIncompleteError(InvalidTransitionError):
    """Shipping was requested before the order was fully paid."""


class TransientExternalError(ReconcileError):
    """OCR, storage, order source or messaging failed or timed out. Retry later."""
    status_code = 503
