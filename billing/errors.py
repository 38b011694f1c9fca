"""
Typed errors raised by the billing core and its document services.

Every error carries a machine-readable ``code`` plus the structured fields a
caller needs to build a response (offending field, current status, attempted
action, allocation scope). The core never recovers from these itself.

    BillingError
    +-- ValidationError            bad numeric input to a line computation
    +-- InvalidTransitionError     lifecycle rule violation, never retried
    +-- RetryableError             numbering contention, retry the transition
    +-- DocumentNotFoundError
    +-- LineItemNotFoundError
    +-- DocumentNotEditableError   line/header change outside DRAFT
    +-- DocumentImmutableError     year/number reassignment
"""


class BillingError(Exception):
    """Base class for all billing errors."""

    code: str = "BILLING_ERROR"


class ValidationError(BillingError):
    code: str = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class InvalidTransitionError(BillingError):
    code: str = "INVALID_TRANSITION"

    def __init__(self, document_type: str, status: str, action: str):
        self.document_type = document_type
        self.status = status
        self.action = action
        super().__init__(
            f"Cannot {action} a {document_type.lower()} in status {status}"
        )


class RetryableError(BillingError):
    """Numbering contention; no number stays allocated once the caller rolls back."""

    code: str = "RETRYABLE"

    def __init__(self, scope: tuple, reason: str):
        self.scope = scope
        self.reason = reason
        super().__init__(f"Number allocation for {scope} failed: {reason}")


class DocumentNotFoundError(BillingError):
    code: str = "NOT_FOUND"

    def __init__(self, document_type: str, document_id: int):
        self.document_type = document_type
        self.document_id = document_id
        super().__init__(f"{document_type.capitalize()} {document_id} not found")


class DocumentNotEditableError(BillingError):
    code: str = "NOT_EDITABLE"

    def __init__(self, document_type: str, document_id: int | None, status: str):
        self.document_type = document_type
        self.document_id = document_id
        self.status = status
        super().__init__(
            f"{document_type.capitalize()} {document_id} is not editable in status {status}"
        )


class DocumentImmutableError(BillingError):
    code: str = "IMMUTABLE_FIELD"

    def __init__(self, document_type: str, field: str):
        self.document_type = document_type
        self.field = field
        super().__init__(
            f"{document_type.capitalize()} {field} is already assigned and cannot change"
        )


class LineItemNotFoundError(BillingError):
    code: str = "NOT_FOUND"

    def __init__(self, document_type: str, document_id: int, item_id: int):
        self.document_type = document_type
        self.document_id = document_id
        self.item_id = item_id
        super().__init__(
            f"Item {item_id} not found on {document_type.lower()} {document_id}"
        )
