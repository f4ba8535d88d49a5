"""
Lending error taxonomy.

Every rejected operation carries a machine-readable ``kind`` and the HTTP
status the API answers with. The base class stays a ``ValueError`` so
callers that only know about ``ValueError`` still catch domain rejections.
"""


class LendingError(ValueError):
    kind = "lending_error"
    http_status = 400
    retryable = False

    def __init__(self, message: str | None = None):
        super().__init__(message or self.kind.replace("_", " "))
        self.message = str(self)

    def to_dict(self) -> dict:
        payload = {"success": False, "kind": self.kind, "message": self.message}
        if self.retryable:
            payload["retryable"] = True
        return payload


class NotFound(LendingError):
    kind = "not_found"
    http_status = 404


class InsufficientCopies(LendingError):
    kind = "insufficient_copies"


class BorrowLimitExceeded(LendingError):
    kind = "borrow_limit_exceeded"


class DuplicateBorrow(LendingError):
    kind = "duplicate_borrow"


class InvalidTransition(LendingError):
    kind = "invalid_transition"
    http_status = 409


class InvalidInput(LendingError):
    kind = "invalid_input"


class RecordInUse(LendingError):
    kind = "record_in_use"
    http_status = 409


class ImmutableRecord(LendingError):
    kind = "immutable_record"
    http_status = 409


class StoreFailure(LendingError):
    """Persistence failed mid-operation; nothing was applied and the caller may retry."""

    kind = "store_failure"
    http_status = 503
    retryable = True
