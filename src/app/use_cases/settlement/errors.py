"""Settlement error codes

Error codes returned in Result errors, and the mapping from database
failures onto them.
"""

from sqlalchemy.exc import DBAPIError, IntegrityError
from libs.result import Error

INVALID_AMOUNT = "INVALID_AMOUNT"
UNKNOWN_BILLING_POLICY = "UNKNOWN_BILLING_POLICY"
CUSTOMER_NOT_FOUND = "CUSTOMER_NOT_FOUND"
DUPLICATE_PAYMENT = "DUPLICATE_PAYMENT"
TRANSACTION_CONFLICT = "TRANSACTION_CONFLICT"
STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"
SETTLEMENT_FAILED = "SETTLEMENT_FAILED"

# serialization_failure, deadlock_detected, lock_not_available
_CONFLICT_SQLSTATES = {"40001", "40P01", "55P03"}


def classify_storage_error(exc: DBAPIError) -> Error:
    """
    Map a database error onto TRANSACTION_CONFLICT or STORAGE_UNAVAILABLE

    Conflicts are transient: the caller may retry the whole call.
    """
    orig = getattr(exc, "orig", None)
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)

    if isinstance(exc, IntegrityError):
        return Error(
            code=TRANSACTION_CONFLICT,
            message="Concurrent write conflict, retry the request",
            reason=str(orig or exc),
        )

    if sqlstate in _CONFLICT_SQLSTATES or "database is locked" in str(orig):
        return Error(
            code=TRANSACTION_CONFLICT,
            message="Account is locked by a concurrent settlement, retry the request",
            reason=str(orig or exc),
        )

    return Error(
        code=STORAGE_UNAVAILABLE,
        message="Storage is unavailable",
        reason=str(orig or exc),
    )
