# accounting/services/exceptions.py

"""
ACCOUNTING SERVICE ERRORS

Centralized domain errors for the ledger registries and the voucher engine.

Every concrete error carries:
- code: stable identifier a transport layer can switch on
- kind: taxonomy bucket (validation / conflict / not_found / referential / unexpected)

Only UnexpectedLedgerError wraps a storage failure; its message never
leaks the underlying cause (the cause is chained and logged instead).
"""

from __future__ import annotations


class AccountingServiceError(Exception):
    """Base exception for all accounting service failures."""

    kind = "error"
    code = "AccountingServiceError"
    default_message = "Accounting operation failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)

    @property
    def detail(self) -> str:
        return str(self)

    def as_dict(self) -> dict:
        return {"kind": self.kind, "code": self.code, "detail": self.detail}


# ============================================================
# KINDS
# ============================================================


class LedgerValidationError(AccountingServiceError):
    """Caller-fixable input problem. Never retried automatically."""

    kind = "validation"


class LedgerConflictError(AccountingServiceError):
    """Stored state moved on or a unique value is taken. Refetch and retry."""

    kind = "conflict"


class LedgerNotFoundError(AccountingServiceError):
    kind = "not_found"


class LedgerReferentialError(AccountingServiceError):
    """SL/DL references are missing, disallowed, or still in use."""

    kind = "referential"


class UnexpectedLedgerError(AccountingServiceError):
    """Unclassified storage failure. The transaction is already rolled back."""

    kind = "unexpected"
    code = "UnexpectedError"
    default_message = "Something went wrong"


# ============================================================
# VALIDATION
# ============================================================


class CodeEmptyOrTooLong(LedgerValidationError):
    code = "CodeEmptyOrTooLong"
    default_message = "code cannot be empty or more than 64 characters"


class TitleEmptyOrTooLong(LedgerValidationError):
    code = "TitleEmptyOrTooLong"
    default_message = "title cannot be empty or more than 64 characters"


class NumberEmptyOrTooLong(LedgerValidationError):
    code = "NumberEmptyOrTooLong"
    default_message = "number cannot be empty or more than 64 characters"


class ItemsCountOutOfRange(LedgerValidationError):
    code = "ItemsCountOutOfRange"
    default_message = "voucher items count should be between 2 and 500"


class DebitOrCreditInvalid(LedgerValidationError):
    code = "DebitOrCreditInvalid"
    default_message = "one and only one of debit or credit should be greater than 0"


class DebitCreditMismatch(LedgerValidationError):
    code = "DebitCreditMismatch"
    default_message = "debits and credits should be equal in a voucher"


class LineReferencedTwice(LedgerValidationError):
    code = "LineReferencedTwice"
    default_message = "a voucher line can appear only once across updated and deleted lines"


# ============================================================
# CONFLICT
# ============================================================


class CodeAlreadyExists(LedgerConflictError):
    code = "CodeAlreadyExists"
    default_message = "code should be unique"


class TitleAlreadyExists(LedgerConflictError):
    code = "TitleAlreadyExists"
    default_message = "title should be unique"


class NumberAlreadyExists(LedgerConflictError):
    code = "NumberAlreadyExists"
    default_message = "voucher number already exists"


class VersionOutdated(LedgerConflictError):
    code = "VersionOutdated"
    default_message = "version is outdated"


# ============================================================
# NOT FOUND
# ============================================================


class DLNotFound(LedgerNotFoundError):
    code = "DLNotFound"
    default_message = "DL not found"


class SLNotFound(LedgerNotFoundError):
    code = "SLNotFound"
    default_message = "SL not found"


class VoucherNotFound(LedgerNotFoundError):
    code = "VoucherNotFound"
    default_message = "voucher not found"


class LineNotFound(LedgerNotFoundError):
    code = "LineNotFound"
    default_message = "voucher item not found"


# ============================================================
# REFERENTIAL
# ============================================================


class ReferencedByVoucherLine(LedgerReferentialError):
    code = "ReferencedByVoucherLine"
    default_message = "record is referenced by at least one voucher item"


class DLIDRequired(LedgerReferentialError):
    code = "DLIDRequired"
    default_message = "provided SL requires DL"


class DLNotAllowed(LedgerReferentialError):
    code = "DLNotAllowed"
    default_message = "provided SL does not require DL"
