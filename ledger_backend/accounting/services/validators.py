# accounting/services/validators.py

"""
======================================================
PATH: accounting/services/validators.py
======================================================
LEDGER VALIDATORS

Shared by the DL/SL registries and the voucher engine (create + update):
- text length (code / title / number)
- code + title uniqueness
- debit/credit shape of a single line
- SL/DL consistency of a single line (with per-request lookup caching)
- line count range
- balance (full set) and balance delta (inserted / updated / deleted)

Validators only read. They raise accounting.services.exceptions errors
and never write.
"""

from __future__ import annotations

from typing import Iterable, Sequence, Tuple, Type

from django.db.models import Q

from accounting.models import DetailLedger, SubsidiaryLedger, VoucherLine
from accounting.services.exceptions import (
    AccountingServiceError,
    CodeAlreadyExists,
    DebitCreditMismatch,
    DebitOrCreditInvalid,
    DLIDRequired,
    DLNotAllowed,
    DLNotFound,
    ItemsCountOutOfRange,
    ReferencedByVoucherLine,
    SLNotFound,
    TitleAlreadyExists,
)
from accounting.services.requests import VoucherLineInput

MAX_TEXT_LENGTH = 64
MIN_VOUCHER_LINES = 2
MAX_VOUCHER_LINES = 500
# upper bound of the BIGINT debit/credit columns
MAX_AMOUNT = 2**63 - 1


# ============================================================
# TEXT + UNIQUENESS
# ============================================================


def validate_text(value, error_cls: Type[AccountingServiceError]) -> None:
    if not isinstance(value, str) or not value or len(value) > MAX_TEXT_LENGTH:
        raise error_cls()


def validate_unique_code_and_title(manager, *, code: str, title: str, exclude_id=None) -> None:
    """
    Code clashes are reported before title clashes.
    At most two rows can match (one per unique column).
    """
    qs = manager.filter(Q(code=code) | Q(title=title))
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)

    clashes = list(qs.values_list("code", "title")[:2])
    if any(existing_code == code for existing_code, _ in clashes):
        raise CodeAlreadyExists()
    if any(existing_title == title for _, existing_title in clashes):
        raise TitleAlreadyExists()


def ensure_not_referenced(store, *, sl_id=None, dl_id=None) -> None:
    lines = store.objects(VoucherLine)
    if sl_id is not None and lines.filter(sl_id=sl_id).exists():
        raise ReferencedByVoucherLine()
    if dl_id is not None and lines.filter(dl_id=dl_id).exists():
        raise ReferencedByVoucherLine()


# ============================================================
# LINE SHAPE
# ============================================================


def _is_amount(value) -> bool:
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and 0 <= value <= MAX_AMOUNT
    )


def validate_debit_credit(debit, credit) -> None:
    if not (_is_amount(debit) and _is_amount(credit)):
        raise DebitOrCreditInvalid()
    if not ((debit > 0 and credit == 0) or (debit == 0 and credit > 0)):
        raise DebitOrCreditInvalid()


def validate_line_count(count: int) -> None:
    if count < MIN_VOUCHER_LINES or count > MAX_VOUCHER_LINES:
        raise ItemsCountOutOfRange()


# ============================================================
# BALANCE
# ============================================================


def _amount(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise DebitOrCreditInvalid()
    return value


def validate_balanced(lines: Iterable[VoucherLineInput]) -> None:
    total_debit = 0
    total_credit = 0
    for line in lines:
        total_debit += _amount(line.debit)
        total_credit += _amount(line.credit)

    if total_debit != total_credit:
        raise DebitCreditMismatch()


def balance_delta(
    *,
    inserted: Iterable[VoucherLineInput],
    updated: Iterable[Tuple[VoucherLine, VoucherLineInput]],
    deleted: Iterable[VoucherLine],
) -> Tuple[int, int]:
    """
    Net change to (total debit, total credit).

    updated pairs are (persisted line, new values). Debit and credit are
    tracked independently, never netted against each other.
    """
    delta_debit = 0
    delta_credit = 0

    for line in inserted:
        delta_debit += _amount(line.debit)
        delta_credit += _amount(line.credit)

    for old, new in updated:
        delta_debit += _amount(new.debit) - old.debit
        delta_credit += _amount(new.credit) - old.credit

    for old in deleted:
        delta_debit -= old.debit
        delta_credit -= old.credit

    return delta_debit, delta_credit


def validate_balanced_delta(**changes) -> None:
    """A balanced voucher stays balanced iff the delta itself balances."""
    delta_debit, delta_credit = balance_delta(**changes)
    if delta_debit != delta_credit:
        raise DebitCreditMismatch()


# ============================================================
# SL / DL REFERENCES
# ============================================================


def _lookup_ids(values) -> set:
    return {v for v in values if isinstance(v, int) and not isinstance(v, bool)}


class LineReferenceValidator:
    """
    Checks the SL/DL references of voucher lines.

    SLs and DLs are fetched once per request (prefetch), then each line is
    checked in input order so the first failing line still wins.
    """

    def __init__(self, store):
        self.store = store
        self._sls: dict = {}
        self._dls: dict = {}

    def prefetch(self, lines: Sequence[VoucherLineInput]) -> "LineReferenceValidator":
        sl_ids = _lookup_ids(line.sl_id for line in lines) - self._sls.keys()
        dl_ids = _lookup_ids(line.dl_id for line in lines) - self._dls.keys()

        if sl_ids:
            self._sls.update(self.store.objects(SubsidiaryLedger).in_bulk(sl_ids))
        if dl_ids:
            self._dls.update(self.store.objects(DetailLedger).in_bulk(dl_ids))
        return self

    def subsidiary_ledger(self, sl_id) -> SubsidiaryLedger:
        sl = self._sls.get(sl_id) if _lookup_ids([sl_id]) else None
        if sl is None:
            raise SLNotFound()
        return sl

    def check(self, line: VoucherLineInput) -> None:
        sl = self.subsidiary_ledger(line.sl_id)

        if sl.requires_detail and line.dl_id is None:
            raise DLIDRequired()
        if not sl.requires_detail and line.dl_id is not None:
            raise DLNotAllowed()

        if line.dl_id is not None:
            dl = self._dls.get(line.dl_id) if _lookup_ids([line.dl_id]) else None
            if dl is None:
                raise DLNotFound()


def validate_line(line: VoucherLineInput, references: LineReferenceValidator) -> None:
    validate_debit_credit(line.debit, line.credit)
    references.check(line)
