# accounting/tests/helpers.py

"""
Shared factories for accounting tests.
"""

from __future__ import annotations

import random
import string

from accounting.services.dl_registry import DetailLedgerRegistry
from accounting.services.requests import VoucherCreateRequest, VoucherLineInput
from accounting.services.sl_registry import SubsidiaryLedgerRegistry
from accounting.services.store import LedgerStore
from accounting.services.voucher_engine import VoucherEngine

_CHARSET = string.ascii_letters + string.digits


def random_string(length: int = 20) -> str:
    return "".join(random.choice(_CHARSET) for _ in range(length))


def make_dl(store: LedgerStore | None = None):
    return DetailLedgerRegistry(store).create(
        code="DL" + random_string(20),
        title="Test" + random_string(20),
    )


def make_sl(store: LedgerStore | None = None, *, requires_detail: bool = False):
    return SubsidiaryLedgerRegistry(store).create(
        code="SL" + random_string(20),
        title="Test" + random_string(20),
        requires_detail=requires_detail,
    )


def debit(sl, amount: int, dl=None) -> VoucherLineInput:
    return VoucherLineInput(
        sl_id=sl.id if hasattr(sl, "id") else sl,
        dl_id=getattr(dl, "id", dl),
        debit=amount,
        credit=0,
    )


def credit(sl, amount: int, dl=None) -> VoucherLineInput:
    return VoucherLineInput(
        sl_id=sl.id if hasattr(sl, "id") else sl,
        dl_id=getattr(dl, "id", dl),
        debit=0,
        credit=amount,
    )


def make_voucher(lines, *, number: str | None = None, store: LedgerStore | None = None):
    return VoucherEngine(store).create(
        VoucherCreateRequest.build(number=number or "V-" + random_string(12), lines=lines)
    )
