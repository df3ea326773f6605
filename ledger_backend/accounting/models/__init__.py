# accounting/models/__init__.py

"""
ACCOUNTING MODELS PACKAGE EXPORTS

Note:
- Keep this file *imports-only* (no business logic).
- Do NOT import services from models anywhere (models must stay pure).
"""

from accounting.models.detail_ledger import DetailLedger
from accounting.models.subsidiary_ledger import SubsidiaryLedger
from accounting.models.voucher import Voucher
from accounting.models.voucher_line import VoucherLine

__all__ = [
    "DetailLedger",
    "SubsidiaryLedger",
    "Voucher",
    "VoucherLine",
]
