# accounting/api/serializers/__init__.py

from accounting.api.serializers.ledgers import (
    DetailLedgerSerializer,
    SubsidiaryLedgerSerializer,
)
from accounting.api.serializers.vouchers import (
    VoucherCreateSerializer,
    VoucherDeleteSerializer,
    VoucherLineSerializer,
    VoucherSerializer,
    VoucherUpdateSerializer,
    VoucherWithLinesSerializer,
)

__all__ = [
    "DetailLedgerSerializer",
    "SubsidiaryLedgerSerializer",
    "VoucherLineSerializer",
    "VoucherSerializer",
    "VoucherWithLinesSerializer",
    "VoucherCreateSerializer",
    "VoucherUpdateSerializer",
    "VoucherDeleteSerializer",
]
