# accounting/services/dl_registry.py

"""
DETAIL LEDGER REGISTRY

create / update / delete / get for DetailLedger.
Deletion is blocked while any voucher line references the DL;
renaming a referenced DL is allowed.
"""

from __future__ import annotations

from accounting.models import DetailLedger
from accounting.services.exceptions import DLNotFound
from accounting.services.ledger_registry import LedgerRegistry


class DetailLedgerRegistry(LedgerRegistry):
    model = DetailLedger
    label = "detail ledger"
    not_found_error = DLNotFound
    reference_field = "dl_id"

    def create(self, *, code: str, title: str) -> DetailLedger:
        return self._create(code=code, title=title)

    def update(self, dl_id: int, *, code: str, title: str, version: int) -> DetailLedger:
        return self._update(dl_id, code=code, title=title, version=version)
