# accounting/services/sl_registry.py

"""
SUBSIDIARY LEDGER REGISTRY

create / update / delete / get for SubsidiaryLedger.

A referenced SL can be neither updated nor deleted: flipping
requires_detail would silently invalidate the DL rule on existing lines.
"""

from __future__ import annotations

from accounting.models import SubsidiaryLedger
from accounting.services.exceptions import SLNotFound
from accounting.services.ledger_registry import LedgerRegistry


class SubsidiaryLedgerRegistry(LedgerRegistry):
    model = SubsidiaryLedger
    label = "subsidiary ledger"
    not_found_error = SLNotFound
    reference_field = "sl_id"
    guard_updates = True

    def create(self, *, code: str, title: str, requires_detail: bool = False) -> SubsidiaryLedger:
        return self._create(code=code, title=title, requires_detail=bool(requires_detail))

    def update(
        self,
        sl_id: int,
        *,
        code: str,
        title: str,
        requires_detail: bool,
        version: int,
    ) -> SubsidiaryLedger:
        return self._update(
            sl_id,
            code=code,
            title=title,
            version=version,
            requires_detail=bool(requires_detail),
        )
