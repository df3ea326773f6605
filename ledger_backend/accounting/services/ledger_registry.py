# accounting/services/ledger_registry.py

"""
======================================================
PATH: accounting/services/ledger_registry.py
======================================================
LEDGER REGISTRY (shared DL / SL behaviour)

Keyed record manager for code + title ledgers:
- code/title length checks (code first)
- code/title uniqueness (code first; own id excluded on update)
- optimistic concurrency: compare-and-set on (id, version), +1 per update
- reference guard before delete (and, for SL, before update)
- hard delete

Concrete registries: accounting.services.dl_registry, accounting.services.sl_registry
"""

from __future__ import annotations

import logging

from django.db.models import F, ProtectedError
from django.utils import timezone

from accounting.services.exceptions import (
    AccountingServiceError,
    CodeEmptyOrTooLong,
    ReferencedByVoucherLine,
    TitleEmptyOrTooLong,
    VersionOutdated,
)
from accounting.services.store import LedgerStore, storage_errors
from accounting.services.validators import (
    ensure_not_referenced,
    validate_text,
    validate_unique_code_and_title,
)

logger = logging.getLogger(__name__)


def _is_id(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class LedgerRegistry:
    model = None
    label = "ledger"
    not_found_error: type[AccountingServiceError] = AccountingServiceError
    reference_field = ""
    guard_updates = False

    def __init__(self, store: LedgerStore | None = None):
        self.store = store or LedgerStore.from_settings()

    def _objects(self):
        return self.store.objects(self.model)

    def _get_or_raise(self, pk):
        record = self._objects().filter(pk=pk).first() if _is_id(pk) else None
        if record is None:
            raise self.not_found_error()
        return record

    def _ensure_not_referenced(self, record) -> None:
        ensure_not_referenced(self.store, **{self.reference_field: record.pk})

    def _reclassify_unique_race(self, *, code: str, title: str, exclude_id=None):
        def reclassify(exc):
            validate_unique_code_and_title(self._objects(), code=code, title=title, exclude_id=exclude_id)

        return reclassify

    @staticmethod
    def _reclassify_protected(exc):
        if isinstance(exc, ProtectedError):
            raise ReferencedByVoucherLine() from exc

    # --------------------------------------------------
    # OPERATIONS
    # --------------------------------------------------

    def get(self, pk):
        with storage_errors(f"reading {self.label}", record_id=pk):
            return self._get_or_raise(pk)

    def _create(self, *, code: str, title: str, **fields):
        with storage_errors(
            f"creating {self.label}",
            on_integrity_error=self._reclassify_unique_race(code=code, title=title),
            code=code,
        ):
            validate_text(code, CodeEmptyOrTooLong)
            validate_text(title, TitleEmptyOrTooLong)

            with self.store.atomic():
                validate_unique_code_and_title(self._objects(), code=code, title=title)
                record = self._objects().create(code=code, title=title, version=0, **fields)

        logger.info(
            f"{self.label} created",
            extra={"record_id": record.pk, "code": record.code},
        )
        return record

    def _update(self, pk, *, code: str, title: str, version: int, **fields):
        with storage_errors(
            f"updating {self.label}",
            on_integrity_error=self._reclassify_unique_race(code=code, title=title, exclude_id=pk),
            record_id=pk,
            expected_version=version,
        ):
            validate_text(code, CodeEmptyOrTooLong)
            validate_text(title, TitleEmptyOrTooLong)

            with self.store.atomic():
                record = self._get_or_raise(pk)
                if record.version != version:
                    raise VersionOutdated()

                validate_unique_code_and_title(
                    self._objects(), code=code, title=title, exclude_id=record.pk
                )
                if self.guard_updates:
                    self._ensure_not_referenced(record)

                changed = self._objects().filter(pk=record.pk, version=version).update(
                    code=code,
                    title=title,
                    version=F("version") + 1,
                    updated_at=timezone.now(),
                    **fields,
                )
                if changed != 1:
                    raise VersionOutdated()

                record.refresh_from_db(using=self.store.using)

        logger.info(
            f"{self.label} updated",
            extra={"record_id": record.pk, "version": record.version},
        )
        return record

    def delete(self, pk, *, version: int) -> None:
        with storage_errors(
            f"deleting {self.label}",
            on_integrity_error=self._reclassify_protected,
            record_id=pk,
            expected_version=version,
        ):
            with self.store.atomic():
                record = self._get_or_raise(pk)
                if record.version != version:
                    raise VersionOutdated()

                self._ensure_not_referenced(record)

                deleted, _ = self._objects().filter(pk=record.pk, version=version).delete()
                if not deleted:
                    raise VersionOutdated()

        logger.info(f"{self.label} deleted", extra={"record_id": pk})
