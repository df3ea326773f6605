# accounting/services/voucher_engine.py

"""
======================================================
PATH: accounting/services/voucher_engine.py
======================================================
VOUCHER ENGINE (POSTING + MUTATION)

This module is the ONLY place allowed to:
- Create / update / delete Voucher and VoucherLine rows
- Enforce debit == credit on every persisted voucher
- Enforce single-sided lines and the SL/DL detail rule
- Enforce 2..500 live lines per voucher
- Guarantee all-or-nothing application of a line delta

Every operation runs inside one transaction on the injected store:
all validation reads first, then all writes. A domain error raised
during validation unwinds the transaction before anything is written;
a storage failure rolls it back and surfaces as UnexpectedLedgerError.

Update validates a three-way delta (inserted / updated / deleted)
against the persisted lines. Because the voucher was balanced before,
requiring the delta to balance is enough; untouched lines are never
re-summed. Persisted rows read during validation are reused when the
delta is applied.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from django.db.models import F
from django.utils import timezone

from accounting.models import Voucher, VoucherLine
from accounting.services.exceptions import (
    LineNotFound,
    LineReferencedTwice,
    NumberAlreadyExists,
    NumberEmptyOrTooLong,
    VersionOutdated,
    VoucherNotFound,
)
from accounting.services.requests import (
    VoucherCreateRequest,
    VoucherDeleteRequest,
    VoucherGetRequest,
    VoucherLineInput,
    VoucherLineUpdate,
    VoucherUpdateRequest,
)
from accounting.services.store import LedgerStore, storage_errors
from accounting.services.validators import (
    LineReferenceValidator,
    validate_balanced,
    validate_balanced_delta,
    validate_line,
    validate_line_count,
    validate_text,
)

logger = logging.getLogger(__name__)


def _is_id(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class VoucherWithLines:
    voucher: Voucher
    lines: Tuple[VoucherLine, ...]

    @property
    def total_debit(self) -> int:
        return sum(line.debit for line in self.lines)

    @property
    def total_credit(self) -> int:
        return sum(line.credit for line in self.lines)


@dataclass
class _UpdatePlan:
    voucher: Voucher
    request: VoucherUpdateRequest
    updated: List[Tuple[VoucherLine, VoucherLineUpdate]] = field(default_factory=list)
    deleted: List[VoucherLine] = field(default_factory=list)


class VoucherEngine:
    def __init__(self, store: LedgerStore | None = None):
        self.store = store or LedgerStore.from_settings()

    # --------------------------------------------------
    # READ HELPERS
    # --------------------------------------------------

    def _vouchers(self):
        return self.store.objects(Voucher)

    def _lines(self):
        return self.store.objects(VoucherLine)

    def _get_voucher_or_raise(self, voucher_id) -> Voucher:
        voucher = self._vouchers().filter(pk=voucher_id).first() if _is_id(voucher_id) else None
        if voucher is None:
            raise VoucherNotFound()
        return voucher

    def _lines_of(self, voucher: Voucher) -> Tuple[VoucherLine, ...]:
        return tuple(self._lines().filter(voucher_id=voucher.pk).order_by("id"))

    def _number_taken(self, number: str, *, exclude_id=None) -> bool:
        qs = self._vouchers().filter(number=number)
        if exclude_id is not None:
            qs = qs.exclude(pk=exclude_id)
        return qs.exists()

    def _reclassify_number_race(self, number: str, *, exclude_id=None):
        def reclassify(exc):
            if isinstance(number, str) and self._number_taken(number, exclude_id=exclude_id):
                raise NumberAlreadyExists() from exc

        return reclassify

    # --------------------------------------------------
    # WRITE HELPERS
    # --------------------------------------------------

    def _insert_lines(self, voucher: Voucher, lines: Iterable[VoucherLineInput]) -> None:
        rows = [
            VoucherLine(
                voucher=voucher,
                sl_id=line.sl_id,
                dl_id=line.dl_id,
                debit=line.debit,
                credit=line.credit,
                version=0,
            )
            for line in lines
        ]
        if rows:
            self._lines().bulk_create(rows)

    # ==================================================
    # CREATE
    # ==================================================

    def create(self, request: VoucherCreateRequest) -> VoucherWithLines:
        """
        FLOW (first failing check wins):
        1) number non-empty, <= 64 chars
        2) 2 <= line count <= 500
        3) number not used yet
        4) sum(debit) == sum(credit)
        5) per line, in order: debit/credit shape, SL exists, DL rule, DL exists
        then: insert header (version 0) + all lines in one batch.
        """
        with storage_errors(
            "creating voucher",
            on_integrity_error=self._reclassify_number_race(request.number),
            number=request.number,
        ):
            with self.store.atomic():
                self._validate_create(request)

                voucher = self._vouchers().create(number=request.number, version=0)
                self._insert_lines(voucher, request.lines)
                lines = self._lines_of(voucher)

        logger.info(
            "Voucher created",
            extra={"voucher_id": voucher.pk, "number": voucher.number, "line_count": len(lines)},
        )
        return VoucherWithLines(voucher=voucher, lines=lines)

    def _validate_create(self, request: VoucherCreateRequest) -> None:
        validate_text(request.number, NumberEmptyOrTooLong)
        validate_line_count(len(request.lines))

        if self._number_taken(request.number):
            raise NumberAlreadyExists()

        validate_balanced(request.lines)

        references = LineReferenceValidator(self.store).prefetch(request.lines)
        for line in request.lines:
            validate_line(line, references)

    # ==================================================
    # UPDATE
    # ==================================================

    def update(self, request: VoucherUpdateRequest) -> Voucher:
        """
        FLOW (first failing check wins):
        1) number non-empty, <= 64 chars
        2) voucher exists
        3) version matches
        4) number not used by another voucher
        5) persisted count + inserted - deleted within 2..500
        6) inserted lines: per-line checks
        7) updated lines: line belongs to voucher, listed once, per-line checks on new values
        8) deleted ids: line belongs to voucher, listed once
        9) delta debit == delta credit
        then: delete -> insert -> update lines -> header number + version.
        """
        with storage_errors(
            "updating voucher",
            on_integrity_error=self._reclassify_number_race(request.number, exclude_id=request.voucher_id),
            voucher_id=request.voucher_id,
            expected_version=request.version,
        ):
            with self.store.atomic():
                plan = self._validate_update(request)
                voucher = self._apply_update(plan)

        logger.info(
            "Voucher updated",
            extra={
                "voucher_id": voucher.pk,
                "version": voucher.version,
                "inserted": len(request.lines.inserted),
                "updated": len(request.lines.updated),
                "deleted": len(request.lines.deleted),
            },
        )
        return voucher

    def _persisted_lines(self, voucher: Voucher, line_ids) -> dict:
        ids = {line_id for line_id in line_ids if _is_id(line_id)}
        if not ids:
            return {}
        return self._lines().filter(voucher_id=voucher.pk).in_bulk(ids)

    def _validate_update(self, request: VoucherUpdateRequest) -> _UpdatePlan:
        delta = request.lines

        validate_text(request.number, NumberEmptyOrTooLong)

        voucher = self._get_voucher_or_raise(request.voucher_id)
        if voucher.version != request.version:
            raise VersionOutdated()

        if self._number_taken(request.number, exclude_id=voucher.pk):
            raise NumberAlreadyExists()

        current_count = self._lines().filter(voucher_id=voucher.pk).count()
        validate_line_count(current_count + delta.count_change)

        references = LineReferenceValidator(self.store).prefetch(
            list(delta.inserted) + [change.as_input() for change in delta.updated]
        )
        for line in delta.inserted:
            validate_line(line, references)

        persisted = self._persisted_lines(
            voucher,
            [change.line_id for change in delta.updated] + list(delta.deleted),
        )
        plan = _UpdatePlan(voucher=voucher, request=request)
        seen = set()

        for change in delta.updated:
            old = self._claim_line(persisted, seen, change.line_id)
            validate_line(change.as_input(), references)
            plan.updated.append((old, change))

        for line_id in delta.deleted:
            plan.deleted.append(self._claim_line(persisted, seen, line_id))

        validate_balanced_delta(
            inserted=delta.inserted,
            updated=plan.updated,
            deleted=plan.deleted,
        )
        return plan

    @staticmethod
    def _claim_line(persisted: dict, seen: set, line_id) -> VoucherLine:
        line = persisted.get(line_id) if _is_id(line_id) else None
        if line is None:
            raise LineNotFound()
        if line.pk in seen:
            raise LineReferencedTwice()
        seen.add(line.pk)
        return line

    def _apply_update(self, plan: _UpdatePlan) -> Voucher:
        voucher = plan.voucher
        request = plan.request
        now = timezone.now()

        if plan.deleted:
            self._lines().filter(
                voucher_id=voucher.pk,
                pk__in=[line.pk for line in plan.deleted],
            ).delete()

        self._insert_lines(voucher, request.lines.inserted)

        for old, change in plan.updated:
            self._lines().filter(pk=old.pk, voucher_id=voucher.pk).update(
                sl_id=change.sl_id,
                dl_id=change.dl_id,
                debit=change.debit,
                credit=change.credit,
                version=F("version") + 1,
                updated_at=now,
            )

        changed = self._vouchers().filter(pk=voucher.pk, version=request.version).update(
            number=request.number,
            version=F("version") + 1,
            updated_at=now,
        )
        if changed != 1:
            raise VersionOutdated()

        voucher.refresh_from_db(using=self.store.using)
        return voucher

    # ==================================================
    # DELETE
    # ==================================================

    def delete(self, request: VoucherDeleteRequest) -> None:
        with storage_errors(
            "deleting voucher",
            voucher_id=request.voucher_id,
            expected_version=request.version,
        ):
            with self.store.atomic():
                voucher = self._get_voucher_or_raise(request.voucher_id)
                if voucher.version != request.version:
                    raise VersionOutdated()

                # lines cascade with the header
                deleted, _ = self._vouchers().filter(pk=voucher.pk, version=request.version).delete()
                if not deleted:
                    raise VersionOutdated()

        logger.info("Voucher deleted", extra={"voucher_id": request.voucher_id})

    # ==================================================
    # GET
    # ==================================================

    def get(self, request: VoucherGetRequest) -> VoucherWithLines:
        with storage_errors("reading voucher", voucher_id=request.voucher_id):
            with self.store.atomic():
                voucher = self._get_voucher_or_raise(request.voucher_id)
                lines = self._lines_of(voucher)

        return VoucherWithLines(voucher=voucher, lines=lines)
