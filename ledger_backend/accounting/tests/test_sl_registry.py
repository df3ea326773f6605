# accounting/tests/test_sl_registry.py

from __future__ import annotations

from django.test import TestCase

from accounting.models import SubsidiaryLedger
from accounting.services.exceptions import (
    CodeAlreadyExists,
    CodeEmptyOrTooLong,
    ReferencedByVoucherLine,
    SLNotFound,
    TitleAlreadyExists,
    VersionOutdated,
)
from accounting.services.requests import VoucherDeleteRequest
from accounting.services.sl_registry import SubsidiaryLedgerRegistry
from accounting.services.voucher_engine import VoucherEngine
from accounting.tests.helpers import credit, debit, make_sl, make_voucher


class SubsidiaryLedgerRegistryTests(TestCase):
    def setUp(self):
        self.registry = SubsidiaryLedgerRegistry()

    def test_create_defaults_to_no_detail(self):
        sl = self.registry.create(code="1100", title="Cash")

        self.assertFalse(sl.requires_detail)
        self.assertEqual(sl.version, 0)

    def test_create_with_detail_flag(self):
        sl = self.registry.create(code="1200", title="Receivables", requires_detail=True)
        self.assertTrue(SubsidiaryLedger.objects.get(pk=sl.pk).requires_detail)

    def test_create_validates_code_and_uniqueness(self):
        existing = make_sl()

        with self.assertRaises(CodeEmptyOrTooLong):
            self.registry.create(code="", title="x")
        with self.assertRaises(CodeAlreadyExists):
            self.registry.create(code=existing.code, title="x")
        with self.assertRaises(TitleAlreadyExists):
            self.registry.create(code="x", title=existing.title)

    def test_flag_can_flip_while_unreferenced(self):
        sl = make_sl()

        updated = self.registry.update(
            sl.id, code=sl.code, title=sl.title, requires_detail=True, version=0
        )
        self.assertTrue(updated.requires_detail)
        self.assertEqual(updated.version, 1)

        updated = self.registry.update(
            sl.id, code=sl.code, title=sl.title, requires_detail=False, version=1
        )
        self.assertFalse(updated.requires_detail)
        self.assertEqual(updated.version, 2)

    def test_update_with_outdated_version(self):
        sl = make_sl()
        with self.assertRaises(VersionOutdated):
            self.registry.update(sl.id, code="a", title="b", requires_detail=False, version=1)

    def test_update_missing_record(self):
        with self.assertRaises(SLNotFound):
            self.registry.update(999_999, code="a", title="b", requires_detail=False, version=0)

    def test_referenced_sl_cannot_be_updated(self):
        sl = make_sl()
        make_voucher([debit(sl, 10), credit(make_sl(), 10)])

        with self.assertRaises(ReferencedByVoucherLine):
            self.registry.update(sl.id, code=sl.code, title="Renamed", requires_detail=True, version=0)

        stored = SubsidiaryLedger.objects.get(pk=sl.pk)
        self.assertFalse(stored.requires_detail)
        self.assertEqual(stored.version, 0)

    def test_uniqueness_checked_before_reference_guard(self):
        sl = make_sl()
        other = make_sl()
        make_voucher([debit(sl, 10), credit(other, 10)])

        with self.assertRaises(CodeAlreadyExists):
            self.registry.update(sl.id, code=other.code, title="x", requires_detail=False, version=0)

    def test_referenced_sl_cannot_be_deleted(self):
        sl = make_sl()
        created = make_voucher([debit(sl, 10), credit(make_sl(), 10)])

        with self.assertRaises(ReferencedByVoucherLine):
            self.registry.delete(sl.id, version=0)

        VoucherEngine().delete(VoucherDeleteRequest(voucher_id=created.voucher.id, version=0))
        self.registry.delete(sl.id, version=0)
        self.assertFalse(SubsidiaryLedger.objects.filter(pk=sl.pk).exists())

    def test_delete_with_outdated_version(self):
        sl = make_sl()
        with self.assertRaises(VersionOutdated):
            self.registry.delete(sl.id, version=2)

    def test_get(self):
        sl = make_sl(requires_detail=True)
        self.assertTrue(self.registry.get(sl.id).requires_detail)
        with self.assertRaises(SLNotFound):
            self.registry.get(999_999)
