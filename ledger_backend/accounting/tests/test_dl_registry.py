# accounting/tests/test_dl_registry.py

from __future__ import annotations

from unittest import mock

from django.db import DatabaseError
from django.test import TestCase

from accounting.models import DetailLedger
from accounting.services.dl_registry import DetailLedgerRegistry
from accounting.services.exceptions import (
    CodeAlreadyExists,
    CodeEmptyOrTooLong,
    DLNotFound,
    ReferencedByVoucherLine,
    TitleAlreadyExists,
    TitleEmptyOrTooLong,
    UnexpectedLedgerError,
    VersionOutdated,
)
from accounting.services.requests import VoucherDeleteRequest
from accounting.services.voucher_engine import VoucherEngine
from accounting.tests.helpers import credit, debit, make_dl, make_sl, make_voucher, random_string


class DetailLedgerCreateTests(TestCase):
    def setUp(self):
        self.registry = DetailLedgerRegistry()

    def test_create_succeeds_with_valid_request(self):
        dl = self.registry.create(code="DL-100", title="Branch North")

        self.assertEqual(dl.code, "DL-100")
        self.assertEqual(dl.title, "Branch North")
        self.assertEqual(dl.version, 0)
        self.assertTrue(DetailLedger.objects.filter(pk=dl.pk).exists())

    def test_create_accepts_64_characters(self):
        dl = self.registry.create(code="c" * 64, title="t" * 64)
        self.assertEqual(len(dl.code), 64)

    def test_empty_code_rejected(self):
        with self.assertRaises(CodeEmptyOrTooLong):
            self.registry.create(code="", title="Title")

    def test_too_long_code_rejected(self):
        with self.assertRaises(CodeEmptyOrTooLong):
            self.registry.create(code=random_string(65), title="Title")

    def test_empty_title_rejected(self):
        with self.assertRaises(TitleEmptyOrTooLong):
            self.registry.create(code="DL-1", title="")

    def test_too_long_title_rejected(self):
        with self.assertRaises(TitleEmptyOrTooLong):
            self.registry.create(code="DL-1", title=random_string(65))

    def test_code_checked_before_title(self):
        with self.assertRaises(CodeEmptyOrTooLong):
            self.registry.create(code="", title="")

    def test_existing_code_rejected(self):
        existing = make_dl()
        with self.assertRaises(CodeAlreadyExists):
            self.registry.create(code=existing.code, title="Fresh title")

    def test_existing_title_rejected(self):
        existing = make_dl()
        with self.assertRaises(TitleAlreadyExists):
            self.registry.create(code="fresh-code", title=existing.title)

    def test_code_clash_reported_before_title_clash(self):
        first = make_dl()
        second = make_dl()
        with self.assertRaises(CodeAlreadyExists):
            self.registry.create(code=second.code, title=first.title)

    def test_unique_race_at_insert_is_reported_as_conflict(self):
        existing = make_dl()

        from accounting.services import ledger_registry

        real_check = ledger_registry.validate_unique_code_and_title
        calls = []

        def blind_first_check(*args, **kwargs):
            calls.append(kwargs)
            if len(calls) == 1:
                return None
            return real_check(*args, **kwargs)

        with mock.patch.object(ledger_registry, "validate_unique_code_and_title", side_effect=blind_first_check):
            with self.assertRaises(CodeAlreadyExists):
                self.registry.create(code=existing.code, title="Another title")

        self.assertEqual(DetailLedger.objects.filter(code=existing.code).count(), 1)


class DetailLedgerUpdateTests(TestCase):
    def setUp(self):
        self.registry = DetailLedgerRegistry()
        self.dl = make_dl()

    def test_update_succeeds_and_bumps_version(self):
        updated = self.registry.update(self.dl.id, code="NEW", title="New title", version=0)

        self.assertEqual(updated.code, "NEW")
        self.assertEqual(updated.title, "New title")
        self.assertEqual(updated.version, 1)

        stored = DetailLedger.objects.get(pk=self.dl.pk)
        self.assertEqual(stored.version, 1)

    def test_reusing_pre_increment_version_is_outdated(self):
        self.registry.update(self.dl.id, code="A", title="A", version=0)
        with self.assertRaises(VersionOutdated):
            self.registry.update(self.dl.id, code="B", title="B", version=0)

        self.assertEqual(DetailLedger.objects.get(pk=self.dl.pk).code, "A")

    def test_update_keeps_own_code_and_title(self):
        updated = self.registry.update(self.dl.id, code=self.dl.code, title=self.dl.title, version=0)
        self.assertEqual(updated.version, 1)

    def test_update_to_other_records_code_rejected(self):
        other = make_dl()
        with self.assertRaises(CodeAlreadyExists):
            self.registry.update(self.dl.id, code=other.code, title="whatever", version=0)

    def test_update_to_other_records_title_rejected(self):
        other = make_dl()
        with self.assertRaises(TitleAlreadyExists):
            self.registry.update(self.dl.id, code="whatever", title=other.title, version=0)

    def test_update_missing_record(self):
        with self.assertRaises(DLNotFound):
            self.registry.update(999_999, code="X", title="X", version=0)

    def test_update_validates_lengths_first(self):
        with self.assertRaises(CodeEmptyOrTooLong):
            self.registry.update(999_999, code="", title="X", version=0)
        with self.assertRaises(TitleEmptyOrTooLong):
            self.registry.update(self.dl.id, code="X", title=random_string(65), version=0)

    def test_referenced_dl_can_be_renamed(self):
        sl = make_sl(requires_detail=True)
        other = make_sl()
        make_voucher([debit(sl, 10, dl=self.dl), credit(other, 10)])

        updated = self.registry.update(self.dl.id, code="RENAMED", title="Renamed", version=0)
        self.assertEqual(updated.code, "RENAMED")


class DetailLedgerDeleteAndGetTests(TestCase):
    def setUp(self):
        self.registry = DetailLedgerRegistry()
        self.dl = make_dl()

    def test_delete_succeeds(self):
        self.registry.delete(self.dl.id, version=0)
        self.assertFalse(DetailLedger.objects.filter(pk=self.dl.pk).exists())

    def test_delete_missing_record(self):
        with self.assertRaises(DLNotFound):
            self.registry.delete(999_999, version=0)

    def test_delete_with_outdated_version(self):
        with self.assertRaises(VersionOutdated):
            self.registry.delete(self.dl.id, version=3)
        self.assertTrue(DetailLedger.objects.filter(pk=self.dl.pk).exists())

    def test_referenced_dl_cannot_be_deleted_until_voucher_is_gone(self):
        sl = make_sl(requires_detail=True)
        other = make_sl()
        created = make_voucher([debit(sl, 10, dl=self.dl), credit(other, 10)])

        with self.assertRaises(ReferencedByVoucherLine):
            self.registry.delete(self.dl.id, version=0)

        VoucherEngine().delete(VoucherDeleteRequest(voucher_id=created.voucher.id, version=0))

        self.registry.delete(self.dl.id, version=0)
        self.assertFalse(DetailLedger.objects.filter(pk=self.dl.pk).exists())

    def test_failing_reference_probe_is_unexpected_not_success(self):
        with mock.patch(
            "accounting.services.ledger_registry.ensure_not_referenced",
            side_effect=DatabaseError("connection reset"),
        ):
            with self.assertRaises(UnexpectedLedgerError) as ctx:
                self.registry.delete(self.dl.id, version=0)

        self.assertEqual(str(ctx.exception), "Something went wrong")
        self.assertTrue(DetailLedger.objects.filter(pk=self.dl.pk).exists())

    def test_get_returns_record(self):
        fetched = self.registry.get(self.dl.id)
        self.assertEqual(fetched.pk, self.dl.pk)
        self.assertEqual(fetched.code, self.dl.code)

    def test_get_missing_record(self):
        with self.assertRaises(DLNotFound):
            self.registry.get(999_999)

    def test_get_with_non_integer_id(self):
        with self.assertRaises(DLNotFound):
            self.registry.get("abc")
