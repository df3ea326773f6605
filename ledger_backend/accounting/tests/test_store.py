# accounting/tests/test_store.py

from unittest import mock

from django.db import DatabaseError, IntegrityError
from django.test import SimpleTestCase, TestCase, override_settings

from accounting.models import DetailLedger
from accounting.services.exceptions import (
    CodeAlreadyExists,
    NumberAlreadyExists,
    UnexpectedLedgerError,
    VersionOutdated,
)
from accounting.services.store import LedgerStore, storage_errors


class LedgerStoreTests(TestCase):
    @override_settings(LEDGER_STATEMENT_TIMEOUT_MS=1500)
    def test_from_settings_reads_timeout(self):
        store = LedgerStore.from_settings()
        self.assertEqual(store.using, "default")
        self.assertEqual(store.statement_timeout_ms, 1500)

    @override_settings(LEDGER_STATEMENT_TIMEOUT_MS=0)
    def test_zero_timeout_means_no_deadline(self):
        self.assertIsNone(LedgerStore.from_settings().statement_timeout_ms)

    def test_with_timeout_keeps_alias(self):
        store = LedgerStore("default").with_timeout(250)
        self.assertEqual(store.using, "default")
        self.assertEqual(store.statement_timeout_ms, 250)

    def test_objects_are_bound_to_alias(self):
        manager = LedgerStore("default").objects(DetailLedger)
        self.assertEqual(manager.db, "default")

    def test_atomic_rolls_back_on_error(self):
        store = LedgerStore("default")

        with self.assertRaises(RuntimeError):
            with store.atomic():
                store.objects(DetailLedger).create(code="tx", title="tx")
                raise RuntimeError("abort")

        self.assertFalse(DetailLedger.objects.filter(code="tx").exists())

    def test_timeout_is_skipped_on_non_postgres_backends(self):
        store = LedgerStore("default", statement_timeout_ms=250)
        with store.atomic():
            store.objects(DetailLedger).create(code="sqlite", title="sqlite")
        self.assertTrue(DetailLedger.objects.filter(code="sqlite").exists())

    def test_timeout_is_set_locally_on_postgres(self):
        store = LedgerStore("default", statement_timeout_ms=250)

        with mock.patch("accounting.services.store.connections") as connections:
            connection = connections.__getitem__.return_value
            connection.vendor = "postgresql"

            with store.atomic():
                pass

        cursor = connection.cursor.return_value.__enter__.return_value
        cursor.execute.assert_called_once_with("SET LOCAL statement_timeout = 250")


class StorageErrorsTests(SimpleTestCase):
    def test_domain_errors_pass_through(self):
        with self.assertLogs("accounting.services.store", level="INFO") as logs:
            with self.assertRaises(VersionOutdated):
                with storage_errors("testing", record_id=1):
                    raise VersionOutdated()

        self.assertIn("Rejected while testing", logs.output[0])

    def test_database_error_becomes_unexpected(self):
        with self.assertLogs("accounting.services.store", level="ERROR"):
            with self.assertRaises(UnexpectedLedgerError) as ctx:
                with storage_errors("testing"):
                    raise DatabaseError("server closed the connection")

        self.assertEqual(str(ctx.exception), "Something went wrong")
        self.assertIn("server closed", str(ctx.exception.__cause__))

    def test_integrity_error_can_be_reclassified(self):
        def reclassify(exc):
            raise NumberAlreadyExists() from exc

        with self.assertLogs("accounting.services.store", level="INFO") as logs:
            with self.assertRaises(NumberAlreadyExists):
                with storage_errors("testing", on_integrity_error=reclassify):
                    raise IntegrityError("UNIQUE constraint failed")

        self.assertEqual(len(logs.records), 1)
        self.assertIn("Rejected while testing", logs.output[0])
        self.assertEqual(logs.records[0].error_code, "NumberAlreadyExists")

    def test_unclassified_integrity_error_is_unexpected(self):
        with self.assertLogs("accounting.services.store", level="ERROR"):
            with self.assertRaises(UnexpectedLedgerError):
                with storage_errors("testing", on_integrity_error=lambda exc: None):
                    raise IntegrityError("CHECK constraint failed")

    def test_failing_reclassification_is_unexpected(self):
        def reclassify(exc):
            raise DatabaseError("probe failed")

        with self.assertLogs("accounting.services.store", level="ERROR"):
            with self.assertRaises(UnexpectedLedgerError):
                with storage_errors("testing", on_integrity_error=reclassify):
                    raise IntegrityError("UNIQUE constraint failed")


class ErrorPayloadTests(SimpleTestCase):
    def test_as_dict(self):
        self.assertEqual(
            CodeAlreadyExists().as_dict(),
            {"kind": "conflict", "code": "CodeAlreadyExists", "detail": "code should be unique"},
        )
        self.assertEqual(UnexpectedLedgerError().as_dict()["kind"], "unexpected")
