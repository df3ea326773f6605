# accounting/tests/test_integrity_command.py

from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from accounting.models import SubsidiaryLedger, VoucherLine
from accounting.tests.helpers import credit, debit, make_sl, make_voucher


class CheckVoucherIntegrityCommandTests(TestCase):
    def setUp(self):
        self.sl1 = make_sl()
        self.sl2 = make_sl()
        self.created = make_voucher([debit(self.sl1, 40), credit(self.sl2, 40)])

    def run_command(self, *args):
        out, err = StringIO(), StringIO()
        call_command("check_voucher_integrity", *args, stdout=out, stderr=err)
        return out.getvalue(), err.getvalue()

    def test_clean_ledger_passes_strict(self):
        out, err = self.run_command("--strict")

        self.assertIn("INTEGRITY CHECK PASSED", out)
        self.assertEqual(err, "")

    def test_unbalanced_voucher_is_reported(self):
        VoucherLine.objects.filter(pk=self.created.lines[0].pk).update(debit=41)

        out, err = self.run_command()

        self.assertIn("Unbalanced vouchers: 1", err)
        self.assertIn(f"number={self.created.voucher.number}", err)

    def test_detail_rule_drift_fails_strict(self):
        SubsidiaryLedger.objects.filter(pk=self.sl1.pk).update(requires_detail=True)

        with self.assertRaises(SystemExit):
            self.run_command("--strict")

    def test_short_voucher_is_reported(self):
        VoucherLine.objects.filter(pk=self.created.lines[1].pk).delete()

        _, err = self.run_command()

        self.assertIn("lines: 1", err)
        self.assertIn("Unbalanced vouchers: 1", err)
