# accounting/management/commands/check_voucher_integrity.py

from __future__ import annotations

from django.core.management.base import BaseCommand
from django.db import DEFAULT_DB_ALIAS
from django.db.models import Count, F, Q, Sum

from accounting.models import Voucher, VoucherLine
from accounting.services.validators import MAX_VOUCHER_LINES, MIN_VOUCHER_LINES

SAMPLE_SIZE = 10


class Command(BaseCommand):
    help = "Verify persisted vouchers: balance, line count, single-sided lines and the SL/DL detail rule."

    def add_arguments(self, parser):
        parser.add_argument(
            "--database",
            default=DEFAULT_DB_ALIAS,
            help="Database alias to inspect (default: %(default)s)",
        )
        parser.add_argument(
            "--strict",
            action="store_true",
            help="Fail (non-zero exit) if any error is found.",
        )

    def handle(self, *args, **options):
        using = options.get("database") or DEFAULT_DB_ALIAS
        strict = bool(options.get("strict"))

        vouchers = Voucher.objects.using(using).annotate(
            total_debit=Sum("lines__debit", default=0),
            total_credit=Sum("lines__credit", default=0),
            line_count=Count("lines"),
        )
        lines = VoucherLine.objects.using(using)

        self.stdout.write(self.style.MIGRATE_HEADING("Voucher integrity check"))
        self.stdout.write(f"Vouchers: {vouchers.count()}")
        self.stdout.write(f"Lines:    {lines.count()}")
        self.stdout.write("")

        errors = 0

        # -----------------------------
        # 1) Debit == credit per voucher
        # -----------------------------
        unbalanced = list(
            vouchers.exclude(total_debit=F("total_credit")).values_list(
                "number", "total_debit", "total_credit"
            )
        )
        if unbalanced:
            errors += len(unbalanced)
            self.stderr.write(self.style.ERROR(f"[FAIL] Unbalanced vouchers: {len(unbalanced)}"))
            for number, dr, cr in unbalanced[:SAMPLE_SIZE]:
                self.stderr.write(f"  number={number} debit={dr} credit={cr}")
        else:
            self.stdout.write(self.style.SUCCESS("[OK] Every voucher is balanced"))

        # -----------------------------
        # 2) Line count range
        # -----------------------------
        out_of_range = list(
            vouchers.filter(
                Q(line_count__lt=MIN_VOUCHER_LINES) | Q(line_count__gt=MAX_VOUCHER_LINES)
            ).values_list("number", "line_count")
        )
        if out_of_range:
            errors += len(out_of_range)
            self.stderr.write(
                self.style.ERROR(
                    f"[FAIL] Vouchers outside {MIN_VOUCHER_LINES}..{MAX_VOUCHER_LINES} lines: {len(out_of_range)}"
                )
            )
            for number, count in out_of_range[:SAMPLE_SIZE]:
                self.stderr.write(f"  number={number} lines={count}")
        else:
            self.stdout.write(self.style.SUCCESS("[OK] Line counts within range"))

        # -----------------------------
        # 3) Single-sided lines
        # -----------------------------
        single_sided = (Q(debit__gt=0) & Q(credit=0)) | (Q(debit=0) & Q(credit__gt=0))
        bad_sides = list(lines.exclude(single_sided).values_list("id", flat=True)[:SAMPLE_SIZE])
        if bad_sides:
            errors += lines.exclude(single_sided).count()
            self.stderr.write(self.style.ERROR("[FAIL] Lines with invalid debit/credit shape"))
            self.stderr.write("  Example IDs: " + ", ".join(str(pk) for pk in bad_sides))
        else:
            self.stdout.write(self.style.SUCCESS("[OK] Every line is single-sided"))

        # -----------------------------
        # 4) SL/DL detail rule
        # -----------------------------
        detail_mismatch = lines.filter(
            Q(sl__requires_detail=True, dl__isnull=True)
            | Q(sl__requires_detail=False, dl__isnull=False)
        )
        bad_details = list(detail_mismatch.values_list("id", flat=True)[:SAMPLE_SIZE])
        if bad_details:
            errors += detail_mismatch.count()
            self.stderr.write(self.style.ERROR("[FAIL] Lines violating the SL detail requirement"))
            self.stderr.write("  Example IDs: " + ", ".join(str(pk) for pk in bad_details))
        else:
            self.stdout.write(self.style.SUCCESS("[OK] DL present exactly where the SL requires it"))

        self.stdout.write("")
        if errors == 0:
            self.stdout.write(self.style.SUCCESS("✅ INTEGRITY CHECK PASSED"))
        else:
            self.stderr.write(self.style.ERROR(f"❌ INTEGRITY CHECK FOUND ISSUES: {errors} problem(s)"))

        return self._exit(strict and errors > 0)

    def _exit(self, fail: bool):
        if fail:
            raise SystemExit(1)
        return None
