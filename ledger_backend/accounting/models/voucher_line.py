# accounting/models/voucher_line.py

"""
======================================================
PATH: accounting/models/voucher_line.py
======================================================
VOUCHER LINE MODEL

One debit-or-credit entry inside a voucher.

Guarantees:
- Exactly one of debit/credit is strictly positive (DB check constraint)
- SL and DL references are PROTECT: a referenced ledger cannot be deleted
- dl is nullable; whether it must be set depends on sl.requires_detail
"""

from __future__ import annotations

from django.db import models
from django.db.models import Q

from accounting.models.detail_ledger import DetailLedger
from accounting.models.subsidiary_ledger import SubsidiaryLedger
from accounting.models.voucher import Voucher


class VoucherLine(models.Model):
    voucher = models.ForeignKey(
        Voucher,
        on_delete=models.CASCADE,
        related_name="lines",
    )

    sl = models.ForeignKey(
        SubsidiaryLedger,
        on_delete=models.PROTECT,
        related_name="voucher_lines",
    )

    dl = models.ForeignKey(
        DetailLedger,
        on_delete=models.PROTECT,
        related_name="voucher_lines",
        null=True,
        blank=True,
    )

    debit = models.PositiveBigIntegerField(default=0)
    credit = models.PositiveBigIntegerField(default=0)

    version = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["id"]
        verbose_name = "Voucher Line"
        verbose_name_plural = "Voucher Lines"
        indexes = [
            models.Index(fields=["voucher"], name="idx_voucher_line_voucher"),
            models.Index(fields=["sl"], name="idx_voucher_line_sl"),
            models.Index(fields=["dl"], name="idx_voucher_line_dl"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(Q(debit__gt=0) & Q(credit=0)) | (Q(debit=0) & Q(credit__gt=0)),
                name="chk_voucher_line_single_sided",
            ),
        ]

    def __str__(self):
        side = f"Dr {self.debit}" if self.debit else f"Cr {self.credit}"
        return f"{side} → SL {self.sl_id}"
