# accounting/models/voucher.py

"""
======================================================
PATH: accounting/models/voucher.py
======================================================
VOUCHER MODEL

Journal entry header. Owns its lines (VoucherLine.voucher is CASCADE).

Invariants (enforced by accounting.services.voucher_engine):
- 2 <= live line count <= 500
- sum(debit) == sum(credit) across live lines
"""

from __future__ import annotations

from django.db import models
from django.db.models import Q

VOUCHER_NUMBER_MAX_LENGTH = 64


class Voucher(models.Model):
    number = models.CharField(max_length=VOUCHER_NUMBER_MAX_LENGTH)

    version = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["id"]
        verbose_name = "Voucher"
        verbose_name_plural = "Vouchers"
        constraints = [
            models.UniqueConstraint(fields=["number"], name="uniq_voucher_number"),
            models.CheckConstraint(
                condition=~Q(number=""),
                name="chk_voucher_number_not_blank",
            ),
        ]

    def __str__(self):
        return f"Voucher {self.number}"
