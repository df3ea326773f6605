# accounting/models/detail_ledger.py

from __future__ import annotations

from django.db import models
from django.db.models import Q

LEDGER_TEXT_MAX_LENGTH = 64


class DetailLedger(models.Model):
    """
    Detail Ledger (DL): a fine-grained sub-account attached to voucher lines
    whose Subsidiary Ledger requires a detail breakdown.

    Guarantees:
    - code and title are each unique and non-blank
    - version is the optimistic-concurrency token (bumped on every update)
    - deletion is blocked while any voucher line references the record
    """

    code = models.CharField(max_length=LEDGER_TEXT_MAX_LENGTH)
    title = models.CharField(max_length=LEDGER_TEXT_MAX_LENGTH)

    version = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["id"]
        verbose_name = "Detail Ledger"
        verbose_name_plural = "Detail Ledgers"
        constraints = [
            models.UniqueConstraint(fields=["code"], name="uniq_dl_code"),
            models.UniqueConstraint(fields=["title"], name="uniq_dl_title"),
            models.CheckConstraint(condition=~Q(code=""), name="chk_dl_code_not_blank"),
            models.CheckConstraint(condition=~Q(title=""), name="chk_dl_title_not_blank"),
        ]

    def __str__(self):
        return f"DL {self.code} – {self.title}"
