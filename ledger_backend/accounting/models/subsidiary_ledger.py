# accounting/models/subsidiary_ledger.py

from __future__ import annotations

from django.db import models
from django.db.models import Q

from accounting.models.detail_ledger import LEDGER_TEXT_MAX_LENGTH


class SubsidiaryLedger(models.Model):
    """
    Subsidiary Ledger (SL): a control account.

    requires_detail decides whether every voucher line posted to this SL
    must also carry a Detail Ledger. Because flipping it could invalidate
    existing lines, a referenced SL can be neither updated nor deleted.
    """

    code = models.CharField(max_length=LEDGER_TEXT_MAX_LENGTH)
    title = models.CharField(max_length=LEDGER_TEXT_MAX_LENGTH)

    requires_detail = models.BooleanField(default=False)

    version = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["id"]
        verbose_name = "Subsidiary Ledger"
        verbose_name_plural = "Subsidiary Ledgers"
        constraints = [
            models.UniqueConstraint(fields=["code"], name="uniq_sl_code"),
            models.UniqueConstraint(fields=["title"], name="uniq_sl_title"),
            models.CheckConstraint(condition=~Q(code=""), name="chk_sl_code_not_blank"),
            models.CheckConstraint(condition=~Q(title=""), name="chk_sl_title_not_blank"),
        ]

    def __str__(self):
        return f"SL {self.code} – {self.title}"
