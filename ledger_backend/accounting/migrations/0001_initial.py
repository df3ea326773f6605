"""
======================================================
PATH: accounting/migrations/0001_initial.py
======================================================
MIGRATION: LEDGER CORE TABLES

Creates DetailLedger, SubsidiaryLedger, Voucher and VoucherLine with the
uniqueness and single-sided line constraints.
"""

from __future__ import annotations

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="DetailLedger",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=64)),
                ("title", models.CharField(max_length=64)),
                ("version", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Detail Ledger",
                "verbose_name_plural": "Detail Ledgers",
                "ordering": ["id"],
                "constraints": [
                    models.UniqueConstraint(fields=("code",), name="uniq_dl_code"),
                    models.UniqueConstraint(fields=("title",), name="uniq_dl_title"),
                    models.CheckConstraint(condition=models.Q(("code", ""), _negated=True), name="chk_dl_code_not_blank"),
                    models.CheckConstraint(condition=models.Q(("title", ""), _negated=True), name="chk_dl_title_not_blank"),
                ],
            },
        ),
        migrations.CreateModel(
            name="SubsidiaryLedger",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=64)),
                ("title", models.CharField(max_length=64)),
                ("requires_detail", models.BooleanField(default=False)),
                ("version", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Subsidiary Ledger",
                "verbose_name_plural": "Subsidiary Ledgers",
                "ordering": ["id"],
                "constraints": [
                    models.UniqueConstraint(fields=("code",), name="uniq_sl_code"),
                    models.UniqueConstraint(fields=("title",), name="uniq_sl_title"),
                    models.CheckConstraint(condition=models.Q(("code", ""), _negated=True), name="chk_sl_code_not_blank"),
                    models.CheckConstraint(condition=models.Q(("title", ""), _negated=True), name="chk_sl_title_not_blank"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Voucher",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("number", models.CharField(max_length=64)),
                ("version", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Voucher",
                "verbose_name_plural": "Vouchers",
                "ordering": ["id"],
                "constraints": [
                    models.UniqueConstraint(fields=("number",), name="uniq_voucher_number"),
                    models.CheckConstraint(
                        condition=models.Q(("number", ""), _negated=True),
                        name="chk_voucher_number_not_blank",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="VoucherLine",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("debit", models.PositiveBigIntegerField(default=0)),
                ("credit", models.PositiveBigIntegerField(default=0)),
                ("version", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "voucher",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="lines",
                        to="accounting.voucher",
                    ),
                ),
                (
                    "sl",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="voucher_lines",
                        to="accounting.subsidiaryledger",
                    ),
                ),
                (
                    "dl",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="voucher_lines",
                        to="accounting.detailledger",
                    ),
                ),
            ],
            options={
                "verbose_name": "Voucher Line",
                "verbose_name_plural": "Voucher Lines",
                "ordering": ["id"],
                "indexes": [
                    models.Index(fields=["voucher"], name="idx_voucher_line_voucher"),
                    models.Index(fields=["sl"], name="idx_voucher_line_sl"),
                    models.Index(fields=["dl"], name="idx_voucher_line_dl"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("credit", 0), ("debit__gt", 0)),
                            models.Q(("credit__gt", 0), ("debit", 0)),
                            _connector="OR",
                        ),
                        name="chk_voucher_line_single_sided",
                    ),
                ],
            },
        ),
    ]
