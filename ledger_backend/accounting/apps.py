# accounting/apps.py

"""
ACCOUNTING APP CONFIG

Double-entry ledger core:
- Detail / Subsidiary Ledger registries
- Voucher posting and mutation engine
"""

from django.apps import AppConfig


class AccountingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "accounting"
    verbose_name = "Accounting Ledgers"
