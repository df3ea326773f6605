# accounting/api/serializers/ledgers.py

"""
LEDGER SERIALIZERS (DTO mapping)

Output shapes for DetailLedger / SubsidiaryLedger records returned by the
registries. version is exposed so callers can send it back on update/delete.
"""

from rest_framework import serializers

from accounting.models import DetailLedger, SubsidiaryLedger


class DetailLedgerSerializer(serializers.ModelSerializer):
    class Meta:
        model = DetailLedger
        fields = ("id", "code", "title", "version")
        read_only_fields = fields


class SubsidiaryLedgerSerializer(serializers.ModelSerializer):
    class Meta:
        model = SubsidiaryLedger
        fields = ("id", "code", "title", "requires_detail", "version")
        read_only_fields = fields
