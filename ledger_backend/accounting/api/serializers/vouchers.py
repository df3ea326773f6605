# accounting/api/serializers/vouchers.py

"""
VOUCHER SERIALIZERS

Output (DB truth):
- VoucherSerializer: header only (result of an update)
- VoucherWithLinesSerializer: header + lines (result of create / get)

Input (command payloads):
- VoucherCreateSerializer / VoucherUpdateSerializer check JSON types only
  and build the engine request dataclasses via to_request().
  Length, count, balance and reference rules stay in the engine so the
  reported error code is always the engine's.
"""

from __future__ import annotations

from rest_framework import serializers

from accounting.models import Voucher, VoucherLine
from accounting.services.requests import (
    VoucherCreateRequest,
    VoucherDeleteRequest,
    VoucherLineInput,
    VoucherLinesDelta,
    VoucherLineUpdate,
    VoucherUpdateRequest,
)

# ============================================================
# OUTPUT
# ============================================================


class VoucherLineSerializer(serializers.ModelSerializer):
    sl_id = serializers.IntegerField(read_only=True)
    dl_id = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = VoucherLine
        fields = ("id", "sl_id", "dl_id", "debit", "credit", "version")
        read_only_fields = fields


class VoucherSerializer(serializers.ModelSerializer):
    class Meta:
        model = Voucher
        fields = ("id", "number", "version")
        read_only_fields = fields


class VoucherWithLinesSerializer(serializers.Serializer):
    """Renders accounting.services.voucher_engine.VoucherWithLines."""

    id = serializers.IntegerField(source="voucher.id", read_only=True)
    number = serializers.CharField(source="voucher.number", read_only=True)
    version = serializers.IntegerField(source="voucher.version", read_only=True)
    lines = VoucherLineSerializer(many=True, read_only=True)
    total_debit = serializers.IntegerField(read_only=True)
    total_credit = serializers.IntegerField(read_only=True)


# ============================================================
# INPUT
# ============================================================


class VoucherLineInputSerializer(serializers.Serializer):
    sl_id = serializers.IntegerField()
    dl_id = serializers.IntegerField(required=False, allow_null=True, default=None)
    debit = serializers.IntegerField(required=False, default=0)
    credit = serializers.IntegerField(required=False, default=0)


class VoucherLineUpdateInputSerializer(VoucherLineInputSerializer):
    line_id = serializers.IntegerField()


def _line_input(data: dict) -> VoucherLineInput:
    return VoucherLineInput(
        sl_id=data["sl_id"],
        dl_id=data.get("dl_id"),
        debit=data["debit"],
        credit=data["credit"],
    )


class VoucherCreateSerializer(serializers.Serializer):
    number = serializers.CharField(allow_blank=True, trim_whitespace=False)
    lines = VoucherLineInputSerializer(many=True, allow_empty=True)

    def to_request(self) -> VoucherCreateRequest:
        data = self.validated_data
        return VoucherCreateRequest.build(
            number=data["number"],
            lines=[_line_input(line) for line in data["lines"]],
        )


class VoucherLinesDeltaSerializer(serializers.Serializer):
    inserted = VoucherLineInputSerializer(many=True, required=False, default=list)
    updated = VoucherLineUpdateInputSerializer(many=True, required=False, default=list)
    deleted = serializers.ListField(
        child=serializers.IntegerField(),
        required=False,
        default=list,
    )


class VoucherUpdateSerializer(serializers.Serializer):
    voucher_id = serializers.IntegerField()
    version = serializers.IntegerField()
    number = serializers.CharField(allow_blank=True, trim_whitespace=False)
    lines = VoucherLinesDeltaSerializer(required=False)

    def to_request(self) -> VoucherUpdateRequest:
        data = self.validated_data
        lines = data.get("lines") or {}
        return VoucherUpdateRequest(
            voucher_id=data["voucher_id"],
            version=data["version"],
            number=data["number"],
            lines=VoucherLinesDelta.build(
                inserted=[_line_input(line) for line in lines.get("inserted", [])],
                updated=[
                    VoucherLineUpdate(
                        line_id=line["line_id"],
                        sl_id=line["sl_id"],
                        dl_id=line.get("dl_id"),
                        debit=line["debit"],
                        credit=line["credit"],
                    )
                    for line in lines.get("updated", [])
                ],
                deleted=lines.get("deleted", []),
            ),
        )


class VoucherDeleteSerializer(serializers.Serializer):
    voucher_id = serializers.IntegerField()
    version = serializers.IntegerField()

    def to_request(self) -> VoucherDeleteRequest:
        data = self.validated_data
        return VoucherDeleteRequest(voucher_id=data["voucher_id"], version=data["version"])
