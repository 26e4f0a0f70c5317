"""Shipment DRF serializers for API input/output."""

from __future__ import annotations

from rest_framework import serializers

from modules.invoices.serializers import InvoiceSerializer
from modules.shipments.constants import Carrier, SignatureRole
from modules.shipments.models import Shipment

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreateShipmentSerializer(serializers.Serializer):
    driver_name = serializers.CharField(allow_blank=True)
    driver_tax_id = serializers.CharField(allow_blank=True)
    responsible_name = serializers.CharField(allow_blank=True)
    carrier = serializers.ChoiceField(choices=Carrier.choices)
    pallet_count = serializers.IntegerField(required=False, default=0, min_value=0)
    note = serializers.CharField(required=False, default="", allow_blank=True)
    invoice_ids = serializers.ListField(
        child=serializers.UUIDField(), required=False, default=list
    )


class UpdateShipmentSerializer(serializers.Serializer):
    driver_name = serializers.CharField(required=False, allow_blank=True)
    driver_tax_id = serializers.CharField(required=False, allow_blank=True)
    responsible_name = serializers.CharField(required=False, allow_blank=True)
    carrier = serializers.ChoiceField(choices=Carrier.choices, required=False)
    pallet_count = serializers.IntegerField(required=False, min_value=0)
    note = serializers.CharField(required=False, allow_blank=True)
    invoice_ids = serializers.ListField(child=serializers.UUIDField(), required=False)


class SignatureSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=SignatureRole.choices)
    image = serializers.CharField()


class LinkInvoicesSerializer(serializers.Serializer):
    invoice_ids = serializers.ListField(
        child=serializers.UUIDField(), allow_empty=False
    )


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class ShipmentSerializer(serializers.ModelSerializer):
    """Detail serializer with bound invoices.

    Signature images are not echoed back; ``*_signed`` flags and the
    timestamps say whether each party has signed.
    """

    invoices = InvoiceSerializer(many=True, read_only=True)
    finalized = serializers.BooleanField(read_only=True)
    driver_signed = serializers.SerializerMethodField()
    responsible_signed = serializers.SerializerMethodField()

    class Meta:
        model = Shipment
        fields = [
            "id",
            "manifest_number",
            "driver_name",
            "driver_tax_id",
            "responsible_name",
            "carrier",
            "pallet_count",
            "note",
            "status",
            "finalized",
            "finalized_at",
            "driver_signed",
            "driver_signed_at",
            "responsible_signed",
            "responsible_signed_at",
            "created_by_id",
            "created_at",
            "updated_at",
            "invoices",
        ]
        read_only_fields = fields

    def get_driver_signed(self, obj: Shipment) -> bool:
        return bool(obj.driver_signature)

    def get_responsible_signed(self, obj: Shipment) -> bool:
        return bool(obj.responsible_signature)


class ShipmentListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for lists (no nested invoices)."""

    invoice_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Shipment
        fields = [
            "id",
            "manifest_number",
            "driver_name",
            "responsible_name",
            "carrier",
            "pallet_count",
            "status",
            "finalized_at",
            "invoice_count",
            "created_at",
        ]
        read_only_fields = fields
