"""Invoice DRF serializers for API input/output.

Input serializers only check the request shape; business validation
(money parsing, duplicates, binding rules) happens in the service.
"""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from modules.invoices.models import Invoice

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class MoneyInputField(serializers.Field):
    """JSON numbers stay numeric; strings go to the registry untouched.

    A BRL string such as ``"12.500"`` uses the dot as a thousands
    separator, so numbers must not be stringified before parsing.
    """

    default_error_messages = {"invalid": "Expected a number or a string."}

    def to_internal_value(self, data):
        if isinstance(data, bool):
            self.fail("invalid")
        if isinstance(data, (int, float)):
            return Decimal(str(data))
        if isinstance(data, str):
            return data
        self.fail("invalid")

    def to_representation(self, value):
        return str(value)


class CreateInvoiceSerializer(serializers.Serializer):
    code = serializers.CharField(allow_blank=True)
    number = serializers.CharField(allow_blank=True)
    value = MoneyInputField(required=False, allow_null=True)
    volumes = serializers.IntegerField(required=False, default=0, min_value=0)


class CreateInvoiceBatchSerializer(serializers.Serializer):
    items = CreateInvoiceSerializer(many=True, allow_empty=False)


class BindInvoiceSerializer(serializers.Serializer):
    shipment_id = serializers.UUIDField()


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class InvoiceSerializer(serializers.ModelSerializer):
    shipment_manifest_number = serializers.IntegerField(
        source="shipment.manifest_number", read_only=True, default=None
    )
    is_bound = serializers.BooleanField(read_only=True)

    class Meta:
        model = Invoice
        fields = [
            "id",
            "code",
            "number",
            "value",
            "volumes",
            "shipment_id",
            "shipment_manifest_number",
            "is_bound",
            "created_by_id",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
