"""Driver DRF serializers for API input/output."""

from __future__ import annotations

from rest_framework import serializers

from modules.drivers.models import Driver
from modules.shipments.constants import Carrier


class CreateDriverSerializer(serializers.Serializer):
    name = serializers.CharField(allow_blank=True)
    tax_id = serializers.CharField(allow_blank=True)
    license_number = serializers.CharField(allow_blank=True)
    carrier = serializers.ChoiceField(choices=Carrier.choices)
    phone = serializers.CharField(required=False, default="", allow_blank=True)


class UpdateDriverSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, allow_blank=True)
    tax_id = serializers.CharField(required=False, allow_blank=True)
    license_number = serializers.CharField(required=False, allow_blank=True)
    carrier = serializers.ChoiceField(choices=Carrier.choices, required=False)
    phone = serializers.CharField(required=False, allow_blank=True)


class DriverSerializer(serializers.ModelSerializer):
    carrier_label = serializers.CharField(
        source="get_carrier_display", read_only=True
    )

    class Meta:
        model = Driver
        fields = [
            "id",
            "name",
            "tax_id",
            "license_number",
            "phone",
            "carrier",
            "carrier_label",
            "created_at",
        ]
        read_only_fields = fields
