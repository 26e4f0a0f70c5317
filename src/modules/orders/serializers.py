"""Order workflow DRF serializers for API input/output."""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.constants import (
    InconsistencyReason,
    ReviewStage,
    ValidationOutcome,
)
from modules.orders.models import Order, OrderReview

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreateOrderSerializer(serializers.Serializer):
    order_number = serializers.CharField(allow_blank=True)
    shipment_id = serializers.UUIDField(required=False, allow_null=True)
    separator_id = serializers.UUIDField(required=False, allow_null=True)


class AssignSeparatorSerializer(serializers.Serializer):
    separator_id = serializers.UUIDField()


class ReviewFindingsSerializer(serializers.Serializer):
    """Shared by conference and audit submissions."""

    fully_picked = serializers.BooleanField(required=False, default=False)
    has_inconsistency = serializers.BooleanField(required=False, default=False)
    reasons = serializers.ListField(
        child=serializers.ChoiceField(choices=InconsistencyReason.choices),
        required=False,
        default=list,
    )
    notes = serializers.CharField(required=False, default="", allow_blank=True)


class ValidateReviewSerializer(serializers.Serializer):
    outcome = serializers.ChoiceField(choices=ValidationOutcome.choices)


class ConferenceReportQuerySerializer(serializers.Serializer):
    """Query string of the conference report; every filter is optional."""

    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    stage = serializers.ChoiceField(
        choices=[
            choice
            for choice in ReviewStage.choices
            if choice[0] != ReviewStage.UNREVIEWED
        ],
        required=False,
    )
    conferer = serializers.UUIDField(required=False, source="conferer_id")

    def validate(self, attrs):
        start, end = attrs.get("start_date"), attrs.get("end_date")
        if start and end and start > end:
            raise serializers.ValidationError(
                {"end_date": "end_date must not be before start_date."}
            )
        return attrs


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderReviewSerializer(serializers.ModelSerializer):
    order_number = serializers.CharField(source="order.order_number", read_only=True)

    class Meta:
        model = OrderReview
        fields = [
            "id",
            "order_id",
            "order_number",
            "stage",
            "validation_status",
            "separator_id",
            "conferer_id",
            "auditor_id",
            "validator_id",
            "fully_picked",
            "has_inconsistency",
            "inconsistency_reasons",
            "notes",
            "conference_performed",
            "conferred_at",
            "audit_performed",
            "audited_at",
            "audit_has_error",
            "audit_notes",
            "validated_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    stage = serializers.CharField(read_only=True)
    separator_name = serializers.CharField(
        source="separator.username", read_only=True, default=None
    )
    review_id = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "shipment_id",
            "separator_id",
            "separator_name",
            "stage",
            "review_id",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_review_id(self, obj: Order) -> str | None:
        review = getattr(obj, "review", None)
        return str(review.id) if review is not None else None


class ConferenceReportRowSerializer(serializers.ModelSerializer):
    order_number = serializers.CharField(source="order.order_number", read_only=True)
    shipment_id = serializers.UUIDField(source="order.shipment_id", read_only=True)
    separator_name = serializers.CharField(
        source="separator.username", read_only=True, default=None
    )
    conferer_name = serializers.CharField(
        source="conferer.username", read_only=True, default=None
    )

    class Meta:
        model = OrderReview
        fields = [
            "id",
            "order_id",
            "order_number",
            "shipment_id",
            "stage",
            "validation_status",
            "separator_name",
            "conferer_name",
            "conferred_at",
            "has_inconsistency",
            "inconsistency_reasons",
            "notes",
            "audit_has_error",
            "audit_notes",
        ]
        read_only_fields = fields
