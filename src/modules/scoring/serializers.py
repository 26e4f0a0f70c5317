from __future__ import annotations

from rest_framework import serializers

from modules.scoring.models import ScoringEvent, UserScore


class UserScoreSerializer(serializers.ModelSerializer):
    username = serializers.CharField(source="user.username", read_only=True)
    role = serializers.CharField(source="user.role", read_only=True)

    class Meta:
        model = UserScore
        fields = [
            "rank",
            "user_id",
            "username",
            "role",
            "total",
            "correct_count",
            "incorrect_count",
            "updated_at",
        ]
        read_only_fields = fields


class ScoringEventSerializer(serializers.ModelSerializer):
    username = serializers.CharField(source="user.username", read_only=True)
    order_number = serializers.CharField(
        source="order.order_number", read_only=True, default=None
    )

    class Meta:
        model = ScoringEvent
        fields = [
            "id",
            "user_id",
            "username",
            "order_id",
            "order_number",
            "action",
            "points",
            "description",
            "created_at",
        ]
        read_only_fields = fields
