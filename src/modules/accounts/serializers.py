"""Account serializers (API layer)."""

from __future__ import annotations

from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from modules.accounts.models import User


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "first_name",
            "last_name",
            "email",
            "role",
            "is_active",
            "date_joined",
        ]
        read_only_fields = fields


class UserStatusSerializer(serializers.Serializer):
    is_active = serializers.BooleanField()


class RoleTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Adds the user's role to the access/refresh token claims."""

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token["role"] = user.role
        token["username"] = user.username
        return token
