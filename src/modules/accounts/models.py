"""User model carrying the actor role used by the authorization policy."""

from __future__ import annotations

import uuid6
from django.contrib.auth.models import AbstractUser, UserManager as DjangoUserManager
from django.db import models

from modules.accounts.constants import UserRole


class UserManager(DjangoUserManager):
    def create_superuser(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault("role", UserRole.ADMIN)
        return super().create_superuser(username, email, password, **extra_fields)


class User(AbstractUser):
    """Back-office employee.

    ``is_active`` doubles as the active/inactive flag managed through
    ``UserService.set_active``; inactive users cannot obtain tokens.
    """

    id = models.UUIDField(primary_key=True, default=uuid6.uuid7, editable=False)
    role = models.CharField(
        max_length=20,
        choices=UserRole.choices,
        default=UserRole.USUARIO,
    )
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    class Meta:
        db_table = "users"
        ordering = ["username"]
        indexes = [
            models.Index(fields=["role"], name="users_role_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"
