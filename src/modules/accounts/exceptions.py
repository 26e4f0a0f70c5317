"""Account domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import NotFound


class UserNotFound(NotFound):
    default_message = "User not found."
