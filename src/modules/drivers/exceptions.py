"""Driver catalog exceptions."""

from __future__ import annotations

from modules.core.exceptions import Conflict, NotFound


class DriverNotFound(NotFound):
    default_message = "Driver not found."


class DuplicateDriver(Conflict):
    default_message = "A driver with this tax id is already registered."
