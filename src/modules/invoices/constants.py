"""Invoice domain constants."""

from django.db import models


class BindingFilter(models.TextChoices):
    ALL = "ALL", "Todas"
    UNBOUND = "UNBOUND", "Sem controle"
    BOUND = "BOUND", "Com controle"
