"""Account roles."""

from django.db import models


class UserRole(models.TextChoices):
    ADMIN = "ADMIN", "Administrador"
    GERENTE = "GERENTE", "Gerente"
    USUARIO = "USUARIO", "Usuário"
    SEPARADOR = "SEPARADOR", "Separador"
    CONFERENTE = "CONFERENTE", "Conferente"
    AUDITOR = "AUDITOR", "Auditor"
