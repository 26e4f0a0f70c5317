"""Order workflow constants.

Review stages form a linear state machine:
UNREVIEWED -> CONFERRED -> AUDITED -> VALIDATED.  ``UNREVIEWED`` is
never stored; it is the stage of an order that has no review yet.
"""

from django.db import models


class ReviewStage(models.TextChoices):
    UNREVIEWED = "UNREVIEWED", "Não conferido"
    CONFERRED = "CONFERRED", "Conferido"
    AUDITED = "AUDITED", "Auditado"
    VALIDATED = "VALIDATED", "Validado"


class ValidationStatus(models.TextChoices):
    PENDING = "PENDING", "Pendente"
    VALIDATED_CORRECT = "VALIDATED_CORRECT", "Validado correto"
    VALIDATED_INCORRECT = "VALIDATED_INCORRECT", "Validado incorreto"


class ValidationOutcome(models.TextChoices):
    CORRECT = "CORRECT", "Correto"
    INCORRECT = "INCORRECT", "Incorreto"


class InconsistencyReason(models.TextChoices):
    AVARIA = "AVARIA", "Avaria"
    QUANTIDADE = "QUANTIDADE", "Quantidade"
    PRODUTO_TROCADO = "PRODUTO_TROCADO", "Produto trocado"
    EMBALAGEM = "EMBALAGEM", "Embalagem"
    PRODUTO_SUJO = "PRODUTO_SUJO", "Produto sujo"
    PRODUTO_VENCIDO = "PRODUTO_VENCIDO", "Produto vencido"
    ETIQUETAGEM = "ETIQUETAGEM", "Etiquetagem"
    LOTE = "LOTE", "Lote"
    SEM_INCONSISTENCIA = "SEM_INCONSISTENCIA", "Sem inconsistência"
    PRODUTO_FALTANDO = "PRODUTO_FALTANDO", "Produto faltando"


VALID_TRANSITIONS: dict[str, set[str]] = {
    ReviewStage.UNREVIEWED: {ReviewStage.CONFERRED},
    ReviewStage.CONFERRED: {ReviewStage.AUDITED},
    ReviewStage.AUDITED: {ReviewStage.VALIDATED},
    ReviewStage.VALIDATED: set(),
}

TERMINAL_STATES: set[str] = {ReviewStage.VALIDATED}

OUTCOME_TO_STATUS: dict[str, str] = {
    ValidationOutcome.CORRECT: ValidationStatus.VALIDATED_CORRECT,
    ValidationOutcome.INCORRECT: ValidationStatus.VALIDATED_INCORRECT,
}
