"""Back-office dashboard counters."""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.db.models import Count

from modules.accounts.models import User
from modules.accounts.policy import Action, Actor, authorize
from modules.invoices.models import Invoice
from modules.orders.constants import ReviewStage
from modules.orders.models import Order, OrderReview
from modules.shipments.constants import ShipmentStatus
from modules.shipments.models import Shipment

logger = structlog.get_logger(__name__)


def dashboard_counters(actor: Optional[Actor]) -> Dict[str, Any]:
    """Aggregate counts for the management dashboard (ADMIN/GERENTE)."""
    authorize(actor, Action.VIEW_DASHBOARD)

    shipments = dict(
        Shipment.objects.values_list("status").annotate(total=Count("id"))
    )
    stages = dict(
        OrderReview.objects.values_list("stage").annotate(total=Count("id"))
    )
    bound = Invoice.objects.filter(shipment__isnull=False).count()
    invoices_total = Invoice.objects.count()
    orders_total = Order.objects.count()
    reviewed = sum(stages.values())

    counters = {
        "users": {
            "total": User.objects.count(),
            "active": User.objects.filter(is_active=True).count(),
        },
        "shipments": {
            "open": shipments.get(ShipmentStatus.OPEN, 0),
            "finalized": shipments.get(ShipmentStatus.FINALIZED, 0),
        },
        "invoices": {"bound": bound, "unbound": invoices_total - bound},
        "orders": {
            ReviewStage.UNREVIEWED.value: orders_total - reviewed,
            ReviewStage.CONFERRED.value: stages.get(ReviewStage.CONFERRED, 0),
            ReviewStage.AUDITED.value: stages.get(ReviewStage.AUDITED, 0),
            ReviewStage.VALIDATED.value: stages.get(ReviewStage.VALIDATED, 0),
        },
    }
    logger.debug("dashboard.computed", user_id=str(actor.user_id))
    return counters
