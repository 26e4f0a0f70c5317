"""Order repositories package."""

from modules.orders.repositories.django_repository import (
    OrderDjangoRepository,
    OrderReviewDjangoRepository,
)
from modules.orders.repositories.interfaces import (
    IOrderRepository,
    IOrderReviewRepository,
)

__all__ = [
    "IOrderRepository",
    "IOrderReviewRepository",
    "OrderDjangoRepository",
    "OrderReviewDjangoRepository",
]
