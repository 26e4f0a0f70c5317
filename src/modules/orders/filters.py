import django_filters

from modules.orders.constants import ReviewStage, ValidationStatus
from modules.orders.models import Order, OrderReview


class OrderFilter(django_filters.FilterSet):
    stage = django_filters.ChoiceFilter(
        choices=ReviewStage.choices, method="filter_stage"
    )
    shipment = django_filters.UUIDFilter(field_name="shipment_id")
    separator = django_filters.UUIDFilter(field_name="separator_id")
    order_number = django_filters.CharFilter(
        field_name="order_number", lookup_expr="icontains"
    )
    start_date = django_filters.DateFilter(
        field_name="created_at", lookup_expr="date__gte"
    )
    end_date = django_filters.DateFilter(
        field_name="created_at", lookup_expr="date__lte"
    )

    class Meta:
        model = Order
        fields = [
            "stage",
            "shipment",
            "separator",
            "order_number",
            "start_date",
            "end_date",
        ]

    def filter_stage(self, queryset, name, value):
        if value == ReviewStage.UNREVIEWED:
            return queryset.filter(review__isnull=True)
        return queryset.filter(review__stage=value)


class OrderReviewFilter(django_filters.FilterSet):
    stage = django_filters.ChoiceFilter(choices=ReviewStage.choices)
    validation_status = django_filters.ChoiceFilter(
        choices=ValidationStatus.choices
    )
    separator = django_filters.UUIDFilter(field_name="separator_id")
    conferer = django_filters.UUIDFilter(field_name="conferer_id")
    has_inconsistency = django_filters.BooleanFilter()

    class Meta:
        model = OrderReview
        fields = [
            "stage",
            "validation_status",
            "separator",
            "conferer",
            "has_inconsistency",
        ]
