import django_filters

from modules.invoices.constants import BindingFilter
from modules.invoices.models import Invoice


class InvoiceFilter(django_filters.FilterSet):
    start_date = django_filters.DateFilter(
        field_name="created_at", lookup_expr="date__gte"
    )
    end_date = django_filters.DateFilter(
        field_name="created_at", lookup_expr="date__lte"
    )
    code = django_filters.CharFilter(field_name="code", lookup_expr="icontains")
    number = django_filters.CharFilter(field_name="number", lookup_expr="icontains")
    shipment = django_filters.UUIDFilter(field_name="shipment_id")
    binding = django_filters.ChoiceFilter(
        choices=BindingFilter.choices, method="filter_binding"
    )

    class Meta:
        model = Invoice
        fields = ["start_date", "end_date", "code", "number", "shipment", "binding"]

    def filter_binding(self, queryset, name, value):
        if value == BindingFilter.UNBOUND:
            return queryset.filter(shipment__isnull=True)
        if value == BindingFilter.BOUND:
            return queryset.filter(shipment__isnull=False)
        return queryset
