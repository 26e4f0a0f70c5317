import django_filters

from modules.shipments.constants import Carrier, ShipmentStatus
from modules.shipments.models import Shipment


class ShipmentFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=ShipmentStatus.choices)
    carrier = django_filters.ChoiceFilter(choices=Carrier.choices)
    manifest_number = django_filters.NumberFilter(field_name="manifest_number")
    driver_name = django_filters.CharFilter(
        field_name="driver_name", lookup_expr="icontains"
    )
    start_date = django_filters.DateFilter(
        field_name="created_at", lookup_expr="date__gte"
    )
    end_date = django_filters.DateFilter(
        field_name="created_at", lookup_expr="date__lte"
    )

    class Meta:
        model = Shipment
        fields = [
            "status",
            "carrier",
            "manifest_number",
            "driver_name",
            "start_date",
            "end_date",
        ]
