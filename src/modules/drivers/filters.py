import django_filters

from modules.drivers.models import Driver
from modules.shipments.constants import Carrier


class DriverFilter(django_filters.FilterSet):
    name = django_filters.CharFilter(field_name="name", lookup_expr="icontains")
    carrier = django_filters.ChoiceFilter(choices=Carrier.choices)

    class Meta:
        model = Driver
        fields = ["name", "carrier"]
