import django_filters

from modules.orders.models import Order


class OrderFilter(django_filters.FilterSet):
    """Range filters layered on top of the role-scoped order list.

    ``status`` and ``vendor`` are handled by ``OrderService.list_orders``.
    """

    start_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    end_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")
    min_total = django_filters.NumberFilter(field_name="total_amount", lookup_expr="gte")
    max_total = django_filters.NumberFilter(field_name="total_amount", lookup_expr="lte")
    payment_status = django_filters.CharFilter(field_name="payment_status", lookup_expr="iexact")

    class Meta:
        model = Order
        fields = ["start_date", "end_date", "min_total", "max_total", "payment_status"]
