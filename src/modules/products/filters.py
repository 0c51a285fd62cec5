"""Product list filters.

``ProductFilter`` backs the back-office list.  ``CatalogFilter`` backs the
public ``GET /products/`` and keeps the storefront's camelCase parameter
names (``minPrice``, ``maxPrice``, ``sortBy``).
"""

import django_filters
from django.db.models import Q
from django_filters.rest_framework import DjangoFilterBackend

from modules.products.constants import CATALOG_SORTS
from modules.products.models import Product


def search_title_or_description(queryset, name, value):
    return queryset.filter(Q(title__icontains=value) | Q(description__icontains=value))


class ProductFilter(django_filters.FilterSet):
    """Back-office product list filters."""

    search = django_filters.CharFilter(method=search_title_or_description)
    is_active = django_filters.BooleanFilter(field_name="is_active")
    category = django_filters.CharFilter(field_name="categories__slug")
    fabric = django_filters.CharFilter(field_name="fabric")
    vendor = django_filters.UUIDFilter(field_name="vendor_id")
    low_stock = django_filters.NumberFilter(field_name="stock", lookup_expr="lte")

    class Meta:
        model = Product
        fields = ["search", "is_active", "category", "fabric", "vendor", "low_stock"]


class CatalogFilter(django_filters.FilterSet):
    """Storefront catalog filters.

    Expects a queryset annotated with ``catalog_price`` (the effective
    price, ``COALESCE(sale_price, price)``), which the price bounds use.
    """

    search = django_filters.CharFilter(method=search_title_or_description)
    category = django_filters.CharFilter(field_name="categories__slug")
    fabric = django_filters.CharFilter(field_name="fabric")
    occasion = django_filters.CharFilter(field_name="occasion")
    minPrice = django_filters.NumberFilter(field_name="catalog_price", lookup_expr="gte")
    maxPrice = django_filters.NumberFilter(field_name="catalog_price", lookup_expr="lte")
    sortBy = django_filters.ChoiceFilter(
        choices=[(key, key) for key in CATALOG_SORTS], method="sort"
    )

    class Meta:
        model = Product
        fields = ["search", "category", "fabric", "occasion"]

    def sort(self, queryset, name, value):
        return queryset.order_by(*CATALOG_SORTS[value], "id")


class CatalogFilterBackend(DjangoFilterBackend):
    """Drops catalog parameters that fail to parse instead of answering 400."""

    raise_exception = False
