import django_filters
from django.db.models import Q

from modules.accounts.models import User, UserRole


class UserFilter(django_filters.FilterSet):
    """Back-office account list filters."""

    role = django_filters.ChoiceFilter(choices=UserRole.choices)
    is_active = django_filters.BooleanFilter(field_name="is_active")
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = User
        fields = ["role", "is_active", "search"]

    def filter_search(self, queryset, name, value):
        return queryset.filter(Q(name__icontains=value) | Q(email__icontains=value))
