"""Page-number pagination shared by the list endpoints.

Clients page with ``?page=<n>&limit=<size>``.  Responses carry the page
slice under ``results`` and the bookkeeping under ``pagination``::

    {"results": [...], "pagination": {"page": 1, "limit": 10, "total": 42, "pages": 5}}

The public catalog uses its own envelope, see ``CatalogResultsSetPagination``.
"""

from __future__ import annotations

from django.conf import settings
from django.core.paginator import EmptyPage, PageNotAnInteger, Paginator
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class StandardResultsSetPagination(PageNumberPagination):
    page_size_query_param = "limit"
    max_page_size = 100

    def get_paginated_response(self, data) -> Response:
        return Response(
            {
                "results": data,
                "pagination": {
                    "page": self.page.number,
                    "limit": self.page.paginator.per_page,
                    "total": self.page.paginator.count,
                    "pages": self.page.paginator.num_pages,
                },
            }
        )

    def get_paginated_response_schema(self, schema: dict) -> dict:
        return {
            "type": "object",
            "properties": {
                "results": schema,
                "pagination": {
                    "type": "object",
                    "properties": {
                        "page": {"type": "integer"},
                        "limit": {"type": "integer"},
                        "total": {"type": "integer"},
                        "pages": {"type": "integer"},
                    },
                },
            },
        }


class OrderResultsSetPagination(StandardResultsSetPagination):
    """Order listings default to a smaller page than the rest of the API."""

    @property
    def page_size(self) -> int:  # type: ignore[override]
        return settings.ORDER_PAGE_SIZE


class LenientPaginator(Paginator):
    """Never raises for a bad page number.

    Unparseable numbers mean page 1; out-of-range pages come back empty.
    An empty result has zero pages.
    """

    def __init__(
        self, object_list, per_page, orphans=0, allow_empty_first_page=False, **kwargs
    ):
        super().__init__(
            object_list, per_page, orphans, allow_empty_first_page, **kwargs
        )

    def validate_number(self, number):
        try:
            return super().validate_number(number)
        except PageNotAnInteger:
            return 1
        except EmptyPage:
            return max(int(number), 1)


class CatalogResultsSetPagination(PageNumberPagination):
    """Storefront catalog paging: ``{"products": [...], "pagination": {...}}``."""

    django_paginator_class = LenientPaginator
    page_size_query_param = "limit"
    max_page_size = 100

    @property
    def page_size(self) -> int:  # type: ignore[override]
        return settings.CATALOG_PAGE_SIZE

    def get_paginated_response(self, data) -> Response:
        return Response(
            {
                "products": data,
                "pagination": {
                    "current_page": self.page.number,
                    "limit": self.page.paginator.per_page,
                    "total_pages": self.page.paginator.num_pages,
                    "total_products": self.page.paginator.count,
                    "has_next_page": self.page.has_next(),
                    "has_prev_page": self.page.has_previous(),
                },
            }
        )

    def get_paginated_response_schema(self, schema: dict) -> dict:
        return {
            "type": "object",
            "properties": {
                "products": schema,
                "pagination": {
                    "type": "object",
                    "properties": {
                        "current_page": {"type": "integer"},
                        "limit": {"type": "integer"},
                        "total_pages": {"type": "integer"},
                        "total_products": {"type": "integer"},
                        "has_next_page": {"type": "boolean"},
                        "has_prev_page": {"type": "boolean"},
                    },
                },
            },
        }
