"""Product and category API views.

Public catalog (``/products/``) plus the back-office endpoints under
``/admin/products/`` and ``/admin/categories/``.  Views only translate
HTTP to DTOs and back; domain errors propagate to the project exception
handler, which renders ``{"error": ...}``.
"""

from __future__ import annotations

from typing import Any, Dict

import structlog
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.accounts.permissions import IsAdmin, IsAdminOrReadOnly
from modules.core.pagination import (
    CatalogResultsSetPagination,
    StandardResultsSetPagination,
)
from modules.core.payload import request_payload
from modules.products.dtos import (
    CreateCategoryDTO,
    CreateProductDTO,
    UpdateCategoryDTO,
    UpdateProductDTO,
)
from modules.products.filters import CatalogFilter, CatalogFilterBackend, ProductFilter
from modules.products.models import Category, Product
from modules.products.repositories.django_repository import (
    CategoryDjangoRepository,
    ProductDjangoRepository,
)
from modules.products.serializers import CategorySerializer, ProductSerializer
from modules.products.services import CategoryService, ProductService

logger = structlog.get_logger(__name__)


def _update_dto(data: Dict[str, Any]) -> UpdateProductDTO:
    data = {k: v for k, v in data.items() if k != "clear_sale_price"}
    clear_sale_price = "sale_price" in data and data["sale_price"] in (None, "")
    if clear_sale_price:
        data = {k: v for k, v in data.items() if k != "sale_price"}
    return UpdateProductDTO(**data, clear_sale_price=clear_sale_price)


class ProductViewSet(GenericViewSet):
    """Storefront catalog.

    ``GET`` is public.  ``PUT`` and ``DELETE`` on a single product are kept
    for admins.  Catalog parameters that fail to parse are ignored.
    """

    queryset = Product.objects.all()
    serializer_class = ProductSerializer
    permission_classes = [IsAdminOrReadOnly]
    filterset_class = CatalogFilter
    filter_backends = [CatalogFilterBackend]
    pagination_class = CatalogResultsSetPagination

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._repository = ProductDjangoRepository()
        self._service = ProductService(repository=self._repository)

    def get_queryset(self):
        return self._repository.active_queryset()

    def list(self, request: Request) -> Response:
        """GET /api/v1/products/"""
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        logger.info(
            "catalog.queried",
            total=self.paginator.page.paginator.count,
            page=self.paginator.page.number,
            sort_by=request.query_params.get("sortBy", ""),
        )
        serializer = ProductSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        product = self._service.get_product(pk)
        return Response({"product": ProductSerializer(product).data})

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/products/{pk}/ merges the supplied fields (admin)."""
        dto = _update_dto(request_payload(request))
        product = self._service.update_product(pk, dto)
        return Response({"product": ProductSerializer(product).data})

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/ (admin)"""
        self._service.delete_product(pk)
        return Response({"message": "Product deleted successfully"})


class AdminProductViewSet(GenericViewSet):
    """Back-office product management."""

    queryset = Product.objects.all()
    serializer_class = ProductSerializer
    permission_classes = [IsAdmin]
    filterset_class = ProductFilter
    filter_backends = [DjangoFilterBackend]
    pagination_class = StandardResultsSetPagination

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(repository=ProductDjangoRepository())

    def get_queryset(self):
        return self._service.list_products()

    def list(self, request: Request) -> Response:
        """GET /api/v1/admin/products/"""
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = ProductSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/admin/products/

        ``vendor_id`` defaults to the calling admin.
        """
        data = request_payload(request)
        data.setdefault("vendor_id", str(request.user.id))
        product = self._service.create_product(CreateProductDTO(**data))
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/admin/products/{pk}/ (full replacement)"""
        current = self._service.get_product(pk)
        data = request_payload(request)
        data.setdefault("vendor_id", str(current.vendor_id))
        product = self._service.replace_product(pk, CreateProductDTO(**data))
        return Response(ProductSerializer(product).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/admin/products/{pk}/ e.g. ``{"is_active": false}``"""
        dto = _update_dto(request_payload(request))
        product = self._service.update_product(pk, dto)
        return Response(ProductSerializer(product).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/admin/products/{pk}/"""
        self._service.delete_product(pk)
        return Response({"message": "Product deleted successfully"})


class AdminCategoryViewSet(GenericViewSet):
    """Back-office category management."""

    queryset = Category.objects.all()
    serializer_class = CategorySerializer
    permission_classes = [IsAdmin]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CategoryService(repository=CategoryDjangoRepository())

    def list(self, request: Request) -> Response:
        """GET /api/v1/admin/categories/ (with active product counts)"""
        categories = self._service.list_categories()
        return Response({"categories": CategorySerializer(categories, many=True).data})

    def create(self, request: Request) -> Response:
        """POST /api/v1/admin/categories/"""
        data = request_payload(request)
        dto = CreateCategoryDTO(
            name=data.get("name") or "",
            description=data.get("description") or "",
            image=data.get("image") or "",
            is_active=data.get("is_active", True),
        )
        category = self._service.create_category(dto)
        return Response(
            {"category": CategorySerializer(category).data},
            status=status.HTTP_201_CREATED,
        )

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/admin/categories/{pk}/"""
        dto = UpdateCategoryDTO(**request_payload(request))
        category = self._service.update_category(pk, dto)
        return Response({"category": CategorySerializer(category).data})

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/admin/categories/{pk}/"""
        self._service.delete_category(pk)
        return Response({"message": "Category deleted successfully"})
