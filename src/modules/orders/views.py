"""Order API views.

Exposes ``OrderService`` over HTTP with DRF ViewSets.  Views never touch
the ORM directly and let domain errors propagate to the project exception
handler.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.accounts.dtos import ActorDTO
from modules.accounts.permissions import IsAdmin
from modules.core.exceptions import ValidationError
from modules.core.pagination import OrderResultsSetPagination
from modules.core.payload import request_payload
from modules.orders.dtos import (
    CreateOrderDTO,
    CreateOrderItemDTO,
    OrderListFiltersDTO,
    ShippingAddressDTO,
    UpdateOrderDTO,
)
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    CreateOrderSerializer,
    OrderListSerializer,
    OrderSerializer,
)
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository


def _build_service() -> OrderService:
    return OrderService(
        order_repository=OrderDjangoRepository(),
        product_repository=ProductDjangoRepository(),
    )


def _list_filters(request: Request, *, allow_vendor: bool) -> OrderListFiltersDTO:
    params = request.query_params
    vendor = (params.get("vendor") or params.get("vendorId")) if allow_vendor else None
    return OrderListFiltersDTO(status=params.get("status") or None, vendor_id=vendor or None)


class _OrderListMixin:
    """Role-scoped listing shared by the storefront and back-office views."""

    filterset_class = OrderFilter
    filter_backends = [DjangoFilterBackend]
    pagination_class = OrderResultsSetPagination

    def _list(self, request: Request, filters: OrderListFiltersDTO) -> Response:
        actor = ActorDTO.from_user(request.user)
        queryset = self.filter_queryset(self._service.list_orders(actor, filters))
        page = self.paginate_queryset(queryset)
        serializer = OrderListSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)


class OrderViewSet(_OrderListMixin, GenericViewSet):
    """Orders as seen by their customer, vendor or an admin.

    Uses ``OrderService`` with injected repositories.  Does **not** extend
    ``ModelViewSet``: all ORM access goes through the service layer.
    """

    queryset = Order.objects.all()
    serializer_class = OrderSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = _build_service()

    def get_throttles(self) -> list[BaseThrottle]:
        throttle_scope: str | None
        if self.action == "create":
            throttle_scope = "order_creation"
        elif self.action in {"list", "retrieve"}:
            throttle_scope = "order_listing"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/?status=&page=&limit=

        Admins may also pass ``vendor``.
        """
        is_admin = ActorDTO.from_user(request.user).is_admin
        return self._list(request, _list_filters(request, allow_vendor=is_admin))

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/ (checkout)"""
        create_serializer = CreateOrderSerializer(data=request.data)
        create_serializer.is_valid(raise_exception=True)
        data = create_serializer.validated_data

        dto = CreateOrderDTO(
            user_id=request.user.id,
            items=[
                CreateOrderItemDTO(
                    product_id=item["product_id"],
                    quantity=item["quantity"],
                )
                for item in data["items"]
            ],
            shipping_address=ShippingAddressDTO(**data["shipping_address"]),
            notes=data.get("notes", ""),
        )
        order = self._service.create_order(dto)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        order = self._service.get_order(pk, ActorDTO.from_user(request.user))
        return Response(OrderSerializer(order).data)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/orders/{pk}/

        Fields: ``status``, ``tracking_number``, ``notes``, ``cancel_reason``;
        which of them a caller may send depends on their role.
        """
        order = self._service.update_order(
            pk,
            UpdateOrderDTO.from_payload(request_payload(request)),
            ActorDTO.from_user(request.user),
        )
        return Response(OrderSerializer(order).data)


class AdminOrderViewSet(_OrderListMixin, GenericViewSet):
    """Back-office order management."""

    queryset = Order.objects.all()
    serializer_class = OrderSerializer
    permission_classes = [IsAdmin]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = _build_service()

    def list(self, request: Request) -> Response:
        """GET /api/v1/admin/orders/?status=&vendor="""
        return self._list(request, _list_filters(request, allow_vendor=True))

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/admin/orders/{pk}/"""
        order = self._service.get_order(pk, ActorDTO.from_user(request.user))
        return Response(OrderSerializer(order).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/admin/orders/{pk}/ with ``{"status": ..., "notes": ...}``"""
        payload = request_payload(request)
        new_status = payload.get("status")
        if not new_status:
            raise ValidationError("Status is required")
        order = self._service.apply_status_transition(
            pk,
            new_status,
            ActorDTO.from_user(request.user),
            notes=payload.get("notes") or "",
        )
        return Response(OrderSerializer(order).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/admin/orders/{pk}/"""
        self._service.delete_order(pk)
        return Response({"message": "Order deleted successfully"})
