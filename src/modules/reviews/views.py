"""Review API views.

``/reviews/`` is the storefront side: anyone may read a product's approved
reviews, a signed-in customer may review a delivered purchase.
``/admin/reviews/`` is the moderation queue.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.permissions import IsAuthenticatedOrReadOnly
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.accounts.permissions import IsAdmin
from modules.core.exceptions import ValidationError
from modules.core.pagination import StandardResultsSetPagination
from modules.core.payload import request_payload
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.reviews.dtos import CreateReviewDTO
from modules.reviews.filters import ProductReviewFilter, ReviewFilter
from modules.reviews.models import Review
from modules.reviews.repositories.django_repository import ReviewDjangoRepository
from modules.reviews.serializers import (
    AdminReviewSerializer,
    CreateReviewSerializer,
    ReviewSerializer,
)
from modules.reviews.services import ReviewService


def _build_service() -> ReviewService:
    return ReviewService(
        review_repository=ReviewDjangoRepository(),
        order_repository=OrderDjangoRepository(),
        product_repository=ProductDjangoRepository(),
    )


class ReviewViewSet(GenericViewSet):
    queryset = Review.objects.all()
    serializer_class = ReviewSerializer
    permission_classes = [IsAuthenticatedOrReadOnly]
    filterset_class = ProductReviewFilter
    filter_backends = [DjangoFilterBackend]
    pagination_class = StandardResultsSetPagination

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = _build_service()

    def get_queryset(self):
        return self._service.list_reviews(approved=True)

    def list(self, request: Request) -> Response:
        """GET /api/v1/reviews/?productId=<id> (approved reviews, newest first)"""
        page = self.paginate_queryset(self.filter_queryset(self.get_queryset()))
        return self.get_paginated_response(ReviewSerializer(page, many=True).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/reviews/"""
        serializer = CreateReviewSerializer(data=request_payload(request))
        serializer.is_valid(raise_exception=True)
        review = self._service.create_review(
            CreateReviewDTO(user_id=request.user.id, **serializer.validated_data)
        )
        return Response(ReviewSerializer(review).data, status=status.HTTP_201_CREATED)


class AdminReviewViewSet(GenericViewSet):
    queryset = Review.objects.all()
    serializer_class = AdminReviewSerializer
    permission_classes = [IsAdmin]
    filterset_class = ReviewFilter
    filter_backends = [DjangoFilterBackend]
    pagination_class = StandardResultsSetPagination

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = _build_service()

    def get_queryset(self):
        return self._service.list_reviews()

    def list(self, request: Request) -> Response:
        """GET /api/v1/admin/reviews/?approved=&productId=&rating="""
        page = self.paginate_queryset(self.filter_queryset(self.get_queryset()))
        return self.get_paginated_response(AdminReviewSerializer(page, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/admin/reviews/{pk}/"""
        return Response(AdminReviewSerializer(self._service.get_review(pk)).data)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/admin/reviews/{pk}/ with ``{"action": "approve"|"reject"}``"""
        action = request_payload(request).get("action")
        if not action:
            raise ValidationError("Action is required")
        review = self._service.moderate(pk, action)
        return Response(AdminReviewSerializer(review).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/admin/reviews/{pk}/"""
        self._service.delete_review(pk)
        return Response({"message": "Review deleted successfully"})
