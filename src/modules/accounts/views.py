"""Account endpoints: the caller's own profile and back-office user management."""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.viewsets import GenericViewSet

from modules.accounts.dtos import AdminUpdateUserDTO, UpdateProfileDTO
from modules.accounts.filters import UserFilter
from modules.accounts.models import User
from modules.accounts.permissions import IsAdmin
from modules.accounts.repositories.django_repository import UserDjangoRepository
from modules.accounts.serializers import AdminUserSerializer, UserProfileSerializer
from modules.accounts.services import ProfileService, UserAdminService
from modules.core.pagination import StandardResultsSetPagination
from modules.core.payload import request_payload


class ProfileView(APIView):
    permission_classes = [IsAuthenticated]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProfileService(repository=UserDjangoRepository())

    def get(self, request: Request) -> Response:
        """GET /api/v1/user/profile/"""
        user = self._service.get_profile(request.user.id)
        return Response(UserProfileSerializer(user).data)

    def put(self, request: Request) -> Response:
        """PUT /api/v1/user/profile/ (only ``name`` is editable)."""
        dto = UpdateProfileDTO(name=request_payload(request).get("name") or "")
        user = self._service.update_profile(request.user.id, dto)
        return Response(UserProfileSerializer(user).data)


class AdminUserViewSet(GenericViewSet):
    """Back-office account list and role/status changes."""

    queryset = User.objects.all()
    serializer_class = AdminUserSerializer
    permission_classes = [IsAdmin]
    filterset_class = UserFilter
    filter_backends = [DjangoFilterBackend]
    pagination_class = StandardResultsSetPagination

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = UserAdminService(repository=UserDjangoRepository())

    def get_queryset(self):
        return self._service.list_users()

    def list(self, request: Request) -> Response:
        """GET /api/v1/admin/users/?role=&is_active=&search="""
        page = self.paginate_queryset(self.filter_queryset(self.get_queryset()))
        return self.get_paginated_response(AdminUserSerializer(page, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/admin/users/{pk}/"""
        return Response(AdminUserSerializer(self._service.get_user(pk)).data)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/admin/users/{pk}/

        Any of ``role``, ``is_active``, ``name`` and ``business_name``.
        """
        dto = AdminUpdateUserDTO.from_payload(request_payload(request))
        user = self._service.update_user(pk, dto)
        return Response(AdminUserSerializer(user).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        return self.update(request, pk)
