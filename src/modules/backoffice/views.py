from __future__ import annotations

from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.accounts.permissions import IsAdmin
from modules.accounts.repositories.django_repository import UserDjangoRepository
from modules.backoffice.serializers import StoreStatsSerializer
from modules.backoffice.services import StatsService
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.products.repositories.django_repository import ProductDjangoRepository


class AdminStatsView(APIView):
    """GET /api/v1/admin/stats/"""

    permission_classes = [IsAdmin]
    serializer_class = StoreStatsSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = StatsService(
            user_repository=UserDjangoRepository(),
            product_repository=ProductDjangoRepository(),
            order_repository=OrderDjangoRepository(),
        )

    def get(self, request: Request) -> Response:
        stats = self._service.get_stats()
        return Response({"stats": StoreStatsSerializer(stats.as_dict()).data})
