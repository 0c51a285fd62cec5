from django.urls import path

from modules.backoffice.views import AdminStatsView

urlpatterns = [
    path("admin/stats/", AdminStatsView.as_view(), name="admin-stats"),
]
