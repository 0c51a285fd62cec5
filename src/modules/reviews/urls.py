"""Review URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.reviews.views import AdminReviewViewSet, ReviewViewSet

router = DefaultRouter(trailing_slash=True)
router.register("reviews", ReviewViewSet, basename="review")
router.register("admin/reviews", AdminReviewViewSet, basename="admin-review")

urlpatterns = router.urls
