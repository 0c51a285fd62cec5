"""Django ORM implementations of the product and category repositories.

Methods return ``None`` / ``False`` for missing rows instead of raising;
the service layer decides which domain error that becomes.

Stock changes never read-modify-write in Python: they are single
``UPDATE ... SET stock = stock +/- n`` statements, the decrement guarded
by ``stock >= n``.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Sequence
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Count, F, Q
from django.db.models.functions import Coalesce
from django.utils import timezone

from modules.products.constants import DEFAULT_CATALOG_SORT
from modules.products.models import Category, Product
from modules.products.repositories.interfaces import (
    ICategoryRepository,
    IProductRepository,
)

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a product by primary key.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return (
                Product.objects.select_related("vendor")
                .prefetch_related("categories")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> "models.QuerySet[Product]":
        queryset = Product.objects.select_related("vendor").prefetch_related(
            "categories"
        )
        if filters:
            queryset = queryset.filter(**filters)
        return queryset.order_by("-created_at")

    def save(self, entity: Product) -> Product:
        entity.save()
        logger.info("product.saved", product_id=str(entity.id), slug=entity.slug)
        return entity

    def delete(self, id: str) -> bool:
        """Hard-delete a product.  Order line items keep their snapshot."""
        try:
            deleted, _ = Product.objects.filter(id=id).delete()
        except (ValueError, ValidationError):
            return False
        if deleted:
            logger.info("product.deleted", product_id=str(id))
        return bool(deleted)

    # ------------------------------------------------------------------
    # Inventory ledger
    # ------------------------------------------------------------------

    def lock_many(self, ids: Iterable[UUID]) -> Dict[UUID, Product]:
        wanted = sorted({UUID(str(i)) for i in ids})
        products = Product.objects.select_for_update().filter(id__in=wanted).order_by("id")
        return {product.id: product for product in products}

    def increment_stock(self, id: UUID, delta: int) -> bool:
        updated = Product.objects.filter(id=id).update(
            stock=F("stock") + delta,
            updated_at=timezone.now(),
        )
        return updated == 1

    def decrement_stock(self, id: UUID, delta: int) -> bool:
        updated = Product.objects.filter(id=id, stock__gte=delta).update(
            stock=F("stock") - delta,
            updated_at=timezone.now(),
        )
        return updated == 1

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    def active_queryset(self) -> "models.QuerySet[Product]":
        return (
            Product.objects.filter(is_active=True)
            .annotate(catalog_price=Coalesce("sale_price", "price"))
            .select_related("vendor")
            .prefetch_related("categories")
            .order_by(*DEFAULT_CATALOG_SORT, "id")
        )

    def set_categories(self, product: Product, slugs: Sequence[str]) -> None:
        product.categories.set(Category.objects.filter(slug__in=list(slugs)))

    def set_rating(self, id: UUID, rating: Decimal, reviews_count: int) -> bool:
        updated = Product.objects.filter(id=id).update(
            rating=rating,
            reviews_count=reviews_count,
            updated_at=timezone.now(),
        )
        return updated == 1

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    def count(self) -> int:
        return Product.objects.count()

    def count_low_stock(self, threshold: int) -> int:
        return Product.objects.filter(stock__lte=threshold).count()


class CategoryDjangoRepository(ICategoryRepository):
    def get_by_id(self, id: str) -> Optional[Category]:
        try:
            return Category.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def save(self, entity: Category) -> Category:
        entity.save()
        logger.info("category.saved", category_id=str(entity.id), slug=entity.slug)
        return entity

    def delete(self, id: str) -> bool:
        try:
            deleted, _ = Category.objects.filter(id=id).delete()
        except (ValueError, ValidationError):
            return False
        if deleted:
            logger.info("category.deleted", category_id=str(id))
        return bool(deleted)

    def list_with_product_counts(self) -> List[Category]:
        return list(
            Category.objects.annotate(
                product_count=Count(
                    "products", filter=Q(products__is_active=True), distinct=True
                )
            ).order_by("-created_at")
        )

    def find_conflict(
        self, name: str, slug: str, exclude_id: Optional[UUID] = None
    ) -> Optional[Category]:
        queryset = Category.objects.filter(Q(name__iexact=name) | Q(slug=slug))
        if exclude_id is not None:
            queryset = queryset.exclude(id=exclude_id)
        return queryset.first()
