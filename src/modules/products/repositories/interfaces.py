"""Product and category repository interfaces.

``IProductRepository`` is also the inventory ledger: the stock primitives
are conditional updates that never let ``stock`` go below zero.
"""

from __future__ import annotations

from abc import abstractmethod
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Sequence
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db import models

    from modules.products.models import Category, Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> "models.QuerySet[Product]":
        """All products (active or not), newest first."""

    @abstractmethod
    def lock_many(self, ids: Iterable[UUID]) -> Dict[UUID, Product]:
        """Lock the given products (``SELECT FOR UPDATE``, primary-key order).

        Missing ids are simply absent from the returned mapping.  Must be
        called inside a transaction.
        """

    @abstractmethod
    def increment_stock(self, id: UUID, delta: int) -> bool:
        """Add ``delta`` units; ``False`` when the product no longer exists."""

    @abstractmethod
    def decrement_stock(self, id: UUID, delta: int) -> bool:
        """Remove ``delta`` units only if at least that many are in stock.

        Returns ``False`` (and changes nothing) otherwise.
        """

    @abstractmethod
    def active_queryset(self) -> "models.QuerySet[Product]":
        """Sellable products, annotated with ``catalog_price``, oldest first."""

    @abstractmethod
    def set_rating(self, id: UUID, rating: Decimal, reviews_count: int) -> bool:
        """Store the review aggregate; ``False`` when the product is gone."""

    @abstractmethod
    def set_categories(self, product: Product, slugs: Sequence[str]) -> None:
        """Replace the product's categories with the ones matching ``slugs``."""

    @abstractmethod
    def count(self) -> int: ...

    @abstractmethod
    def count_low_stock(self, threshold: int) -> int: ...


class ICategoryRepository(IRepository["Category"]):
    """Repository contract for categories."""

    @abstractmethod
    def list_with_product_counts(self) -> List[Category]:
        """All categories, each annotated with ``product_count`` (active products)."""

    @abstractmethod
    def find_conflict(
        self, name: str, slug: str, exclude_id: Optional[UUID] = None
    ) -> Optional[Category]:
        """A category whose name (case-insensitive) or slug collides."""
