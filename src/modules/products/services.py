"""Product and category services (use cases).

Business rules enforced here:
- Products are created for an existing vendor; categories are referenced
  by slug and unknown slugs are ignored.
- ``sale_price`` stays below ``price`` after a partial update.
- Category names are unique case-insensitively, slugs exactly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

import structlog
from django.db import transaction
from django.utils.text import slugify

from modules.products.exceptions import (
    CategoryAlreadyExists,
    CategoryNotFound,
    InvalidProduct,
    ProductNotFoundError,
)
from modules.products.models import Category, Product

if TYPE_CHECKING:
    from django.db import models

    from modules.products.dtos import (
        CreateCategoryDTO,
        CreateProductDTO,
        UpdateCategoryDTO,
        UpdateProductDTO,
    )
    from modules.products.repositories.interfaces import (
        ICategoryRepository,
        IProductRepository,
    )

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` via constructor injection.
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: CreateProductDTO) -> Product:
        product = Product(
            vendor_id=dto.vendor_id,
            title=dto.title,
            description=dto.description,
            price=dto.price,
            sale_price=dto.sale_price,
            stock=dto.stock,
            images=list(dto.images),
            fabric=dto.fabric,
            color=dto.color,
            size=dto.size,
            pattern=dto.pattern,
            occasion=dto.occasion,
            is_active=dto.is_active,
        )
        product = self._repo.save(product)
        self._repo.set_categories(product, dto.categories)
        logger.info(
            "product.created",
            product_id=str(product.id),
            vendor_id=str(dto.vendor_id),
        )
        return self._repo.get_by_id(str(product.id)) or product

    @transaction.atomic
    def replace_product(self, id: str, dto: CreateProductDTO) -> Product:
        """PUT semantics: every field is overwritten."""
        product = self._get_or_raise(id)
        for field in (
            "title",
            "description",
            "price",
            "sale_price",
            "stock",
            "fabric",
            "color",
            "size",
            "pattern",
            "occasion",
            "is_active",
        ):
            setattr(product, field, getattr(dto, field))
        product.vendor_id = dto.vendor_id
        product.images = list(dto.images)
        self._repo.save(product)
        self._repo.set_categories(product, dto.categories)
        logger.info("product.replaced", product_id=str(id))
        return self._repo.get_by_id(str(id)) or product

    @transaction.atomic
    def update_product(self, id: str, dto: UpdateProductDTO) -> Product:
        """PATCH semantics: only supplied fields change.

        Raises:
            ProductNotFoundError: the product does not exist.
            InvalidProduct: the result would have ``sale_price >= price``.
        """
        product = self._get_or_raise(id)
        log = logger.bind(product_id=str(id))

        for field, value in dto.changes().items():
            setattr(product, field, value)
        if dto.clear_sale_price:
            product.sale_price = None

        if product.sale_price is not None and product.sale_price >= product.price:
            log.warning("product.invalid_sale_price")
            raise InvalidProduct("Sale price must be less than regular price")

        self._repo.save(product)
        if dto.categories is not None:
            self._repo.set_categories(product, dto.categories)
        log.info("product.updated", fields=sorted(dto.changes()))
        return self._repo.get_by_id(str(id)) or product

    @transaction.atomic
    def delete_product(self, id: str) -> None:
        """Hard-delete a product.

        Raises:
            ProductNotFoundError: the product does not exist.
        """
        if not self._repo.delete(id):
            raise ProductNotFoundError()
        logger.info("product.deleted", product_id=str(id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_product(self, id: str, *, active_only: bool = False) -> Product:
        product = self._get_or_raise(id)
        if active_only and not product.is_active:
            raise ProductNotFoundError()
        return product

    def list_products(self) -> "models.QuerySet[Product]":
        return self._repo.list()

    def _get_or_raise(self, id: str) -> Product:
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFoundError()
        return product


class CategoryService:
    """Back-office category management."""

    def __init__(self, repository: ICategoryRepository) -> None:
        self._repo = repository

    def list_categories(self) -> List[Category]:
        return self._repo.list_with_product_counts()

    @transaction.atomic
    def create_category(self, dto: CreateCategoryDTO) -> Category:
        """Raises ``CategoryAlreadyExists`` on a name or slug collision."""
        slug = slugify(dto.name)
        if self._repo.find_conflict(dto.name, slug):
            logger.warning("category.duplicate", name=dto.name, slug=slug)
            raise CategoryAlreadyExists()

        category = Category(
            name=dto.name,
            slug=slug,
            description=dto.description,
            image=dto.image,
            is_active=dto.is_active,
        )
        category = self._repo.save(category)
        logger.info("category.created", category_id=str(category.id), slug=slug)
        return category

    @transaction.atomic
    def update_category(self, id: str, dto: UpdateCategoryDTO) -> Category:
        category = self._repo.get_by_id(id)
        if not category:
            raise CategoryNotFound()

        if dto.name is not None and dto.name != category.name:
            slug = slugify(dto.name)
            if self._repo.find_conflict(dto.name, slug, exclude_id=category.id):
                raise CategoryAlreadyExists()
            category.name = dto.name
            category.slug = slug
        for field in ("description", "image", "is_active"):
            value = getattr(dto, field)
            if value is not None:
                setattr(category, field, value)

        self._repo.save(category)
        logger.info("category.updated", category_id=str(id))
        return category

    @transaction.atomic
    def delete_category(self, id: str) -> None:
        if not self._repo.delete(id):
            raise CategoryNotFound()
        logger.info("category.deleted", category_id=str(id))
