from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import String, cast, func, or_, select, update
from sqlalchemy.orm import selectinload

from storefront.crud.base import CRUDBase
from storefront.models.product import Product
from storefront.models.variant import ProductVariant
from storefront.schemas.product import ProductCreate, ProductUpdate


def _escape_like(term: str) -> str:
    """Make `%` and `_` in a search term match literally"""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ProductCRUD(CRUDBase[Product, ProductCreate, ProductUpdate]):
    async def get_with_variants(
        self,
        db: AsyncSession,
        product_id: str,
        *,
        for_update: bool = False
    ) -> Optional[Product]:
        """Get a product with its variants, optionally locking the product row"""
        stmt = (
            select(Product)
            .options(selectinload(Product.variants))
            .where(Product.id == product_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    async def lock(self, db: AsyncSession, product_id: str) -> Optional[str]:
        """Take a row lock on the product (no-op on SQLite, where writers are serialized)"""
        stmt = select(Product.id).where(Product.id == product_id).with_for_update()
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_products(
        self,
        db: AsyncSession,
        *,
        include_hidden: bool = False,
        category: Optional[str] = None,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 100
    ) -> List[Product]:
        """List products with their variants.

        `search` matches product name, category and description, or any
        variant's value, SKU, type, price or quantity, case-insensitively.
        """
        stmt = select(Product).options(selectinload(Product.variants))

        if not include_hidden:
            stmt = stmt.where(Product.is_visible.is_(True))
        if category:
            stmt = stmt.where(Product.category == category.strip().lower())
        if search and search.strip():
            pattern = f"%{_escape_like(search.strip().lower())}%"
            variant_match = (
                select(ProductVariant.id)
                .where(
                    ProductVariant.product_id == Product.id,
                    or_(
                        func.lower(ProductVariant.variant_value).like(pattern, escape="\\"),
                        func.lower(ProductVariant.sku).like(pattern, escape="\\"),
                        func.lower(ProductVariant.variant_type).like(pattern, escape="\\"),
                        cast(ProductVariant.price, String).like(pattern, escape="\\"),
                        cast(ProductVariant.quantity, String).like(pattern, escape="\\"),
                    ),
                )
                .exists()
            )
            stmt = stmt.where(
                or_(
                    func.lower(Product.name).like(pattern, escape="\\"),
                    func.lower(Product.category).like(pattern, escape="\\"),
                    func.lower(Product.description).like(pattern, escape="\\"),
                    variant_match,
                )
            )

        stmt = stmt.order_by(Product.name, Product.id).offset(skip).limit(limit)
        result = await db.execute(stmt)
        return result.scalars().all()

    async def clear_category(self, db: AsyncSession, category_name: str) -> List[str]:
        """Null the category of every product that references it; returns their ids"""
        result = await db.execute(select(Product.id).where(Product.category == category_name))
        product_ids = list(result.scalars().all())
        if product_ids:
            stmt = (
                update(Product)
                .where(Product.id.in_(product_ids))
                .values(category=None)
                .execution_options(synchronize_session="fetch")
            )
            await db.execute(stmt)
        return product_ids


product = ProductCRUD(Product)
