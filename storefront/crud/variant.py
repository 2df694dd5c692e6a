from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import delete, func, select
from sqlalchemy.orm import aliased

from storefront.crud.base import CRUDBase
from storefront.models.variant import ProductVariant
from storefront.schemas.variant import VariantCreate, VariantUpdate


class VariantCRUD(CRUDBase[ProductVariant, VariantCreate, VariantUpdate]):
    async def check_variant_exists(
        self,
        db: AsyncSession,
        product_id: str,
        variant_type: str,
        variant_value: str,
        *,
        exclude_id: Optional[str] = None
    ) -> bool:
        """Check if a variant with the same type and value already exists for the product"""
        stmt = select(ProductVariant.id).where(
            ProductVariant.product_id == product_id,
            ProductVariant.variant_type == variant_type,
            ProductVariant.variant_value == variant_value,
        )
        if exclude_id is not None:
            stmt = stmt.where(ProductVariant.id != exclude_id)
        result = await db.execute(stmt.limit(1))
        return result.scalar_one_or_none() is not None

    async def sku_exists(
        self,
        db: AsyncSession,
        sku: str,
        *,
        exclude_id: Optional[str] = None
    ) -> bool:
        stmt = select(ProductVariant.id).where(ProductVariant.sku == sku)
        if exclude_id is not None:
            stmt = stmt.where(ProductVariant.id != exclude_id)
        result = await db.execute(stmt.limit(1))
        return result.scalar_one_or_none() is not None

    async def delete_unless_last(
        self,
        db: AsyncSession,
        *,
        variant_id: str,
        product_id: str
    ) -> int:
        """Delete the variant only if its product keeps at least one other.

        The remaining-count check and the delete are a single statement.
        Returns the number of rows deleted (0 or 1).
        """
        sibling = aliased(ProductVariant)
        remaining = (
            select(func.count(sibling.id))
            .where(sibling.product_id == product_id)
            .scalar_subquery()
        )
        stmt = (
            delete(ProductVariant)
            .where(ProductVariant.id == variant_id, remaining > 1)
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(stmt)
        return result.rowcount


variant = VariantCRUD(ProductVariant)
