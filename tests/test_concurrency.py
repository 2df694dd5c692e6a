import asyncio

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront.core.exceptions import InvariantViolation
from storefront.models.variant import ProductVariant
from storefront.services.catalog_service import CatalogService
from storefront.services.events import EventBus

from conftest import ADMIN_ID


@pytest.fixture
def file_session_maker(file_engine):
    return async_sessionmaker(file_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.mark.asyncio
async def test_concurrent_sku_generation_never_repeats(file_session_maker):
    async def generate():
        async with file_session_maker() as session:
            return await CatalogService(session, events=EventBus()).generate_sku()

    skus = await asyncio.gather(*(generate() for _ in range(20)))

    assert len(set(skus)) == 20
    assert {int(sku.split("-")[1]) for sku in skus} == set(range(1, 21))


@pytest.mark.asyncio
async def test_concurrent_deletes_keep_one_variant(file_session_maker):
    async with file_session_maker() as session:
        service = CatalogService(session, events=EventBus())
        product = await service.create_product(
            {
                "name": "Fudge",
                "variants": [
                    {"variant_type": "size", "variant_value": "Small"},
                    {"variant_type": "size", "variant_value": "Large"},
                ],
            },
            ADMIN_ID,
        )
        product_id = product.id
        variant_ids = [v.id for v in product.variants]

    async def remove(variant_id):
        async with file_session_maker() as session:
            await CatalogService(session, events=EventBus()).delete_variant(variant_id, ADMIN_ID)

    results = await asyncio.gather(*(remove(v) for v in variant_ids), return_exceptions=True)

    failures = [r for r in results if isinstance(r, Exception)]
    assert len(failures) == 1
    assert isinstance(failures[0], InvariantViolation)

    async with file_session_maker() as session:
        result = await session.execute(
            select(func.count()).select_from(ProductVariant).where(ProductVariant.product_id == product_id)
        )
        assert result.scalar() == 1
