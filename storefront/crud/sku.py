from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import update

from storefront.models.sku_counter import SkuCounter

SKU_COUNTER_NAME = "sku"


def format_sku(prefix: str, value: int, width: int = 4) -> str:
    """PREFIX-0007; wider values are never truncated (PREFIX-10234)."""
    return f"{prefix}-{value:0{width}d}"


async def next_counter_value(db: AsyncSession, name: str) -> int:
    """Atomically increment the named counter and return the new value.

    The increment happens in the database in one statement, so concurrent
    callers can never observe the same value.
    """
    stmt = (
        update(SkuCounter)
        .where(SkuCounter.name == name)
        .values(value=SkuCounter.value + 1)
        .returning(SkuCounter.value)
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    value = result.scalar_one_or_none()
    if value is None:
        # First use on a database that was never seeded
        db.add(SkuCounter(name=name, value=1))
        await db.flush()
        return 1
    return value
