import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import exc as sa_exc
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.config import settings
from storefront.core.exceptions import (
    InvariantViolation,
    NotAuthorized,
    NotFound,
    ReferentialError,
    TransientStoreError,
    UniquenessViolation,
    ValidationError,
)
from storefront.core.types import ChangeType, VariantType, utcnow
from storefront.crud.category import category as crud_category
from storefront.crud.product import product as crud_product
from storefront.crud.sku import SKU_COUNTER_NAME, format_sku, next_counter_value
from storefront.crud.store_status import store_status as crud_store_status
from storefront.crud.variant import variant as crud_variant
from storefront.models.category import Category
from storefront.models.product import Product
from storefront.models.store_status import StoreStatus
from storefront.models.variant import ProductVariant
from storefront.schemas import category as category_schemas
from storefront.schemas import product as product_schemas
from storefront.schemas import store_status as store_status_schemas
from storefront.schemas import variant as variant_schemas
from storefront.services import authorization
from storefront.services.events import ChangeEvent, EventBus, event_bus

logger = logging.getLogger(__name__)

SchemaType = TypeVar("SchemaType", bound=BaseModel)

LAST_VARIANT_MESSAGE = "A product must have at least one variant"

DEFAULT_VARIANT = {
    "variant_type": VariantType.PCS.value,
    "variant_value": "default",
    "price": 0,
    "quantity": 0,
}


def _validate(schema: Type[SchemaType], payload: Union[SchemaType, Dict[str, Any]]) -> SchemaType:
    """Coerce a payload into its schema, raising the catalog ValidationError"""
    if isinstance(payload, schema):
        return payload
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as exc:
        error = exc.errors()[0]
        field = ".".join(str(part) for part in error.get("loc", ()))
        message = f"{field}: {error['msg']}" if field else error["msg"]
        raise ValidationError(message, field=field or None) from exc


def _snapshot(schema: Type[BaseModel], obj: Any) -> Dict[str, Any]:
    return schema.model_validate(obj).model_dump(mode="json")


class CatalogService:
    """Catalog store: every mutation is admin-gated, runs in one transaction,
    keeps the catalog invariants and publishes its changes after commit.
    """

    def __init__(self, db: AsyncSession, events: Optional[EventBus] = None):
        self.db = db
        self.events = events if events is not None else event_bus
        self._pending: List[ChangeEvent] = []

    # ------------------------------------------------------------------
    # Transaction plumbing
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def _store_errors(self):
        """Translate database failures into catalog errors"""
        try:
            yield
        except sa_exc.IntegrityError as exc:
            detail = str(exc.orig)
            if "foreign key" in detail.lower():
                raise ReferentialError(f"Referenced row does not exist: {detail}") from exc
            raise UniquenessViolation(f"Conflicting row: {detail}") from exc
        except (sa_exc.OperationalError, sa_exc.InterfaceError, sa_exc.TimeoutError, asyncio.TimeoutError) as exc:
            logger.error(f"Database unavailable: {str(exc)}")
            raise TransientStoreError("The catalog store is temporarily unavailable, try again") from exc

    @asynccontextmanager
    async def _unit_of_work(self):
        self._pending = []
        async with self._store_errors():
            try:
                yield
                await self.db.commit()
            except BaseException:
                await self.db.rollback()
                self._pending = []
                raise
        pending, self._pending = self._pending, []
        for event in pending:
            await self.events.publish(event)

    def _record(self, table: str, change: ChangeType, record_id: Optional[str], record: Optional[Dict[str, Any]] = None):
        self._pending.append(ChangeEvent(table=table, type=change, record_id=record_id, record=record or {}))

    def _record_variant(self, change: ChangeType, variant: ProductVariant):
        self._record("product_variants", change, variant.id, _snapshot(variant_schemas.Variant, variant))

    # ------------------------------------------------------------------
    # Authorization and SKUs
    # ------------------------------------------------------------------

    async def is_admin(self, actor_id: Optional[str]) -> bool:
        async with self._store_errors():
            return await authorization.is_admin(self.db, actor_id)

    async def require_admin(self, actor_id: Optional[str]) -> None:
        async with self._store_errors():
            await authorization.require_admin(self.db, actor_id)

    async def _next_sku(self, reserved: Iterable[str] = ()) -> str:
        """Draw counter values until one is not already used by a variant.

        Values taken by hand-entered SKUs (or listed in `reserved`) are
        skipped, so the counter moves past them for good once committed.
        """
        reserved = set(reserved)
        while True:
            value = await next_counter_value(self.db, SKU_COUNTER_NAME)
            sku = format_sku(settings.SKU_PREFIX, value, settings.SKU_MIN_WIDTH)
            if sku in reserved or await crud_variant.sku_exists(self.db, sku):
                logger.info(f"Skipping SKU {sku}, already in use")
                continue
            return sku

    async def generate_sku(self) -> str:
        """Reserve the next SKU from the shared counter. Values are never reused."""
        async with self._unit_of_work():
            sku = await self._next_sku()
        return sku

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    async def _check_category(self, name: Optional[str]) -> None:
        if name is None:
            return
        if await crud_category.get_by_name(self.db, name) is None:
            raise ReferentialError(f"Category '{name}' does not exist", field="category")

    async def _check_sku_free(self, sku: str, exclude_id: Optional[str] = None) -> None:
        if await crud_variant.sku_exists(self.db, sku, exclude_id=exclude_id):
            raise UniquenessViolation(f"SKU '{sku}' is already in use", field="sku")

    async def _load_product(self, product_id: str, *, for_update: bool = False) -> Product:
        product = await crud_product.get_with_variants(self.db, product_id, for_update=for_update)
        if product is None:
            raise NotFound(f"Product {product_id} not found")
        return product

    async def create_product(
        self,
        payload: Union[product_schemas.ProductCreate, Dict[str, Any]],
        actor_id: Optional[str],
    ) -> Product:
        """Create a product together with its default variant.

        When the payload lists variants, the first one takes over the default
        variant and the rest are added with generated SKUs where none is given.
        """
        data = _validate(product_schemas.ProductCreate, payload)
        variants_in = data.variants

        seen = set()
        supplied_skus = set()
        for v in variants_in:
            key = (v.variant_type.value, v.variant_value)
            if key in seen:
                raise UniquenessViolation(
                    f"Variant {v.variant_type.value} '{v.variant_value}' is listed twice", field="variants"
                )
            seen.add(key)
            if v.sku:
                if v.sku in supplied_skus:
                    raise UniquenessViolation(f"SKU '{v.sku}' is listed twice", field="variants")
                supplied_skus.add(v.sku)

        async with self._unit_of_work():
            await authorization.require_admin(self.db, actor_id)
            await self._check_category(data.category)
            for sku in supplied_skus:
                await self._check_sku_free(sku)

            now = utcnow()
            default_variant = ProductVariant(
                sku=await self._next_sku(supplied_skus),
                last_updated=now,
                updated_by=actor_id,
                **DEFAULT_VARIANT,
            )
            product = Product(
                **data.model_dump(mode="json", exclude={"variants"}),
                last_updated=now,
                updated_by=actor_id,
                variants=[default_variant],
            )
            self.db.add(product)
            await self.db.flush()

            if variants_in:
                first, rest = variants_in[0], variants_in[1:]
                if first.sku:
                    default_variant.sku = first.sku
                default_variant.variant_type = first.variant_type.value
                default_variant.variant_value = first.variant_value
                default_variant.price = first.price
                default_variant.quantity = first.quantity
                for v in rest:
                    product.variants.append(
                        ProductVariant(
                            sku=v.sku or await self._next_sku(supplied_skus),
                            variant_type=v.variant_type.value,
                            variant_value=v.variant_value,
                            price=v.price,
                            quantity=v.quantity,
                            last_updated=now,
                            updated_by=actor_id,
                        )
                    )
                await self.db.flush()

            self._record("products", ChangeType.INSERT, product.id, _snapshot(product_schemas.Product, product))
            for variant in product.variants:
                self._record_variant(ChangeType.INSERT, variant)

        logger.info(f"Product {product.id} created by {actor_id} with {len(product.variants)} variant(s)")
        return await self.get_product(product.id, include_hidden=True, actor_id=actor_id)

    async def update_product(
        self,
        product_id: str,
        payload: Union[product_schemas.ProductUpdate, Dict[str, Any]],
        actor_id: Optional[str],
    ) -> Product:
        data = _validate(product_schemas.ProductUpdate, payload)
        changes = data.model_dump(mode="json", exclude_unset=True)

        async with self._unit_of_work():
            await authorization.require_admin(self.db, actor_id)
            product = await self._load_product(product_id, for_update=True)
            if "category" in changes:
                await self._check_category(changes["category"])

            # Server-assigned, whatever the payload carried
            changes["last_updated"] = utcnow()
            changes["updated_by"] = actor_id
            await crud_product.update(self.db, db_obj=product, obj_in=changes)
            self._record("products", ChangeType.UPDATE, product.id, _snapshot(product_schemas.Product, product))

        logger.info(f"Product {product_id} updated by {actor_id}: {sorted(changes)}")
        return await self.get_product(product_id, include_hidden=True, actor_id=actor_id)

    async def set_product_visibility(self, product_id: str, is_visible: bool, actor_id: Optional[str]) -> Product:
        return await self.update_product(product_id, {"is_visible": is_visible}, actor_id)

    async def delete_product(self, product_id: str, actor_id: Optional[str]) -> None:
        """Delete a product and, with it, all of its variants"""
        async with self._unit_of_work():
            await authorization.require_admin(self.db, actor_id)
            product = await self._load_product(product_id, for_update=True)
            variants = list(product.variants)
            snapshot = _snapshot(product_schemas.Product, product)
            variant_snapshots = [_snapshot(variant_schemas.Variant, v) for v in variants]
            await crud_product.remove(self.db, db_obj=product)
            for variant_snapshot in variant_snapshots:
                self._record("product_variants", ChangeType.DELETE, variant_snapshot["id"], variant_snapshot)
            self._record("products", ChangeType.DELETE, product_id, snapshot)

        logger.info(f"Product {product_id} deleted by {actor_id} ({len(variants)} variant(s))")

    async def get_product(
        self,
        product_id: str,
        *,
        actor_id: Optional[str] = None,
        include_hidden: bool = False,
    ) -> Product:
        """Fetch a product with its variants; hidden products are only shown to admins"""
        async with self._store_errors():
            product = await self._load_product(product_id)
            if not product.is_visible and not (include_hidden and await authorization.is_admin(self.db, actor_id)):
                raise NotFound(f"Product {product_id} not found")
        return product

    async def list_products(
        self,
        *,
        actor_id: Optional[str] = None,
        include_hidden: bool = False,
        category: Optional[str] = None,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Product]:
        async with self._store_errors():
            if include_hidden and not await authorization.is_admin(self.db, actor_id):
                raise NotAuthorized("Only admins can list hidden products")
            return await crud_product.list_products(
                self.db,
                include_hidden=include_hidden,
                category=category,
                search=search,
                skip=skip,
                limit=limit,
            )

    # ------------------------------------------------------------------
    # Variants
    # ------------------------------------------------------------------

    async def create_variant(
        self,
        product_id: str,
        payload: Union[variant_schemas.VariantCreate, Dict[str, Any]],
        actor_id: Optional[str],
    ) -> ProductVariant:
        data = _validate(variant_schemas.VariantCreate, payload)
        variant_type = data.variant_type.value

        async with self._unit_of_work():
            await authorization.require_admin(self.db, actor_id)
            if await crud_product.lock(self.db, product_id) is None:
                raise NotFound(f"Product {product_id} not found")
            if await crud_variant.check_variant_exists(self.db, product_id, variant_type, data.variant_value):
                raise UniquenessViolation(
                    f"Variant {variant_type} '{data.variant_value}' already exists for this product",
                    field="variant_value",
                )
            if data.sku:
                await self._check_sku_free(data.sku)
            sku = data.sku or await self._next_sku()

            variant = await crud_variant.create(
                self.db,
                obj_in=data.model_dump(mode="json", exclude={"sku"}),
                product_id=product_id,
                sku=sku,
                last_updated=utcnow(),
                updated_by=actor_id,
            )
            self._record_variant(ChangeType.INSERT, variant)

        logger.info(f"Variant {variant.id} ({variant.sku}) added to product {product_id} by {actor_id}")
        return variant

    async def update_variant(
        self,
        variant_id: str,
        payload: Union[variant_schemas.VariantUpdate, Dict[str, Any]],
        actor_id: Optional[str],
    ) -> ProductVariant:
        data = _validate(variant_schemas.VariantUpdate, payload)
        changes = data.model_dump(mode="json", exclude_unset=True)

        async with self._unit_of_work():
            await authorization.require_admin(self.db, actor_id)
            variant = await crud_variant.get(self.db, variant_id)
            if variant is None:
                raise NotFound(f"Variant {variant_id} not found")

            new_type = changes.get("variant_type", variant.variant_type)
            new_value = changes.get("variant_value", variant.variant_value)
            if (new_type, new_value) != (variant.variant_type, variant.variant_value):
                if await crud_variant.check_variant_exists(
                    self.db, variant.product_id, new_type, new_value, exclude_id=variant.id
                ):
                    raise UniquenessViolation(
                        f"Variant {new_type} '{new_value}' already exists for this product",
                        field="variant_value",
                    )
            if "sku" in changes and changes["sku"] != variant.sku:
                await self._check_sku_free(changes["sku"], exclude_id=variant.id)

            changes["last_updated"] = utcnow()
            changes["updated_by"] = actor_id
            await crud_variant.update(self.db, db_obj=variant, obj_in=changes)
            self._record_variant(ChangeType.UPDATE, variant)

        logger.info(f"Variant {variant_id} updated by {actor_id}: {sorted(changes)}")
        return variant

    async def delete_variant(self, variant_id: str, actor_id: Optional[str]) -> None:
        """Delete a variant unless it is the last one of its product.

        The product row is locked and the delete is conditional on a fresh
        count of its variants, so two concurrent deletes cannot both remove
        the final pair.
        """
        async with self._unit_of_work():
            await authorization.require_admin(self.db, actor_id)
            variant = await crud_variant.get(self.db, variant_id)
            if variant is None:
                raise NotFound(f"Variant {variant_id} not found")
            product_id = variant.product_id
            snapshot = _snapshot(variant_schemas.Variant, variant)

            await crud_product.lock(self.db, product_id)
            deleted = await crud_variant.delete_unless_last(self.db, variant_id=variant_id, product_id=product_id)
            if not deleted:
                if not await crud_variant.exists(self.db, variant_id):
                    raise NotFound(f"Variant {variant_id} not found")
                logger.warning(f"Refused to delete last variant {variant_id} of product {product_id}")
                raise InvariantViolation(LAST_VARIANT_MESSAGE)

            self.db.expunge(variant)
            self._record("product_variants", ChangeType.DELETE, variant_id, snapshot)

        logger.info(f"Variant {variant_id} deleted from product {product_id} by {actor_id}")

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    async def list_categories(self) -> List[Category]:
        async with self._store_errors():
            return await crud_category.list_all(self.db)

    async def create_category(
        self,
        payload: Union[category_schemas.CategoryCreate, Dict[str, Any]],
        actor_id: Optional[str],
    ) -> Category:
        data = _validate(category_schemas.CategoryCreate, payload)

        async with self._unit_of_work():
            await authorization.require_admin(self.db, actor_id)
            if await crud_category.get_by_name(self.db, data.name) is not None:
                raise UniquenessViolation(f"Category '{data.name}' already exists", field="name")
            category = await crud_category.create(self.db, obj_in=data)
            self._record("categories", ChangeType.INSERT, category.id, _snapshot(category_schemas.Category, category))

        logger.info(f"Category '{category.name}' created by {actor_id}")
        return category

    async def delete_category(self, category_id: str, actor_id: Optional[str]) -> None:
        """Delete a category; products that used it keep existing with no category"""
        async with self._unit_of_work():
            await authorization.require_admin(self.db, actor_id)
            category = await crud_category.get(self.db, category_id)
            if category is None:
                raise NotFound(f"Category {category_id} not found")
            snapshot = _snapshot(category_schemas.Category, category)

            product_ids = await crud_product.clear_category(self.db, category.name)
            await crud_category.remove(self.db, db_obj=category)
            self._record("categories", ChangeType.DELETE, category_id, snapshot)
            for product_id in product_ids:
                self._record("products", ChangeType.UPDATE, product_id, {"id": product_id, "category": None})

        logger.info(f"Category '{snapshot['name']}' deleted by {actor_id}; {len(product_ids)} product(s) uncategorized")

    # ------------------------------------------------------------------
    # Store status
    # ------------------------------------------------------------------

    async def get_store_status(self) -> Optional[StoreStatus]:
        async with self._store_errors():
            return await crud_store_status.get_current(self.db)

    async def set_store_status(self, is_open: bool, actor_id: Optional[str]) -> StoreStatus:
        """Update the current status row, or insert the first one"""
        data = _validate(store_status_schemas.StoreStatusUpdate, {"is_open": is_open})

        async with self._unit_of_work():
            await authorization.require_admin(self.db, actor_id)
            current = await crud_store_status.get_current(self.db, for_update=True)
            values = {"is_open": data.is_open, "updated_at": utcnow(), "updated_by": actor_id}
            if current is None:
                current = await crud_store_status.create(self.db, obj_in=values)
                change = ChangeType.INSERT
            else:
                await crud_store_status.update(self.db, db_obj=current, obj_in=values)
                change = ChangeType.UPDATE
            self._record("store_status", change, current.id, _snapshot(store_status_schemas.StoreStatus, current))

        logger.info(f"Store marked {'open' if current.is_open else 'closed'} by {actor_id}")
        return current
