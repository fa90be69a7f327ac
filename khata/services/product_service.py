import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.exc import DataError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from khata.models.product_models import Product
from khata.schemas.auth_schemas import CurrentUser
from khata.schemas.product_schema import ProductCreate, ProductUpdate, ProductOut, ProductResponse, ProductListResponse
from khata.utils.activity_helpers import log_user_activity

logger = logging.getLogger(__name__)


async def get_product_or_404(db: AsyncSession, product_id: UUID, user_id: UUID) -> Product:
    result = await db.execute(select(Product).where(Product.id == product_id, Product.user_id == user_id))
    product = result.scalars().first()
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return product


async def list_user_products(db: AsyncSession, user_id: UUID) -> list[Product]:
    result = await db.execute(select(Product).where(Product.user_id == user_id).order_by(Product.name))
    return list(result.scalars().all())


# ---------------------------
# CREATE PRODUCT
# ---------------------------
async def create_product(db: AsyncSession, data: ProductCreate, current_user: CurrentUser) -> ProductResponse:
    try:
        product = Product(user_id=current_user.id, **data.model_dump())
        db.add(product)
        await db.flush()

        await log_user_activity(
            db,
            user_id=current_user.id,
            username=current_user.username,
            message=f"Created product '{product.name}' at {product.price}/{product.unit} (ID: {product.id})",
        )
        await db.commit()
        await db.refresh(product)
        return ProductResponse(message="Product created successfully", data=ProductOut.model_validate(product))

    except IntegrityError as e:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e.orig))
    except DataError as e:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e.orig))


# ---------------------------
# GET ALL / SINGLE
# ---------------------------
async def get_all_products(db: AsyncSession, user_id: UUID) -> ProductListResponse:
    products = await list_user_products(db, user_id)
    return ProductListResponse(
        message="Products fetched successfully",
        total=len(products),
        data=[ProductOut.model_validate(p) for p in products],
    )


async def get_product(db: AsyncSession, product_id: UUID, user_id: UUID) -> ProductResponse:
    product = await get_product_or_404(db, product_id, user_id)
    return ProductResponse(message="Product fetched successfully", data=ProductOut.model_validate(product))


# ---------------------------
# UPDATE PRODUCT
# ---------------------------
async def update_product(db: AsyncSession, product_id: UUID, data: ProductUpdate, current_user: CurrentUser) -> ProductResponse:
    product = await get_product_or_404(db, product_id, current_user.id)

    changes = []
    for key, value in data.model_dump(exclude_unset=True).items():
        if value is None:
            continue
        old_val = getattr(product, key)
        if old_val != value:
            changes.append(f"{key}: {old_val} -> {value}")
            setattr(product, key, value)

    if changes:
        # Orders store no price snapshot, so a price change re-values existing orders
        if any(c.startswith("price:") for c in changes):
            logger.info("Price of product %s changed; open order totals will follow", product.id)
        await log_user_activity(
            db,
            user_id=current_user.id,
            username=current_user.username,
            message=f"Updated product '{product.name}' (ID: {product.id}): {', '.join(changes)}",
        )
    await db.commit()
    await db.refresh(product)
    return ProductResponse(message="Product updated successfully", data=ProductOut.model_validate(product))


# ---------------------------
# DELETE PRODUCT
# ---------------------------
async def delete_product(db: AsyncSession, product_id: UUID, current_user: CurrentUser) -> ProductResponse:
    product = await get_product_or_404(db, product_id, current_user.id)
    out = ProductOut.model_validate(product)

    await db.delete(product)
    await log_user_activity(
        db,
        user_id=current_user.id,
        username=current_user.username,
        message=f"Deleted product '{out.name}' (ID: {out.id})",
    )
    await db.commit()
    return ProductResponse(message="Product deleted successfully", data=out)
