from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError, DataError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from khata.models.supplier_models import Supplier
from khata.schemas.auth_schemas import CurrentUser
from khata.schemas.response_schemas import MessageResponse
from khata.schemas.supplier_schemas import SupplierCreate, SupplierUpdate, SupplierOut
from khata.utils.activity_helpers import log_user_activity


async def _get_supplier(db: AsyncSession, supplier_id: UUID, user_id: UUID) -> Supplier:
    result = await db.execute(
        select(Supplier).where(Supplier.id == supplier_id, Supplier.user_id == user_id)
    )
    supplier = result.scalars().first()
    if not supplier:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Supplier not found")
    return supplier


# ---------------------------
# CREATE SUPPLIER
# ---------------------------
async def create_supplier(db: AsyncSession, data: SupplierCreate, current_user: CurrentUser) -> dict:
    try:
        supplier = Supplier(user_id=current_user.id, **data.model_dump())
        db.add(supplier)
        await db.flush()  # ensures supplier.id is available

        await log_user_activity(
            db,
            user_id=current_user.id,
            username=current_user.username,
            message=f"Created supplier '{supplier.name}' (ID: {supplier.id})"
        )

        await db.commit()
        await db.refresh(supplier)
        return {"message": "Supplier created successfully", "data": SupplierOut.model_validate(supplier)}

    except IntegrityError as e:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e.orig))
    except DataError as e:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e.orig))


# ---------------------------
# GET ALL SUPPLIERS
# ---------------------------
async def get_all_suppliers(db: AsyncSession, user_id: UUID) -> dict:
    result = await db.execute(select(Supplier).where(Supplier.user_id == user_id).order_by(Supplier.name))
    suppliers = result.scalars().all()
    return {
        "message": "Suppliers fetched successfully",
        "total": len(suppliers),
        "data": [SupplierOut.model_validate(s) for s in suppliers],
    }


# ---------------------------
# GET SINGLE SUPPLIER
# ---------------------------
async def get_supplier(db: AsyncSession, supplier_id: UUID, user_id: UUID) -> dict:
    supplier = await _get_supplier(db, supplier_id, user_id)
    return {"message": "Supplier fetched successfully", "data": SupplierOut.model_validate(supplier)}


# ---------------------------
# UPDATE SUPPLIER
# ---------------------------
async def update_supplier(db: AsyncSession, supplier_id: UUID, data: SupplierUpdate, current_user: CurrentUser) -> dict:
    supplier = await _get_supplier(db, supplier_id, current_user.id)

    changes = []
    for key, value in data.model_dump(exclude_unset=True).items():
        old_val = getattr(supplier, key)
        if old_val != value:
            changes.append(f"{key}: {old_val} -> {value}")
            setattr(supplier, key, value)

    if changes:
        await log_user_activity(
            db,
            user_id=current_user.id,
            username=current_user.username,
            message=f"Updated supplier '{supplier.name}' (ID: {supplier.id}): {', '.join(changes)}"
        )
    await db.commit()
    await db.refresh(supplier)
    return {"message": "Supplier updated successfully", "data": SupplierOut.model_validate(supplier)}


# ---------------------------
# DELETE SUPPLIER
# ---------------------------
async def delete_supplier(db: AsyncSession, supplier_id: UUID, current_user: CurrentUser) -> MessageResponse:
    supplier = await _get_supplier(db, supplier_id, current_user.id)
    name = supplier.name

    await db.delete(supplier)
    await log_user_activity(
        db,
        user_id=current_user.id,
        username=current_user.username,
        message=f"Deleted supplier '{name}' (ID: {supplier_id})"
    )
    await db.commit()
    return MessageResponse(message="Supplier deleted successfully")
