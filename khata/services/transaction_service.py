from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from khata.models.collection_models import Transaction, TransactionType
from khata.schemas.auth_schemas import CurrentUser
from khata.schemas.transaction_schema import TransactionCreate, TransactionOut, TransactionResponse, TransactionListResponse
from khata.services.customer_service import get_customer_or_404
from khata.utils.activity_helpers import log_user_activity


async def add_transaction(db: AsyncSession, data: TransactionCreate, current_user: CurrentUser) -> TransactionResponse:
    """Manual ledger entry: credit given (udhaar) or payment received (paid)."""
    await get_customer_or_404(db, data.customer_id, current_user.id)

    txn = Transaction(
        user_id=current_user.id,
        customer_id=data.customer_id,
        type=data.type,
        amount=data.amount,
        date=data.date or date.today(),
        note=data.note or "",
    )
    db.add(txn)
    await db.flush()

    verb = "Gave udhaar of" if data.type == TransactionType.UDHAAR else "Received payment of"
    await log_user_activity(
        db,
        user_id=current_user.id,
        username=current_user.username,
        message=f"{verb} {txn.amount} for customer {txn.customer_id}",
    )
    await db.commit()
    await db.refresh(txn)
    return TransactionResponse(message="Transaction added successfully", data=TransactionOut.model_validate(txn))


async def list_transactions(
    db: AsyncSession,
    user_id: UUID,
    customer_id: Optional[UUID] = None,
    txn_type: Optional[TransactionType] = None,
) -> TransactionListResponse:
    query = select(Transaction).where(Transaction.user_id == user_id)
    if customer_id:
        query = query.where(Transaction.customer_id == customer_id)
    if txn_type:
        query = query.where(Transaction.type == txn_type)
    result = await db.execute(query.order_by(Transaction.date.desc(), Transaction.created_at.desc()))
    transactions = result.scalars().all()
    return TransactionListResponse(
        message="Transactions retrieved successfully",
        total=len(transactions),
        data=[TransactionOut.model_validate(t) for t in transactions],
    )


async def delete_transaction(db: AsyncSession, transaction_id: UUID, current_user: CurrentUser) -> TransactionResponse:
    result = await db.execute(
        select(Transaction).where(Transaction.id == transaction_id, Transaction.user_id == current_user.id)
    )
    txn = result.scalars().first()
    if not txn:
        raise HTTPException(status_code=404, detail="Transaction not found")
    out = TransactionOut.model_validate(txn)

    # collections.transaction_id is cleared by ON DELETE SET NULL
    await db.delete(txn)
    await log_user_activity(
        db,
        user_id=current_user.id,
        username=current_user.username,
        message=f"Deleted {out.type.value} transaction {out.id} of {out.amount}",
    )
    await db.commit()
    return TransactionResponse(message="Transaction deleted successfully", data=out)
