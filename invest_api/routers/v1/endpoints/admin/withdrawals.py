# invest_api/routers/v1/endpoints/admin/withdrawals.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from invest_api.crud import withdrawal as crud_withdrawal
from invest_api.dependencies import get_admin_user, get_db
from invest_api.models.user import User
from invest_api.schemas.withdrawal import AdminWithdrawalDetails, PaginatedAdminWithdrawals, WithdrawalStatusUpdate
from invest_api.services import admin as admin_service
from invest_api.services import verification as verification_service

router = APIRouter()


@router.get("", response_model=PaginatedAdminWithdrawals)
def list_withdrawals(
    status: Optional[str] = Query(None, description="pending | approved | rejected | completed"),
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db)
):
    return admin_service.get_paginated_withdrawals(db, page=page, size=size, status=status)


@router.put("/{withdrawal_id}/status", response_model=AdminWithdrawalDetails)
async def update_withdrawal_status(
    withdrawal_id: int,
    status_update: WithdrawalStatusUpdate,
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_admin_user)
):
    """Одобрение (списание с баланса), отклонение или завершение выплаты."""
    verification_service.update_withdrawal_status(
        db,
        withdrawal_id=withdrawal_id,
        new_status=status_update.status,
        admin=admin_user,
        admin_notes=status_update.admin_notes,
        transaction_hash=status_update.transaction_hash,
    )
    await admin_service.invalidate_dashboard_cache()
    return crud_withdrawal.get_withdrawal_by_id(db, withdrawal_id=withdrawal_id)
