# invest_api/routers/v1/endpoints/admin/deposits.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from invest_api.crud import deposit as crud_deposit
from invest_api.dependencies import get_admin_user, get_db
from invest_api.models.user import User
from invest_api.schemas.deposit import AdminDepositDetails, DepositStatusUpdate, PaginatedAdminDeposits
from invest_api.services import admin as admin_service
from invest_api.services import storage as storage_service
from invest_api.services import verification as verification_service

router = APIRouter()


@router.get("", response_model=PaginatedAdminDeposits)
def list_deposits(
    status: Optional[str] = Query(None, description="pending | verified | rejected"),
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db)
):
    return admin_service.get_paginated_deposits(db, page=page, size=size, status=status)


@router.get("/{deposit_id}", response_model=AdminDepositDetails)
def get_deposit(deposit_id: int, db: Session = Depends(get_db)):
    deposit = crud_deposit.get_deposit_by_id(db, deposit_id=deposit_id)
    if not deposit:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Deposit not found")
    return deposit


@router.get("/{deposit_id}/image")
def get_deposit_image(deposit_id: int, db: Session = Depends(get_db)):
    """Скриншот транзакции. Файлы загрузок наружу не раздаются, только через админку."""
    deposit = crud_deposit.get_deposit_by_id(db, deposit_id=deposit_id)
    if not deposit:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Deposit not found")

    file_path = storage_service.resolve_upload_path(deposit.image_url)
    if not file_path.is_file():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image file not found")
    return FileResponse(file_path)


@router.put("/{deposit_id}/status", response_model=AdminDepositDetails)
async def update_deposit_status(
    deposit_id: int,
    status_update: DepositStatusUpdate,
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_admin_user)
):
    """
    Подтверждение или отклонение депозита.
    При подтверждении сумма зачисляется на баланс пользователя.
    """
    verification_service.update_deposit_status(
        db,
        deposit_id=deposit_id,
        new_status=status_update.status,
        admin=admin_user,
        admin_notes=status_update.admin_notes,
    )
    await admin_service.invalidate_dashboard_cache()
    return crud_deposit.get_deposit_by_id(db, deposit_id=deposit_id)
