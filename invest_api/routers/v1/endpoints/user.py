# invest_api/routers/v1/endpoints/user.py
import math

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from invest_api.crud import deposit as crud_deposit
from invest_api.crud import transaction as crud_transaction
from invest_api.crud import withdrawal as crud_withdrawal
from invest_api.dependencies import get_current_user, get_db
from invest_api.models.user import User
from invest_api.schemas.deposit import DepositRead, PaginatedDeposits
from invest_api.schemas.referral import ReferralSummary
from invest_api.schemas.transaction import PaginatedTransactions, TransactionRead
from invest_api.schemas.user import UserRead
from invest_api.schemas.withdrawal import PaginatedWithdrawals, WithdrawalRead
from invest_api.services import referral as referral_service

router = APIRouter()


def _total_pages(total_items: int, size: int) -> int:
    return math.ceil(total_items / size) if total_items > 0 else 1


@router.get("/users/me", response_model=UserRead)
def read_users_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.get("/users/me/deposits", response_model=PaginatedDeposits)
def get_my_deposits(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """История депозитов текущего пользователя (от новых к старым)."""
    deposits = crud_deposit.get_user_deposits(db, user_id=current_user.id, skip=(page - 1) * size, limit=size)
    total_items = crud_deposit.count_user_deposits(db, user_id=current_user.id)
    return PaginatedDeposits(
        total_items=total_items, total_pages=_total_pages(total_items, size),
        current_page=page, size=size,
        items=[DepositRead.model_validate(d) for d in deposits]
    )


@router.get("/users/me/withdrawals", response_model=PaginatedWithdrawals)
def get_my_withdrawals(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    withdrawals = crud_withdrawal.get_user_withdrawals(db, user_id=current_user.id, skip=(page - 1) * size, limit=size)
    total_items = crud_withdrawal.count_user_withdrawals(db, user_id=current_user.id)
    return PaginatedWithdrawals(
        total_items=total_items, total_pages=_total_pages(total_items, size),
        current_page=page, size=size,
        items=[WithdrawalRead.model_validate(w) for w in withdrawals]
    )


@router.get("/users/me/transactions", response_model=PaginatedTransactions)
def get_my_transactions(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Журнал движения средств по балансу."""
    transactions = crud_transaction.get_user_transactions(db, user_id=current_user.id, skip=(page - 1) * size, limit=size)
    total_items = crud_transaction.count_user_transactions(db, user_id=current_user.id)
    return PaginatedTransactions(
        total_items=total_items, total_pages=_total_pages(total_items, size),
        current_page=page, size=size,
        items=[TransactionRead.model_validate(t) for t in transactions]
    )


@router.get("/users/me/referrals", response_model=ReferralSummary)
def get_my_referrals(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return referral_service.get_referral_summary(db, user_id=current_user.id)
