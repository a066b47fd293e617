# invest_api/routers/v1/endpoints/withdrawals.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from invest_api.dependencies import get_current_user, get_db
from invest_api.models.user import User
from invest_api.schemas.withdrawal import WithdrawalCreate, WithdrawalRead
from invest_api.services import withdrawal as withdrawal_service

router = APIRouter()


@router.post("/withdrawals", response_model=WithdrawalRead, status_code=status.HTTP_201_CREATED)
async def create_withdrawal(
    withdrawal_data: WithdrawalCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Заявка на вывод средств с баланса на кошелек."""
    return await withdrawal_service.create_withdrawal_request(db, current_user, withdrawal_data)
