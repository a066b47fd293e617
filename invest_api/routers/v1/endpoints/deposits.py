# invest_api/routers/v1/endpoints/deposits.py
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from sqlalchemy.orm import Session

from invest_api.core.limiter import limiter
from invest_api.dependencies import get_db, get_optional_current_user
from invest_api.models.user import User
from invest_api.schemas.deposit import DepositRead
from invest_api.services import deposit as deposit_service

router = APIRouter()


@router.post("/deposits", response_model=DepositRead, status_code=status.HTTP_201_CREATED)
@limiter.limit("5/minute")
async def submit_deposit(
    request: Request,
    # Все поля необязательные на уровне FastAPI: проверки и их порядок в сервисе
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    amount: Optional[str] = Form(None),
    network: Optional[str] = Form(None),
    transaction_hash: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_current_user),
):
    """
    Прием заявки на депозит со скриншотом транзакции.
    Токен необязателен: без него депозит привязывается к пользователю по email.
    """
    return await deposit_service.submit_deposit(
        db,
        current_user=current_user,
        name=name,
        email=email,
        amount=amount,
        network=network,
        transaction_hash=transaction_hash,
        image=image,
    )
