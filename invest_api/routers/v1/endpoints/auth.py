# invest_api/routers/v1/endpoints/auth.py
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from invest_api.core.limiter import limiter
from invest_api.dependencies import get_db
from invest_api.schemas.user import RegisterRequest, RegisterResponse
from invest_api.services import auth as auth_service

router = APIRouter()


@router.post("/auth/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("5/minute")
def register(
    request: Request,
    register_data: RegisterRequest,
    db: Session = Depends(get_db)
):
    """
    Регистрация по email и паролю, опционально с реферальным кодом.
    Защищено лимитом в 5 запросов в минуту с одного IP.
    """
    return auth_service.register_user(db, register_data)
