# invest_api/schemas/user.py
from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, EmailStr, Field


# Схема формы регистрации
class RegisterRequest(BaseModel):
    name: str = Field(..., max_length=255)
    email: EmailStr
    password: str
    confirm_password: str
    referral_code: Optional[str] = None # Код пригласившего, необязательный

# Короткая карточка пользователя для вложенных ответов (админка, депозиты)
class UserShort(BaseModel):
    id: int
    name: str
    email: str

    class Config:
        from_attributes = True

class UserRead(UserShort):
    phone: Optional[str] = None
    referral_code: str
    referrer_id: Optional[int] = None
    account_balance: Decimal
    total_earning: Decimal
    rewards: Decimal
    created_at: datetime

    class Config:
        from_attributes = True

# Схема для ответа с токеном
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

class RegisterResponse(Token):
    user: UserRead
