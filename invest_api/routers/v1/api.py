# invest_api/routers/v1/api.py

from fastapi import APIRouter

from invest_api.routers.v1.endpoints import auth, user, deposits, withdrawals, referrals
from invest_api.routers.v1.endpoints import admin as admin_v1_router

# Главный роутер API версии v1, в приложении подключается с префиксом /api
api_router = APIRouter(prefix="/v1")

# Пользовательские и публичные эндпоинты
api_router.include_router(auth.router, tags=["Authentication"])
api_router.include_router(user.router, tags=["Users"])
api_router.include_router(deposits.router, tags=["Deposits"])
api_router.include_router(withdrawals.router, tags=["Withdrawals"])
api_router.include_router(referrals.router, tags=["Referrals"])

# Админские эндпоинты
api_router.include_router(admin_v1_router.router, prefix="/admin")
