# invest_api/routers/v1/endpoints/admin/__init__.py

from fastapi import APIRouter, Depends
from invest_api.dependencies import get_admin_user

from . import (
    general,
    deposits,
    withdrawals,
    users,
)

# Зависимость get_admin_user применяется ко всем эндпоинтам,
# подключенным к этому роутеру: доступ только у администраторов.
router = APIRouter(
    tags=["Admin"],
    dependencies=[Depends(get_admin_user)]
)

# /admin/dashboard
router.include_router(general.router)

# /admin/deposits, /admin/deposits/{id}, /admin/deposits/{id}/status
router.include_router(deposits.router, prefix="/deposits")

# /admin/withdrawals, /admin/withdrawals/{id}/status
router.include_router(withdrawals.router, prefix="/withdrawals")

# /admin/users/{id}/referrals
router.include_router(users.router, prefix="/users")
