# invest_api/routers/v1/endpoints/admin/general.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from invest_api.dependencies import get_db
from invest_api.schemas.admin import DashboardStats
from invest_api.services import admin as admin_service

router = APIRouter()


@router.get("/dashboard", response_model=DashboardStats)
async def get_admin_dashboard(db: Session = Depends(get_db)):
    """Счетчики пользователей, депозитов и выводов для главной страницы админки."""
    return await admin_service.get_dashboard_stats(db)
