# invest_api/routers/v1/endpoints/admin/users.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from invest_api.dependencies import get_db
from invest_api.schemas.referral import ReferralSummary
from invest_api.services import referral as referral_service

router = APIRouter()


@router.get("/{user_id}/referrals", response_model=ReferralSummary)
def get_user_referral_tree(user_id: int, db: Session = Depends(get_db)):
    """Реферальное дерево любого пользователя."""
    return referral_service.get_referral_summary(db, user_id=user_id)
