# invest_api/routers/v1/endpoints/referrals.py
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from invest_api.dependencies import get_current_user, get_db, is_admin
from invest_api.models.user import User
from invest_api.schemas.referral import ReferralSummary
from invest_api.services import referral as referral_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/referrals/{user_id}", response_model=ReferralSummary)
def get_user_referrals(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Реферальное дерево пользователя. Чужое дерево доступно только администратору."""
    if current_user.id != user_id and not is_admin(current_user):
        logger.warning(f"User {current_user.id} tried to read referrals of user {user_id}.")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only view your own referrals")
    return referral_service.get_referral_summary(db, user_id=user_id)
