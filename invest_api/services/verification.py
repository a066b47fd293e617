# invest_api/services/verification.py
import logging
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from invest_api.crud import deposit as crud_deposit
from invest_api.crud import transaction as crud_transaction
from invest_api.crud import user as crud_user
from invest_api.crud import withdrawal as crud_withdrawal
from invest_api.models.deposit import Deposit, DepositStatus
from invest_api.models.transaction import TransactionType
from invest_api.models.user import User
from invest_api.models.withdrawal import Withdrawal, WithdrawalStatus

logger = logging.getLogger(__name__)

# Админка присылает 'approved' для подтверждения депозита
DEPOSIT_STATUS_ALIASES = {"approved": DepositStatus.VERIFIED.value}


def parse_deposit_status(value: str | None) -> DepositStatus:
    normalized = (value or "").strip().lower()
    normalized = DEPOSIT_STATUS_ALIASES.get(normalized, normalized)
    try:
        return DepositStatus(normalized)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid deposit status '{value}'")


def parse_withdrawal_status(value: str | None) -> WithdrawalStatus:
    try:
        return WithdrawalStatus((value or "").strip().lower())
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid withdrawal status '{value}'")


def update_deposit_status(
    db: Session,
    deposit_id: int,
    new_status: str,
    admin: User,
    admin_notes: str | None = None,
) -> Deposit:
    """
    Переводит депозит в новый статус.
    При подтверждении в той же транзакции увеличивает баланс владельца
    и добавляет запись в журнал транзакций. Либо все, либо ничего.
    """
    target_status = parse_deposit_status(new_status)

    try:
        deposit = crud_deposit.get_deposit_for_update(db, deposit_id=deposit_id)
        if not deposit:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Deposit not found")

        current_status = deposit.status
        if not current_status.can_transition_to(target_status):
            logger.warning(
                f"Admin {admin.id} tried to move deposit {deposit_id} "
                f"from '{current_status.value}' to '{target_status.value}'."
            )
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Cannot change deposit status from '{current_status.value}' to '{target_status.value}'",
            )

        deposit.status = target_status
        deposit.admin_notes = admin_notes
        deposit.reviewed_by = admin.id
        deposit.reviewed_at = datetime.now(timezone.utc)

        if target_status == DepositStatus.VERIFIED:
            owner = crud_user.get_user_for_update(db, user_id=deposit.user_id)
            owner.account_balance = (owner.account_balance or 0) + deposit.amount
            crud_transaction.create_transaction(
                db,
                user_id=owner.id,
                amount=deposit.amount,
                type=TransactionType.DEPOSIT,
                description=f"Deposit #{deposit.id} via {deposit.network.value}",
                deposit_id=deposit.id,
            )

        db.commit()
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError:
        # Уникальный deposit_id в журнале: депозит уже проведен параллельным запросом
        db.rollback()
        logger.warning(f"Deposit {deposit_id} already has a ledger entry.", exc_info=True)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Deposit has already been processed")
    except SQLAlchemyError:
        db.rollback()
        logger.error(f"Database error while updating deposit {deposit_id}.", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update deposit status")

    db.refresh(deposit)
    logger.info(
        f"Admin {admin.id} changed deposit {deposit_id} status "
        f"'{current_status.value}' -> '{target_status.value}'."
    )
    return deposit


def update_withdrawal_status(
    db: Session,
    withdrawal_id: int,
    new_status: str,
    admin: User,
    admin_notes: str | None = None,
    transaction_hash: str | None = None,
) -> Withdrawal:
    """
    Переводит заявку на вывод в новый статус.
    pending -> approved списывает сумму с баланса (одна проводка на заявку),
    approved -> completed только фиксирует хеш выплаты.
    """
    target_status = parse_withdrawal_status(new_status)

    try:
        withdrawal = crud_withdrawal.get_withdrawal_for_update(db, withdrawal_id=withdrawal_id)
        if not withdrawal:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Withdrawal not found")

        current_status = withdrawal.status
        if not current_status.can_transition_to(target_status):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Cannot change withdrawal status from '{current_status.value}' to '{target_status.value}'",
            )

        if target_status == WithdrawalStatus.APPROVED:
            owner = crud_user.get_user_for_update(db, user_id=withdrawal.user_id)
            balance = owner.account_balance or 0
            if balance < withdrawal.amount:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Insufficient balance")
            owner.account_balance = balance - withdrawal.amount
            crud_transaction.create_transaction(
                db,
                user_id=owner.id,
                amount=-withdrawal.amount,
                type=TransactionType.WITHDRAWAL,
                description=f"Withdrawal {withdrawal.transaction_uid} to {withdrawal.network.value}",
                withdrawal_id=withdrawal.id,
            )

        if target_status == WithdrawalStatus.COMPLETED and transaction_hash:
            withdrawal.transaction_hash = transaction_hash.strip()

        withdrawal.status = target_status
        if admin_notes is not None:
            withdrawal.admin_notes = admin_notes
        withdrawal.processed_by = admin.id
        withdrawal.processed_at = datetime.now(timezone.utc)

        db.commit()
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError:
        db.rollback()
        logger.warning(f"Withdrawal {withdrawal_id} already has a ledger entry.", exc_info=True)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Withdrawal has already been processed")
    except SQLAlchemyError:
        db.rollback()
        logger.error(f"Database error while updating withdrawal {withdrawal_id}.", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update withdrawal status")

    db.refresh(withdrawal)
    logger.info(
        f"Admin {admin.id} changed withdrawal {withdrawal_id} status "
        f"'{current_status.value}' -> '{target_status.value}'."
    )
    return withdrawal
