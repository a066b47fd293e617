# tests/v1/admin/test_withdrawals_admin.py

from decimal import Decimal

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from invest_api.models.deposit import DepositNetwork
from invest_api.models.transaction import Transaction, TransactionType
from invest_api.models.withdrawal import Withdrawal, WithdrawalStatus


@pytest.fixture
def make_withdrawal(db_session):
    def _make_withdrawal(user, amount: str = "40", status: WithdrawalStatus = WithdrawalStatus.PENDING) -> Withdrawal:
        withdrawal = Withdrawal(
            user_id=user.id,
            amount=Decimal(amount),
            network=DepositNetwork.TRC20,
            wallet_address="TXYZwallet",
            status=status,
        )
        db_session.add(withdrawal)
        db_session.commit()
        db_session.refresh(withdrawal)
        return withdrawal

    return _make_withdrawal


def _status_url(withdrawal_id: int) -> str:
    return f"/api/v1/admin/withdrawals/{withdrawal_id}/status"


async def test_approve_then_complete_debits_once(
    client: AsyncClient, admin_auth_headers, make_user, make_withdrawal, db_session
):
    investor = make_user(balance=Decimal("100"))
    withdrawal = make_withdrawal(investor, amount="40")

    # 1. Одобрение списывает сумму
    response = await client.put(_status_url(withdrawal.id), json={"status": "approved"}, headers=admin_auth_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "approved"

    db_session.refresh(investor)
    assert investor.account_balance == Decimal("60.00")
    [transaction] = db_session.query(Transaction).all()
    assert transaction.type == TransactionType.WITHDRAWAL
    assert transaction.amount == Decimal("-40.00")
    assert transaction.withdrawal_id == withdrawal.id

    # 2. Завершение фиксирует хеш и баланс не трогает
    response = await client.put(
        _status_url(withdrawal.id),
        json={"status": "completed", "transaction_hash": "0xpayout"},
        headers=admin_auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["status"] == "completed"
    assert response.json()["transaction_hash"] == "0xpayout"

    db_session.refresh(investor)
    assert investor.account_balance == Decimal("60.00")
    assert db_session.query(Transaction).count() == 1


async def test_reject_never_touches_balance(client: AsyncClient, admin_auth_headers, make_user, make_withdrawal, db_session):
    investor = make_user(balance=Decimal("100"))
    withdrawal = make_withdrawal(investor, amount="40")

    response = await client.put(_status_url(withdrawal.id), json={"status": "rejected"}, headers=admin_auth_headers)

    assert response.status_code == 200
    db_session.refresh(investor)
    assert investor.account_balance == Decimal("100.00")
    assert db_session.query(Transaction).count() == 0


async def test_approve_with_insufficient_balance(client: AsyncClient, admin_auth_headers, make_user, make_withdrawal, db_session):
    investor = make_user(balance=Decimal("10"))
    withdrawal = make_withdrawal(investor, amount="40")

    response = await client.put(_status_url(withdrawal.id), json={"status": "approved"}, headers=admin_auth_headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "Insufficient balance"
    db_session.refresh(withdrawal)
    assert withdrawal.status == WithdrawalStatus.PENDING


async def test_invalid_withdrawal_transitions(client: AsyncClient, admin_auth_headers, test_user, make_withdrawal):
    withdrawal = make_withdrawal(test_user)

    response = await client.put(_status_url(withdrawal.id), json={"status": "completed"}, headers=admin_auth_headers)
    assert response.status_code == 409

    response = await client.put(_status_url(withdrawal.id), json={"status": "sent"}, headers=admin_auth_headers)
    assert response.status_code == 400

    response = await client.put(_status_url(9999), json={"status": "approved"}, headers=admin_auth_headers)
    assert response.status_code == 404


async def test_list_withdrawals(client: AsyncClient, admin_auth_headers, test_user, make_withdrawal):
    make_withdrawal(test_user)
    make_withdrawal(test_user, status=WithdrawalStatus.REJECTED)

    response = await client.get("/api/v1/admin/withdrawals", params={"status": "pending"}, headers=admin_auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["total_items"] == 1
    assert data["items"][0]["user"]["id"] == test_user.id
    assert len(data["items"][0]["transaction_uid"]) == 32


async def test_failed_ledger_write_rolls_back_debit(
    client: AsyncClient, admin_auth_headers, make_user, make_withdrawal, db_session, mocker
):
    investor = make_user(balance=Decimal("100"))
    withdrawal = make_withdrawal(investor, amount="40")
    mocker.patch(
        "invest_api.services.verification.crud_transaction.create_transaction",
        side_effect=SQLAlchemyError("ledger write failed"),
    )

    response = await client.put(_status_url(withdrawal.id), json={"status": "approved"}, headers=admin_auth_headers)

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to update withdrawal status"

    db_session.refresh(withdrawal)
    db_session.refresh(investor)
    assert withdrawal.status == WithdrawalStatus.PENDING
    assert withdrawal.processed_by is None
    assert investor.account_balance == Decimal("100.00")
    assert db_session.query(Transaction).count() == 0


async def test_duplicate_withdrawal_ledger_entry_is_conflict(
    client: AsyncClient, admin_auth_headers, make_user, make_withdrawal, db_session, mocker
):
    investor = make_user(balance=Decimal("100"))
    withdrawal = make_withdrawal(investor, amount="40")
    mocker.patch(
        "invest_api.services.verification.crud_transaction.create_transaction",
        side_effect=IntegrityError("INSERT INTO transactions", {}, Exception("UNIQUE constraint failed")),
    )

    response = await client.put(_status_url(withdrawal.id), json={"status": "approved"}, headers=admin_auth_headers)

    assert response.status_code == 409
    assert response.json()["detail"] == "Withdrawal has already been processed"

    db_session.refresh(withdrawal)
    db_session.refresh(investor)
    assert withdrawal.status == WithdrawalStatus.PENDING
    assert investor.account_balance == Decimal("100.00")
