# tests/v1/admin/test_deposits.py

from decimal import Decimal

from httpx import AsyncClient
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from invest_api.models.deposit import DepositStatus
from invest_api.models.transaction import Transaction, TransactionType


def _status_url(deposit_id: int) -> str:
    return f"/api/v1/admin/deposits/{deposit_id}/status"


async def test_approve_deposit_credits_balance_once(
    client: AsyncClient, admin_auth_headers, admin_user, test_user, make_deposit, db_session, mock_redis
):
    deposit = make_deposit(test_user, amount="100")

    # 1. Первое подтверждение: баланс растет, появляется одна проводка
    response = await client.put(
        _status_url(deposit.id), json={"status": "approved", "admin_notes": "tx found"}, headers=admin_auth_headers
    )
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "verified"
    assert data["admin_notes"] == "tx found"
    assert data["reviewed_by"] == admin_user.id
    assert data["reviewed_at"] is not None
    mock_redis.delete.assert_awaited()

    db_session.refresh(test_user)
    assert test_user.account_balance == Decimal("100.00")
    transactions = db_session.query(Transaction).filter(Transaction.user_id == test_user.id).all()
    assert len(transactions) == 1
    assert transactions[0].type == TransactionType.DEPOSIT
    assert transactions[0].deposit_id == deposit.id
    assert transactions[0].amount == Decimal("100.00")

    # 2. Повторное подтверждение отклоняется и ничего не меняет
    response = await client.put(_status_url(deposit.id), json={"status": "verified"}, headers=admin_auth_headers)
    assert response.status_code == 409

    db_session.refresh(test_user)
    assert test_user.account_balance == Decimal("100.00")
    assert db_session.query(Transaction).count() == 1


async def test_reject_deposit_keeps_balance(
    client: AsyncClient, admin_auth_headers, make_user, make_deposit, db_session
):
    investor = make_user(balance=Decimal("20"))
    deposit = make_deposit(investor, amount="500")

    response = await client.put(
        _status_url(deposit.id), json={"status": "rejected", "admin_notes": "no such tx"}, headers=admin_auth_headers
    )

    assert response.status_code == 200
    assert response.json()["status"] == "rejected"
    db_session.refresh(investor)
    assert investor.account_balance == Decimal("20.00")
    assert db_session.query(Transaction).count() == 0

    # Из конечного статуса дальше не двигаемся
    response = await client.put(_status_url(deposit.id), json={"status": "verified"}, headers=admin_auth_headers)
    assert response.status_code == 409


async def test_unknown_status_and_missing_deposit(client: AsyncClient, admin_auth_headers, test_user, make_deposit):
    deposit = make_deposit(test_user)

    response = await client.put(_status_url(deposit.id), json={"status": "paid"}, headers=admin_auth_headers)
    assert response.status_code == 400

    response = await client.put(_status_url(9999), json={"status": "verified"}, headers=admin_auth_headers)
    assert response.status_code == 404
    assert response.json()["detail"] == "Deposit not found"


async def test_list_deposits_with_status_filter(client: AsyncClient, admin_auth_headers, test_user, make_deposit):
    for _ in range(3):
        make_deposit(test_user, status=DepositStatus.PENDING)
    make_deposit(test_user, status=DepositStatus.VERIFIED)

    response = await client.get(
        "/api/v1/admin/deposits", params={"status": "pending", "page": 1, "size": 2}, headers=admin_auth_headers
    )

    assert response.status_code == 200
    data = response.json()
    assert data["total_items"] == 3
    assert data["total_pages"] == 2
    assert len(data["items"]) == 2
    assert all(item["status"] == "pending" for item in data["items"])
    assert data["items"][0]["user"]["email"] == test_user.email

    response = await client.get("/api/v1/admin/deposits", params={"status": "bogus"}, headers=admin_auth_headers)
    assert response.status_code == 400


async def test_get_deposit_and_image(client: AsyncClient, admin_auth_headers, test_user, make_deposit, upload_dir):
    upload_dir.mkdir(parents=True, exist_ok=True)
    (upload_dir / "proof-1.png").write_bytes(b"\x89PNG fake image")
    deposit = make_deposit(test_user, image_url="/uploads/proof-1.png")
    missing = make_deposit(test_user, image_url="/uploads/missing.png")

    response = await client.get(f"/api/v1/admin/deposits/{deposit.id}", headers=admin_auth_headers)
    assert response.status_code == 200
    assert response.json()["user"]["id"] == test_user.id

    response = await client.get(f"/api/v1/admin/deposits/{deposit.id}/image", headers=admin_auth_headers)
    assert response.status_code == 200
    assert response.content == b"\x89PNG fake image"

    response = await client.get(f"/api/v1/admin/deposits/{missing.id}/image", headers=admin_auth_headers)
    assert response.status_code == 404


async def test_failed_ledger_write_rolls_back_credit(
    client: AsyncClient, admin_auth_headers, test_user, make_deposit, db_session, mocker
):
    deposit = make_deposit(test_user, amount="100")
    mocker.patch(
        "invest_api.services.verification.crud_transaction.create_transaction",
        side_effect=SQLAlchemyError("ledger write failed"),
    )

    response = await client.put(_status_url(deposit.id), json={"status": "verified"}, headers=admin_auth_headers)

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to update deposit status"

    # Ни статус, ни баланс не изменились
    db_session.refresh(deposit)
    db_session.refresh(test_user)
    assert deposit.status == DepositStatus.PENDING
    assert deposit.reviewed_by is None
    assert test_user.account_balance == Decimal("0.00")
    assert db_session.query(Transaction).count() == 0


async def test_duplicate_ledger_entry_is_conflict(
    client: AsyncClient, admin_auth_headers, test_user, make_deposit, db_session, mocker
):
    deposit = make_deposit(test_user, amount="100")
    mocker.patch(
        "invest_api.services.verification.crud_transaction.create_transaction",
        side_effect=IntegrityError("INSERT INTO transactions", {}, Exception("UNIQUE constraint failed")),
    )

    response = await client.put(_status_url(deposit.id), json={"status": "verified"}, headers=admin_auth_headers)

    assert response.status_code == 409
    assert response.json()["detail"] == "Deposit has already been processed"

    db_session.refresh(deposit)
    db_session.refresh(test_user)
    assert deposit.status == DepositStatus.PENDING
    assert test_user.account_balance == Decimal("0.00")
