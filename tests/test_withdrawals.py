# tests/test_withdrawals.py

from decimal import Decimal

from httpx import AsyncClient

from invest_api.models.withdrawal import Withdrawal

WITHDRAWALS_URL = "/api/v1/withdrawals"


async def test_create_withdrawal_request(client: AsyncClient, make_user, make_auth_headers, db_session):
    investor = make_user(balance=Decimal("100"))

    response = await client.post(
        WITHDRAWALS_URL,
        json={"amount": "40", "network": "trc20", "wallet_address": " TXYZwallet "},
        headers=make_auth_headers(investor),
    )

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "pending"
    assert data["amount"] == "40.00"
    assert data["network"] == "TRC20"
    assert data["wallet_address"] == "TXYZwallet"
    assert len(data["transaction_uid"]) == 32

    # Баланс списывается только при одобрении админом
    db_session.refresh(investor)
    assert investor.account_balance == Decimal("100.00")


async def test_withdrawal_above_balance_rejected(client: AsyncClient, make_user, make_auth_headers, db_session):
    investor = make_user(balance=Decimal("30"))

    response = await client.post(
        WITHDRAWALS_URL,
        json={"amount": "40", "network": "BEP20", "wallet_address": "0xwallet"},
        headers=make_auth_headers(investor),
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Insufficient balance"
    assert db_session.query(Withdrawal).count() == 0


async def test_withdrawal_validation(client: AsyncClient, make_user, make_auth_headers):
    investor = make_user(balance=Decimal("100"))
    headers = make_auth_headers(investor)

    response = await client.post(
        WITHDRAWALS_URL, json={"amount": "0", "network": "TRC20", "wallet_address": "T1"}, headers=headers
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid amount"

    response = await client.post(
        WITHDRAWALS_URL, json={"amount": "10", "network": "ERC20", "wallet_address": "T1"}, headers=headers
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid network selection"

    response = await client.post(
        WITHDRAWALS_URL, json={"amount": "10", "network": "TRC20", "wallet_address": "  "}, headers=headers
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Wallet address is required"


async def test_withdrawal_requires_token(client: AsyncClient):
    response = await client.post(
        WITHDRAWALS_URL, json={"amount": "10", "network": "TRC20", "wallet_address": "T1"}
    )
    assert response.status_code == 401


async def test_user_history_endpoints(client: AsyncClient, make_user, make_auth_headers, make_deposit):
    investor = make_user(balance=Decimal("100"))
    headers = make_auth_headers(investor)
    make_deposit(investor, amount="60")
    make_deposit(investor, amount="70")
    await client.post(
        WITHDRAWALS_URL, json={"amount": "10", "network": "TRC20", "wallet_address": "T1"}, headers=headers
    )

    response = await client.get("/api/v1/users/me/deposits", params={"size": 1}, headers=headers)
    assert response.status_code == 200
    assert response.json()["total_items"] == 2
    assert response.json()["total_pages"] == 2

    response = await client.get("/api/v1/users/me/withdrawals", headers=headers)
    assert response.status_code == 200
    assert response.json()["total_items"] == 1

    response = await client.get("/api/v1/users/me/transactions", headers=headers)
    assert response.status_code == 200
    assert response.json()["total_items"] == 0
    assert response.json()["total_pages"] == 1


async def test_withdrawal_amount_above_column_limit(client: AsyncClient, make_user, make_auth_headers, db_session):
    investor = make_user(balance=Decimal("100"))
    headers = make_auth_headers(investor)

    for amount in ("1e30", "10000000000000000", "0.001"):
        response = await client.post(
            WITHDRAWALS_URL, json={"amount": amount, "network": "TRC20", "wallet_address": "T1"}, headers=headers
        )
        assert response.status_code == 400, amount
        assert response.json()["detail"] == "Invalid amount"

    assert db_session.query(Withdrawal).count() == 0
