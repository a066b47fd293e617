# tests/v1/test_referrals_api.py

from httpx import AsyncClient
from sqlalchemy.exc import SQLAlchemyError

from invest_api.models.deposit import DepositStatus


async def test_own_referral_tree(client: AsyncClient, make_user, make_deposit, make_auth_headers):
    user_a = make_user(name="Alice")
    user_b = make_user(name="Bob", referrer=user_a)
    user_c = make_user(name="Carol", referrer=user_a)
    user_d = make_user(name="Dave", referrer=user_b)
    make_deposit(user_b, amount="100", status=DepositStatus.VERIFIED)
    make_deposit(user_c, amount="200", status=DepositStatus.VERIFIED)
    make_deposit(user_d, amount="50", status=DepositStatus.VERIFIED)

    response = await client.get(f"/api/v1/referrals/{user_a.id}", headers=make_auth_headers(user_a))

    assert response.status_code == 200
    data = response.json()
    assert data["statistics"]["level1_total"] == "300.00"
    assert data["statistics"]["level2_total"] == "50.00"
    assert data["statistics"]["level1_commission"] == "15.00"
    assert data["statistics"]["level2_commission"] == "1.00"
    assert data["statistics"]["total_commission"] == "16.00"
    assert data["referrals"]["level2"][0]["level1_referral_name"] == "Bob"
    assert data["user"]["referral_link"].endswith(f"/signup?ref={user_a.referral_code}")

    # Тот же результат через /users/me/referrals
    response = await client.get("/api/v1/users/me/referrals", headers=make_auth_headers(user_a))
    assert response.json()["statistics"]["total_commission"] == "16.00"


async def test_foreign_tree_forbidden_for_regular_user(client: AsyncClient, make_user, auth_headers):
    other = make_user()

    response = await client.get(f"/api/v1/referrals/{other.id}", headers=auth_headers)

    assert response.status_code == 403


async def test_admin_can_read_any_tree(client: AsyncClient, make_user, admin_auth_headers):
    other = make_user(name="Other")

    response = await client.get(f"/api/v1/referrals/{other.id}", headers=admin_auth_headers)
    assert response.status_code == 200
    assert response.json()["user"]["name"] == "Other"

    response = await client.get(f"/api/v1/admin/users/{other.id}/referrals", headers=admin_auth_headers)
    assert response.status_code == 200
    assert response.json()["user_found"] is True


async def test_unknown_user_returns_zero_structure(client: AsyncClient, admin_auth_headers):
    response = await client.get("/api/v1/referrals/9999", headers=admin_auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["user_found"] is False
    assert data["referrals"] == {"level1": [], "level2": []}
    assert data["statistics"]["total_commission"] == "0.00"


async def test_database_failure_returns_fallback(client: AsyncClient, test_user, auth_headers, mocker):
    mocker.patch(
        "invest_api.services.referral.crud_referral.get_level2_referrals",
        side_effect=SQLAlchemyError("timeout"),
    )

    response = await client.get(f"/api/v1/referrals/{test_user.id}", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["fallback"] is True
    assert data["error"]
    assert data["statistics"]["level1_count"] == 0
