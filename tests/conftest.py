# tests/conftest.py
import os

# Настройки должны быть в окружении до первого импорта invest_api
os.environ.update({
    "DATABASE_USER": "test",
    "DATABASE_PASSWORD": "test",
    "DATABASE_HOST": "localhost",
    "DATABASE_PORT": "5432",
    "DATABASE_NAME": "test",
    "SECRET_KEY": "test-secret-key",
    "REDIS_HOST": "localhost",
    "REDIS_PORT": "6379",
    "RATE_LIMIT_ENABLED": "false",
    "ADMIN_EMAILS": "admin@example.com",
})
os.environ.pop("TELEGRAM_BOT_TOKEN", None)
os.environ.pop("ADMIN_CHAT_ID", None)

import logging
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from invest_api.core.config import settings
from invest_api.db.session import Database
from invest_api.dependencies import get_db
from invest_api.main import app
from invest_api.models.deposit import Deposit, DepositNetwork, DepositStatus
from invest_api.models.user import User
from invest_api.services.auth import create_access_token

logger = logging.getLogger(__name__)

ADMIN_EMAIL = "admin@example.com"


@pytest.fixture(scope="function")
def database() -> Database:
    """
    In-memory SQLite с одним соединением на все потоки
    (синхронные эндпоинты выполняются в threadpool).
    """
    database = Database(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    database.create_all()
    yield database
    database.dispose()


@pytest.fixture(scope="function")
def db_session(database: Database) -> Session:
    """Сессия, общая для теста и эндпоинтов."""
    db = database.session()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    """Файлы загрузок пишутся во временную директорию теста."""
    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(path))
    return path


@pytest.fixture(autouse=True)
def mock_redis(mocker):
    """Redis в тестах не нужен: подменяем клиент в сервисе админки."""
    mock_client = AsyncMock()
    mock_client.get.return_value = None
    mocker.patch("invest_api.services.admin.redis_client", mock_client)
    return mock_client


@pytest.fixture
async def client(database: Database, db_session: Session):
    def override_get_db():
        yield db_session

    app.state.database = database
    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session: Session):
    """Фабрика пользователей. Код вида BDS + 7 символов, как у настоящих."""
    counter = {"value": 0}

    def _make_user(
        name: str = None,
        email: str = None,
        referrer: User | None = None,
        balance: Decimal = Decimal("0"),
        password_hash: str | None = "hashed",
    ) -> User:
        counter["value"] += 1
        n = counter["value"]
        user = User(
            name=name or f"User {n}",
            email=email or f"user{n}@example.com",
            password_hash=password_hash,
            referral_code=f"BDS{n:07d}",
            referrer_id=referrer.id if referrer else None,
            account_balance=balance,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        logger.info(f"--- CREATED TEST USER (ID: {user.id}, email: {user.email}) ---")
        return user

    return _make_user


@pytest.fixture
def make_deposit(db_session: Session):
    def _make_deposit(
        user: User,
        amount: str = "100",
        status: DepositStatus = DepositStatus.PENDING,
        network: DepositNetwork = DepositNetwork.TRC20,
        image_url: str = "/uploads/proof.png",
    ) -> Deposit:
        deposit = Deposit(
            user_id=user.id,
            referrer_id=user.referrer_id,
            name=user.name,
            email=user.email,
            amount=Decimal(amount),
            network=network,
            image_url=image_url,
            status=status,
        )
        db_session.add(deposit)
        db_session.commit()
        db_session.refresh(deposit)
        return deposit

    return _make_deposit


@pytest.fixture
def test_user(make_user) -> User:
    return make_user(name="Test User", email="user@example.com")


@pytest.fixture
def admin_user(make_user) -> User:
    return make_user(name="Admin", email=ADMIN_EMAIL)


def auth_headers_for(user: User) -> dict:
    token = create_access_token(data={"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_auth_headers():
    return auth_headers_for


@pytest.fixture
def auth_headers(test_user: User) -> dict:
    return auth_headers_for(test_user)


@pytest.fixture
def admin_auth_headers(admin_user: User) -> dict:
    return auth_headers_for(admin_user)
