# invest_api/core/config.py
from decimal import Decimal
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Настройки базы данных
    DATABASE_USER: str
    DATABASE_PASSWORD: str
    DATABASE_HOST: str
    DATABASE_PORT: int
    DATABASE_NAME: str

    # Настройки JWT токенов
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24  # 24 часа

    REDIS_HOST: str
    REDIS_PORT: int
    RATE_LIMIT_ENABLED: bool = True

    # Публичный адрес фронтенда, из него строятся реферальные ссылки
    BASE_URL: str = "http://localhost:3000"
    REFERRAL_CODE_PREFIX: str = "BDS"

    # Администраторы определяются по email
    ADMIN_EMAILS_STR: str = Field(default="", alias="ADMIN_EMAILS")

    @property
    def ADMIN_EMAILS(self) -> List[str]:
        return [email.strip().lower() for email in self.ADMIN_EMAILS_STR.split(",") if email.strip()]

    # Депозиты
    MIN_DEPOSIT_AMOUNT: Decimal = Decimal("50")
    # Верхняя граница суммы депозита и вывода, колонки Numeric(18, 2)
    MAX_AMOUNT: Decimal = Decimal("10000000000000000")
    MAX_UPLOAD_SIZE_MB: int = 5
    UPLOAD_DIR: str = "uploads"
    ORPHAN_UPLOAD_MAX_AGE_HOURS: int = 24

    # Реферальная программа
    LEVEL1_COMMISSION_RATE: Decimal = Decimal("0.05")
    LEVEL2_COMMISSION_RATE: Decimal = Decimal("0.02")
    # True - в оборот рефералов идут только подтвержденные депозиты
    REFERRAL_COUNT_VERIFIED_ONLY: bool = True

    # Telegram-бот для уведомлений администраторов (необязательно)
    TELEGRAM_BOT_TOKEN: str | None = None
    ADMIN_CHAT_ID: int | None = None

    CORS_ORIGINS_STR: str = Field(default="http://localhost:3000", alias="CORS_ORIGINS")

    @property
    def CORS_ORIGINS(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS_STR.split(",") if origin.strip()]

    @property
    def MAX_UPLOAD_SIZE_BYTES(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def REDIS_URL(self) -> str:
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}"

    @property
    def DATABASE_URL(self) -> str:
        return f"postgresql+psycopg2://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}"

    model_config = SettingsConfigDict(env_file=".env", populate_by_name=True)

settings = Settings()
