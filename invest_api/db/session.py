# invest_api/db/session.py
import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """
    Владелец движка и фабрики сессий.
    Создается при старте приложения (lifespan) и закрывается при остановке,
    в обработчики попадает через зависимость `get_db`.
    """

    def __init__(self, url: str, **engine_kwargs):
        engine_kwargs.setdefault("pool_pre_ping", True)
        self.engine = create_engine(url, **engine_kwargs)
        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        logger.info(f"Database engine created for {self.engine.url.render_as_string(hide_password=True)}")

    def session(self) -> Session:
        return self._session_factory()

    def create_all(self):
        """Создает таблицы напрямую, без миграций (тесты и локальный запуск)."""
        Base.metadata.create_all(bind=self.engine)

    def dispose(self):
        self.engine.dispose()
        logger.info("Database engine disposed.")
