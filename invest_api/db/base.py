# invest_api/db/base.py
# Импортируем все модели, чтобы они зарегистрировались в Base.metadata
# (нужно для Alembic, тестов и строковых ссылок в relationship).
from invest_api.db.session import Base  # noqa: F401
from invest_api.models.user import User  # noqa: F401
from invest_api.models.deposit import Deposit  # noqa: F401
from invest_api.models.withdrawal import Withdrawal  # noqa: F401
from invest_api.models.transaction import Transaction  # noqa: F401
