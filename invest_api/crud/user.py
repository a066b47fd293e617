# invest_api/crud/user.py
from datetime import datetime
from sqlalchemy.orm import Session
from sqlalchemy import func
from invest_api.models.user import User


def get_user_by_id(db: Session, user_id: int) -> User | None:
    """Получает пользователя по его первичному ключу."""
    return db.query(User).filter(User.id == user_id).first()

def get_user_for_update(db: Session, user_id: int) -> User | None:
    """То же самое, но с блокировкой строки до конца транзакции (баланс меняется только так)."""
    return db.query(User).filter(User.id == user_id).with_for_update().first()

def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()

def get_user_by_referral_code(db: Session, code: str) -> User | None:
    return db.query(User).filter(User.referral_code == code).first()

def create_user(
    db: Session,
    name: str,
    email: str,
    referral_code: str,
    password_hash: str | None = None,
    referrer_id: int | None = None,
) -> User:
    """
    Создает пользователя и добавляет его в сессию.
    Требует внешнего вызова db.commit().
    """
    db_user = User(
        name=name,
        email=email.strip().lower(),
        password_hash=password_hash,
        referral_code=referral_code,
        referrer_id=referrer_id,
    )
    db.add(db_user)
    db.flush()
    return db_user


def count_all_users(db: Session) -> int:
    return db.query(User).count()

def count_new_users_since(db: Session, since: datetime) -> int:
    return db.query(func.count(User.id)).filter(User.created_at >= since).scalar()
