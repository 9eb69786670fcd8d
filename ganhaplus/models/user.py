from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String

from ganhaplus.db.base import Base


class User(Base):
    __tablename__ = "users"
    __table_args__ = (CheckConstraint("balance >= 0", name="ck_users_balance_non_negative"),)

    id = Column(String, primary_key=True, default=lambda: str(uuid4()))
    phone = Column(String, unique=True, nullable=False, index=True)  # digits only, login name
    password_hash = Column(String, nullable=False)
    age = Column(Integer, nullable=False)  # checked >= min_age at registration only
    # Cached sum of history.amount; mutated only by LedgerStore.
    balance = Column(Integer, nullable=False, default=0)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
