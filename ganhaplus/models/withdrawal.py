from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String

from ganhaplus.db.base import Base

STATUS_PENDING = "pendente"
STATUS_PAID = "pago"


class WithdrawalRequest(Base):
    __tablename__ = "withdrawals"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, nullable=False, index=True)
    amount = Column(Integer, nullable=False)  # already debited from balance at creation
    destination = Column(String, nullable=False)  # Multicaixa Express number
    status = Column(String, nullable=False, default=STATUS_PENDING, index=True)  # pendente -> pago, terminal
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    paid_at = Column(DateTime(timezone=True), nullable=True)
