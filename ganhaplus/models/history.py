from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Index, Integer, String, Text

from ganhaplus.db.base import Base

CATEGORY_AD = "anuncio"
CATEGORY_TASK = "tarefa"
CATEGORY_SHARE = "compartilhamento"
CATEGORY_WITHDRAWAL = "saque"


class HistoryEntry(Base):
    """Append-only audit record. Never updated or deleted."""

    __tablename__ = "history"
    __table_args__ = (Index("ix_history_user_category_created", "user_id", "category", "created_at"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, nullable=False, index=True)
    category = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    amount = Column(Integer, nullable=False)  # signed: credits > 0, withdrawal debit < 0
    external_ref = Column(String, nullable=True)  # ad id, share link id, withdrawal id
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
