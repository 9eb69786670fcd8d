from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Index, Integer, String

from ganhaplus.db.base import Base


class ShareEvent(Base):
    __tablename__ = "share_events"
    __table_args__ = (Index("ix_share_events_user_created", "user_id", "created_at"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, nullable=False)
    link_id = Column(String, nullable=False)  # client-supplied
    platform = Column(String, nullable=False)
    amount = Column(Integer, nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
