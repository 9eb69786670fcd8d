"""Import every model so Base.metadata knows all tables."""
from ganhaplus.models.history import HistoryEntry
from ganhaplus.models.share_event import ShareEvent
from ganhaplus.models.user import User
from ganhaplus.models.withdrawal import WithdrawalRequest

__all__ = ["HistoryEntry", "ShareEvent", "User", "WithdrawalRequest"]
