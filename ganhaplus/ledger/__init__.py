"""
Ledger: user balances as a cache over an append-only history,
plus the event tables used for rate-window queries.
"""
from ganhaplus.ledger.locks import UserLocks, default_user_locks
from ganhaplus.ledger.store import LedgerStore, utcnow

__all__ = ["LedgerStore", "UserLocks", "default_user_locks", "utcnow"]
