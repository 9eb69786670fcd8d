"""
LedgerStore: atomic balance primitives over users, history, share events and withdrawals.

No business rules live here: amounts, caps and windows are decided by the caller.
Balance is a cache over history; every mutation goes through post(), which pairs
the balance change with its history entry inside one transaction.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ganhaplus.core.errors import InsufficientFundsError, InternalError, NotFoundError, WalletError
from ganhaplus.ledger.locks import UserLocks, default_user_locks
from ganhaplus.models.history import CATEGORY_SHARE, HistoryEntry
from ganhaplus.models.share_event import ShareEvent
from ganhaplus.models.user import User
from ganhaplus.models.withdrawal import WithdrawalRequest

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LedgerStore:
    def __init__(
        self,
        db: Session,
        locks: UserLocks | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.db = db
        self.locks = locks if locks is not None else default_user_locks
        self.clock = clock or utcnow

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Commit everything written inside the block, or roll all of it back."""
        try:
            yield
            self.db.commit()
        except WalletError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("ledger_transaction_failed", extra={"error": str(e)})
            raise InternalError() from e
        except Exception:
            self.db.rollback()
            raise

    @contextmanager
    def user_scope(self, user_id: str) -> Iterator[User]:
        """
        Serialize check-then-act sequences for one user.
        Holds the per-user lock and a row lock on the user until commit/rollback.
        """
        with self.locks.hold(user_id):
            with self.atomic():
                yield self._lock_user(user_id)

    # ------------------------------------------------------------------
    # Balance
    # ------------------------------------------------------------------

    def get_balance(self, user_id: str) -> int:
        row = self.db.query(User.balance).filter(User.id == user_id).one_or_none()
        if row is None:
            raise NotFoundError("Usuário não encontrado")
        return row.balance

    def credit_or_debit(self, user_id: str, signed_amount: int) -> int:
        """Apply a signed delta to the cached balance. Flushes, does not commit."""
        user = self._lock_user(user_id)
        new_balance = user.balance + signed_amount
        if signed_amount < 0 and new_balance < 0:
            raise InsufficientFundsError()
        user.balance = new_balance
        self.db.add(user)
        self.db.flush()
        return new_balance

    def append_history(self, entry: HistoryEntry) -> int:
        if entry.created_at is None:
            entry.created_at = self.clock()
        self.db.add(entry)
        self.db.flush()
        return entry.id

    def post(
        self,
        user_id: str,
        category: str,
        amount: int,
        description: str,
        external_ref: str | None = None,
    ) -> tuple[int, HistoryEntry]:
        """Balance change + its history entry. Call inside atomic()/user_scope()."""
        new_balance = self.credit_or_debit(user_id, amount)
        entry = HistoryEntry(
            user_id=user_id,
            category=category,
            description=description,
            amount=amount,
            external_ref=external_ref,
            created_at=self.clock(),
        )
        self.append_history(entry)
        return new_balance, entry

    # ------------------------------------------------------------------
    # Event tables
    # ------------------------------------------------------------------

    def add_share_event(self, user_id: str, link_id: str, platform: str, amount: int) -> ShareEvent:
        event = ShareEvent(
            user_id=user_id,
            link_id=link_id,
            platform=platform,
            amount=amount,
            created_at=self.clock(),
        )
        self.db.add(event)
        self.db.flush()
        return event

    def create_withdrawal(self, user_id: str, amount: int, destination: str) -> WithdrawalRequest:
        withdrawal = WithdrawalRequest(
            user_id=user_id,
            amount=amount,
            destination=destination,
            created_at=self.clock(),
        )
        self.db.add(withdrawal)
        self.db.flush()
        return withdrawal

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def count_events_in_window(self, user_id: str, category: str, window_start: datetime) -> int:
        """
        Shares: ShareEvents strictly after window_start (rolling window).
        Other categories: history entries at or after window_start (calendar day).
        """
        if category == CATEGORY_SHARE:
            query = self.db.query(func.count(ShareEvent.id)).filter(
                ShareEvent.user_id == user_id,
                ShareEvent.created_at > window_start,
            )
        else:
            query = self.db.query(func.count(HistoryEntry.id)).filter(
                HistoryEntry.user_id == user_id,
                HistoryEntry.category == category,
                HistoryEntry.created_at >= window_start,
            )
        return query.scalar() or 0

    def list_history(self, user_id: str, limit: int) -> list[HistoryEntry]:
        return (
            self.db.query(HistoryEntry)
            .filter(HistoryEntry.user_id == user_id)
            .order_by(HistoryEntry.created_at.desc(), HistoryEntry.id.desc())
            .limit(limit)
            .all()
        )

    def history_total(self, user_id: str) -> int:
        """Sum of history amounts; equals the cached balance when the ledger is consistent."""
        return (
            self.db.query(func.coalesce(func.sum(HistoryEntry.amount), 0))
            .filter(HistoryEntry.user_id == user_id)
            .scalar()
        )

    def _lock_user(self, user_id: str) -> User:
        user = (
            self.db.query(User)
            .filter(User.id == user_id)
            .populate_existing()
            .with_for_update()
            .one_or_none()
        )
        if user is None:
            raise NotFoundError("Usuário não encontrado")
        return user
