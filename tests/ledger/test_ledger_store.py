"""Tests for LedgerStore: atomic balance + history primitives and window counts."""
from datetime import timedelta

import pytest

from ganhaplus.core.errors import InsufficientFundsError, InternalError, NotFoundError
from ganhaplus.ledger import LedgerStore, UserLocks
from ganhaplus.models.history import CATEGORY_AD, CATEGORY_SHARE, CATEGORY_TASK, CATEGORY_WITHDRAWAL, HistoryEntry
from ganhaplus.rewards import RewardEngine


def _history_count(db, user_id):
    return db.query(HistoryEntry).filter(HistoryEntry.user_id == user_id).count()


class TestCreditOrDebit:
    def test_credit_commits_balance_and_history_together(self, db, locks, clock, make_user):
        user_id = make_user()
        store = LedgerStore(db, locks=locks, clock=clock)

        with store.atomic():
            new_balance, entry = store.post(user_id, CATEGORY_AD, 500, "Assistiu anúncio", external_ref="ad-1")

        assert new_balance == 500
        assert store.get_balance(user_id) == 500
        assert store.history_total(user_id) == 500
        assert entry.id is not None

    def test_debit_below_zero_rejected_and_nothing_written(self, db, locks, clock, make_user):
        user_id = make_user(balance=50)
        store = LedgerStore(db, locks=locks, clock=clock)

        with pytest.raises(InsufficientFundsError):
            with store.atomic():
                store.post(user_id, CATEGORY_WITHDRAWAL, -100, "Saque")

        assert store.get_balance(user_id) == 50
        assert _history_count(db, user_id) == 1

    def test_debit_to_exactly_zero_allowed(self, db, locks, clock, make_user):
        user_id = make_user(balance=100)
        store = LedgerStore(db, locks=locks, clock=clock)

        with store.atomic():
            new_balance, _ = store.post(user_id, CATEGORY_WITHDRAWAL, -100, "Saque")

        assert new_balance == 0
        assert store.history_total(user_id) == 0

    def test_unknown_user(self, db, locks):
        store = LedgerStore(db, locks=locks)
        with pytest.raises(NotFoundError):
            with store.atomic():
                store.credit_or_debit("missing", 10)
        with pytest.raises(NotFoundError):
            store.get_balance("missing")

    def test_error_after_credit_rolls_back_balance(self, db, locks, clock, make_user):
        user_id = make_user()
        store = LedgerStore(db, locks=locks, clock=clock)

        with pytest.raises(RuntimeError):
            with store.atomic():
                store.credit_or_debit(user_id, 100)
                raise RuntimeError("crash before history append")

        assert store.get_balance(user_id) == 0
        assert _history_count(db, user_id) == 0

    def test_storage_failure_maps_to_internal_error(self, db, locks, clock, make_user):
        user_id = make_user()
        store = LedgerStore(db, locks=locks, clock=clock)

        with pytest.raises(InternalError):
            with store.atomic():
                store.credit_or_debit(user_id, 100)
                store.append_history(HistoryEntry(user_id=user_id, category=None, amount=100))

        assert store.get_balance(user_id) == 0
        assert _history_count(db, user_id) == 0


class TestUserScope:
    def test_scope_yields_locked_user_and_commits(self, db, locks, clock, make_user):
        user_id = make_user()
        store = LedgerStore(db, locks=locks, clock=clock)

        with store.user_scope(user_id) as user:
            assert user.id == user_id
            assert len(locks) == 1
            store.post(user_id, CATEGORY_TASK, 100, "Tarefa", external_ref="t1")

        assert store.get_balance(user_id) == 100
        assert len(locks) == 0

    def test_injected_registry_is_used_even_when_idle(self, db, clock, make_user):
        user_id = make_user()
        idle = UserLocks()
        assert len(idle) == 0

        store = LedgerStore(db, locks=idle, clock=clock)
        assert store.locks is idle

        with store.user_scope(user_id):
            assert len(idle) == 1
        assert len(idle) == 0

    def test_reward_engine_passes_registry_through(self, db, settings, locks):
        engine = RewardEngine(db, settings, locks=locks)
        assert engine.ledger.locks is locks

    def test_scope_unknown_user_releases_lock(self, db, locks):
        store = LedgerStore(db, locks=locks)
        with pytest.raises(NotFoundError):
            with store.user_scope("missing"):
                pass
        assert len(locks) == 0


class TestWindows:
    def test_calendar_day_count_per_category(self, db, locks, clock, make_user):
        user_id = make_user()
        store = LedgerStore(db, locks=locks, clock=clock)
        with store.atomic():
            store.post(user_id, CATEGORY_AD, 500, "ad", external_ref="a1")
            store.post(user_id, CATEGORY_AD, 500, "ad", external_ref="a2")
            store.post(user_id, CATEGORY_TASK, 100, "task", external_ref="t1")

        day_start = clock.now.replace(hour=0, minute=0, second=0, microsecond=0)
        assert store.count_events_in_window(user_id, CATEGORY_AD, day_start) == 2
        assert store.count_events_in_window(user_id, CATEGORY_TASK, day_start) == 1

        next_day = day_start + timedelta(days=1)
        assert store.count_events_in_window(user_id, CATEGORY_AD, next_day) == 0

    def test_share_window_is_strictly_after_start(self, db, locks, clock, make_user):
        user_id = make_user()
        store = LedgerStore(db, locks=locks, clock=clock)
        with store.atomic():
            store.add_share_event(user_id, "link-1", "WhatsApp", 500)
        shared_at = clock.now

        assert store.count_events_in_window(user_id, CATEGORY_SHARE, shared_at - timedelta(seconds=1)) == 1
        assert store.count_events_in_window(user_id, CATEGORY_SHARE, shared_at) == 0


class TestListHistory:
    def test_most_recent_first_with_limit(self, db, locks, clock, make_user):
        user_id = make_user()
        store = LedgerStore(db, locks=locks, clock=clock)
        for i in range(5):
            with store.atomic():
                store.post(user_id, CATEGORY_TASK, 100, f"task {i}", external_ref=f"t{i}")
            clock.advance(minutes=1)

        entries = store.list_history(user_id, 3)
        assert [e.description for e in entries] == ["task 4", "task 3", "task 2"]

    def test_other_users_not_listed(self, db, locks, clock, make_user):
        a = make_user()
        b = make_user()
        store = LedgerStore(db, locks=locks, clock=clock)
        with store.atomic():
            store.post(a, CATEGORY_TASK, 100, "a", external_ref="x")

        assert store.list_history(b, 10) == []
        assert store.history_total(b) == 0


class TestUserLocks:
    def test_entries_removed_after_release(self):
        locks = UserLocks()
        with locks.hold("u1"):
            assert len(locks) == 1
            with locks.hold("u2"):
                assert len(locks) == 2
        assert len(locks) == 0
