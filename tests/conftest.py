from datetime import datetime, timedelta, timezone

import pytest

import ganhaplus.models  # noqa: F401
from ganhaplus.core.config import Settings
from ganhaplus.db.base import Base
from ganhaplus.db.session import build_engine, build_session_factory
from ganhaplus.ledger import LedgerStore, UserLocks
from ganhaplus.models.history import CATEGORY_TASK
from ganhaplus.models.user import User


class FakeClock:
    """Controllable UTC clock for window tests."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        database_url=f"sqlite:///{tmp_path / 'test.sqlite'}",
        bcrypt_rounds=4,
        max_tasks_per_day=3,
        min_withdraw=600_000,
        redis_url="",
    )


@pytest.fixture
def db_engine(settings):
    engine = build_engine(settings)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return build_session_factory(db_engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def locks():
    return UserLocks()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_user(db, locks, clock):
    """Create a user; a starting balance is seeded through the ledger so history stays consistent."""
    counter = {"n": 0}

    def _make(phone: str | None = None, balance: int = 0) -> str:
        counter["n"] += 1
        user = User(phone=phone or f"92300000{counter['n']}", password_hash="x", age=30, balance=0)
        db.add(user)
        db.commit()
        user_id = user.id
        if balance:
            # Seed one day earlier so it never counts toward today's task cap.
            store = LedgerStore(db, locks=locks, clock=lambda: clock.now - timedelta(days=1))
            with store.atomic():
                store.post(user_id, CATEGORY_TASK, balance, "Saldo inicial", external_ref="seed")
        return user_id

    return _make
