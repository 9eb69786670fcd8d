"""Tests for AdminReviewService: pending list, mark paid, shared-secret gate."""
import pytest

from ganhaplus.core.errors import AuthError, NotFoundError, ValidationError
from ganhaplus.models.withdrawal import STATUS_PAID, STATUS_PENDING, WithdrawalRequest
from ganhaplus.rewards import RewardEngine
from ganhaplus.services.admin.service import AdminReviewService, check_admin_secret


@pytest.fixture
def admin(db, clock):
    return AdminReviewService(db, clock=clock)


@pytest.fixture
def engine(db, settings, locks, clock):
    return RewardEngine(db, settings, locks=locks, clock=clock)


class TestMarkPaid:
    def test_nonexistent_and_already_paid_are_not_found(self, admin, engine, db, make_user):
        user_id = make_user(balance=1_000_000)
        withdrawal_id = engine.request_withdrawal(user_id, 700_000, "923111222").withdrawal_id

        with pytest.raises(NotFoundError):
            admin.mark_paid(999_999)

        admin.mark_paid(withdrawal_id)
        with pytest.raises(NotFoundError) as again:
            admin.mark_paid(withdrawal_id)
        assert again.value.message == "Saque não encontrado"

        withdrawal = db.query(WithdrawalRequest).filter(WithdrawalRequest.id == withdrawal_id).one()
        assert withdrawal.status == STATUS_PAID
        assert withdrawal.paid_at is not None

    def test_mark_paid_does_not_touch_balance(self, admin, engine, make_user):
        user_id = make_user(balance=1_000_000)
        withdrawal_id = engine.request_withdrawal(user_id, 600_000, "923111222").withdrawal_id

        admin.mark_paid(withdrawal_id)

        assert engine.get_balance(user_id) == 400_000

    def test_missing_id(self, admin):
        with pytest.raises(ValidationError):
            admin.mark_paid(None)


class TestListPending:
    def test_lists_only_pending_newest_first_with_phone(self, admin, engine, clock, make_user):
        first = make_user(phone="923000001", balance=2_000_000)
        second = make_user(phone="923000002", balance=1_000_000)
        paid_id = engine.request_withdrawal(first, 600_000, "923111222").withdrawal_id
        clock.advance(minutes=1)
        older_id = engine.request_withdrawal(first, 700_000, "923111222").withdrawal_id
        clock.advance(minutes=1)
        newer_id = engine.request_withdrawal(second, 800_000, "923333444").withdrawal_id
        admin.mark_paid(paid_id)

        pending = admin.list_pending_withdrawals()

        assert [w["id"] for w in pending] == [newer_id, older_id]
        assert pending[0]["telefone"] == "923000002"
        assert pending[0]["valor"] == 800_000
        assert pending[0]["numero_express"] == "923333444"
        assert all(w["status"] == STATUS_PENDING for w in pending)

    def test_empty(self, admin):
        assert admin.list_pending_withdrawals() == []


class TestListUsers:
    def test_lists_users_with_balance(self, admin, make_user):
        user_id = make_user(phone="923000009", balance=1500)
        users = admin.list_users()
        assert users == [
            {
                "id": user_id,
                "telefone": "923000009",
                "idade": 30,
                "saldo": 1500,
                "criado_em": users[0]["criado_em"],
            }
        ]


class TestAdminSecret:
    def test_correct_secret(self, settings):
        check_admin_secret(settings, settings.admin_secret)

    @pytest.mark.parametrize("supplied", [None, "", "wrong-secret"])
    def test_wrong_secret(self, settings, supplied):
        with pytest.raises(AuthError) as exc:
            check_admin_secret(settings, supplied)
        assert exc.value.status_code == 403
