import hmac
import logging
from collections.abc import Callable
from datetime import datetime

from sqlalchemy import update
from sqlalchemy.orm import Session

from ganhaplus.core.config import Settings
from ganhaplus.core.errors import AuthError, NotFoundError, ValidationError
from ganhaplus.ledger import utcnow
from ganhaplus.models.user import User
from ganhaplus.models.withdrawal import STATUS_PAID, STATUS_PENDING, WithdrawalRequest
from ganhaplus.utils.metrics import metrics

logger = logging.getLogger(__name__)


def check_admin_secret(settings: Settings, supplied: str | None) -> None:
    """Constant-time comparison against the configured shared secret."""
    if not supplied or not hmac.compare_digest(supplied.encode("utf-8"), settings.admin_secret.encode("utf-8")):
        logger.warning("admin_access_denied")
        raise AuthError("Acesso administrativo negado", status_code=403)


class AdminReviewService:
    """Withdrawal review. Status transitions only; balances were debited at request time."""

    def __init__(self, db: Session, clock: Callable[[], datetime] | None = None):
        self.db = db
        self.clock = clock or utcnow

    def list_pending_withdrawals(self) -> list[dict]:
        rows = (
            self.db.query(WithdrawalRequest, User.phone)
            .join(User, User.id == WithdrawalRequest.user_id)
            .filter(WithdrawalRequest.status == STATUS_PENDING)
            .order_by(WithdrawalRequest.created_at.desc(), WithdrawalRequest.id.desc())
            .all()
        )
        return [
            {
                "id": w.id,
                "usuario_id": w.user_id,
                "telefone": phone,
                "valor": w.amount,
                "numero_express": w.destination,
                "status": w.status,
                "criado_em": w.created_at,
                "pago_em": w.paid_at,
            }
            for w, phone in rows
        ]

    def mark_paid(self, withdrawal_id: int | None) -> None:
        """pendente -> pago. Missing and already-paid requests both report not found."""
        if withdrawal_id is None:
            raise ValidationError("saque_id é obrigatório")
        result = self.db.execute(
            update(WithdrawalRequest)
            .where(WithdrawalRequest.id == withdrawal_id, WithdrawalRequest.status == STATUS_PENDING)
            .values(status=STATUS_PAID, paid_at=self.clock())
        )
        if result.rowcount == 0:
            self.db.rollback()
            raise NotFoundError("Saque não encontrado")
        self.db.commit()
        metrics.inc_withdrawal("paid")
        logger.info("withdrawal_marked_paid", extra={"withdrawal_id": withdrawal_id})

    def list_users(self) -> list[dict]:
        users = self.db.query(User).order_by(User.created_at.desc()).all()
        return [
            {
                "id": u.id,
                "telefone": u.phone,
                "idade": u.age,
                "saldo": u.balance,
                "criado_em": u.created_at,
            }
            for u in users
        ]
