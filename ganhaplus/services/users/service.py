import logging
import re
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ganhaplus.core.config import Settings
from ganhaplus.core.errors import AuthError, AuthorizationError, ConflictError, InternalError, ValidationError
from ganhaplus.models.user import User
from ganhaplus.services.auth.jwt import SessionClaims, create_access_token, verify_token
from ganhaplus.services.auth.passwords import hash_password, verify_password

logger = logging.getLogger(__name__)

BCRYPT_MAX_BYTES = 72


@dataclass(frozen=True)
class AuthResult:
    user_id: str
    phone: str
    token: str
    balance: int = 0


def normalize_phone(phone) -> str:
    return re.sub(r"\D", "", str(phone or ""))


class UserService:
    """Registration, login and session checks."""

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings

    def register(self, phone, password, age) -> AuthResult:
        if not phone or not password or age is None:
            raise ValidationError("Preencha todos os campos")
        digits = normalize_phone(phone)
        if not self.settings.phone_min_digits <= len(digits) <= self.settings.phone_max_digits:
            raise ValidationError("Telefone inválido")
        if len(password) < self.settings.password_min_length:
            raise ValidationError(f"A senha deve ter pelo menos {self.settings.password_min_length} caracteres")
        if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
            raise ValidationError("Senha demasiado longa")
        if age < self.settings.min_age:
            raise ValidationError(f"Apenas maiores de {self.settings.min_age} anos")

        if self.get_by_phone(digits) is not None:
            raise ConflictError("Telefone já registado")

        user = User(
            phone=digits,
            password_hash=hash_password(password, rounds=self.settings.bcrypt_rounds),
            age=age,
            balance=0,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # Concurrent registration of the same phone.
            self.db.rollback()
            raise ConflictError("Telefone já registado")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("user_register_failed", extra={"error": str(e)})
            raise InternalError("Erro ao criar conta") from e
        self.db.refresh(user)

        logger.info("user_registered", extra={"user_id": user.id})
        token = create_access_token(self.settings, user.id, user.phone)
        return AuthResult(user_id=user.id, phone=user.phone, token=token, balance=user.balance)

    def login(self, phone, password) -> AuthResult:
        if not phone or not password:
            raise ValidationError("Telefone e senha obrigatórios")
        user = self.get_by_phone(normalize_phone(phone))
        if user is None or not verify_password(password, user.password_hash):
            raise AuthError("Credenciais inválidas")
        token = create_access_token(self.settings, user.id, user.phone)
        logger.info("user_logged_in", extra={"user_id": user.id})
        return AuthResult(user_id=user.id, phone=user.phone, token=token, balance=user.balance)

    def authenticate(self, token: str | None) -> SessionClaims:
        return verify_token(self.settings, token)

    @staticmethod
    def ensure_subject(claims: SessionClaims, user_id: str) -> None:
        """The user id in the path must be the one the token was issued to."""
        if claims.user_id != str(user_id):
            raise AuthorizationError("Acesso não autorizado")

    def get_by_phone(self, phone: str) -> User | None:
        return self.db.query(User).filter(User.phone == phone).one_or_none()
