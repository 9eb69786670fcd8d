"""
Session tokens: signed, expiring JWTs carrying the user id and phone.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from ganhaplus.core.config import Settings
from ganhaplus.core.errors import AuthError


@dataclass(frozen=True)
class SessionClaims:
    user_id: str
    phone: str


def create_access_token(settings: Settings, user_id: str, phone: str) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "id": user_id,
        "telefone": phone,
        "iat": now,
        "exp": now + timedelta(days=settings.session_ttl_days),
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_token(settings: Settings, token: str | None) -> SessionClaims:
    if not token:
        raise AuthError("Token ausente")
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "id"]},
        )
    except jwt.ExpiredSignatureError:
        raise AuthError("Token inválido ou expirado")
    except jwt.InvalidTokenError:
        raise AuthError("Token inválido ou expirado")
    user_id = payload.get("id")
    if not isinstance(user_id, str) or not user_id:
        raise AuthError("Token inválido")
    return SessionClaims(user_id=user_id, phone=str(payload.get("telefone", "")))


def parse_bearer(authorization: str | None) -> str:
    """Extract the token from an `Authorization: Bearer <token>` header."""
    if not authorization:
        raise AuthError("Token ausente")
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise AuthError("Token inválido")
    return parts[1]
