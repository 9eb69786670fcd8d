from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from ganhaplus.core.config import Settings
from ganhaplus.db.session import get_db
from ganhaplus.rewards import RewardEngine
from ganhaplus.services.admin.service import AdminReviewService, check_admin_secret
from ganhaplus.services.auth.jwt import SessionClaims, parse_bearer
from ganhaplus.services.users.service import UserService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_user_service(db: Session = Depends(get_db), settings: Settings = Depends(get_settings)) -> UserService:
    return UserService(db, settings)


def get_current_user(
    authorization: str | None = Header(default=None),
    users: UserService = Depends(get_user_service),
) -> SessionClaims:
    """Bearer token guard for every user-scoped route."""
    return users.authenticate(parse_bearer(authorization))


def get_reward_engine(
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> RewardEngine:
    return RewardEngine(db, settings, locks=request.app.state.user_locks)


def require_admin(request: Request, settings: Settings = Depends(get_settings)) -> None:
    check_admin_secret(settings, request.headers.get(settings.admin_secret_header))


def get_admin_service(db: Session = Depends(get_db)) -> AdminReviewService:
    return AdminReviewService(db)
