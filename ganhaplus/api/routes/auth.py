"""
User registration and login. Both return a 7-day bearer token.
"""
from fastapi import APIRouter, Body, Depends, Request

from ganhaplus.api.deps import get_settings, get_user_service
from ganhaplus.core.config import Settings
from ganhaplus.core.errors import AuthError, RateLimitError
from ganhaplus.schemas.users import LoginRequest, RegisterRequest, UserOut
from ganhaplus.services.auth.login_rate_limit import get_client_ip
from ganhaplus.services.users.service import UserService
from ganhaplus.utils.metrics import metrics

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/register")
def register(body: RegisterRequest = Body(...), users: UserService = Depends(get_user_service)):
    result = users.register(body.telefone, body.senha, body.idade)
    return {
        "sucesso": True,
        "mensagem": "Conta criada com sucesso!",
        "usuario": UserOut(id=result.user_id, telefone=result.phone).model_dump(exclude_none=True),
        "token": result.token,
    }


@router.post("/login")
def login(
    request: Request,
    body: LoginRequest = Body(...),
    users: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_settings),
):
    """Same error for unknown phone and wrong password."""
    limiter = request.app.state.login_limiter
    client_ip = get_client_ip(request, settings)
    if not limiter.check(client_ip):
        metrics.inc_login("rate_limited")
        raise RateLimitError("Muitas tentativas de login. Tente novamente mais tarde.")

    try:
        result = users.login(body.telefone, body.senha)
    except AuthError:
        metrics.inc_login("invalid")
        raise

    limiter.reset(client_ip)
    metrics.inc_login("ok")
    return {
        "sucesso": True,
        "mensagem": "Login concluído",
        "usuario": UserOut(id=result.user_id, telefone=result.phone, saldo=result.balance).model_dump(),
        "token": result.token,
    }
