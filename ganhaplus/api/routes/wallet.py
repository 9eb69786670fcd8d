"""
User wallet: balance, ad/task rewards, share rewards, history, withdrawals.
All routes require a bearer token; path ids must match the token subject.
"""
from fastapi import APIRouter, Body, Depends, Query

from ganhaplus.api.deps import get_current_user, get_reward_engine
from ganhaplus.rewards import RewardEngine
from ganhaplus.schemas.wallet import HistoryOut, ShareRequest, TaskRequest, WithdrawRequest
from ganhaplus.services.auth.jwt import SessionClaims
from ganhaplus.services.users.service import UserService

router = APIRouter(prefix="/api", tags=["wallet"])


@router.get("/saldo/{user_id}")
def get_balance(
    user_id: str,
    claims: SessionClaims = Depends(get_current_user),
    engine: RewardEngine = Depends(get_reward_engine),
):
    UserService.ensure_subject(claims, user_id)
    return {"sucesso": True, "saldo": engine.get_balance(user_id)}


@router.post("/tarefa")
def submit_task(
    body: TaskRequest = Body(...),
    claims: SessionClaims = Depends(get_current_user),
    engine: RewardEngine = Depends(get_reward_engine),
):
    result = engine.submit_task(claims.user_id, body.tipo, body.descricao, body.valor, body.anuncio_id)
    return {
        "sucesso": True,
        "mensagem": "Tarefa registrada",
        "ganho": result.credited,
        "saldo_atual": result.new_balance,
    }


@router.post("/compartilhar")
def submit_share(
    body: ShareRequest = Body(...),
    claims: SessionClaims = Depends(get_current_user),
    engine: RewardEngine = Depends(get_reward_engine),
):
    result = engine.submit_share(claims.user_id, body.link_id, body.plataforma)
    return {
        "sucesso": True,
        "mensagem": "Compartilhamento registrado",
        "ganho": result.credited,
        "saldo_atual": result.new_balance,
    }


@router.get("/historico/{user_id}")
def get_history(
    user_id: str,
    limite: int | None = Query(default=None, ge=1),
    claims: SessionClaims = Depends(get_current_user),
    engine: RewardEngine = Depends(get_reward_engine),
):
    """Newest first. Returns the last `history_limit` entries unless `limite` is given."""
    UserService.ensure_subject(claims, user_id)
    entries = engine.list_history(user_id, limite)
    historico = [
        HistoryOut(
            id=e.id,
            usuario_id=e.user_id,
            tipo=e.category,
            descricao=e.description,
            valor=e.amount,
            anuncio_id=e.external_ref,
            criado_em=e.created_at,
        ).model_dump(mode="json")
        for e in entries
    ]
    return {"sucesso": True, "historico": historico}


@router.post("/withdraw")
def request_withdrawal(
    body: WithdrawRequest = Body(...),
    claims: SessionClaims = Depends(get_current_user),
    engine: RewardEngine = Depends(get_reward_engine),
):
    result = engine.request_withdrawal(claims.user_id, body.valor, body.numero_express)
    return {
        "sucesso": True,
        "mensagem": "Pedido enviado! Aguarde aprovação.",
        "saque_id": result.withdrawal_id,
        "saldo_atual": result.new_balance,
    }
