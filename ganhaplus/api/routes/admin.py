"""
Admin review API: pending withdrawals, mark paid, user list.
Gated by the shared secret header, not by user tokens.
"""
from fastapi import APIRouter, Body, Depends

from ganhaplus.api.deps import get_admin_service, require_admin
from ganhaplus.schemas.admin import MarkPaidRequest
from ganhaplus.services.admin.service import AdminReviewService

router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/saques")
def list_pending_withdrawals(admin: AdminReviewService = Depends(get_admin_service)):
    return {"sucesso": True, "saques": admin.list_pending_withdrawals()}


@router.post("/markPaid")
def mark_paid(body: MarkPaidRequest = Body(...), admin: AdminReviewService = Depends(get_admin_service)):
    admin.mark_paid(body.saque_id)
    return {"sucesso": True, "mensagem": "Saque marcado como pago"}


@router.get("/usuarios")
def list_users(admin: AdminReviewService = Depends(get_admin_service)):
    return {"sucesso": True, "usuarios": admin.list_users()}
