from datetime import datetime

from pydantic import BaseModel


class TaskRequest(BaseModel):
    tipo: str | None = None
    descricao: str | None = None
    valor: int | None = None
    anuncio_id: str | int | None = None


class ShareRequest(BaseModel):
    link_id: str | None = None
    plataforma: str | None = None


class WithdrawRequest(BaseModel):
    valor: int | None = None
    numero_express: str | int | None = None


class HistoryOut(BaseModel):
    id: int
    usuario_id: str
    tipo: str
    descricao: str | None = None
    valor: int
    anuncio_id: str | None = None
    criado_em: datetime
