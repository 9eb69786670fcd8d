from pydantic import BaseModel


class MarkPaidRequest(BaseModel):
    saque_id: int | None = None
