"""
DTO reward engine: results returned to the API layer.
"""
from __future__ import annotations

from pydantic import BaseModel, Field


class RewardResult(BaseModel):
    """Outcome of a credited task/ad or share reward."""

    new_balance: int
    credited: int = Field(..., description="Amount credited by this call")
    history_id: int

    model_config = {"frozen": True}


class WithdrawalResult(BaseModel):
    """Outcome of a withdrawal request: balance already debited, request pending."""

    new_balance: int
    withdrawal_id: int
    amount: int

    model_config = {"frozen": True}
