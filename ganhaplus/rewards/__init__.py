"""
Reward engine: ad/task rewards (calendar-day cap), share rewards (rolling window),
withdrawal requests (debit at request time).
"""
from ganhaplus.rewards.models import RewardResult, WithdrawalResult
from ganhaplus.rewards.service import RewardEngine

__all__ = ["RewardEngine", "RewardResult", "WithdrawalResult"]
