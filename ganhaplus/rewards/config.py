"""
Reward schedule: typed wrappers over Settings. The server owns every credited amount.
"""
from __future__ import annotations

from datetime import datetime, timedelta

from ganhaplus.core.config import Settings
from ganhaplus.models.history import CATEGORY_AD, CATEGORY_SHARE, CATEGORY_TASK, CATEGORY_WITHDRAWAL

# Categories that only their dedicated pipeline may write.
RESERVED_CATEGORIES = frozenset({CATEGORY_SHARE, CATEGORY_WITHDRAWAL})


def get_task_rewards(settings: Settings) -> dict[str, int]:
    """Categories accepted by submit_task and the amount credited per call."""
    return {
        CATEGORY_AD: settings.reward_ad,
        CATEGORY_TASK: settings.reward_task,
    }


def get_task_reward(settings: Settings, category: str) -> int | None:
    return get_task_rewards(settings).get(category)


def get_share_reward(settings: Settings) -> int:
    return settings.reward_share


def get_daily_task_limit(settings: Settings) -> int:
    return settings.max_tasks_per_day


def get_min_withdraw(settings: Settings) -> int:
    return settings.min_withdraw


def day_start(now: datetime) -> datetime:
    """Calendar-day window start (UTC date boundary)."""
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def share_window_start(settings: Settings, now: datetime) -> datetime:
    """Rolling window start for share rewards."""
    return now - timedelta(hours=settings.share_window_hours)
