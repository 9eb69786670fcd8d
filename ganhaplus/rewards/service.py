"""
RewardEngine: turns a user action into one atomic, audited balance mutation.

Every request is validate -> check window -> apply, with the window check and the
mutation serialized per user (LedgerStore.user_scope) so a capped event cannot be
credited twice by concurrent requests.
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from sqlalchemy.orm import Session

from ganhaplus.core.config import Settings
from ganhaplus.core.errors import InsufficientFundsError, RateLimitError, ValidationError
from ganhaplus.ledger import LedgerStore, UserLocks
from ganhaplus.models.history import CATEGORY_SHARE, CATEGORY_WITHDRAWAL
from ganhaplus.rewards.config import (
    RESERVED_CATEGORIES,
    day_start,
    get_daily_task_limit,
    get_min_withdraw,
    get_share_reward,
    get_task_reward,
    share_window_start,
)
from ganhaplus.rewards.models import RewardResult, WithdrawalResult
from ganhaplus.utils.metrics import metrics

logger = logging.getLogger(__name__)


def _blank(value: str | None) -> bool:
    return value is None or not str(value).strip()


class RewardEngine:
    def __init__(
        self,
        db: Session,
        settings: Settings,
        locks: UserLocks | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.settings = settings
        self.ledger = LedgerStore(db, locks=locks, clock=clock)

    # ------------------------------------------------------------------
    # Ad / task reward
    # ------------------------------------------------------------------

    def submit_task(
        self,
        user_id: str,
        category: str | None,
        description: str | None,
        amount: int | None,
        external_ref: str | None,
    ) -> RewardResult:
        """
        Credit one ad view or task. The credited amount comes from the reward
        schedule; the client value must match it. Capped per calendar day per category.
        """
        if _blank(category) or _blank(description) or _blank(external_ref) or not amount or amount <= 0:
            raise ValidationError("Dados incompletos")
        category = category.strip()
        if category in RESERVED_CATEGORIES:
            raise ValidationError("Categoria reservada")
        scheduled = get_task_reward(self.settings, category)
        if scheduled is None:
            raise ValidationError("Categoria desconhecida")
        if amount != scheduled:
            metrics.inc_reward_rejected(category, "amount_mismatch")
            logger.warning(
                "reward_task_amount_mismatch",
                extra={"user_id": user_id, "category": category, "amount": amount},
            )
            raise ValidationError("Valor da recompensa inválido")

        limit = get_daily_task_limit(self.settings)
        with self.ledger.user_scope(user_id):
            today = day_start(self.ledger.clock())
            done = self.ledger.count_events_in_window(user_id, category, today)
            if done >= limit:
                metrics.inc_reward_rejected(category, "daily_limit")
                logger.info(
                    "reward_task_rejected_daily_limit",
                    extra={"user_id": user_id, "category": category},
                )
                raise RateLimitError("Limite diário atingido")
            new_balance, entry = self.ledger.post(
                user_id,
                category,
                scheduled,
                description.strip(),
                external_ref=str(external_ref).strip(),
            )
            history_id = entry.id

        metrics.inc_reward_credited(category, scheduled)
        logger.info(
            "reward_task_credited",
            extra={"user_id": user_id, "category": category, "amount": scheduled, "new_balance": new_balance},
        )
        return RewardResult(new_balance=new_balance, credited=scheduled, history_id=history_id)

    # ------------------------------------------------------------------
    # Share reward
    # ------------------------------------------------------------------

    def submit_share(self, user_id: str, link_id: str | None, platform: str | None) -> RewardResult:
        """At most one rewarded share per rolling window, measured from the last share."""
        if _blank(link_id) or _blank(platform):
            raise ValidationError("Dados incompletos")
        link_id = str(link_id).strip()
        platform = str(platform).strip()
        reward = get_share_reward(self.settings)

        with self.ledger.user_scope(user_id):
            since = share_window_start(self.settings, self.ledger.clock())
            if self.ledger.count_events_in_window(user_id, CATEGORY_SHARE, since) > 0:
                metrics.inc_reward_rejected(CATEGORY_SHARE, "window")
                logger.info(
                    "reward_share_rejected_window",
                    extra={"user_id": user_id, "link_id": link_id},
                )
                raise RateLimitError(
                    f"Já recebeu recompensa por compartilhamento nas últimas {self.settings.share_window_hours}h"
                )
            self.ledger.add_share_event(user_id, link_id, platform, reward)
            new_balance, entry = self.ledger.post(
                user_id,
                CATEGORY_SHARE,
                reward,
                f"Compartilhamento em {platform}",
                external_ref=link_id,
            )
            history_id = entry.id

        metrics.inc_reward_credited(CATEGORY_SHARE, reward)
        logger.info(
            "reward_share_credited",
            extra={"user_id": user_id, "platform": platform, "amount": reward, "new_balance": new_balance},
        )
        return RewardResult(new_balance=new_balance, credited=reward, history_id=history_id)

    # ------------------------------------------------------------------
    # Withdrawal
    # ------------------------------------------------------------------

    def request_withdrawal(self, user_id: str, amount: int | None, destination: str | None) -> WithdrawalResult:
        """Debit now, pay later: the request is created pending with the balance already reduced."""
        if not amount or amount <= 0 or _blank(destination):
            raise ValidationError("Dados incompletos")
        min_withdraw = get_min_withdraw(self.settings)
        if amount < min_withdraw:
            raise ValidationError(f"Valor mínimo: {min_withdraw:,} AOA".replace(",", "."))
        destination = str(destination).strip()

        with self.ledger.user_scope(user_id) as user:
            if user.balance < amount:
                metrics.inc_withdrawal("rejected_funds")
                logger.info(
                    "withdrawal_rejected_insufficient_funds",
                    extra={"user_id": user_id, "amount": amount},
                )
                raise InsufficientFundsError("Saldo insuficiente")
            withdrawal = self.ledger.create_withdrawal(user_id, amount, destination)
            new_balance, _ = self.ledger.post(
                user_id,
                CATEGORY_WITHDRAWAL,
                -amount,
                f"Solicitação de saque #{withdrawal.id}",
                external_ref=str(withdrawal.id),
            )
            withdrawal_id = withdrawal.id

        metrics.inc_withdrawal("pending")
        logger.info(
            "withdrawal_requested",
            extra={"user_id": user_id, "withdrawal_id": withdrawal_id, "amount": amount, "new_balance": new_balance},
        )
        return WithdrawalResult(new_balance=new_balance, withdrawal_id=withdrawal_id, amount=amount)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_balance(self, user_id: str) -> int:
        return self.ledger.get_balance(user_id)

    def list_history(self, user_id: str, limit: int | None = None):
        return self.ledger.list_history(user_id, limit or self.settings.history_limit)
