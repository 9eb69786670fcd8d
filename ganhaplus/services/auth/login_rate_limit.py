"""
Rate limiter for user login to slow down password guessing.
"""
import logging

import redis
from starlette.requests import Request

from ganhaplus.core.config import Settings

logger = logging.getLogger("auth")


def get_client_ip(request: Request, settings: Settings) -> str:
    """Client IP (supports X-Forwarded-For from a trusted proxy)."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded and settings.app_env == "production":
        trusted = settings.trusted_proxy_ips_set
        if trusted and request.client and request.client.host in trusted:
            return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "127.0.0.1"


class LoginRateLimiter:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.client = redis.Redis.from_url(settings.redis_url, decode_responses=True) if settings.redis_url else None

    def check(self, client_ip: str) -> bool:
        """
        Returns True if the attempt is allowed. Increments the counter on each call.
        Fails open when Redis is not configured or unreachable.
        """
        if self.client is None:
            return True
        key = f"login_attempts:{client_ip}"
        try:
            current = self.client.incr(key)
            if current == 1:
                self.client.expire(key, self.settings.login_rate_limit_window_seconds)
        except redis.RedisError as e:
            logger.warning("login_rate_limit_redis_error", extra={"error": str(e)})
            return True
        if current > self.settings.login_rate_limit_attempts:
            logger.warning("login_rate_limited", extra={"ip": client_ip, "attempts": current})
            return False
        return True

    def reset(self, client_ip: str) -> None:
        """Reset counter on successful login."""
        if self.client is None:
            return
        try:
            self.client.delete(f"login_attempts:{client_ip}")
        except redis.RedisError as e:
            logger.warning("login_rate_limit_redis_error", extra={"error": str(e)})
