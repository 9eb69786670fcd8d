"""
Application configuration.
All settings are loaded from environment variables (or a local .env file).
Settings are built once at process start and handed to services explicitly.
"""
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOCAL_JWT_SECRET = "local-dev-jwt-secret-change-me"
LOCAL_ADMIN_SECRET = "local-dev-admin-secret-change-me"
WEAK_SECRETS = ("changeme", "secret", "password", "admin", "JWT_SECRET_EXEMPLO", "ADMIN_SECRET_EXEMPLO")


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Secrets have local-only defaults; any other app_env must override them.
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # ===========================================
    # APPLICATION
    # ===========================================
    app_env: str = "local"
    # CORS: comma-separated origins. Empty = allow any origin (the mobile web client is served elsewhere).
    cors_origins: str = ""

    # ===========================================
    # DATABASE
    # ===========================================
    database_url: str = "sqlite:///./ganhaplus.sqlite"
    db_pool_size: int = 10
    db_max_overflow: int = 20

    # ===========================================
    # SESSION TOKENS (JWT)
    # ===========================================
    jwt_secret_key: str = LOCAL_JWT_SECRET
    jwt_algorithm: str = "HS256"
    session_ttl_days: int = 7

    # ===========================================
    # ADMIN REVIEW
    # ===========================================
    admin_secret: str = LOCAL_ADMIN_SECRET
    admin_secret_header: str = "x-admin-secret"

    # ===========================================
    # REGISTRATION RULES
    # ===========================================
    bcrypt_rounds: int = 12
    password_min_length: int = 6
    phone_min_digits: int = 9
    phone_max_digits: int = 15
    min_age: int = 18

    # ===========================================
    # REWARDS & WITHDRAWALS (AOA, smallest unit)
    # ===========================================
    min_withdraw: int = 600_000
    max_tasks_per_day: int = 60
    reward_share: int = 500
    reward_ad: int = 500
    reward_task: int = 100
    share_window_hours: int = 24
    history_limit: int = 100

    # ===========================================
    # LOGIN RATE LIMIT (brute-force protection)
    # ===========================================
    # Empty = limiter disabled.
    redis_url: str = ""
    login_rate_limit_attempts: int = 5
    login_rate_limit_window_seconds: int = 900  # 15 min
    trusted_proxy_ips: str = ""

    # ===========================================
    # LOGGING
    # ===========================================
    log_level: str = "INFO"
    request_id_header: str = "X-Request-Id"
    log_file: str | None = None
    log_max_bytes: int = 10_000_000
    log_backup_count: int = 5

    @field_validator("min_withdraw", "max_tasks_per_day", "reward_share", "reward_ad", "reward_task")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("reward amounts and limits must be positive")
        return v

    @model_validator(mode="after")
    def validate_secrets(self) -> "Settings":
        """Refuse local or weak secrets outside the local environment."""
        if self.app_env == "local":
            return self
        for name in ("jwt_secret_key", "admin_secret"):
            value = getattr(self, name)
            if value in (LOCAL_JWT_SECRET, LOCAL_ADMIN_SECRET) or value in WEAK_SECRETS:
                raise ValueError(f"{name} must be set for app_env={self.app_env}")
            if len(value) < 16:
                raise ValueError(f"{name} must be at least 16 characters")
        return self

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def trusted_proxy_ips_set(self) -> set[str]:
        """Get trusted proxy IPs as a set."""
        return {ip.strip() for ip in self.trusted_proxy_ips.split(",") if ip.strip()}


@lru_cache
def get_settings() -> Settings:
    return Settings()
