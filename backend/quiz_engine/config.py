"""Application settings and validation."""

import os
from pathlib import Path

BASE = Path(__file__).resolve().parent.parent


class Settings:
    ENV: str
    DATABASE_URL: str
    JWT_SECRET: str
    JWT_ALGORITHM: str
    JWT_EXPIRE_HOURS: int
    ALLOW_INSECURE_JWT: bool
    ALLOW_DEV_CORS: bool
    COUNTDOWN_TICK_SECONDS: float
    SUBMISSION_GRACE_SECONDS: int
    STALE_UNTIMED_MAX_AGE_MINUTES: int
    STALE_SWEEP_INTERVAL_SECONDS: int
    ATTEMPT_NUMBER_RETRIES: int
    NOTIFICATIONS_ENABLED: bool
    LOG_LEVEL: str

    def __init__(self):
        self.ENV = os.getenv("ENV", "dev").lower()
        self.DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{BASE / 'quiz.db'}")
        self.JWT_SECRET = os.getenv("JWT_SECRET", "change_me_for_prod")
        self.JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
        self.JWT_EXPIRE_HOURS = int(os.getenv("JWT_EXPIRE_HOURS", "24"))
        self.ALLOW_INSECURE_JWT = os.getenv("ALLOW_INSECURE_JWT", "false").lower() == "true"
        self.ALLOW_DEV_CORS = os.getenv("ALLOW_DEV_CORS", "true").lower() == "true"
        self.COUNTDOWN_TICK_SECONDS = float(os.getenv("COUNTDOWN_TICK_SECONDS", "1"))
        self.SUBMISSION_GRACE_SECONDS = int(os.getenv("SUBMISSION_GRACE_SECONDS", "5"))
        self.STALE_UNTIMED_MAX_AGE_MINUTES = int(os.getenv("STALE_UNTIMED_MAX_AGE_MINUTES", str(24 * 60)))
        self.STALE_SWEEP_INTERVAL_SECONDS = int(os.getenv("STALE_SWEEP_INTERVAL_SECONDS", "300"))
        self.ATTEMPT_NUMBER_RETRIES = int(os.getenv("ATTEMPT_NUMBER_RETRIES", "3"))
        self.NOTIFICATIONS_ENABLED = os.getenv("NOTIFICATIONS_ENABLED", "true").lower() == "true"
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self._validate()

    def _validate(self):
        if self.ENV != "dev" and not self.ALLOW_INSECURE_JWT and self.JWT_SECRET == "change_me_for_prod":
            raise RuntimeError("JWT_SECRET must be set to a non-default value in non-dev environments")
        if self.COUNTDOWN_TICK_SECONDS <= 0:
            raise RuntimeError("COUNTDOWN_TICK_SECONDS must be positive")
        if self.SUBMISSION_GRACE_SECONDS < 0:
            raise RuntimeError("SUBMISSION_GRACE_SECONDS must be >= 0")
        if self.ATTEMPT_NUMBER_RETRIES < 1:
            raise RuntimeError("ATTEMPT_NUMBER_RETRIES must be >= 1")


settings = Settings()
