"""
Application configuration. Reads all settings from environment variables.
"""

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings


class AssistantTuning(BaseModel):
    """Thresholds and delays shared by the conversational core."""

    model_config = ConfigDict(frozen=True)

    match_floor: float = 0.8
    match_span: float = 0.2
    fallback_intent: str = "help"
    fallback_confidence: float = 0.1
    clarification_confidence: float = 0.6
    suggestion_floor: float = 0.8
    medium_tier_at: int = 3
    high_tier_at: int = 6
    topic_history_limit: int = 50
    typing_delay_min_ms: int = 800
    typing_delay_max_ms: int = 2000
    followup_delay_ms: int = 1000
    suggestion_delay_ms: int = 1000
    acknowledgement_delay_ms: int = 1000


class Settings(BaseSettings):
    # ── App ──────────────────────────────────────────────
    APP_NAME: str = "Pulse Assistant"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    CORS_ORIGINS: str = "*"
    LOG_LEVEL: str = "INFO"

    # ── Assistant ────────────────────────────────────────
    DEFAULT_LANGUAGE: str = "en"
    MATCH_FLOOR: float = 0.8
    MATCH_SPAN: float = 0.2
    FALLBACK_INTENT: str = "help"
    FALLBACK_CONFIDENCE: float = 0.1
    CLARIFICATION_CONFIDENCE: float = 0.6
    SUGGESTION_FLOOR: float = 0.8
    MEDIUM_TIER_AT: int = 3
    HIGH_TIER_AT: int = 6
    TOPIC_HISTORY_LIMIT: int = 50

    # ── Simulated delays (milliseconds) ──────────────────
    TYPING_DELAY_MIN_MS: int = 800
    TYPING_DELAY_MAX_MS: int = 2000
    FOLLOWUP_DELAY_MS: int = 1000
    SUGGESTION_DELAY_MS: int = 1000
    ACKNOWLEDGEMENT_DELAY_MS: int = 1000

    # ── Rate Limiting ────────────────────────────────────
    RATE_LIMIT_PER_MINUTE: int = 60

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    def tuning(self) -> AssistantTuning:
        return AssistantTuning(
            match_floor=self.MATCH_FLOOR,
            match_span=self.MATCH_SPAN,
            fallback_intent=self.FALLBACK_INTENT,
            fallback_confidence=self.FALLBACK_CONFIDENCE,
            clarification_confidence=self.CLARIFICATION_CONFIDENCE,
            suggestion_floor=self.SUGGESTION_FLOOR,
            medium_tier_at=self.MEDIUM_TIER_AT,
            high_tier_at=self.HIGH_TIER_AT,
            topic_history_limit=self.TOPIC_HISTORY_LIMIT,
            typing_delay_min_ms=self.TYPING_DELAY_MIN_MS,
            typing_delay_max_ms=self.TYPING_DELAY_MAX_MS,
            followup_delay_ms=self.FOLLOWUP_DELAY_MS,
            suggestion_delay_ms=self.SUGGESTION_DELAY_MS,
            acknowledgement_delay_ms=self.ACKNOWLEDGEMENT_DELAY_MS,
        )


settings = Settings()
