"""
Conversation context bookkeeping. Contexts are frozen; every operation
returns an updated copy.
"""

from datetime import datetime, timezone
from typing import Optional

from pulse_assistant.config import AssistantTuning
from pulse_assistant.models.schemas import (
    ConversationContext,
    EngagementTier,
    engagement_tier_for as _tier,
)

_DEFAULT_TUNING = AssistantTuning()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def engagement_tier_for(message_count: int, tuning: Optional[AssistantTuning] = None) -> EngagementTier:
    tuning = tuning or _DEFAULT_TUNING
    return _tier(message_count, tuning.medium_tier_at, tuning.high_tier_at)


def new_context(
    language: str = "en",
    tuning: Optional[AssistantTuning] = None,
    now: Optional[datetime] = None,
) -> ConversationContext:
    tuning = tuning or _DEFAULT_TUNING
    now = now or _utcnow()
    return ConversationContext(
        session_start=now,
        last_active_at=now,
        language=language,
        tier_thresholds=(tuning.medium_tier_at, tuning.high_tier_at),
    )


def record_user_message(ctx: ConversationContext, now: Optional[datetime] = None) -> ConversationContext:
    return ctx.model_copy(update={
        "message_count": ctx.message_count + 1,
        "last_active_at": now or _utcnow(),
    })


def record_topic(ctx: ConversationContext, intent_name: str, limit: int = 50) -> ConversationContext:
    topics = ctx.recognized_topics + (intent_name,)
    if limit > 0:
        topics = topics[-limit:]
    return ctx.model_copy(update={"recognized_topics": topics})


def with_language(ctx: ConversationContext, language: str) -> ConversationContext:
    return ctx.model_copy(update={"language": language})
