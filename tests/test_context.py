from datetime import datetime, timezone

import pytest

from pulse_assistant.config import AssistantTuning
from pulse_assistant.models.schemas import EngagementTier
from pulse_assistant.services import context_service


@pytest.mark.parametrize("count,tier", [
    (0, EngagementTier.LOW),
    (1, EngagementTier.LOW),
    (2, EngagementTier.LOW),
    (3, EngagementTier.MEDIUM),
    (5, EngagementTier.MEDIUM),
    (6, EngagementTier.HIGH),
    (40, EngagementTier.HIGH),
])
def test_engagement_tier_table(count, tier):
    assert context_service.engagement_tier_for(count) == tier


def test_record_user_message_n_times():
    ctx = context_service.new_context("en")
    tiers = []
    for _ in range(7):
        ctx = context_service.record_user_message(ctx)
        tiers.append(ctx.engagement_tier)
    assert ctx.message_count == 7
    assert tiers == [
        EngagementTier.LOW,
        EngagementTier.LOW,
        EngagementTier.MEDIUM,
        EngagementTier.MEDIUM,
        EngagementTier.MEDIUM,
        EngagementTier.HIGH,
        EngagementTier.HIGH,
    ]


def test_record_user_message_updates_activity_and_returns_copy():
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    later = datetime(2024, 1, 1, 0, 5, tzinfo=timezone.utc)
    ctx = context_service.new_context("en", now=start)
    updated = context_service.record_user_message(ctx, now=later)

    assert ctx.message_count == 0
    assert ctx.last_active_at == start
    assert updated.last_active_at == later
    assert updated.session_start == start


def test_tier_thresholds_follow_tuning():
    tuning = AssistantTuning(medium_tier_at=1, high_tier_at=2)
    ctx = context_service.new_context("en", tuning)
    ctx = context_service.record_user_message(ctx)
    assert ctx.engagement_tier == EngagementTier.MEDIUM


def test_recognized_topics_are_bounded():
    ctx = context_service.new_context("en")
    for i in range(60):
        ctx = context_service.record_topic(ctx, f"topic-{i}", limit=50)
    assert len(ctx.recognized_topics) == 50
    assert ctx.recognized_topics[0] == "topic-10"
    assert ctx.recognized_topics[-1] == "topic-59"


def test_recognized_topics_keep_duplicates():
    ctx = context_service.new_context("en")
    ctx = context_service.record_topic(ctx, "donation")
    ctx = context_service.record_topic(ctx, "donation")
    assert ctx.recognized_topics == ("donation", "donation")


def test_topics_do_not_count_as_messages():
    ctx = context_service.record_topic(context_service.new_context("en"), "help")
    assert ctx.message_count == 0


def test_with_language():
    ctx = context_service.new_context("en")
    assert context_service.with_language(ctx, "ar").language == "ar"


def test_engagement_tier_is_serialized():
    ctx = context_service.new_context("en")
    assert ctx.model_dump(mode="json")["engagement_tier"] == "low"
