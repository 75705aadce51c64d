"""Shared fixtures: knowledge bases, zero-delay tuning and deterministic controllers."""

import asyncio
import random

import pytest

from pulse_assistant.config import AssistantTuning
from pulse_assistant.integrations.action_dispatcher import RecordingActionDispatcher
from pulse_assistant.middleware.rate_limit import limiter
from pulse_assistant.services.dialogue_service import DialogueController
from pulse_assistant.services.knowledge_service import load_language

FAST_TUNING = AssistantTuning(
    typing_delay_min_ms=0,
    typing_delay_max_ms=0,
    followup_delay_ms=0,
    suggestion_delay_ms=0,
    acknowledgement_delay_ms=0,
)


@pytest.fixture(autouse=True)
def _no_rate_limit():
    limiter.enabled = False
    yield
    limiter.enabled = True


@pytest.fixture
def kb_en():
    return load_language("en")


@pytest.fixture
def kb_ar():
    return load_language("ar")


@pytest.fixture
def fast_tuning():
    return FAST_TUNING


@pytest.fixture
def recorded_sleep():
    calls = []

    async def fake_sleep(seconds: float) -> None:
        calls.append(seconds)
        await asyncio.sleep(0)

    fake_sleep.calls = calls
    return fake_sleep


@pytest.fixture
def dispatcher():
    return RecordingActionDispatcher()


@pytest.fixture
def make_controller(recorded_sleep, dispatcher):
    def factory(language: str = "en", **kwargs) -> DialogueController:
        kwargs.setdefault("rng", random.Random(7))
        kwargs.setdefault("sleep", recorded_sleep)
        kwargs.setdefault("dispatcher", dispatcher)
        return DialogueController(language, session_id="test-session", **kwargs)

    return factory
