"""
Pydantic models for the assistant core and its API.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, computed_field


def _uuid() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _unit(value: float) -> float:
    return max(0.0, min(1.0, value))


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ── Enums ────────────────────────────────────────────────
class Sender(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class MessageKind(str, Enum):
    USER = "user"
    REPLY = "reply"
    FOLLOWUP = "followup"
    GREETING = "greeting"
    SUGGESTIONS = "suggestions"
    ACKNOWLEDGEMENT = "acknowledgement"


class EngagementTier(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TurnState(str, Enum):
    IDLE = "idle"
    AWAITING_RECOGNITION = "awaiting_recognition"
    AWAITING_GENERATION = "awaiting_generation"
    RESPONDING = "responding"


# ── Value types ──────────────────────────────────────────
class Action(_Frozen):
    label: str
    token: str
    icon_hint: Optional[str] = None


class Suggestion(_Frozen):
    label: str
    action_token: str
    related_intent: str


class Message(_Frozen):
    id: str = Field(default_factory=_uuid)
    sender: Sender
    text: str
    created_at: datetime = Field(default_factory=_now)
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    actions: Tuple[Action, ...] = ()
    suggestions: Optional[Tuple[Suggestion, ...]] = None
    kind: MessageKind = MessageKind.REPLY


# ── Knowledge ────────────────────────────────────────────
class ResponseTemplate(_Frozen):
    text: str
    base_confidence: float = Field(ge=0.0, le=1.0)
    actions: Tuple[Action, ...] = ()


class Intent(_Frozen):
    name: str
    match_patterns: Tuple[str, ...]
    response_templates: Tuple[ResponseTemplate, ...] = Field(min_length=1)


class SuggestionSets(_Frozen):
    first_time: Tuple[Suggestion, ...]
    returning: Tuple[Suggestion, ...]


class KnowledgeBase(_Frozen):
    """
    Everything the assistant knows in one language.

    Intents keep their definition order; the recognizer relies on it for
    tie-breaking.
    """

    language: str
    greetings: Tuple[str, ...] = Field(min_length=1)
    intents: Tuple[Intent, ...]
    suggestions: SuggestionSets
    clarification: str
    suggestion_prompt: str
    returning_prompt: str
    followup_prompt: str
    default_acknowledgement: str
    acknowledgements: Tuple[Tuple[str, str], ...] = ()
    action_labels: Tuple[Tuple[str, str], ...] = ()

    def intent(self, name: str) -> Optional[Intent]:
        for item in self.intents:
            if item.name == name:
                return item
        return None

    @property
    def intent_names(self) -> Tuple[str, ...]:
        return tuple(item.name for item in self.intents)

    def acknowledgement_for(self, token: str) -> str:
        return dict(self.acknowledgements).get(token, self.default_acknowledgement)

    def label_for(self, token: str) -> Optional[str]:
        return dict(self.action_labels).get(token)


# ── Pipeline results ─────────────────────────────────────
class Recognition(_Frozen):
    intent_name: str
    confidence: float = Field(ge=0.0, le=1.0)


class ResponsePayload(_Frozen):
    intent_name: Optional[str] = None
    text: str
    confidence: float = Field(ge=0.0, le=1.0)
    actions: Tuple[Action, ...] = ()
    suggestions: Optional[Tuple[Suggestion, ...]] = None

    def to_message(self, kind: MessageKind = MessageKind.REPLY) -> Message:
        return Message(
            sender=Sender.ASSISTANT,
            text=self.text,
            confidence=_unit(self.confidence),
            actions=self.actions,
            suggestions=self.suggestions,
            kind=kind,
        )


# ── Session state ────────────────────────────────────────
def engagement_tier_for(message_count: int, medium_at: int = 3, high_at: int = 6) -> EngagementTier:
    if message_count >= high_at:
        return EngagementTier.HIGH
    if message_count >= medium_at:
        return EngagementTier.MEDIUM
    return EngagementTier.LOW


class ConversationContext(_Frozen):
    session_start: datetime = Field(default_factory=_now)
    message_count: int = Field(default=0, ge=0)
    last_active_at: datetime = Field(default_factory=_now)
    recognized_topics: Tuple[str, ...] = ()
    language: str = "en"
    tier_thresholds: Tuple[int, int] = (3, 6)

    @computed_field
    @property
    def engagement_tier(self) -> EngagementTier:
        medium_at, high_at = self.tier_thresholds
        return engagement_tier_for(self.message_count, medium_at, high_at)


# ── API ──────────────────────────────────────────────────
class RecognizeRequest(BaseModel):
    text: str
    language: str = "en"


class TurnRequest(BaseModel):
    text: str
    language: str = "en"
    context: Optional[ConversationContext] = None


class ActionRequest(BaseModel):
    token: str
    label: Optional[str] = None
    language: str = "en"
    context: Optional[ConversationContext] = None


class OpenRequest(BaseModel):
    language: str = "en"
    context: Optional[ConversationContext] = None
    has_history: bool = False


class TurnResponse(BaseModel):
    accepted: bool
    messages: list[Message] = []
    recognition: Optional[Recognition] = None
    context: ConversationContext


class KnowledgeSummary(BaseModel):
    language: str
    greetings: list[str]
    intents: list[str]
    first_time_suggestions: list[Suggestion]
    returning_suggestions: list[Suggestion]
