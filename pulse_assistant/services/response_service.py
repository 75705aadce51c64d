"""
Response generation: template selection, follow-up nudges, scripted
acknowledgements and the session-open greeting.
"""

import random
from typing import Optional

from pulse_assistant.config import AssistantTuning
from pulse_assistant.models.schemas import (
    ConversationContext,
    KnowledgeBase,
    ResponsePayload,
    Suggestion,
)

_DEFAULT_TUNING = AssistantTuning()


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def _offers_actions(payload: ResponsePayload, tuning: AssistantTuning) -> bool:
    return payload.confidence > tuning.suggestion_floor and bool(payload.actions)


def clarification(
    knowledge: KnowledgeBase,
    confidence: float = 1.0,
    tuning: Optional[AssistantTuning] = None,
) -> ResponsePayload:
    tuning = tuning or _DEFAULT_TUNING
    return ResponsePayload(
        intent_name=None,
        text=knowledge.clarification,
        confidence=_clamp(min(tuning.clarification_confidence, confidence)),
    )


def generate(
    intent_name: str,
    confidence: float,
    context: ConversationContext,
    knowledge: KnowledgeBase,
    rng: Optional[random.Random] = None,
    tuning: Optional[AssistantTuning] = None,
) -> ResponsePayload:
    """
    Pick a response for ``intent_name``. The result never reports more
    confidence than the recognizer did.
    """
    rng = rng or random.Random()
    tuning = tuning or _DEFAULT_TUNING

    intent = knowledge.intent(intent_name)
    if intent is None:
        return clarification(knowledge, confidence, tuning)

    template = rng.choice(intent.response_templates)
    payload = ResponsePayload(
        intent_name=intent.name,
        text=template.text,
        confidence=_clamp(min(confidence, template.base_confidence)),
        actions=template.actions,
    )
    if _offers_actions(payload, tuning):
        payload = payload.model_copy(update={
            "suggestions": tuple(
                Suggestion(label=a.label, action_token=a.token, related_intent=intent.name)
                for a in payload.actions
            ),
        })
    return payload


def followup_for(
    payload: ResponsePayload,
    knowledge: KnowledgeBase,
    tuning: Optional[AssistantTuning] = None,
) -> Optional[ResponsePayload]:
    """Second message restating the actions of a confident answer."""
    tuning = tuning or _DEFAULT_TUNING
    if not _offers_actions(payload, tuning):
        return None
    return ResponsePayload(
        intent_name=payload.intent_name,
        text=knowledge.followup_prompt,
        confidence=payload.confidence,
        actions=payload.actions,
    )


def acknowledge(token: str, knowledge: KnowledgeBase) -> ResponsePayload:
    return ResponsePayload(
        intent_name=None,
        text=knowledge.acknowledgement_for(token),
        confidence=1.0,
    )


def greeting(knowledge: KnowledgeBase, rng: Optional[random.Random] = None) -> ResponsePayload:
    rng = rng or random.Random()
    return ResponsePayload(text=rng.choice(knowledge.greetings), confidence=1.0)


def suggestion_prompt(context: ConversationContext, knowledge: KnowledgeBase) -> ResponsePayload:
    if context.message_count == 0:
        text, suggestions = knowledge.suggestion_prompt, knowledge.suggestions.first_time
    else:
        text, suggestions = knowledge.returning_prompt, knowledge.suggestions.returning
    return ResponsePayload(text=text, confidence=1.0, suggestions=suggestions)
