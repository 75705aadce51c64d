"""
Intent recognition by substring match against the knowledge base.
"""

from typing import Optional

from loguru import logger

from pulse_assistant.config import AssistantTuning
from pulse_assistant.models.schemas import KnowledgeBase, Recognition

_DEFAULT_TUNING = AssistantTuning()


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def score_pattern(pattern: str, text: str, tuning: AssistantTuning = _DEFAULT_TUNING) -> float:
    """
    Confidence for one matching pattern: the floor plus a bonus for how much
    of the input the pattern covers.
    """
    if not text:
        return 0.0
    return _clamp(tuning.match_floor + (len(pattern) / len(text)) * tuning.match_span)


def recognize(
    text: str,
    knowledge: KnowledgeBase,
    tuning: Optional[AssistantTuning] = None,
) -> Recognition:
    tuning = tuning or _DEFAULT_TUNING
    normalized = (text or "").lower()

    best_intent = None
    best_confidence = 0.0

    if normalized:
        for intent in knowledge.intents:
            for pattern in intent.match_patterns:
                if pattern and pattern in normalized:
                    confidence = score_pattern(pattern, normalized, tuning)
                    # strict comparison: the first candidate reaching the max wins
                    if best_intent is None or confidence > best_confidence:
                        best_intent = intent.name
                        best_confidence = confidence

    if best_intent is None:
        logger.debug(f"No intent matched '{normalized[:40]}' -> {tuning.fallback_intent}")
        return Recognition(
            intent_name=tuning.fallback_intent,
            confidence=_clamp(tuning.fallback_confidence),
        )

    logger.debug(f"Recognized '{normalized[:40]}' -> {best_intent} ({best_confidence:.3f})")
    return Recognition(intent_name=best_intent, confidence=best_confidence)
