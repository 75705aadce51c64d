"""
Stateless assistant endpoints. The client keeps its own conversation context
and sends it back with every turn; nothing is stored between requests.
"""

import random
from typing import Optional

from fastapi import APIRouter, Request
from loguru import logger

from pulse_assistant.config import settings
from pulse_assistant.middleware.rate_limit import ASSISTANT_LIMIT, limiter
from pulse_assistant.models.schemas import (
    ActionRequest,
    ConversationContext,
    KnowledgeSummary,
    Message,
    MessageKind,
    OpenRequest,
    Recognition,
    RecognizeRequest,
    Sender,
    TurnRequest,
    TurnResponse,
)
from pulse_assistant.services import context_service, response_service
from pulse_assistant.services.intent_service import recognize
from pulse_assistant.services.knowledge_service import load_language, supported_languages

router = APIRouter(prefix="/api/assistant", tags=["assistant"])

_tuning = settings.tuning()
_rng = random.Random()


def _context_for(context: Optional[ConversationContext], language: str) -> ConversationContext:
    if context is None:
        return context_service.new_context(language, _tuning)
    # tiers always follow server tuning, whatever the client sent back
    context = context.model_copy(
        update={"tier_thresholds": (_tuning.medium_tier_at, _tuning.high_tier_at)}
    )
    if context.language != language:
        return context_service.with_language(context, language)
    return context


@router.get("/languages")
async def languages():
    return {"languages": list(supported_languages()), "default": settings.DEFAULT_LANGUAGE}


@router.get("/knowledge/{language}", response_model=KnowledgeSummary)
async def knowledge(language: str):
    kb = load_language(language)
    return KnowledgeSummary(
        language=kb.language,
        greetings=list(kb.greetings),
        intents=list(kb.intent_names),
        first_time_suggestions=list(kb.suggestions.first_time),
        returning_suggestions=list(kb.suggestions.returning),
    )


@router.post("/recognize", response_model=Recognition)
@limiter.limit(ASSISTANT_LIMIT)
async def recognize_text(request: Request, req: RecognizeRequest):
    return recognize(req.text, load_language(req.language), _tuning)


@router.post("/open", response_model=TurnResponse)
@limiter.limit(ASSISTANT_LIMIT)
async def open_session(request: Request, req: OpenRequest):
    """Greeting plus suggestion prompt for a client with no history yet."""
    kb = load_language(req.language)
    ctx = _context_for(req.context, req.language)
    if req.has_history:
        return TurnResponse(accepted=False, context=ctx)

    messages = [
        response_service.greeting(kb, _rng).to_message(MessageKind.GREETING),
        response_service.suggestion_prompt(ctx, kb).to_message(MessageKind.SUGGESTIONS),
    ]
    return TurnResponse(accepted=True, messages=messages, context=ctx)


@router.post("/turn", response_model=TurnResponse)
@limiter.limit(ASSISTANT_LIMIT)
async def turn(request: Request, req: TurnRequest):
    """
    One full turn: the echoed user message, the assistant reply and, for a
    confident answer with actions, the follow-up nudge.
    """
    kb = load_language(req.language)
    ctx = _context_for(req.context, req.language)

    text = req.text.strip()
    if not text:
        return TurnResponse(accepted=False, context=ctx)

    user_msg = Message(sender=Sender.USER, text=text, kind=MessageKind.USER)
    ctx = context_service.record_user_message(ctx)

    recognition = recognize(text, kb, _tuning)
    ctx = context_service.record_topic(ctx, recognition.intent_name, _tuning.topic_history_limit)
    payload = response_service.generate(
        recognition.intent_name, recognition.confidence, ctx, kb, _rng, _tuning
    )

    messages = [user_msg, payload.to_message(MessageKind.REPLY)]
    followup = response_service.followup_for(payload, kb, _tuning)
    if followup is not None:
        messages.append(followup.to_message(MessageKind.FOLLOWUP))

    logger.info(f"[API] '{text[:40]}' -> {recognition.intent_name} ({payload.confidence:.2f})")
    return TurnResponse(accepted=True, messages=messages, recognition=recognition, context=ctx)


@router.post("/action", response_model=TurnResponse)
@limiter.limit(ASSISTANT_LIMIT)
async def action(request: Request, req: ActionRequest):
    """Action click: echo the action's label as the user's message and acknowledge it."""
    kb = load_language(req.language)
    ctx = _context_for(req.context, req.language)

    label = kb.label_for(req.token) or req.label or req.token
    user_msg = Message(sender=Sender.USER, text=label, kind=MessageKind.USER)
    ctx = context_service.record_user_message(ctx)
    ack = response_service.acknowledge(req.token, kb).to_message(MessageKind.ACKNOWLEDGEMENT)

    logger.info(f"[API] action {req.token}")
    return TurnResponse(accepted=True, messages=[user_msg, ack], context=ctx)
