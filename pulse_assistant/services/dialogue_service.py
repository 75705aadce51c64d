"""
Turn-taking for one assistant session.

The controller owns the message history and the conversation context. User
input is appended immediately; the assistant's answer arrives after a
simulated "thinking" delay on a background task, followed (for confident,
actionable answers) by a second "you can also" message. Closing the session
cancels anything still pending.
"""

import asyncio
import random
import uuid
from typing import Awaitable, Callable, List, Optional, Set, Union

from loguru import logger

from pulse_assistant.config import AssistantTuning
from pulse_assistant.integrations.action_dispatcher import ActionDispatcher, LoggingActionDispatcher
from pulse_assistant.models.schemas import (
    Action,
    KnowledgeBase,
    Message,
    MessageKind,
    Recognition,
    ResponsePayload,
    Sender,
    Suggestion,
    TurnState,
)
from pulse_assistant.services import context_service, response_service
from pulse_assistant.services.intent_service import recognize
from pulse_assistant.services.knowledge_service import load_language

MessageListener = Callable[[Message], None]
TypingListener = Callable[[bool], None]
Sleeper = Callable[[float], Awaitable[None]]


class DialogueController:
    def __init__(
        self,
        language: str = "en",
        *,
        session_id: Optional[str] = None,
        tuning: Optional[AssistantTuning] = None,
        rng: Optional[random.Random] = None,
        sleep: Optional[Sleeper] = None,
        dispatcher: Optional[ActionDispatcher] = None,
        on_message: Optional[MessageListener] = None,
        on_typing: Optional[TypingListener] = None,
    ):
        self.session_id = session_id or str(uuid.uuid4())
        self.tuning = tuning or AssistantTuning()
        self.knowledge: KnowledgeBase = load_language(language)
        self.context = context_service.new_context(language, self.tuning)
        self.messages: List[Message] = []
        self.state = TurnState.IDLE
        self.is_open = False
        self.last_recognition: Optional[Recognition] = None

        self._rng = rng or random.Random()
        self._sleep = sleep or asyncio.sleep
        self._dispatcher = dispatcher or LoggingActionDispatcher()
        self._on_message = on_message
        self._on_typing = on_typing
        self._generation = 0
        self._pending_replies = 0
        self._tasks: Set[asyncio.Task] = set()

    # ── Properties ───────────────────────────────────────
    @property
    def language(self) -> str:
        return self.knowledge.language

    @property
    def is_typing(self) -> bool:
        return self._pending_replies > 0

    @property
    def has_pending(self) -> bool:
        return any(not task.done() for task in self._tasks)

    # ── Session lifecycle ────────────────────────────────
    def open(self) -> None:
        """Open the widget; a fresh session greets the user unprompted."""
        self.is_open = True
        logger.info(f"[{self.session_id[:8]}] assistant opened ({self.language})")
        if self.messages:
            return

        knowledge = self.knowledge
        self._append(response_service.greeting(knowledge, self._rng).to_message(MessageKind.GREETING))
        # first-time or returning is decided now, not when the delay ends
        payload = response_service.suggestion_prompt(self.context, knowledge)
        self._schedule(self._offer_suggestions(self._generation, payload))

    def close(self) -> None:
        """End the session. Pending responses are cancelled and never appended."""
        self.is_open = False
        self._generation += 1
        for task in list(self._tasks):
            task.cancel()
        if self._pending_replies:
            self._pending_replies = 0
            self._notify_typing()
        self.state = TurnState.IDLE
        logger.info(f"[{self.session_id[:8]}] assistant closed after {self.context.message_count} user messages")

    def set_language(self, language: str) -> None:
        knowledge = load_language(language)
        self.knowledge = knowledge
        self.context = context_service.with_language(self.context, language)
        logger.info(f"[{self.session_id[:8]}] language switched to {language}")

    # ── User input ───────────────────────────────────────
    def submit(self, text: str) -> bool:
        """Accept a user message. Returns False for blank input, which changes nothing."""
        if not text or not text.strip():
            return False

        text = text.strip()
        self._record_user(text)
        self._schedule(self._respond(text, self._generation, self.knowledge))
        return True

    def choose_suggestion(self, suggestion: Suggestion) -> bool:
        return self.submit(suggestion.label)

    def click_action(self, action: Union[Action, str]) -> None:
        """
        Treat an action click as the user saying the action's label, then
        answer with the scripted acknowledgement for that token. The intent
        recognizer is not consulted.
        """
        if isinstance(action, Action):
            token, fallback_label = action.token, action.label
        else:
            token, fallback_label = action, action

        label = self.knowledge.label_for(token) or fallback_label
        self._record_user(label)
        self._schedule(self._acknowledge(token, self._generation, self.knowledge))

    async def wait_idle(self) -> None:
        """Wait until every scheduled response has been delivered or cancelled."""
        while True:
            pending = [task for task in self._tasks if not task.done()]
            if not pending:
                return
            await asyncio.wait(pending)

    # ── Turn pipeline ────────────────────────────────────
    async def _respond(self, text: str, generation: int, knowledge: KnowledgeBase) -> None:
        try:
            await self._pause(self._typing_delay_ms())
            if not self._is_current(generation):
                return

            self.state = TurnState.AWAITING_RECOGNITION
            recognition = recognize(text, knowledge, self.tuning)
            self.last_recognition = recognition
            self.context = context_service.record_topic(
                self.context, recognition.intent_name, self.tuning.topic_history_limit
            )

            self.state = TurnState.AWAITING_GENERATION
            payload = response_service.generate(
                recognition.intent_name,
                recognition.confidence,
                self.context,
                knowledge,
                self._rng,
                self.tuning,
            )

            self.state = TurnState.RESPONDING
            self._append(payload.to_message(MessageKind.REPLY))
            logger.info(
                f"[{self.session_id[:8]}] '{text[:40]}' -> {recognition.intent_name} "
                f"({payload.confidence:.2f})"
            )
        finally:
            self._reply_done(generation)

        followup = response_service.followup_for(payload, knowledge, self.tuning)
        if followup is None:
            return
        await self._pause(self.tuning.followup_delay_ms)
        if self._is_current(generation):
            self._append(followup.to_message(MessageKind.FOLLOWUP))

    async def _acknowledge(self, token: str, generation: int, knowledge: KnowledgeBase) -> None:
        try:
            await self._dispatcher.dispatch(token, self.session_id)
            await self._pause(self.tuning.acknowledgement_delay_ms)
            if not self._is_current(generation):
                return
            self.state = TurnState.RESPONDING
            self._append(response_service.acknowledge(token, knowledge).to_message(MessageKind.ACKNOWLEDGEMENT))
        finally:
            self._reply_done(generation)

    async def _offer_suggestions(self, generation: int, payload: ResponsePayload) -> None:
        await self._pause(self.tuning.suggestion_delay_ms)
        if self._is_current(generation):
            self._append(payload.to_message(MessageKind.SUGGESTIONS))

    # ── Helpers ──────────────────────────────────────────
    def _record_user(self, text: str) -> None:
        self._append(Message(sender=Sender.USER, text=text, kind=MessageKind.USER))
        self.context = context_service.record_user_message(self.context)
        self._pending_replies += 1
        self._notify_typing()

    def _reply_done(self, generation: int) -> None:
        if self._is_current(generation) and self._pending_replies:
            self._pending_replies -= 1
            self._notify_typing()
        if not self._pending_replies:
            self.state = TurnState.IDLE

    def _append(self, message: Message) -> None:
        self.messages.append(message)
        if self._on_message is not None:
            self._on_message(message)

    def _notify_typing(self) -> None:
        if self._on_typing is not None:
            self._on_typing(self.is_typing)

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _typing_delay_ms(self) -> float:
        return self._rng.uniform(self.tuning.typing_delay_min_ms, self.tuning.typing_delay_max_ms)

    async def _pause(self, milliseconds: float) -> None:
        await self._sleep(milliseconds / 1000)

    def _schedule(self, coro: Awaitable[None]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.opt(exception=exc).error(f"[{self.session_id[:8]}] assistant turn failed")
