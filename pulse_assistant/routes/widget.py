"""
Live assistant widget over WebSocket, one dialogue session per connection.
"""

import asyncio
import json
from typing import Any, Dict

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from loguru import logger
from pydantic import ValidationError

from pulse_assistant.config import settings
from pulse_assistant.integrations.action_dispatcher import ForwardingActionDispatcher
from pulse_assistant.models.schemas import Action, Message, Suggestion
from pulse_assistant.services.dialogue_service import DialogueController
from pulse_assistant.services.knowledge_service import UnsupportedLanguageError, load_language

router = APIRouter(tags=["widget"])

_tuning = settings.tuning()


def build_controller(session_id: str, language: str, outbox: asyncio.Queue) -> DialogueController:
    def on_message(message: Message) -> None:
        outbox.put_nowait({"type": "message", "message": message.model_dump(mode="json")})

    def on_typing(value: bool) -> None:
        outbox.put_nowait({"type": "typing", "value": value})

    def on_navigate(token: str) -> None:
        outbox.put_nowait({"type": "navigate", "token": token})

    return DialogueController(
        language,
        session_id=session_id,
        tuning=_tuning,
        dispatcher=ForwardingActionDispatcher(on_navigate),
        on_message=on_message,
        on_typing=on_typing,
    )


async def _pump(websocket: WebSocket, outbox: asyncio.Queue) -> None:
    """Send queued frames in order until the None sentinel arrives."""
    while True:
        frame = await outbox.get()
        if frame is None:
            return
        await websocket.send_json(frame)


def _handle_frame(controller: DialogueController, frame: Dict[str, Any], outbox: asyncio.Queue) -> bool:
    """Apply one client frame. Returns False when the client asked to close."""
    kind = frame.get("type")

    if kind == "message":
        controller.submit(str(frame.get("text") or ""))
    elif kind == "action":
        token = frame.get("token")
        if not token:
            raise ValueError("action frame needs a token")
        controller.click_action(Action(label=frame.get("label") or token, token=token))
    elif kind == "suggestion":
        controller.choose_suggestion(Suggestion.model_validate(frame.get("suggestion") or {}))
    elif kind == "language":
        controller.set_language(str(frame.get("language") or ""))
        outbox.put_nowait({"type": "language", "language": controller.language})
    elif kind == "close":
        return False
    else:
        raise ValueError(f"Unknown frame type: {kind!r}")
    return True


@router.websocket("/ws/assistant/{session_id}")
async def assistant_websocket(websocket: WebSocket, session_id: str, language: str = settings.DEFAULT_LANGUAGE):
    await websocket.accept()

    try:
        load_language(language)
    except UnsupportedLanguageError as exc:
        await websocket.send_json({"type": "error", "message": str(exc)})
        await websocket.close(code=1008)
        return

    outbox: asyncio.Queue = asyncio.Queue()
    controller = build_controller(session_id, language, outbox)
    pump = asyncio.create_task(_pump(websocket, outbox))
    logger.info(f"WebSocket connected: session={session_id} language={language}")

    controller.open()
    disconnected = False
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                frame = json.loads(raw)
                if not isinstance(frame, dict):
                    raise ValueError("frames must be JSON objects")
                if not _handle_frame(controller, frame, outbox):
                    break
            except (ValueError, ValidationError) as exc:
                # covers bad JSON and UnsupportedLanguageError as well
                outbox.put_nowait({"type": "error", "message": str(exc)})
    except WebSocketDisconnect:
        disconnected = True
        logger.info(f"WebSocket disconnected: session={session_id}")
    finally:
        controller.close()
        if disconnected:
            pump.cancel()
        else:
            # flush whatever the session queued before the close
            outbox.put_nowait(None)
        await asyncio.gather(pump, return_exceptions=True)

    if not disconnected:
        await websocket.close()
