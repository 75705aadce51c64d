"""
Terminal front-end for the assistant: type messages, watch replies arrive.

Commands: ``/lang <code>``, ``/action <token>``, ``/quit``.
"""

import asyncio
import sys

from loguru import logger

from pulse_assistant.config import settings
from pulse_assistant.integrations.action_dispatcher import LoggingActionDispatcher
from pulse_assistant.models.schemas import Message, Sender
from pulse_assistant.services.dialogue_service import DialogueController
from pulse_assistant.services.knowledge_service import UnsupportedLanguageError


def _print_message(message: Message) -> None:
    who = "User" if message.sender == Sender.USER else "Bot"
    print(f"{who}: {message.text}")
    for action in message.actions:
        print(f"   [{action.token}] {action.label}")
    for suggestion in message.suggestions or ():
        print(f"   • {suggestion.label}")


async def run_console(language: str = settings.DEFAULT_LANGUAGE) -> None:
    controller = DialogueController(
        language,
        tuning=settings.tuning(),
        dispatcher=LoggingActionDispatcher(),
        on_message=_print_message,
    )

    # Step 1: greet
    controller.open()

    while True:
        # Step 2: read a line without blocking pending replies
        try:
            line = await asyncio.to_thread(input)
        except EOFError:
            break
        line = line.strip()

        # Step 3: commands
        if line == "/quit":
            break
        if line.startswith("/lang "):
            try:
                controller.set_language(line.split(maxsplit=1)[1])
            except UnsupportedLanguageError as exc:
                print(exc)
            continue
        if line.startswith("/action "):
            controller.click_action(line.split(maxsplit=1)[1])
            await controller.wait_idle()
            continue

        # Step 4: regular turn
        if controller.submit(line):
            await controller.wait_idle()

    controller.close()


def run() -> None:
    logger.remove()
    logger.add(sys.stderr, level=settings.LOG_LEVEL.upper())
    language = sys.argv[1] if len(sys.argv) > 1 else settings.DEFAULT_LANGUAGE
    asyncio.run(run_console(language))


if __name__ == "__main__":
    run()
