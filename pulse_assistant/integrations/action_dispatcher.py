"""
Action dispatch boundary. The assistant only emits action tokens; the host
application decides what each token does.
"""

from typing import Callable, List, Protocol, Tuple

from loguru import logger


class ActionDispatcher(Protocol):
    async def dispatch(self, token: str, session_id: str) -> None:
        ...


class LoggingActionDispatcher:
    """Default dispatcher: records the request in the log and does nothing else."""

    async def dispatch(self, token: str, session_id: str) -> None:
        logger.info(f"[{session_id[:8]}] action requested: {token}")


class RecordingActionDispatcher:
    def __init__(self) -> None:
        self.dispatched: List[Tuple[str, str]] = []

    async def dispatch(self, token: str, session_id: str) -> None:
        self.dispatched.append((token, session_id))
        logger.debug(f"[{session_id[:8]}] action recorded: {token}")

    @property
    def tokens(self) -> List[str]:
        return [token for token, _ in self.dispatched]


class ForwardingActionDispatcher:
    """Hands each token to a callback, e.g. to push a navigate frame to the browser."""

    def __init__(self, forward: Callable[[str], None]) -> None:
        self._forward = forward

    async def dispatch(self, token: str, session_id: str) -> None:
        logger.info(f"[{session_id[:8]}] forwarding action: {token}")
        self._forward(token)
