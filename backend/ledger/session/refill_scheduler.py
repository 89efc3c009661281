"""
Delayed Free Parking refill after a manual pot collection.

One-shot asyncio tasks keyed by game id. The scheduler only owns timing
and cancellation; the callback (SessionManager) decides at fire time
whether the refill still applies.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import structlog

logger = structlog.get_logger()

DEFAULT_REFILL_DELAY_SECONDS = 3.0

# Callback type: (game_id) -> Awaitable[None]
RefillCallback = Callable[[str], Awaitable[None]]


class PotRefillScheduler:
    """
    Manage at most one pending refill task per game.

    Scheduling again for the same game replaces the pending task.
    """

    def __init__(self, on_refill: RefillCallback, delay_seconds: float = DEFAULT_REFILL_DELAY_SECONDS) -> None:
        self._on_refill = on_refill
        self._delay_seconds = delay_seconds
        self._tasks: dict[str, asyncio.Task[None]] = {}

    @property
    def delay_seconds(self) -> float:
        return self._delay_seconds

    @property
    def pending_count(self) -> int:
        return len(self._tasks)

    def has_pending(self, game_id: str) -> bool:
        """Check if a refill is waiting to fire for a game."""
        return game_id in self._tasks

    def schedule(self, game_id: str, delay_seconds: float | None = None) -> None:
        """Start (or restart) the refill countdown for a game."""
        self.cancel(game_id)
        delay = self._delay_seconds if delay_seconds is None else delay_seconds
        task = asyncio.create_task(self._run(game_id, delay))
        self._tasks[game_id] = task
        logger.debug("pot refill scheduled", game_id=game_id, delay_seconds=delay)

    def cancel(self, game_id: str) -> bool:
        """Cancel the pending refill for a game. Returns True if one was pending."""
        task = self._tasks.pop(game_id, None)
        if task is None:
            return False
        if not task.done():
            task.cancel()
        logger.debug("pot refill cancelled", game_id=game_id)
        return True

    def cancel_all(self) -> None:
        """Cancel every pending refill (used on shutdown)."""
        for game_id in list(self._tasks):
            self.cancel(game_id)

    async def _run(self, game_id: str, seconds: float) -> None:
        # the task outlives the request that scheduled it; tag its lines with the game
        with structlog.contextvars.bound_contextvars(game_id=game_id, task="pot_refill"):
            try:
                await asyncio.sleep(seconds)
                # drop our entry before the callback so a reschedule from inside it is kept
                if self._tasks.get(game_id) is asyncio.current_task():
                    del self._tasks[game_id]
                await self._on_refill(game_id)
            except asyncio.CancelledError:
                pass
            except Exception:
                logger.exception("pot refill callback failed")
