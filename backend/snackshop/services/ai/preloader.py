"""Background model preloading.

Starts loading both models shortly after startup so the first product
request does not pay the load time. Safe to call repeatedly: only one
preload task ever runs per event loop.
"""

import asyncio
import logging
from typing import Optional

from ...domain.shop import ModelLoadingState
from .model_runtime import ModelRuntime

logger = logging.getLogger(__name__)


class ModelPreloader:
    """Schedules ModelRuntime.load_all() in the background, once.

    Args:
        runtime: Models to preload
        delay_seconds: Idle delay before starting the load
    """

    def __init__(self, runtime: ModelRuntime, delay_seconds: float = 1.5):
        self.runtime = runtime
        self.delay_seconds = delay_seconds
        self._task: Optional[asyncio.Task] = None

    def start(self) -> asyncio.Task:
        """Start the preload task, or return the one already running."""
        loop = asyncio.get_running_loop()
        if self._task is None or self._task.get_loop() is not loop:
            self._task = loop.create_task(self._run())
        return self._task

    async def _run(self) -> Optional[ModelLoadingState]:
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)

        logger.info("Starting background model preload")
        state = await self.runtime.load_all()
        logger.info(
            f"Background model preload finished: text={state.text_model.value} "
            f"embedding={state.embedding_model.value}"
        )
        return state

    async def stop(self) -> None:
        """Cancel a preload that is still running (app shutdown)."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
