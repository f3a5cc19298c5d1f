"""Model Runtime - lazily loaded model handles owned by the application.

Each model is wrapped in a LazyModel. The first caller of ``get()`` starts
the loader as an asyncio task; every other caller awaits the same task
instead of polling a flag. A failed load is reported to all waiting callers
and retried on the next ``get()``.

The runtime is an explicit object held by the ShopContext, not module state,
so tests and the app each get their own models.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Generic, Optional, TypeVar

from ...config import Settings
from ...domain.ai.ports import EmbeddingProviderPort, TextGeneratorPort
from ...domain.shop import ModelLoadingState, ModelStatus
from ...observability.metrics import model_loads_total

logger = logging.getLogger(__name__)

T = TypeVar("T")

Loader = Callable[[], Awaitable[T]]


class LazyModel(Generic[T]):
    """A model handle that is loaded once, on first use.

    Args:
        name: Label used in logs, metrics and status reports
        loader: Coroutine function producing the model

    Example:
        model = LazyModel("embedding", load_embedder)
        embedder = await model.get()   # loads
        embedder = await model.get()   # cached handle
    """

    def __init__(self, name: str, loader: Loader):
        self.name = name
        self._loader = loader
        self._model: Optional[T] = None
        self._task: Optional[asyncio.Task] = None
        self.state = ModelStatus.IDLE
        self.last_error: Optional[str] = None

    @property
    def is_loaded(self) -> bool:
        return self._model is not None

    async def get(self) -> T:
        """Return the loaded model, loading it if needed.

        Concurrent callers share one load. Cancelling a caller does not
        cancel the shared load.

        Raises:
            Exception: Whatever the loader raised
        """
        if self._model is not None:
            return self._model

        loop = asyncio.get_running_loop()
        task = self._task
        # A task from another (closed) event loop cannot be awaited here
        if task is None or task.get_loop() is not loop:
            task = loop.create_task(self._load())
            self._task = task

        return await asyncio.shield(task)

    async def _load(self) -> T:
        self.state = ModelStatus.LOADING
        logger.info(f"Loading {self.name} model...", extra={"model": self.name})

        try:
            model = await self._loader()
        except Exception as e:
            self.state = ModelStatus.ERROR
            self.last_error = str(e)
            self._task = None
            model_loads_total.labels(model=self.name, status="error").inc()
            logger.error(f"Failed to load {self.name} model: {e}", extra={"model": self.name})
            raise

        self._model = model
        self.state = ModelStatus.LOADED
        self.last_error = None
        model_loads_total.labels(model=self.name, status="success").inc()
        logger.info(f"{self.name} model loaded", extra={"model": self.name})
        return model


class ModelRuntime:
    """Owns the text-generation and embedding models."""

    def __init__(
        self,
        text_loader: Loader[TextGeneratorPort],
        embedding_loader: Loader[EmbeddingProviderPort],
    ):
        self.text_model: LazyModel[TextGeneratorPort] = LazyModel("text-generation", text_loader)
        self.embedding_model: LazyModel[EmbeddingProviderPort] = LazyModel("embedding", embedding_loader)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ModelRuntime":
        """Build a runtime backed by the OpenAI adapters."""
        from ...infrastructure.ai import OpenAIEmbeddingAdapter, OpenAITextGenerator

        async def load_text_generator() -> TextGeneratorPort:
            return OpenAITextGenerator(
                api_key=settings.OPENAI_API_KEY,
                model=settings.TEXT_MODEL,
                timeout=settings.AI_TIMEOUT_SECONDS,
            )

        async def load_embedder() -> EmbeddingProviderPort:
            return OpenAIEmbeddingAdapter(
                api_key=settings.OPENAI_API_KEY,
                model=settings.EMBEDDING_MODEL,
                timeout=settings.AI_TIMEOUT_SECONDS,
            )

        return cls(load_text_generator, load_embedder)

    def loading_state(self) -> ModelLoadingState:
        return ModelLoadingState(
            text_model=self.text_model.state,
            embedding_model=self.embedding_model.state,
        )

    async def load_all(self) -> ModelLoadingState:
        """Load both models; failures are logged and reflected in the state."""
        results = await asyncio.gather(
            self.text_model.get(),
            self.embedding_model.get(),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, Exception):
                logger.warning(f"Model preload failed: {result}")
        return self.loading_state()
