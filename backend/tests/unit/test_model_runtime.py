"""Unit tests for LazyModel, ModelRuntime and ModelPreloader"""

import asyncio

import pytest

from snackshop.domain.shop import ModelStatus
from snackshop.services.ai import LazyModel, ModelPreloader, ModelRuntime
from tests.fakes import FakeEmbedder, FakeTextGenerator, make_runtime


class CountingLoader:
    """Loader that counts calls and can be made to fail or block"""

    def __init__(self, fail_times: int = 0, delay: float = 0.0):
        self.calls = 0
        self.fail_times = fail_times
        self.delay = delay

    async def __call__(self):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.calls <= self.fail_times:
            raise RuntimeError("load failed")
        return object()


class TestLazyModel:
    """Test shared, retrying model loads"""

    @pytest.mark.asyncio
    async def test_starts_idle(self):
        model = LazyModel("text", CountingLoader())

        assert model.state == ModelStatus.IDLE
        assert model.is_loaded is False

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_load(self):
        """Concurrent get() calls trigger exactly one load"""
        loader = CountingLoader(delay=0.01)
        model = LazyModel("text", loader)

        results = await asyncio.gather(*(model.get() for _ in range(10)))

        assert loader.calls == 1
        assert all(result is results[0] for result in results)
        assert model.state == ModelStatus.LOADED
        assert model.is_loaded is True

    @pytest.mark.asyncio
    async def test_loaded_model_is_reused(self):
        loader = CountingLoader()
        model = LazyModel("text", loader)

        first = await model.get()
        second = await model.get()

        assert first is second
        assert loader.calls == 1

    @pytest.mark.asyncio
    async def test_failure_propagates_and_sets_error_state(self):
        model = LazyModel("text", CountingLoader(fail_times=1))

        with pytest.raises(RuntimeError, match="load failed"):
            await model.get()

        assert model.state == ModelStatus.ERROR
        assert model.last_error == "load failed"
        assert model.is_loaded is False

    @pytest.mark.asyncio
    async def test_concurrent_callers_all_see_failure(self):
        loader = CountingLoader(fail_times=1, delay=0.01)
        model = LazyModel("text", loader)

        results = await asyncio.gather(*(model.get() for _ in range(3)), return_exceptions=True)

        assert all(isinstance(result, RuntimeError) for result in results)
        assert loader.calls == 1

    @pytest.mark.asyncio
    async def test_retries_after_failure(self):
        """The next get() after a failed load tries again"""
        loader = CountingLoader(fail_times=1)
        model = LazyModel("text", loader)

        with pytest.raises(RuntimeError):
            await model.get()
        await model.get()

        assert loader.calls == 2
        assert model.state == ModelStatus.LOADED
        assert model.last_error is None

    @pytest.mark.asyncio
    async def test_cancelled_caller_does_not_cancel_load(self):
        loader = CountingLoader(delay=0.05)
        model = LazyModel("text", loader)

        waiter = asyncio.ensure_future(model.get())
        await asyncio.sleep(0)
        waiter.cancel()

        await model.get()
        assert loader.calls == 1


class TestModelRuntime:
    """Test the runtime grouping both models"""

    @pytest.mark.asyncio
    async def test_loading_state_reports_both_models(self, runtime):
        assert runtime.loading_state().text_model == ModelStatus.IDLE

        state = await runtime.load_all()

        assert state.text_model == ModelStatus.LOADED
        assert state.embedding_model == ModelStatus.LOADED

    @pytest.mark.asyncio
    async def test_load_all_tolerates_one_failure(self):
        async def load_text():
            return FakeTextGenerator()

        async def broken_embedder():
            raise RuntimeError("no weights")

        runtime = ModelRuntime(load_text, broken_embedder)

        state = await runtime.load_all()

        assert state.text_model == ModelStatus.LOADED
        assert state.embedding_model == ModelStatus.ERROR

    @pytest.mark.asyncio
    async def test_model_handles_are_the_fakes(self):
        embedder = FakeEmbedder()
        runtime = make_runtime(embedder=embedder)

        assert await runtime.embedding_model.get() is embedder


class TestModelPreloader:
    """Test background preloading"""

    @pytest.mark.asyncio
    async def test_preload_loads_both_models(self, runtime):
        preloader = ModelPreloader(runtime, delay_seconds=0)

        state = await preloader.start()

        assert state.text_model == ModelStatus.LOADED
        assert state.embedding_model == ModelStatus.LOADED

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self, runtime):
        preloader = ModelPreloader(runtime, delay_seconds=0)

        first = preloader.start()
        second = preloader.start()

        assert first is second
        await first

    @pytest.mark.asyncio
    async def test_stop_cancels_pending_preload(self, runtime):
        preloader = ModelPreloader(runtime, delay_seconds=10)
        task = preloader.start()

        await preloader.stop()

        assert task.cancelled()
        assert runtime.loading_state().text_model == ModelStatus.IDLE
