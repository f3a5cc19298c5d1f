"""Test doubles shared by unit and integration tests.

- FakeClock: epoch-millisecond clock advanced by hand
- FakeTextGenerator / FakeEmbedder: model ports without network access
- make_runtime / make_product: builders for runtimes and products
"""

import zlib
from typing import Optional

from snackshop.domain.ai import (
    EmbeddingProviderPort,
    EmbeddingResult,
    TextGenerationServiceError,
    TextGeneratorPort,
)
from snackshop.domain.shop import Category, NutritionFacts, SnackProduct
from snackshop.services.ai import ModelRuntime


EMBEDDING_DIMENSION = 32
START_MS = 1_700_000_000_000


class FakeClock:
    """Epoch-millisecond clock that only moves when told to"""

    def __init__(self, now: int = START_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FakeTextGenerator(TextGeneratorPort):
    """Returns canned responses in order, or raises when fail=True"""

    def __init__(self, responses: Optional[list[str]] = None, fail: bool = False):
        self.responses = list(responses or [])
        self.fail = fail
        self.prompts: list[str] = []

    async def generate(self, prompt, max_new_tokens=60, temperature=0.8, do_sample=True) -> str:
        self.prompts.append(prompt)
        if self.fail:
            raise TextGenerationServiceError("model unavailable")
        if self.responses:
            return self.responses.pop(0)
        return ""


class FakeEmbedder(EmbeddingProviderPort):
    """Deterministic bag-of-words embedding (words hashed into buckets).

    Texts sharing words get similar vectors, which is enough to test
    ranking without a real model.
    """

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls: list[str] = []

    async def embed_text(self, text: str) -> EmbeddingResult:
        self.calls.append(text)
        if self.fail:
            raise RuntimeError("embedding model unavailable")
        vector = [0.0] * EMBEDDING_DIMENSION
        for word in text.lower().split():
            vector[zlib.crc32(word.encode("utf-8")) % EMBEDDING_DIMENSION] += 1.0
        return EmbeddingResult(embedding=vector, model="fake", dimension=EMBEDDING_DIMENSION)


def make_runtime(
    text_model: Optional[TextGeneratorPort] = None,
    embedder: Optional[EmbeddingProviderPort] = None,
) -> ModelRuntime:
    """Build a ModelRuntime whose loaders return the given fakes"""
    text_model = text_model or FakeTextGenerator()
    embedder = embedder or FakeEmbedder()

    async def load_text():
        return text_model

    async def load_embedder():
        return embedder

    return ModelRuntime(load_text, load_embedder)


def make_product(
    product_id: str = "snack_1",
    name: str = "Cosmic Yuzu Crunch",
    description: str = "Bright citrus chips dusted with sea salt.",
    category: Category = Category.CHIPS,
    origin: str = "Japan",
    price: float = 4.99,
    embedding: Optional[list[float]] = None,
) -> SnackProduct:
    """Build a complete SnackProduct with sensible defaults"""
    return SnackProduct(
        id=product_id,
        name=name,
        description=description,
        price=price,
        emoji="🥔",
        ingredients=["Potatoes", "Sea Salt"],
        allergens=[],
        category=category,
        origin=origin,
        flavor_profile=[],
        nutrition_facts=NutritionFacts(calories=150, protein=2, carbs=15, fat=10, sodium=170, sugar=1),
        embedding=embedding,
        generated_at=START_MS,
    )

