"""Product Generator - invents fictional snack products.

Name and description come from the text-generation model; everything else
(price, nutrition, ingredients, allergens, flavor, origin, emoji) is drawn
from the reference tables in ``catalog``. Any model failure, or any output
that fails the sanity checks, is replaced by a template so generation itself
never fails.

Every generated product is written to the product cache before it is
returned.
"""

import asyncio
import logging
import random
import re
import string
from typing import Optional

from ...domain.shop import (
    Category,
    FlavorProfile,
    GenerateProductParams,
    NutritionFacts,
    SnackProduct,
)
from ...domain.storage import KeyValueStoreError
from ...observability.metrics import generation_fallbacks_total, products_generated_total
from ..ai.model_runtime import ModelRuntime
from ..cache.product_cache import Clock, ProductCache, now_ms
from ..embedding.embedding_service import EmbeddingService
from . import catalog

logger = logging.getLogger(__name__)

NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 60
DESCRIPTION_MIN_LENGTH = 10

_NAME_PREFIX = re.compile(r"^(Name:|Snack name:|Answer:)", re.IGNORECASE)
_DESCRIPTION_PREFIX = re.compile(r"^(Description:|Answer:)", re.IGNORECASE)
_ID_ALPHABET = string.digits + string.ascii_lowercase


def clean_generated_name(raw: str) -> str:
    """Strip label prefixes, keep the first line, drop quotes."""
    name = _NAME_PREFIX.sub("", raw.strip()).strip()
    name = name.split("\n")[0].strip()
    return name.replace('"', "").replace("'", "")


def clean_generated_description(raw: str) -> str:
    """Strip label prefixes from a generated description."""
    return _DESCRIPTION_PREFIX.sub("", raw.strip()).strip()


class ProductGenerator:
    """Builds complete SnackProduct records.

    Args:
        runtime: Owner of the text-generation model
        cache: Product cache every new product is written to
        embeddings: Used when params.include_embedding is set
        batch_size: Concurrent generations per batch in generate_products()
        rng: Random source (seed it for reproducible products in tests)
        clock: Epoch-millisecond clock for ids and generated_at
    """

    def __init__(
        self,
        runtime: ModelRuntime,
        cache: ProductCache,
        embeddings: EmbeddingService,
        batch_size: int = 3,
        rng: Optional[random.Random] = None,
        clock: Clock = now_ms,
    ):
        self.runtime = runtime
        self.cache = cache
        self.embeddings = embeddings
        self.batch_size = max(1, batch_size)
        self.rng = rng or random.Random()
        self._clock = clock

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def generate_product(self, params: Optional[GenerateProductParams] = None) -> SnackProduct:
        """Generate one product and cache it.

        Args:
            params: Optional search term / category / embedding flag

        Returns:
            The new product
        """
        params = params or GenerateProductParams()
        category = params.category or self.rng.choice(list(Category))

        name = await self.generate_name(category, params.search_term)
        description = await self.generate_description(name, category)
        ingredients = self.generate_ingredients(category)

        product = SnackProduct(
            id=self.generate_id(),
            name=name,
            description=description,
            price=self.generate_price(category),
            emoji=self.rng.choice(catalog.EMOJI_MAP[category]),
            ingredients=ingredients,
            allergens=self.generate_allergens(ingredients),
            category=category,
            origin=self.rng.choice(catalog.ORIGINS),
            flavor_profile=self.generate_flavor_profile(category),
            nutrition_facts=self.generate_nutrition(category),
            starred=False,
            generated_at=self._clock(),
            view_count=0,
        )

        if params.include_embedding:
            product.embedding = await self.embeddings.product_embedding(product)

        try:
            self.cache.put(product)
        except KeyValueStoreError as e:
            logger.warning(f"Failed to cache generated product: {e}", extra={"product_id": product.id})

        products_generated_total.labels(category=category.value).inc()
        logger.info(
            f"Generated product '{product.name}'",
            extra={"product_id": product.id, "category": category.value}
        )
        return product

    async def generate_products(
        self,
        count: int,
        params: Optional[GenerateProductParams] = None,
    ) -> list[SnackProduct]:
        """Generate count products, batch_size at a time.

        Generations inside a batch run concurrently; batches run one after
        another to avoid flooding the model.
        """
        products: list[SnackProduct] = []
        for start in range(0, max(count, 0), self.batch_size):
            batch_count = min(self.batch_size, count - start)
            batch = await asyncio.gather(
                *(self.generate_product(params) for _ in range(batch_count))
            )
            products.extend(batch)
        return products

    # ------------------------------------------------------------------
    # Model-backed fields
    # ------------------------------------------------------------------

    async def generate_name(self, category: Category, search_term: Optional[str] = None) -> str:
        """Ask the model for a snack name, falling back to a template."""
        if search_term:
            prompt = (
                f"Create a creative {category.value} snack name inspired by: {search_term}. "
                "Make it exotic and unique. Name only:"
            )
        else:
            prompt = (
                f"Create a creative exotic {category.value} snack name. "
                "Make it unique and interesting. Name only:"
            )

        try:
            generator = await self.runtime.text_model.get()
            raw = await generator.generate(prompt, max_new_tokens=20, temperature=0.9, do_sample=True)
        except Exception as e:
            logger.warning(f"AI name generation failed, using fallback: {e}")
            return self._fallback_name(category, search_term)

        name = clean_generated_name(raw)
        if len(name) < NAME_MIN_LENGTH or len(name) > NAME_MAX_LENGTH:
            return self._fallback_name(category, search_term)
        return name

    async def generate_description(self, name: str, category: Category) -> str:
        """Ask the model for a 1-2 sentence description, falling back to a template."""
        prompt = f"Describe this exotic snack in 1-2 sentences: {name}. Make it sound delicious and unique."

        try:
            generator = await self.runtime.text_model.get()
            raw = await generator.generate(prompt, max_new_tokens=60, temperature=0.8)
        except Exception as e:
            logger.warning(f"AI description generation failed, using fallback: {e}")
            return self._fallback_description(name, category)

        description = clean_generated_description(raw)
        if len(description) < DESCRIPTION_MIN_LENGTH:
            return self._fallback_description(name, category)
        return description

    def _fallback_name(self, category: Category, search_term: Optional[str] = None) -> str:
        generation_fallbacks_total.labels(field="name").inc()
        prefix = self.rng.choice(catalog.NAME_PREFIXES)
        suffix = self.rng.choice(catalog.NAME_SUFFIXES)
        if search_term:
            return f"{prefix} {search_term} {suffix}"
        adjective = self.rng.choice(catalog.NAME_ADJECTIVES)
        return f"{adjective} {prefix} {category.value.title()} {suffix}"

    def _fallback_description(self, name: str, category: Category) -> str:
        generation_fallbacks_total.labels(field="description").inc()
        template = self.rng.choice(catalog.DESCRIPTION_TEMPLATES)
        return template.format(name=name, category=category.value)

    # ------------------------------------------------------------------
    # Table-driven fields
    # ------------------------------------------------------------------

    def generate_id(self) -> str:
        """Id of the form snack_<epoch ms>_<9 base36 chars>."""
        suffix = "".join(self.rng.choice(_ID_ALPHABET) for _ in range(9))
        return f"snack_{self._clock()}_{suffix}"

    def generate_price(self, category: Category) -> float:
        low, high = catalog.PRICE_RANGES[category]
        return round(self.rng.uniform(low, high), 2)

    def generate_nutrition(self, category: Category) -> NutritionFacts:
        """Category baseline with +/-20% jitter per field."""
        base = catalog.NUTRITION_BASE[category]
        return NutritionFacts(**{
            field: round(value * (0.8 + self.rng.random() * 0.4))
            for field, value in base.items()
        })

    def generate_ingredients(self, category: Category) -> list[str]:
        """Category base ingredients plus one or two exotic ones."""
        exotic_count = 2 if self.rng.random() > 0.5 else 1
        exotic = self.rng.sample(catalog.EXOTIC_INGREDIENTS, exotic_count)
        return [*catalog.BASE_INGREDIENTS[category], *exotic]

    def generate_allergens(self, ingredients: list[str]) -> list[str]:
        allergens: list[str] = []
        for ingredient in ingredients:
            allergen = catalog.ALLERGEN_MAP.get(ingredient)
            if allergen and allergen not in allergens:
                allergens.append(allergen)

        # "May contain" warning
        if self.rng.random() > 0.7 and "Tree Nuts" not in allergens:
            allergens.append("Tree Nuts")
        return allergens

    def generate_flavor_profile(self, category: Category) -> list[FlavorProfile]:
        flavors: list[FlavorProfile] = []
        if category in catalog.SWEET_CATEGORIES:
            flavors.append(FlavorProfile.SWEET)
        if category in catalog.SAVORY_CATEGORIES:
            flavors.append(FlavorProfile.SAVORY)
        if category == Category.SPICY:
            flavors.extend([FlavorProfile.SPICY, FlavorProfile.SAVORY])
        if self.rng.random() > 0.7:
            flavors.append(FlavorProfile.TANGY)
        if self.rng.random() > 0.8:
            flavors.append(FlavorProfile.UMAMI)
        return flavors
