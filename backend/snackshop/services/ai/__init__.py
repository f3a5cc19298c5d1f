"""Model runtime and preloading"""

from .model_runtime import LazyModel, ModelRuntime
from .preloader import ModelPreloader

__all__ = ["LazyModel", "ModelRuntime", "ModelPreloader"]
