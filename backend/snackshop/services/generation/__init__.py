"""Product generation"""

from .product_generator import ProductGenerator, clean_generated_name, clean_generated_description

__all__ = ["ProductGenerator", "clean_generated_name", "clean_generated_description"]
