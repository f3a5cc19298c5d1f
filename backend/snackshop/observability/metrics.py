"""Prometheus metrics for SnackShop.

Defines and exposes operational metrics for the product cache, product
generation and model calls.
"""

from prometheus_client import Counter, Histogram, Gauge

# Product cache metrics
cache_lookups_total = Counter(
    "snackshop_cache_lookups_total",
    "Product and embedding cache lookups",
    ["kind", "result"]  # kind: product|embedding, result: hit|miss|expired
)

cache_evictions_total = Counter(
    "snackshop_cache_evictions_total",
    "Products evicted to keep the cache under its size cap"
)

cache_products = Gauge(
    "snackshop_cache_products",
    "Number of product ids in the cache index"
)

# Generation metrics
products_generated_total = Counter(
    "snackshop_products_generated_total",
    "Total imagined products",
    ["category"]
)

generation_fallbacks_total = Counter(
    "snackshop_generation_fallbacks_total",
    "Template fallbacks used instead of model output",
    ["field"]  # field: name|description
)

# Model call metrics
model_calls_total = Counter(
    "snackshop_model_calls_total",
    "Total model API calls",
    ["call_type", "status"]  # call_type: text|embedding, status: success|error
)

model_latency_ms = Histogram(
    "snackshop_model_latency_ms",
    "Model API call latency in milliseconds",
    ["call_type"],
    buckets=[50, 100, 250, 500, 1000, 2500, 5000, 10000, 30000]
)

model_loads_total = Counter(
    "snackshop_model_loads_total",
    "Model load attempts",
    ["model", "status"]  # status: success|error
)
