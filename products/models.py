"""
Model registry entry point for the products app.
"""
from products.infrastructure.models import PricingTier, Product, Purchase  # noqa: F401
