"""
Products module - catalog and purchases.

This module handles:
- Product and PricingTier entities (the catalog)
- Purchase records and the purchase preview
"""
