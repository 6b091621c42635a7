"""
Django management command to create the product catalog.

Creates a release and a beta product, each with week, month and lifetime
pricing tiers. Existing products (matched by slug) are updated in place.
"""

from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from core.domain.value_objects import DurationType
from products.infrastructure.models import PricingTier, Product

CATALOG = [
    {
        "slug": "release",
        "name": "Release",
        "is_beta": False,
        "features": ["Stable build", "Automatic updates", "Priority support"],
        "tiers": [
            (DurationType.WEEK, Decimal("199.00"), 7),
            (DurationType.MONTH, Decimal("499.00"), 30),
            (DurationType.LIFETIME, Decimal("2499.00"), None),
        ],
    },
    {
        "slug": "beta",
        "name": "Beta",
        "is_beta": True,
        "features": ["Early access builds", "Experimental features"],
        "tiers": [
            (DurationType.WEEK, Decimal("299.00"), 7),
            (DurationType.MONTH, Decimal("699.00"), 30),
            (DurationType.LIFETIME, Decimal("3499.00"), None),
        ],
    },
]


class Command(BaseCommand):
    """Command to seed products and pricing tiers."""

    help = "Create or update the default products and their pricing tiers"

    @transaction.atomic
    def handle(self, *args, **options):
        """Execute the command."""
        for entry in CATALOG:
            product, created = Product.objects.update_or_create(
                slug=entry["slug"],
                defaults={
                    "name": entry["name"],
                    "is_beta": entry["is_beta"],
                    "features": entry["features"],
                },
            )
            for duration_type, price, duration_days in entry["tiers"]:
                PricingTier.objects.update_or_create(
                    product=product,
                    duration_type=duration_type.value,
                    defaults={"price": price, "duration_days": duration_days},
                )

            action = "Created" if created else "Updated"
            # pylint: disable=no-member
            self.stdout.write(
                self.style.SUCCESS(f"{action} product: {product.name} (slug: {product.slug})")
            )
