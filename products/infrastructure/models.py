"""
Product, PricingTier and Purchase models.
"""
import uuid

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from core.domain.value_objects import DurationType
from products.domain.product import PurchaseStatus


class Product(models.Model):
    """
    A product that can be licensed (the client add-on and its beta builds).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    slug = models.SlugField(max_length=100, unique=True, help_text="URL-safe identifier")
    name = models.CharField(max_length=255, help_text="Product display name")
    is_beta = models.BooleanField(default=False)
    features = models.JSONField(default=list, blank=True, help_text="List of feature strings")
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "products"
        ordering = ["created_at"]

    def __str__(self):
        return self.name


class PricingTier(models.Model):
    """A purchasable duration of a product."""

    DURATION_CHOICES = [(d.value, d.name.title()) for d in DurationType]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="pricing_tiers")
    duration_type = models.CharField(max_length=20, choices=DURATION_CHOICES)
    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    duration_days = models.PositiveIntegerField(null=True, blank=True)

    class Meta:
        db_table = "pricing_tiers"
        ordering = ["price"]
        constraints = [
            models.UniqueConstraint(
                fields=["product", "duration_type"], name="unique_product_duration_type"
            ),
        ]

    def __str__(self):
        return f"{self.product.name} - {self.duration_type} ({self.price})"


class Purchase(models.Model):
    """A recorded purchase of a license."""

    STATUS_CHOICES = [(s.value, s.name.title()) for s in PurchaseStatus]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey("accounts.User", on_delete=models.CASCADE, related_name="purchases")
    license = models.ForeignKey(
        "licenses.License",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="purchases",
    )
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default=PurchaseStatus.PENDING.value, db_index=True
    )
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "purchases"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "created_at"]),
        ]

    def __str__(self):
        return f"{self.user_id} - {self.amount} ({self.status})"
