"""
License model.
"""
import uuid

from django.db import models
from django.utils import timezone

from core.domain.value_objects import DurationType


class License(models.Model):
    """
    A license grants one account the use of a product.

    ``owner`` is empty until the license is activated; ``hwid`` is the
    optional soft device binding.
    """

    DURATION_CHOICES = [(d.value, d.name.title()) for d in DurationType]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    license_key = models.CharField(max_length=32, unique=True)
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="licenses",
    )
    owner = models.ForeignKey(
        "accounts.User",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="licenses",
    )
    issued_by = models.ForeignKey(
        "accounts.User",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="issued_licenses",
    )
    is_active = models.BooleanField(default=True, db_index=True)
    duration_type = models.CharField(max_length=20, choices=DURATION_CHOICES, null=True, blank=True)
    hwid = models.CharField(max_length=255, null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)
    activated_at = models.DateTimeField(null=True, blank=True)
    expires_at = models.DateTimeField(null=True, blank=True, db_index=True)

    class Meta:
        db_table = "licenses"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["owner", "created_at"]),
        ]

    def __str__(self):
        return self.license_key
