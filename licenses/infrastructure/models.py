"""
License Django ORM model.

This is the infrastructure layer model for licenses.
Domain entities are in licenses.domain.license.
"""
from decimal import Decimal

from django.db import models

from core.domain.value_objects import normalize_contact, normalize_location


class License(models.Model):
    """
    Represents the right to run the product at one customer location.

    ``contact_key`` and ``location_key`` are derived on save and back
    the duplicate-prevention lookup.
    """

    STATUS_CHOICES = [
        ("active", "Active"),
        ("expired", "Expired"),
        ("revoked", "Revoked"),
        ("suspended", "Suspended"),
    ]

    license_key = models.CharField(max_length=24, unique=True)
    customer_name = models.CharField(max_length=255, null=True, blank=True)
    customer_phone = models.CharField(max_length=32, null=True, blank=True)
    contact_key = models.CharField(max_length=32, blank=True, default="", db_index=True)
    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default="active", db_index=True
    )
    is_free_trial = models.BooleanField(default=False)
    free_trial_end_date = models.DateTimeField(null=True, blank=True)
    start_date = models.DateTimeField(null=True, blank=True)
    end_date = models.DateTimeField(null=True, blank=True)
    seat_count = models.PositiveIntegerField(default=0)
    seat_limit = models.PositiveIntegerField(default=2)
    location_name = models.CharField(max_length=255, null=True, blank=True)
    location_key = models.CharField(max_length=255, blank=True, default="", db_index=True)
    location_address = models.TextField(null=True, blank=True)
    initial_price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("350.00"))
    price_per_seat = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("25.00"))
    product_tag = models.CharField(max_length=50, default="grocery")
    purchase_date = models.DateTimeField()
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField()

    class Meta:
        db_table = "licenses"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["contact_key", "location_key"]),
            models.Index(fields=["status", "is_free_trial"]),
        ]

    def save(self, *args, **kwargs):
        """Save license with derived lookup fields."""
        self.contact_key = normalize_contact(self.customer_phone)
        self.location_key = normalize_location(self.location_name)
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.license_key} ({self.status})"
