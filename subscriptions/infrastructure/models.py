"""
Subscription Django ORM model.
"""
from django.db import models


class Subscription(models.Model):
    """One validity window of a license."""

    STATUS_CHOICES = [
        ("active", "Active"),
        ("expired", "Expired"),
        ("cancelled", "Cancelled"),
        ("grace_period", "Grace period"),
    ]

    license = models.ForeignKey(
        "licenses.License",
        on_delete=models.CASCADE,
        related_name="subscriptions",
    )
    start_date = models.DateTimeField()
    end_date = models.DateTimeField(db_index=True)
    annual_fee = models.DecimalField(max_digits=10, decimal_places=2)
    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default="active", db_index=True
    )
    grace_period_end = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField()

    class Meta:
        db_table = "subscriptions"
        ordering = ["-end_date", "-id"]
        indexes = [
            models.Index(fields=["license", "status"]),
            models.Index(fields=["status", "end_date"]),
        ]

    def __str__(self):
        return f"Subscription {self.id} of license {self.license_id} ({self.status})"
