"""
Payment Django ORM model.
"""
from django.db import models


class Payment(models.Model):
    """Append-only payment ledger row."""

    PAYMENT_TYPE_CHOICES = [
        ("initial", "Initial"),
        ("annual", "Annual"),
        ("user", "User"),
    ]

    license = models.ForeignKey(
        "licenses.License",
        on_delete=models.CASCADE,
        related_name="payments",
    )
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    payment_date = models.DateTimeField()
    is_annual_subscription = models.BooleanField(default=False)
    payment_type = models.CharField(
        max_length=20, choices=PAYMENT_TYPE_CHOICES, default="initial", db_index=True
    )
    additional_users = models.PositiveIntegerField(null=True, blank=True)

    class Meta:
        db_table = "payments"
        ordering = ["-payment_date", "-id"]
        indexes = [
            models.Index(fields=["license", "payment_type"]),
        ]

    def __str__(self):
        return f"{self.payment_type} payment of {self.amount} for license {self.license_id}"
