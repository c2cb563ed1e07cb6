"""
Activation Django ORM model.

This is the infrastructure layer model for activations.
Domain entities are in activations.domain.activation.
"""
from django.db import models


class Activation(models.Model):
    """
    Binds a license to one physical device.

    The (license, hardware_id) pair is unique; it is the store-level
    guard against two concurrent first activations of the same pair.
    """

    license = models.ForeignKey(
        "licenses.License",
        on_delete=models.CASCADE,
        related_name="activations",
    )
    hardware_id = models.CharField(max_length=255, help_text="Device fingerprint")
    machine_name = models.CharField(max_length=255, null=True, blank=True)
    activated_at = models.DateTimeField()
    last_validation = models.DateTimeField()
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        db_table = "activations"
        ordering = ["-activated_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["license", "hardware_id"], name="unique_license_hardware"
            ),
        ]
        indexes = [
            models.Index(fields=["hardware_id", "is_active"]),
            models.Index(fields=["license", "is_active"]),
        ]

    def clean(self):
        """Validate activation fields."""
        from django.core.exceptions import ValidationError

        if not self.hardware_id or len(self.hardware_id.strip()) == 0:
            raise ValidationError("Hardware ID cannot be empty")

    def __str__(self):
        return f"License {self.license_id} @ {self.hardware_id}"
