"""
Contact verification Django ORM model.
"""
from django.db import models


class ContactVerification(models.Model):
    """Verification state of a customer phone number."""

    phone = models.CharField(max_length=32, unique=True)
    verified = models.BooleanField(default=False)
    verified_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "contact_verifications"

    def __str__(self):
        return f"{self.phone} ({'verified' if self.verified else 'unverified'})"
