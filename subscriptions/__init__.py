"""
Subscriptions module - Time-bounded license validity.

This module handles:
- Subscription entity and domain logic
- Subscription creation and renewal
- Expiration sweep for lapsed subscriptions
"""
