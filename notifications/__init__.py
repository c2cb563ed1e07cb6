"""
Notifications module - Customer messages.

This module handles:
- Message rendering for activation, license details and expiration
- Notification channel adapters
- Contact verification records
"""
