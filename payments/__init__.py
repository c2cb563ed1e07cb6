"""
Payments module - Payment ledger and payment-driven renewal.

This module handles:
- Payment entity and domain logic
- Trial conversion, seat limit growth and subscription extension
"""
