"""
Licenses module - License key and License lifecycle management.

This module handles:
- License key generation and checksum validation
- License entity and domain logic
- License lifecycle (create, suspend, resume, revoke, expire)
- Cached license lookups, dashboard statistics and search
- Scheduled expiration and notification sweeps
"""
