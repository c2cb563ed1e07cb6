"""
Activations module - Device binding and seat management.

This module handles:
- Activation entity and domain logic
- Activation, validation and rollback of device bindings
- Seat accounting against the license seat limit
"""
