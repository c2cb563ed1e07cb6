"""
Core module for shared domain infrastructure.

This module contains:
- Domain events, exceptions and value objects
- Cache, task runner, transaction and job lock infrastructure
- Metrics and scheduled tasks
"""
