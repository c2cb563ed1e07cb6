"""
Database utilities and transaction management.
"""

import functools
from typing import Any, Awaitable, Callable

from asgiref.sync import sync_to_async
from django.db import transaction


def atomic_async(func: Callable[..., Any]) -> Callable[..., Awaitable[Any]]:
    """
    Run a synchronous ORM function in one transaction from async code.

    The whole body executes inside ``transaction.atomic()`` on Django's
    thread-sensitive executor, so either every write commits or none does.

    Usage:
        @atomic_async
        def revoke(self, license_id, revoked_at):
            ...
    """

    @functools.wraps(func)
    def in_transaction(*args, **kwargs):
        with transaction.atomic():
            return func(*args, **kwargs)

    return sync_to_async(in_transaction)
