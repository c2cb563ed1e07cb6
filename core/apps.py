"""
App configuration for the core app.
"""
import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class CoreConfig(AppConfig):
    """App configuration for core."""

    name = "core"
    verbose_name = "Core"

    def ready(self):
        """Size the shared cache and register event handlers once apps are loaded."""
        from core.infrastructure.cache_adapters import configure_cache_adapter
        from core.infrastructure.event_handlers import register_event_handlers

        configure_cache_adapter()
        register_event_handlers()
        logger.debug("Core app ready")
