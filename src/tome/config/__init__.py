"""Runtime configuration for tome."""

from tome.config.settings import get_settings

__all__ = ["get_settings"]
