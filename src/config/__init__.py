"""Process settings and the packaged tool manifest."""

from .settings import CONFIG_DIR, Settings, get_settings

__all__ = ["CONFIG_DIR", "Settings", "get_settings"]
