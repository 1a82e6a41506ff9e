"""Route group exports."""

from . import health, locations

__all__ = ["health", "locations"]
