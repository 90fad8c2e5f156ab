"""Registry document sources for roagen."""

from .registry import Document, RegistrySource

__all__ = ["Document", "RegistrySource"]
