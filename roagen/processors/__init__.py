"""RPSL object parsing for roagen."""

from .rpsl import RouteObjectParser

__all__ = ["RouteObjectParser"]
