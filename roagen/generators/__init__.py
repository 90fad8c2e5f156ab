"""
roagen Generators Module

Turns parsed route objects into ROA entries and assembles the dataset.
"""

from .dataset import CACHE_EXPIRY, DatasetAssembler, FixedClock, SystemClock
from .roa import ROAResolver, Resolution, ResolutionOutcome

__all__ = [
    "CACHE_EXPIRY", "DatasetAssembler", "FixedClock", "SystemClock",
    "ROAResolver", "Resolution", "ResolutionOutcome",
]
