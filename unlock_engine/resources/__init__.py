"""
Resources module - static data loading.
"""

from unlock_engine.resources.database import Database

__all__ = ["Database"]
