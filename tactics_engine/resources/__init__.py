"""
Resource loading - static data validated against JSON schemas.
"""

from tactics_engine.resources.database import Database

__all__ = ["Database"]
