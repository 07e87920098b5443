"""
Operation modules
"""

from .factory import FactoryModule

__all__ = ["FactoryModule"]
