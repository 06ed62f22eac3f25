"""
Utility modules for the Game Survey backend
"""

from .ids import IdGenerator, local_now

__all__ = [
    "IdGenerator",
    "local_now",
]
