"""
Game Survey backend: pre/post-game sentiment surveys, sessions and analytics
"""

__version__ = "1.0.0"
