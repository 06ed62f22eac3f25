"""
Database package for the Game Survey backend.

This package provides SQLite-based persistence for the survey workbook.
"""

from .manager import WorkbookManager
from .repository import SurveyRepository

__all__ = ["WorkbookManager", "SurveyRepository"]
