"""
Shared repository handle for the API routers.

The repository is built on first use from the application settings; tests swap
it with ``set_repository``.
"""

from typing import Optional
from zoneinfo import ZoneInfo

from gamesurvey.config import settings
from gamesurvey.db.manager import WorkbookManager
from gamesurvey.db.repository import SurveyRepository
from gamesurvey.engine.statistics import StatisticsOptions

_repository: Optional[SurveyRepository] = None


def get_repository() -> SurveyRepository:
    global _repository
    if _repository is None:
        _repository = SurveyRepository(
            WorkbookManager(settings.database_path), settings.sheet_names()
        )
    return _repository


def set_repository(repository: Optional[SurveyRepository]) -> None:
    global _repository
    _repository = repository


def statistics_options() -> StatisticsOptions:
    return StatisticsOptions(
        tz=ZoneInfo(settings.timezone) if settings.timezone else None,
        feedback_limit=settings.feedback_limit,
        emotional_limit=settings.emotional_limit,
    )
