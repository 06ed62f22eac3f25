"""
Shared fixtures for the Game Survey tests.
"""

from datetime import datetime, timedelta, timezone

import pytest

from gamesurvey.config import SheetNames
from gamesurvey.db.manager import WorkbookManager
from gamesurvey.db.repository import SurveyRepository

FIXED_NOW = datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)


class TickingClock:
    """Clock that advances one minute per call"""

    def __init__(self, start: datetime = FIXED_NOW):
        self.current = start

    def __call__(self) -> datetime:
        now = self.current
        self.current = now + timedelta(minutes=1)
        return now


@pytest.fixture
def workbook(tmp_path):
    return WorkbookManager(str(tmp_path / "data" / "test.db"))


@pytest.fixture
def repository(workbook):
    repo = SurveyRepository(workbook, SheetNames(), clock=TickingClock())
    repo.setup_sheets()
    return repo
