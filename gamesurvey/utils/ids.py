"""
Identifier and clock helpers for new workbook rows.
"""

import uuid
from datetime import datetime
from typing import Callable, Literal

Clock = Callable[[], datetime]

SurveyKind = Literal["pre", "post"]


def local_now() -> datetime:
    """Current time as an aware datetime in the process timezone"""
    return datetime.now().astimezone()


class IdGenerator:
    """Short opaque identifiers with a kind-specific prefix"""

    def _token(self) -> str:
        return uuid.uuid4().hex[:8]

    def new_player_id(self) -> str:
        return "P" + self._token().upper()

    def new_session_id(self) -> str:
        return "S" + self._token().upper()

    def new_survey_id(self, kind: SurveyKind) -> str:
        prefix = "PRE-" if kind == "pre" else "POST-"
        return prefix + self._token()
