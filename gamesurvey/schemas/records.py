"""
Typed records for the survey workbook sheets.

Sheets are positional: each record class declares its fields in sheet column
order and decodes a raw row into typed, forgiving values. Blank or malformed
cells never raise; numbers become ``None``, text becomes ``""`` and timestamps
become ``None``.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar, List, Optional, Sequence, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel
from typing_extensions import Annotated

from gamesurvey.utils.logger import get_logger

logger = get_logger(__name__)

R = TypeVar("R", bound="SheetRecord")


def to_number(value: Any) -> Optional[Union[int, float]]:
    """Parse a cell as a finite number, keeping integral values as int."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    if isinstance(number, float):
        if math.isnan(number) or math.isinf(number):
            return None
        if number.is_integer():
            return int(number)
    return number


def to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def to_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 cell into a datetime, or None."""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def to_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1")
    if isinstance(value, (int, float)):
        return value == 1
    return False


def to_cell(value: Any) -> Any:
    """Encode a field value for storage in a sheet row."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.isoformat()
    return value


Number = Annotated[Optional[Union[int, float]], BeforeValidator(to_number)]
Text = Annotated[str, BeforeValidator(to_text)]
Timestamp = Annotated[Optional[datetime], BeforeValidator(to_timestamp)]
Flag = Annotated[bool, BeforeValidator(to_flag)]


class SheetRecord(BaseModel):
    """Base class for a row of a sheet"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    COLUMNS: ClassVar[Tuple[str, ...]] = ()

    @classmethod
    def from_row(cls: Type[R], row: Sequence[Any]) -> R:
        """Decode a positional row; short rows are padded with blanks."""
        names = list(cls.model_fields)
        cells = list(row) + [""] * (len(names) - len(row))
        return cls(**dict(zip(names, cells)))

    def to_row(self) -> List[Any]:
        return [to_cell(getattr(self, name)) for name in type(self).model_fields]

    def to_payload(self) -> dict:
        """JSON-ready camelCase view for API responses."""
        return self.model_dump(mode="json", by_alias=True)


class Player(SheetRecord):
    COLUMNS: ClassVar[Tuple[str, ...]] = (
        "PlayerId", "Name", "Age", "Gender", "Email", "Phone",
        "Education", "GameExperience", "RegisteredAt", "LastActive",
    )

    player_id: Text = ""
    name: Text = ""
    age: Number = None
    gender: Text = ""
    email: Text = ""
    phone: Text = ""
    education: Text = ""
    game_experience: Text = ""
    registered_at: Timestamp = None
    last_active: Timestamp = None


class PreSurvey(SheetRecord):
    COLUMNS: ClassVar[Tuple[str, ...]] = (
        "SurveyId", "PlayerId", "SessionId", "Timestamp",
        "StressLevel", "HappinessLevel", "EnergyLevel",
        "MotivationLevel", "AnxietyLevel", "MoodDescription",
        "ExpectationScore", "Comments",
    )

    survey_id: Text = ""
    player_id: Text = ""
    session_id: Text = ""
    timestamp: Timestamp = None
    stress: Number = None
    happiness: Number = None
    energy: Number = None
    motivation: Number = None
    anxiety: Number = None
    mood_description: Text = ""
    expectation_score: Number = None
    comments: Text = ""


class PostSurvey(SheetRecord):
    COLUMNS: ClassVar[Tuple[str, ...]] = (
        "SurveyId", "PlayerId", "SessionId", "Timestamp",
        "StressLevel", "HappinessLevel", "FunLevel",
        "SatisfactionLevel", "EnergyLevel", "DifficultyRating",
        "WillPlayAgain", "FavoriteAspect", "ImprovementSuggestions",
        "OverallRating", "Comments",
    )

    survey_id: Text = ""
    player_id: Text = ""
    session_id: Text = ""
    timestamp: Timestamp = None
    stress: Number = None
    happiness: Number = None
    fun: Number = None
    satisfaction: Number = None
    energy: Number = None
    difficulty: Number = None
    will_play_again: Text = ""
    favorite_aspect: Text = ""
    improvement_suggestions: Text = ""
    overall_rating: Number = None
    comments: Text = ""


class GameSession(SheetRecord):
    COLUMNS: ClassVar[Tuple[str, ...]] = (
        "SessionId", "PlayerId", "StartTime", "EndTime",
        "Duration", "GameLevel", "Score", "Completed", "Notes",
    )

    session_id: Text = ""
    player_id: Text = ""
    start_time: Timestamp = None
    end_time: Timestamp = None
    duration: Text = ""
    game_level: Text = ""
    score: Number = None
    completed: Flag = False
    notes: Text = ""


def decode_table(table: Sequence[Sequence[Any]], record_cls: Type[R]) -> List[R]:
    """
    Decode a header + rows table into records.

    A row that still fails validation is logged and replaced by an empty
    record so the row count is preserved.
    """
    records: List[R] = []
    for position, row in enumerate(table[1:], start=1):
        try:
            records.append(record_cls.from_row(row))
        except ValidationError as e:
            logger.warning(
                f"Row {position} of {record_cls.__name__} could not be decoded: {e}"
            )
            records.append(record_cls())
    return records


@dataclass
class SurveySnapshot:
    """All four tables, read once at the start of a request"""

    players: List[Player] = field(default_factory=list)
    pre_surveys: List[PreSurvey] = field(default_factory=list)
    post_surveys: List[PostSurvey] = field(default_factory=list)
    sessions: List[GameSession] = field(default_factory=list)
