"""
Typed access to the survey workbook.

The repository is the only place that knows sheet names and column positions.
Everything above it works with the records from ``gamesurvey.schemas.records``.
"""

from typing import Any, List, Optional, Protocol, Sequence, Type, TypeVar

from gamesurvey.config import SheetNames
from gamesurvey.engine.statistics import DEFAULT_GENDER, DEFAULT_NAME
from gamesurvey.schemas.records import (
    GameSession,
    Player,
    PostSurvey,
    PreSurvey,
    SheetRecord,
    SurveySnapshot,
    decode_table,
)
from gamesurvey.utils.ids import Clock, IdGenerator, local_now
from gamesurvey.utils.logger import get_logger

logger = get_logger(__name__)

R = TypeVar("R", bound=SheetRecord)


class Workbook(Protocol):
    """Row store the repository reads from and appends to"""

    def read_table(self, sheet_name: str) -> List[List[Any]]:
        ...

    def get_or_create_sheet(
        self, sheet_name: str, headers: Optional[Sequence[str]] = None
    ) -> List[str]:
        ...

    def append_row(self, sheet_name: str, row: Sequence[Any]) -> int:
        ...

    def update_cell(self, sheet_name: str, row_number: int, column: int, value: Any) -> bool:
        ...

    def clear_sheet(self, sheet_name: str) -> int:
        ...


class SurveyRepository:
    """
    Reads and appends players, surveys and sessions.

    Attributes:
        workbook: Row store holding the sheets
        sheets: Names of the four sheets
        ids: Identifier generator for new rows
        clock: Source of the current time
    """

    def __init__(
        self,
        workbook: Workbook,
        sheets: Optional[SheetNames] = None,
        ids: Optional[IdGenerator] = None,
        clock: Clock = local_now,
    ):
        self.workbook = workbook
        self.sheets = sheets or SheetNames()
        self.ids = ids or IdGenerator()
        self.clock = clock

    def _layout(self):
        return [
            (self.sheets.players, Player),
            (self.sheets.pre_survey, PreSurvey),
            (self.sheets.post_survey, PostSurvey),
            (self.sheets.sessions, GameSession),
        ]

    def _read(self, sheet_name: str, record_cls: Type[R]) -> List[R]:
        return decode_table(self.workbook.read_table(sheet_name), record_cls)

    def _append(self, sheet_name: str, record: SheetRecord) -> None:
        self.workbook.get_or_create_sheet(sheet_name, type(record).COLUMNS)
        self.workbook.append_row(sheet_name, record.to_row())

    # ==================== Setup ====================

    def setup_sheets(self) -> List[str]:
        """Create all four sheets with their headers; existing ones are left alone."""
        for sheet_name, record_cls in self._layout():
            self.workbook.get_or_create_sheet(sheet_name, record_cls.COLUMNS)
        logger.info("All sheets ready")
        return self.sheets.as_list()

    def clear_all(self) -> List[str]:
        """Delete every data row, keeping headers. Returns the sheets that had rows."""
        cleared = []
        for sheet_name in self.sheets.as_list():
            if self.workbook.clear_sheet(sheet_name):
                cleared.append(sheet_name)
        logger.warning(f"Cleared sheets: {cleared}")
        return cleared

    # ==================== Reads ====================

    def players(self) -> List[Player]:
        return self._read(self.sheets.players, Player)

    def pre_surveys(self) -> List[PreSurvey]:
        return self._read(self.sheets.pre_survey, PreSurvey)

    def post_surveys(self) -> List[PostSurvey]:
        return self._read(self.sheets.post_survey, PostSurvey)

    def sessions(self) -> List[GameSession]:
        return self._read(self.sheets.sessions, GameSession)

    def load_snapshot(self) -> SurveySnapshot:
        """Read every sheet once."""
        return SurveySnapshot(
            players=self.players(),
            pre_surveys=self.pre_surveys(),
            post_surveys=self.post_surveys(),
            sessions=self.sessions(),
        )

    def find_player(self, player_id: str) -> Optional[Player]:
        return next((p for p in self.players() if p.player_id == player_id), None)

    def find_session(self, session_id: str) -> Optional[GameSession]:
        """Latest session row with this id"""
        return next(
            (s for s in reversed(self.sessions()) if s.session_id == session_id), None
        )

    def player_sessions(self, player_id: str) -> List[GameSession]:
        return [s for s in self.sessions() if s.player_id == player_id]

    # ==================== Players ====================

    def register_player(self, player: Player) -> Player:
        """Append a new player with a fresh id and timestamps."""
        now = self.clock()
        record = player.model_copy(
            update={
                "player_id": self.ids.new_player_id(),
                "registered_at": now,
                "last_active": now,
            }
        )
        self._append(self.sheets.players, record)
        logger.info(f"Registered player {record.player_id}")
        return record

    def upsert_player(
        self,
        player_id: str,
        name: Optional[str] = None,
        age: Optional[Any] = None,
        gender: Optional[str] = None,
    ) -> None:
        """
        Create the player if missing, otherwise fill only blank fields.

        A name replaces a blank or "Anonymous" name, an age replaces a blank
        age and a gender replaces a blank or "unspecified" gender. LastActive
        is always refreshed.
        """
        if not player_id:
            return

        sheet = self.sheets.players
        now = self.clock()
        self.workbook.get_or_create_sheet(sheet, Player.COLUMNS)

        for row_number, player in enumerate(self.players(), start=1):
            if player.player_id != player_id:
                continue
            if name and player.name in ("", DEFAULT_NAME):
                self.workbook.update_cell(sheet, row_number, Player.COLUMNS.index("Name"), name)
            if age and player.age is None:
                self.workbook.update_cell(sheet, row_number, Player.COLUMNS.index("Age"), age)
            if gender and player.gender in ("", DEFAULT_GENDER):
                self.workbook.update_cell(
                    sheet, row_number, Player.COLUMNS.index("Gender"), gender
                )
            self.workbook.update_cell(
                sheet, row_number, Player.COLUMNS.index("LastActive"), now.isoformat()
            )
            logger.debug(f"Updated player {player_id}")
            return

        record = Player(
            player_id=player_id,
            name=name or DEFAULT_NAME,
            age=age,
            gender=gender or DEFAULT_GENDER,
            registered_at=now,
            last_active=now,
        )
        self._append(sheet, record)
        logger.info(f"Created player {player_id} from submission")

    # ==================== Surveys ====================

    def add_pre_survey(self, survey: PreSurvey) -> PreSurvey:
        record = survey.model_copy(
            update={"survey_id": self.ids.new_survey_id("pre"), "timestamp": self.clock()}
        )
        self._append(self.sheets.pre_survey, record)
        logger.info(f"Pre-game survey {record.survey_id} saved for session {record.session_id!r}")
        return record

    def add_post_survey(self, survey: PostSurvey) -> PostSurvey:
        record = survey.model_copy(
            update={"survey_id": self.ids.new_survey_id("post"), "timestamp": self.clock()}
        )
        self._append(self.sheets.post_survey, record)
        logger.info(f"Post-game survey {record.survey_id} saved for session {record.session_id!r}")
        return record

    # ==================== Sessions ====================

    def start_session(
        self, player_id: str = "", game_level: str = "", notes: str = ""
    ) -> GameSession:
        """Append an open session with no score."""
        record = GameSession(
            session_id=self.ids.new_session_id(),
            player_id=player_id,
            start_time=self.clock(),
            game_level=game_level,
            completed=False,
            notes=notes,
        )
        self._append(self.sheets.sessions, record)
        logger.info(f"Session {record.session_id} started for player {player_id!r}")
        return record

    def record_score(
        self,
        player_id: str = "",
        session_id: Optional[str] = None,
        score: Optional[Any] = None,
        level: Optional[Any] = None,
        notes: Optional[str] = None,
    ) -> GameSession:
        """Append a completed session carrying a score."""
        now = self.clock()
        record = GameSession(
            session_id=session_id or self.ids.new_session_id(),
            player_id=player_id,
            start_time=now,
            end_time=now,
            duration="0",
            game_level=level or "1",
            score=score or 0,
            completed=True,
            notes=notes or "Submitted via Web",
        )
        self._append(self.sheets.sessions, record)
        logger.info(f"Score {record.score} recorded for session {record.session_id}")
        return record
