"""
Game session actions: starting sessions, recording scores and lookups.
"""

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from gamesurvey.db.repository import SurveyRepository
from gamesurvey.engine.pairing import session_surveys
from gamesurvey.errors import MissingParameterError, RecordNotFoundError
from gamesurvey.schemas.records import Text
from gamesurvey.utils.logger import get_logger

logger = get_logger(__name__)


class StartSessionRequest(BaseModel):
    """Request to open a game session"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    player_id: Text = Field(default="")
    game_level: Text = Field(default="")
    notes: Text = Field(default="")


class ScoreRequest(BaseModel):
    """Request to record a finished game's score"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    player_id: Text = Field(default="")
    player_name: Text = Field(default="")
    age: Optional[Union[int, float, str]] = Field(default=None)
    gender: Text = Field(default="")
    session_id: Text = Field(default="")
    score: Optional[Union[int, float, str]] = Field(default=None)
    level: Optional[Union[int, float, str]] = Field(default=None)
    notes: Text = Field(default="")


def start_session(
    repository: SurveyRepository, request: StartSessionRequest
) -> Dict[str, Any]:
    session = repository.start_session(
        player_id=request.player_id,
        game_level=request.game_level,
        notes=request.notes,
    )
    return {
        "success": True,
        "sessionId": session.session_id,
        "startTime": session.start_time.isoformat() if session.start_time else None,
        "message": "Game session started",
    }


def submit_score(repository: SurveyRepository, request: ScoreRequest) -> Dict[str, Any]:
    repository.upsert_player(
        request.player_id, request.player_name, request.age, request.gender
    )
    session = repository.record_score(
        player_id=request.player_id,
        session_id=request.session_id,
        score=request.score,
        level=request.level,
        notes=request.notes,
    )
    return {
        "success": True,
        "sessionId": session.session_id,
        "message": "Score submitted successfully",
    }


def get_session(repository: SurveyRepository, session_id: Optional[str]) -> Dict[str, Any]:
    if not session_id:
        raise MissingParameterError("sessionId")

    session = repository.find_session(session_id)
    if session is None:
        raise RecordNotFoundError("Session")

    pre, post = session_surveys(
        session_id, repository.pre_surveys(), repository.post_surveys()
    )
    payload = session.to_payload()
    payload["surveys"] = {
        "pre": pre.to_payload() if pre else None,
        "post": post.to_payload() if post else None,
    }
    logger.debug(f"Session {session_id}: pre={pre is not None} post={post is not None}")
    return {"success": True, "session": payload}
