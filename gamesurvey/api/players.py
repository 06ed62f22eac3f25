"""
Player actions: registration and lookups.
"""

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from gamesurvey.db.repository import SurveyRepository
from gamesurvey.errors import MissingParameterError, RecordNotFoundError
from gamesurvey.schemas.records import Player, Text
from gamesurvey.utils.logger import get_logger

logger = get_logger(__name__)


class PlayerRegistrationRequest(BaseModel):
    """Request to register a new player"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: Text = Field(default="", description="Display name")
    age: Optional[Union[int, float, str]] = Field(default=None)
    gender: Text = Field(default="")
    email: Text = Field(default="")
    phone: Text = Field(default="")
    education: Text = Field(default="")
    game_experience: Text = Field(
        default="", description="beginner, intermediate, expert, never played..."
    )


def register_player(
    repository: SurveyRepository, request: PlayerRegistrationRequest
) -> Dict[str, Any]:
    player = repository.register_player(Player(**request.model_dump()))
    return {
        "success": True,
        "playerId": player.player_id,
        "message": "Player registered successfully",
    }


def get_player(repository: SurveyRepository, player_id: Optional[str]) -> Dict[str, Any]:
    if not player_id:
        raise MissingParameterError("playerId")

    player = repository.find_player(player_id)
    if player is None:
        raise RecordNotFoundError("Player")
    return {"success": True, "player": player.to_payload()}


def get_all_players(repository: SurveyRepository) -> Dict[str, Any]:
    players = [p.to_payload() for p in repository.players()]
    return {"success": True, "players": players, "count": len(players)}


def get_player_sessions(
    repository: SurveyRepository, player_id: Optional[str]
) -> Dict[str, Any]:
    if not player_id:
        raise MissingParameterError("playerId")

    sessions = [s.to_payload() for s in repository.player_sessions(player_id)]
    logger.debug(f"Player {player_id} has {len(sessions)} sessions")
    return {
        "success": True,
        "playerId": player_id,
        "sessions": sessions,
        "count": len(sessions),
    }
