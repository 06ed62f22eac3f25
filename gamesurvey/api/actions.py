"""
Action router for the survey API.

Clients call a single endpoint and name the operation in ``action``: as a query
parameter for reads, in the JSON body (or query string) for writes. Every
response is wrapped as ``{"success": true, ...}``; failures are rendered as
``{"success": false, "error": ...}`` by the handlers in ``gamesurvey.main``.
"""

import json
from typing import Any, Callable, Dict, Mapping, Optional

from fastapi import APIRouter, Request
from pydantic import BaseModel, ValidationError
from starlette.concurrency import run_in_threadpool

from gamesurvey.api import players, sessions, stats, store, surveys
from gamesurvey.config import settings
from gamesurvey.db.repository import SurveyRepository
from gamesurvey.errors import InvalidActionError, SurveyAPIError
from gamesurvey.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()

API_NAME = "Game Survey API v1.0"

ReadAction = Callable[[SurveyRepository, Mapping[str, Any]], Dict[str, Any]]

READ_ACTIONS: Dict[str, ReadAction] = {
    "getPlayer": lambda repo, params: players.get_player(repo, params.get("playerId")),
    "getSession": lambda repo, params: sessions.get_session(repo, params.get("sessionId")),
    "getAllPlayers": lambda repo, params: players.get_all_players(repo),
    "getPlayerSessions": lambda repo, params: players.get_player_sessions(
        repo, params.get("playerId")
    ),
    "getLeaderboard": lambda repo, params: stats.get_leaderboard(
        repo, params.get("limit"), settings.leaderboard_limit
    ),
    "getStats": lambda repo, params: stats.get_stats(repo, store.statistics_options()),
    "getSurveyChanges": lambda repo, params: stats.get_changes(repo),
}

# action -> (request model, handler)
WRITE_ACTIONS: Dict[str, Any] = {
    "registerPlayer": (players.PlayerRegistrationRequest, players.register_player),
    "submitPreSurvey": (surveys.PreSurveyRequest, surveys.submit_pre_survey),
    "submitPostSurvey": (surveys.PostSurveyRequest, surveys.submit_post_survey),
    "startSession": (sessions.StartSessionRequest, sessions.start_session),
    "submitScore": (sessions.ScoreRequest, sessions.submit_score),
}


def describe_api() -> Dict[str, Any]:
    return {
        "success": True,
        "message": API_NAME,
        "endpoints": {
            "POST": [f"/exec?action={name}" for name in WRITE_ACTIONS],
            "GET": [
                "/exec?action=getPlayer&playerId=XXX",
                "/exec?action=getSession&sessionId=XXX",
                "/exec?action=getAllPlayers",
                "/exec?action=getPlayerSessions&playerId=XXX",
                "/exec?action=getLeaderboard&limit=10",
                "/exec?action=getStats",
                "/exec?action=getSurveyChanges",
            ],
        },
    }


def dispatch_read(action: Optional[str], params: Mapping[str, Any]) -> Dict[str, Any]:
    handler = READ_ACTIONS.get(action or "")
    if handler is None:
        return describe_api()
    logger.info(f"[API] Read action: {action}")
    return handler(store.get_repository(), params)


def dispatch_write(action: Optional[str], payload: Dict[str, Any]) -> Dict[str, Any]:
    entry = WRITE_ACTIONS.get(action or "")
    if entry is None:
        logger.warning(f"[API] Unknown write action: {action!r}")
        raise InvalidActionError()

    request_model, handler = entry
    try:
        request: BaseModel = request_model.model_validate(payload)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise SurveyAPIError(f"Invalid {action} payload: {fields}") from e

    logger.info(f"[API] Write action: {action}")
    return handler(store.get_repository(), request)


@router.get("")
def read_action(request: Request):
    """Run a read action named by the ``action`` query parameter."""
    params = dict(request.query_params)
    return dispatch_read(params.get("action"), params)


@router.post("")
async def write_action(request: Request):
    """
    Run a write action.

    The body is parsed as JSON whatever its content type, since browser
    clients often post it as text/plain.
    """
    try:
        payload = await request.json() if await request.body() else {}
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise SurveyAPIError(f"Invalid JSON body: {e}") from e
    if not isinstance(payload, dict):
        raise SurveyAPIError("JSON body must be an object")

    action = payload.get("action") or request.query_params.get("action")
    return await run_in_threadpool(dispatch_write, action, payload)
