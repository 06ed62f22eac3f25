"""
Leaderboard ranking: each player's best session, highest first.
"""

from typing import Any, Dict, List, Optional, Sequence

from gamesurvey.engine.statistics import DEFAULT_NAME
from gamesurvey.schemas.records import GameSession, to_number

DEFAULT_LIMIT = 10
UNKNOWN_LEVEL = "Unknown"


def resolve_limit(limit: Any, default: int = DEFAULT_LIMIT) -> int:
    """Positive integer limit, or the default for anything else"""
    value = to_number(limit)
    if value is None or value < 1:
        return default
    return int(value)


def rank_players(
    sessions: Sequence[GameSession],
    name_by_player: Dict[str, str],
    limit: Optional[int] = DEFAULT_LIMIT,
) -> List[Dict[str, Any]]:
    """
    Keep each player's highest-scoring session and rank them.

    Non-numeric scores count as 0. On equal scores the session seen first
    is kept, and equal entries keep their order of first appearance.
    """
    best: Dict[str, Dict[str, Any]] = {}
    for session in sessions:
        score = session.score or 0
        current = best.get(session.player_id)
        if current is not None and score <= current["score"]:
            continue
        best[session.player_id] = {
            "playerId": session.player_id,
            "name": name_by_player.get(session.player_id) or DEFAULT_NAME,
            "score": score,
            "level": session.game_level or UNKNOWN_LEVEL,
            "date": session.start_time.isoformat() if session.start_time else None,
        }

    ranked = sorted(best.values(), key=lambda entry: entry["score"], reverse=True)
    return ranked[: resolve_limit(limit)]
