"""
Read-only analytics actions backing the dashboard and leaderboard.

Each action reads a fresh snapshot of the workbook; two actions called back to
back may see different data.
"""

from typing import Any, Dict, Optional

from gamesurvey.db.repository import SurveyRepository
from gamesurvey.engine.leaderboard import rank_players, resolve_limit
from gamesurvey.engine.pairing import get_survey_changes
from gamesurvey.engine.statistics import StatisticsOptions, get_statistics, name_index
from gamesurvey.utils.ids import local_now
from gamesurvey.utils.logger import get_logger

logger = get_logger(__name__)


def get_stats(
    repository: SurveyRepository, options: Optional[StatisticsOptions] = None
) -> Dict[str, Any]:
    snapshot = repository.load_snapshot()
    statistics = get_statistics(snapshot, options)
    logger.info(
        f"Statistics served: {statistics['totalPlayers']} players, "
        f"{statistics['totalSessions']} sessions"
    )
    return {
        "success": True,
        "statistics": statistics,
        "generatedAt": local_now().isoformat(),
    }


def get_changes(repository: SurveyRepository) -> Dict[str, Any]:
    changes = get_survey_changes(repository.load_snapshot())
    return {"success": True, **changes}


def get_leaderboard(
    repository: SurveyRepository, limit: Any = None, default_limit: int = 10
) -> Dict[str, Any]:
    leaderboard = rank_players(
        repository.sessions(),
        name_index(repository.players()),
        resolve_limit(limit, default_limit),
    )
    return {"success": True, "leaderboard": leaderboard}
