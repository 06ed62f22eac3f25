"""
Aggregation engine for the Game Survey backend
"""

from .leaderboard import rank_players
from .pairing import compare_session, get_survey_changes, match_survey_pairs, summarize_changes
from .statistics import StatisticsOptions, get_statistics

__all__ = [
    "StatisticsOptions",
    "compare_session",
    "get_statistics",
    "get_survey_changes",
    "match_survey_pairs",
    "rank_players",
    "summarize_changes",
]
