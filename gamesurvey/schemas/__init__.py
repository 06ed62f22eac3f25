"""
Typed records for the survey workbook
"""

from .records import (
    GameSession,
    Player,
    PostSurvey,
    PreSurvey,
    SurveySnapshot,
    decode_table,
)

__all__ = [
    "Player",
    "PreSurvey",
    "PostSurvey",
    "GameSession",
    "SurveySnapshot",
    "decode_table",
]
