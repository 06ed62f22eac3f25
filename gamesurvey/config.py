"""
Configuration management for the Game Survey backend
"""

from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class SheetNames(BaseModel):
    """Names of the sheets backing each logical table"""

    players: str = "Players"
    pre_survey: str = "PreGameSurvey"
    post_survey: str = "PostGameSurvey"
    sessions: str = "GameSessions"

    def as_list(self):
        return [self.players, self.pre_survey, self.post_survey, self.sessions]


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Server Configuration
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    debug: bool = Field(default=False)

    # Database Configuration
    database_path: str = Field(
        default="data/gamesurvey.db",
        description="SQLite database file path for the survey workbook",
    )

    # Sheet names
    players_sheet: str = Field(default="Players")
    pre_survey_sheet: str = Field(default="PreGameSurvey")
    post_survey_sheet: str = Field(default="PostGameSurvey")
    sessions_sheet: str = Field(default="GameSessions")

    # Statistics Configuration
    timezone: Optional[str] = Field(
        default=None,
        description="IANA timezone used to bucket dates (process-local if unset)",
    )
    leaderboard_limit: int = Field(default=10)
    feedback_limit: int = Field(default=5)
    emotional_limit: int = Field(default=20)

    class Config:
        env_file = ".env"
        case_sensitive = False

    def sheet_names(self) -> SheetNames:
        """Build the explicit sheet-name struct handed to the repository"""
        return SheetNames(
            players=self.players_sheet,
            pre_survey=self.pre_survey_sheet,
            post_survey=self.post_survey_sheet,
            sessions=self.sessions_sheet,
        )


# Global settings instance
settings = Settings()
