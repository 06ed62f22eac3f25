"""
Unit tests for backend configuration.
"""

import os

from gamesurvey.config import Settings, SheetNames


class TestSettings:
    """Test the Settings configuration class"""

    def test_default_values(self):
        """Test that default values are set correctly"""
        settings = Settings(_env_file=None)
        assert isinstance(settings.database_path, str)
        assert isinstance(settings.debug, bool)
        assert settings.leaderboard_limit == 10
        assert settings.feedback_limit == 5
        assert settings.emotional_limit == 20

    def test_environment_variables(self):
        """Test that environment variables override defaults"""
        original_env = os.environ.copy()

        try:
            os.environ["DATABASE_PATH"] = "/tmp/other.db"
            os.environ["DEBUG"] = "true"
            os.environ["TIMEZONE"] = "Asia/Bangkok"
            os.environ["PLAYERS_SHEET"] = "Players2"

            settings = Settings(_env_file=None)
            assert settings.database_path == "/tmp/other.db"
            assert settings.debug is True
            assert settings.timezone == "Asia/Bangkok"
            assert settings.sheet_names().players == "Players2"
        finally:
            os.environ.clear()
            os.environ.update(original_env)

    def test_database_path_construction(self):
        """Test that database path is constructed correctly"""
        settings = Settings(_env_file=None)
        assert settings.database_path.endswith("gamesurvey.db")


class TestSheetNames:
    """Test the sheet-name struct"""

    def test_defaults(self):
        assert SheetNames().as_list() == [
            "Players",
            "PreGameSurvey",
            "PostGameSurvey",
            "GameSessions",
        ]

    def test_built_from_settings(self):
        names = Settings(_env_file=None, sessions_sheet="Runs").sheet_names()
        assert names.sessions == "Runs"
        assert names.pre_survey == "PreGameSurvey"
