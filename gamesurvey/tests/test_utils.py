"""
Unit tests for backend utilities.
"""

import logging
import random

import pytest

from gamesurvey.utils.fake_data import clamp_rating, seed_fake_data
from gamesurvey.utils.ids import IdGenerator
from gamesurvey.utils.logger import get_logger, setup_logging


class TestLogger:
    """Test the logging utilities"""

    def test_get_logger(self):
        logger = get_logger("test")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "test"

    def test_setup_logging(self):
        """setup_logging should not raise with or without colors"""
        try:
            setup_logging(level="INFO", enable_colors=False)
            setup_logging(level="DEBUG", enable_colors=True, include_timestamp=False)
        except Exception as e:
            pytest.fail(f"setup_logging raised an exception: {e}")

    def test_setup_logging_to_file(self, tmp_path):
        log_file = tmp_path / "logs" / "app.log"
        setup_logging(level="INFO", log_file=str(log_file), enable_colors=False)

        get_logger("test_file").info("written to file")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "written to file" in log_file.read_text()
        setup_logging(level="INFO", enable_colors=False)

    def test_logger_levels(self):
        logger = get_logger("test_levels")
        logger.setLevel(logging.WARNING)
        assert logger.level == logging.WARNING


class TestIdGenerator:
    """Test id formats"""

    def test_player_and_session_ids(self):
        ids = IdGenerator()
        player_id = ids.new_player_id()
        session_id = ids.new_session_id()

        assert player_id.startswith("P") and len(player_id) == 9
        assert session_id.startswith("S") and len(session_id) == 9
        assert player_id[1:] == player_id[1:].upper()

    def test_survey_ids(self):
        ids = IdGenerator()
        assert ids.new_survey_id("pre").startswith("PRE-")
        assert ids.new_survey_id("post").startswith("POST-")
        assert len(ids.new_survey_id("pre")) == len("PRE-") + 8

    def test_ids_are_unique(self):
        ids = IdGenerator()
        assert len({ids.new_session_id() for _ in range(200)}) == 200


class TestFakeData:
    """Test demo data seeding"""

    @pytest.mark.parametrize("raw,expected", [(0.2, 1), (5.4, 5), (12, 10)])
    def test_clamp_rating(self, raw, expected):
        assert clamp_rating(raw) == expected

    def test_seed_creates_paired_players(self, repository):
        created = seed_fake_data(repository, 5, random.Random(1))
        snapshot = repository.load_snapshot()

        assert created == 5
        assert len(snapshot.players) == 5
        assert len(snapshot.pre_surveys) == 5
        assert len(snapshot.post_surveys) == 5
        assert {s.session_id for s in snapshot.pre_surveys} == {
            s.session_id for s in snapshot.post_surveys
        }
        assert all(500 <= s.score <= 2000 for s in snapshot.sessions)
        assert all(1 <= s.stress <= 10 for s in snapshot.post_surveys)

    def test_seed_then_clear(self, repository):
        seed_fake_data(repository, 2, random.Random(2))
        cleared = repository.clear_all()

        assert len(cleared) == 4
        assert repository.load_snapshot().sessions == []
