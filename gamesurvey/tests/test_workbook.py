"""
Tests for the SQLite workbook and the survey repository.
"""

import pytest

from gamesurvey.schemas.records import Player, PostSurvey, PreSurvey


class TestWorkbookManager:
    """Test sheet-level operations"""

    def test_missing_sheet_reads_empty(self, workbook):
        assert workbook.read_table("Nope") == [[]]

    def test_create_append_read(self, workbook):
        headers = workbook.get_or_create_sheet("Things", ["Id", "Value"])
        assert headers == ["Id", "Value"]

        assert workbook.append_row("Things", ["a", 1]) == 1
        assert workbook.append_row("Things", ["b", 2]) == 2

        assert workbook.read_table("Things") == [["Id", "Value"], ["a", 1], ["b", 2]]

    def test_existing_headers_kept(self, workbook):
        workbook.get_or_create_sheet("Things", ["Id"])
        assert workbook.get_or_create_sheet("Things", ["Other"]) == ["Id"]

    def test_update_cell(self, workbook):
        workbook.get_or_create_sheet("Things", ["Id", "Value"])
        workbook.append_row("Things", ["a", 1])
        workbook.append_row("Things", ["b"])

        assert workbook.update_cell("Things", 2, 1, 5) is True
        assert workbook.update_cell("Things", 3, 1, 5) is False
        assert workbook.update_cell("Things", 0, 1, 5) is False

        assert workbook.read_table("Things")[1:] == [["a", 1], ["b", 5]]

    def test_clear_sheet_keeps_headers(self, workbook):
        workbook.get_or_create_sheet("Things", ["Id"])
        workbook.append_row("Things", ["a"])
        workbook.append_row("Things", ["b"])

        assert workbook.clear_sheet("Things") == 2
        assert workbook.read_table("Things") == [["Id"]]

    def test_list_sheets(self, workbook):
        workbook.get_or_create_sheet("First", ["A"])
        workbook.get_or_create_sheet("Second", ["B"])

        assert set(workbook.list_sheets()) == {"First", "Second"}


class TestSurveyRepository:
    """Test typed reads and writes"""

    def test_setup_creates_headers(self, repository, workbook):
        assert workbook.read_table("Players")[0] == list(Player.COLUMNS)
        assert workbook.read_table("PreGameSurvey")[0] == list(PreSurvey.COLUMNS)

    def test_register_player(self, repository):
        player = repository.register_player(Player(name="Alice", age=21, gender="female"))

        assert player.player_id.startswith("P")
        assert len(player.player_id) == 9
        assert player.registered_at == player.last_active

        stored = repository.find_player(player.player_id)
        assert stored.name == "Alice"
        assert stored.age == 21

    def test_upsert_creates_missing_player(self, repository):
        repository.upsert_player("P1")

        player = repository.find_player("P1")
        assert player.name == "Anonymous"
        assert player.gender == "unspecified"
        assert player.registered_at is not None

    def test_upsert_fills_only_blank_fields(self, repository):
        repository.upsert_player("P1")
        repository.upsert_player("P1", name="Alice", age=30, gender="female")
        repository.upsert_player("P1", name="Mallory", age=99, gender="male")

        player = repository.find_player("P1")
        assert player.name == "Alice"
        assert player.age == 30
        assert player.gender == "female"
        assert player.last_active > player.registered_at
        assert len(repository.players()) == 1

    def test_upsert_without_id_is_noop(self, repository):
        repository.upsert_player("", name="Ghost")
        assert repository.players() == []

    def test_surveys_get_ids_and_timestamps(self, repository):
        pre = repository.add_pre_survey(PreSurvey(player_id="P1", session_id="S1", stress=8))
        post = repository.add_post_survey(PostSurvey(player_id="P1", session_id="S1", stress=3))

        assert pre.survey_id.startswith("PRE-")
        assert post.survey_id.startswith("POST-")
        assert repository.pre_surveys()[0].stress == 8
        assert repository.post_surveys()[0].timestamp == post.timestamp

    def test_start_session_and_record_score(self, repository):
        started = repository.start_session(player_id="P1", game_level="2")
        scored = repository.record_score(player_id="P1", session_id=started.session_id, score=1500)

        sessions = repository.player_sessions("P1")
        assert len(sessions) == 2
        assert sessions[0].score is None
        assert sessions[0].completed is False
        assert sessions[1].score == 1500
        assert sessions[1].completed is True
        assert sessions[1].game_level == "1"
        assert sessions[1].notes == "Submitted via Web"
        assert repository.find_session(started.session_id) == scored

    def test_record_score_generates_session_id(self, repository):
        session = repository.record_score(player_id="P1", score=None)

        assert session.session_id.startswith("S")
        assert session.score == 0

    def test_load_snapshot(self, repository):
        repository.upsert_player("P1")
        repository.add_pre_survey(PreSurvey(player_id="P1", session_id="S1"))
        repository.start_session(player_id="P1")

        snapshot = repository.load_snapshot()
        assert len(snapshot.players) == 1
        assert len(snapshot.pre_surveys) == 1
        assert snapshot.post_surveys == []
        assert len(snapshot.sessions) == 1

    def test_clear_all(self, repository):
        repository.upsert_player("P1")
        repository.start_session(player_id="P1")

        cleared = repository.clear_all()

        assert set(cleared) == {"Players", "GameSessions"}
        assert repository.load_snapshot().players == []
