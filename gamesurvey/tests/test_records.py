"""
Tests for decoding sheet rows into typed records.
"""

from datetime import datetime, timezone

import pytest

from gamesurvey.schemas.records import (
    GameSession,
    Player,
    PostSurvey,
    PreSurvey,
    decode_table,
    to_number,
    to_timestamp,
)


@pytest.mark.parametrize(
    "raw,expected",
    [
        (7, 7),
        (7.0, 7),
        (7.5, 7.5),
        ("8", 8),
        (" 6.25 ", 6.25),
        ("", None),
        (None, None),
        ("abc", None),
        (float("nan"), None),
        (True, None),
    ],
)
def test_to_number(raw, expected):
    assert to_number(raw) == expected


def test_to_timestamp():
    assert to_timestamp("2024-05-01T10:00:00+00:00") == datetime(
        2024, 5, 1, 10, 0, tzinfo=timezone.utc
    )
    assert to_timestamp("2024-05-01T10:00:00Z").tzinfo is not None
    assert to_timestamp("not a date") is None
    assert to_timestamp("") is None
    assert to_timestamp(12) is None


def test_columns_match_fields():
    for record_cls in (Player, PreSurvey, PostSurvey, GameSession):
        assert len(record_cls.COLUMNS) == len(record_cls.model_fields)


def test_pre_survey_from_row():
    row = [
        "PRE-abc", "P1", "S1", "2024-05-01T10:00:00+00:00",
        8, "3", 4, "", 6, "nervous", 7, "hello",
    ]
    survey = PreSurvey.from_row(row)

    assert survey.survey_id == "PRE-abc"
    assert survey.session_id == "S1"
    assert survey.stress == 8
    assert survey.happiness == 3
    assert survey.motivation is None
    assert survey.mood_description == "nervous"
    assert survey.timestamp.year == 2024


def test_short_row_is_padded():
    session = GameSession.from_row(["S1", "P1"])

    assert session.session_id == "S1"
    assert session.score is None
    assert session.completed is False
    assert session.notes == ""


def test_round_trip_through_row():
    session = GameSession(
        session_id="S1",
        player_id="P1",
        start_time=datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc),
        game_level=3,
        score="1500",
        completed="true",
    )
    row = session.to_row()

    assert row[2] == "2024-05-01T10:00:00+00:00"
    assert row[3] == ""
    assert row[5] == "3"
    assert GameSession.from_row(row) == session


def test_payload_uses_camel_case():
    payload = Player(player_id="P1", game_experience="expert").to_payload()

    assert payload["playerId"] == "P1"
    assert payload["gameExperience"] == "expert"
    assert payload["registeredAt"] is None


def test_decode_table_skips_header():
    table = [list(Player.COLUMNS), ["P1", "Alice"], ["P2", "Bob", 30]]
    players = decode_table(table, Player)

    assert [p.name for p in players] == ["Alice", "Bob"]
    assert players[1].age == 30
    assert decode_table([[]], Player) == []
