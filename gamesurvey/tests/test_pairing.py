"""
Unit tests for pre/post survey pairing and deltas.
"""

from gamesurvey.engine.pairing import (
    BASIS_AGGREGATES,
    BASIS_NONE,
    BASIS_PAIRS,
    compare_session,
    get_survey_changes,
    index_pre_surveys,
    match_survey_pairs,
    session_surveys,
    summarize_changes,
)
from gamesurvey.schemas.records import PostSurvey, PreSurvey, SurveySnapshot


def pre(session_id, **levels):
    return PreSurvey(player_id=levels.pop("player_id", "P1"), session_id=session_id, **levels)


def post(session_id, **levels):
    return PostSurvey(player_id=levels.pop("player_id", "P1"), session_id=session_id, **levels)


class TestMatchSurveyPairs:
    """Test pairing pre and post surveys by session id"""

    def test_single_pair_deltas(self):
        pairs = match_survey_pairs(
            [pre("S1", stress=8, happiness=3, energy=4)],
            [post("S1", stress=3, happiness=8, energy=7, fun=9, satisfaction=8, difficulty=5)],
        )

        assert len(pairs) == 1
        pair = pairs[0]
        assert pair["sessionId"] == "S1"
        assert pair["playerId"] == "P1"
        assert pair["delta"] == {"stress": -5, "happiness": 5, "energy": 3}
        assert pair["pre"] == {
            "stress": 8,
            "happiness": 3,
            "energy": 4,
            "motivation": 0,
            "anxiety": 0,
        }
        assert pair["post"] == {
            "stress": 3,
            "happiness": 8,
            "fun": 9,
            "satisfaction": 8,
            "energy": 7,
            "difficulty": 5,
        }

    def test_lower_stress_is_negative_delta(self):
        pairs = match_survey_pairs([pre("S1", stress=7)], [post("S1", stress=3)])
        assert pairs[0]["delta"]["stress"] == -4

    def test_later_pre_survey_overwrites_earlier(self):
        pre_surveys = [pre("S2", stress=5), pre("S2", stress=9)]

        assert index_pre_surveys(pre_surveys)["S2"].stress == 9
        pairs = match_survey_pairs(pre_surveys, [post("S2", stress=4)])
        assert pairs[0]["pre"]["stress"] == 9
        assert pairs[0]["delta"]["stress"] == -5

    def test_duplicate_post_surveys_each_pair(self):
        pairs = match_survey_pairs(
            [pre("S3", happiness=4)],
            [post("S3", happiness=6), post("S3", happiness=9)],
        )

        assert [p["delta"]["happiness"] for p in pairs] == [2, 5]

    def test_unmatched_and_blank_sessions_skipped(self):
        pairs = match_survey_pairs(
            [pre("", stress=5), pre("S1", stress=5)],
            [post("", stress=1), post("S9", stress=1), post("S1", stress=2)],
        )

        assert [p["sessionId"] for p in pairs] == ["S1"]

    def test_order_follows_post_table(self):
        pre_surveys = [pre("A"), pre("B"), pre("C")]
        post_surveys = [post("C"), post("A"), post("B")]

        first = match_survey_pairs(pre_surveys, post_surveys)
        second = match_survey_pairs(pre_surveys, post_surveys)

        assert [p["sessionId"] for p in first] == ["C", "A", "B"]
        assert first == second

    def test_malformed_values_count_as_zero(self):
        bad_pre = PreSurvey.from_row(["PRE-1", "P1", "S1", "", "n/a", "", "4"])
        pairs = match_survey_pairs([bad_pre], [post("S1", stress=3, happiness=2, energy=6)])

        assert pairs[0]["delta"] == {"stress": 3, "happiness": 2, "energy": 2}


class TestSummarizeChanges:
    """Test the improvement summary over matched pairs"""

    def test_matched_pair_rates(self):
        pairs = match_survey_pairs(
            [
                pre("S1", stress=8, happiness=3, energy=4),
                pre("S2", stress=5, happiness=6, energy=6),
            ],
            [
                post("S1", stress=3, happiness=8, energy=7),
                post("S2", stress=6, happiness=6, energy=5),
            ],
        )
        summary = summarize_changes(pairs, {}, {})

        assert summary["basis"] == BASIS_PAIRS
        assert summary["pairs"] == 2
        assert summary["meanDelta"] == {"stress": -2.0, "happiness": 2.5, "energy": 1.0}
        assert summary["improved"]["stress"] == {"count": 1, "percentage": 50.0}
        assert summary["improved"]["happiness"] == {"count": 1, "percentage": 50.0}
        assert summary["improved"]["energy"] == {"count": 1, "percentage": 50.0}

    def test_falls_back_to_aggregate_means(self):
        summary = summarize_changes(
            [],
            {"stress": 7.0, "happiness": 4.0, "energy": 5.0},
            {"stress": 3.5, "happiness": 7.5, "energy": 6.25},
        )

        assert summary["basis"] == BASIS_AGGREGATES
        assert summary["pairs"] == 0
        assert summary["meanDelta"] == {"stress": -3.5, "happiness": 3.5, "energy": 1.25}
        assert summary["improved"] is None

    def test_no_data_at_all(self):
        summary = summarize_changes([], {}, {})

        assert summary["basis"] == BASIS_NONE
        assert summary["meanDelta"] == {}


class TestSurveyChanges:
    """Test the full survey-changes output"""

    def test_changes_and_count(self):
        snapshot = SurveySnapshot(
            pre_surveys=[pre("S1", stress=8, happiness=3, energy=4)],
            post_surveys=[post("S1", stress=3, happiness=8, energy=7)],
        )
        result = get_survey_changes(snapshot)

        assert result["count"] == 1
        assert result["changes"][0]["delta"] == {"stress": -5, "happiness": 5, "energy": 3}
        assert result["summary"]["basis"] == BASIS_PAIRS

    def test_no_pairs_uses_aggregate_basis(self):
        snapshot = SurveySnapshot(
            pre_surveys=[pre("S1", stress=8, happiness=3, energy=4)],
            post_surveys=[post("S2", stress=4, happiness=5, energy=4)],
        )
        result = get_survey_changes(snapshot)

        assert result["changes"] == []
        assert result["count"] == 0
        assert result["summary"]["basis"] == BASIS_AGGREGATES
        assert result["summary"]["meanDelta"]["stress"] == -4.0


class TestSessionComparison:
    """Test the single-session lookup used after a post-survey submit"""

    def test_latest_surveys_win(self):
        pre_surveys = [pre("S1", stress=5), pre("S1", stress=9)]
        post_surveys = [post("S1", stress=4), post("S1", stress=2)]

        found_pre, found_post = session_surveys("S1", pre_surveys, post_surveys)

        assert found_pre.stress == 9
        assert found_post.stress == 2
        assert compare_session("S1", pre_surveys, post_surveys)["stressChange"] == -7

    def test_missing_side_returns_none(self):
        assert compare_session("S1", [pre("S1", stress=5)], []) is None
        assert compare_session("", [pre("")], [post("")]) is None

    def test_change_keys(self):
        comparison = compare_session(
            "S1",
            [pre("S1", stress=8, happiness=3, energy=4)],
            [post("S1", stress=3, happiness=8, energy=7)],
        )

        assert comparison == {"stressChange": -5, "happinessChange": 5, "energyChange": 3}
