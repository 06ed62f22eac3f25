"""
Matching pre- and post-game surveys by session and computing their deltas.

Duplicate session ids resolve the same way everywhere in this module: the most
recently appended survey wins.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from gamesurvey.engine.statistics import (
    POST_AVERAGE_FIELDS,
    PRE_AVERAGE_FIELDS,
    round_half_up,
    survey_means,
)
from gamesurvey.schemas.records import PostSurvey, PreSurvey, SurveySnapshot
from gamesurvey.utils.logger import get_logger

logger = get_logger(__name__)

PRE_METRICS = ("stress", "happiness", "energy", "motivation", "anxiety")
POST_METRICS = ("stress", "happiness", "fun", "satisfaction", "energy", "difficulty")
DELTA_METRICS = ("stress", "happiness", "energy")

BASIS_PAIRS = "matched_pairs"
BASIS_AGGREGATES = "aggregate_means"
BASIS_NONE = "none"


def _metrics(record: Any, names: Sequence[str]) -> Dict[str, float]:
    return {name: getattr(record, name) or 0 for name in names}


def _improved(metric: str, delta: float) -> bool:
    # Lower stress is better; higher happiness and energy are better
    return delta < 0 if metric == "stress" else delta > 0


def index_pre_surveys(pre_surveys: Sequence[PreSurvey]) -> Dict[str, PreSurvey]:
    """sessionId -> pre survey, later rows overwriting earlier ones"""
    index: Dict[str, PreSurvey] = {}
    for survey in pre_surveys:
        if survey.session_id:
            index[survey.session_id] = survey
    return index


def match_survey_pairs(
    pre_surveys: Sequence[PreSurvey], post_surveys: Sequence[PostSurvey]
) -> List[Dict[str, Any]]:
    """
    Pair every post survey with the pre survey of the same session.

    Pairs come out in post-survey table order; post surveys without a
    session id or without a matching pre survey are skipped.
    """
    index = index_pre_surveys(pre_surveys)
    pairs = []
    for post_survey in post_surveys:
        pre_survey = index.get(post_survey.session_id) if post_survey.session_id else None
        if pre_survey is None:
            continue

        pre = _metrics(pre_survey, PRE_METRICS)
        post = _metrics(post_survey, POST_METRICS)
        pairs.append(
            {
                "playerId": pre_survey.player_id or post_survey.player_id,
                "sessionId": post_survey.session_id,
                "pre": pre,
                "post": post,
                "delta": {name: post[name] - pre[name] for name in DELTA_METRICS},
            }
        )
    return pairs


def summarize_changes(
    pairs: Sequence[Dict[str, Any]],
    pre_means: Dict[str, float],
    post_means: Dict[str, float],
) -> Dict[str, Any]:
    """
    Summarize matched pairs into mean deltas and improvement rates.

    Without any matched pair the summary falls back to the difference of the
    independent pre/post means. That figure is tagged with a different
    ``basis`` and carries no improvement counts, since it says nothing about
    how individual players changed.
    """
    if pairs:
        count = len(pairs)
        mean_delta = {}
        improved = {}
        for metric in DELTA_METRICS:
            deltas = [pair["delta"][metric] for pair in pairs]
            hits = sum(1 for d in deltas if _improved(metric, d))
            mean_delta[metric] = float(round_half_up(sum(deltas) / count, 2))
            improved[metric] = {
                "count": hits,
                "percentage": float(round_half_up(hits * 100 / count, 1)),
            }
        return {
            "basis": BASIS_PAIRS,
            "pairs": count,
            "meanDelta": mean_delta,
            "improved": improved,
        }

    if pre_means and post_means:
        mean_delta = {
            metric: float(round_half_up(post_means[metric] - pre_means[metric], 2))
            for metric in DELTA_METRICS
        }
        return {"basis": BASIS_AGGREGATES, "pairs": 0, "meanDelta": mean_delta, "improved": None}

    return {"basis": BASIS_NONE, "pairs": 0, "meanDelta": {}, "improved": None}


def get_survey_changes(snapshot: SurveySnapshot) -> Dict[str, Any]:
    """Matched pre/post pairs for the whole workbook, with their summary."""
    pairs = match_survey_pairs(snapshot.pre_surveys, snapshot.post_surveys)
    summary = summarize_changes(
        pairs,
        survey_means(snapshot.pre_surveys, PRE_AVERAGE_FIELDS),
        survey_means(snapshot.post_surveys, POST_AVERAGE_FIELDS),
    )
    logger.debug(f"Matched {len(pairs)} survey pairs ({summary['basis']})")
    return {"changes": pairs, "count": len(pairs), "summary": summary}


def session_surveys(
    session_id: str,
    pre_surveys: Sequence[PreSurvey],
    post_surveys: Sequence[PostSurvey],
) -> Tuple[Optional[PreSurvey], Optional[PostSurvey]]:
    """Latest pre and post survey recorded for a session."""
    if not session_id:
        return None, None
    pre = next((s for s in reversed(pre_surveys) if s.session_id == session_id), None)
    post = next((s for s in reversed(post_surveys) if s.session_id == session_id), None)
    return pre, post


def compare_session(
    session_id: str,
    pre_surveys: Sequence[PreSurvey],
    post_surveys: Sequence[PostSurvey],
) -> Optional[Dict[str, float]]:
    """Stress/happiness/energy change for one session, or None if unpaired."""
    pre, post = session_surveys(session_id, pre_surveys, post_surveys)
    if pre is None or post is None:
        return None
    return {
        "stressChange": (post.stress or 0) - (pre.stress or 0),
        "happinessChange": (post.happiness or 0) - (pre.happiness or 0),
        "energyChange": (post.energy or 0) - (pre.energy or 0),
    }
