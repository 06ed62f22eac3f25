"""
Statistics aggregation over a snapshot of the survey workbook.

The pipeline runs in one pass per table:

1. Demographics over players (gender and age-bucket histograms)
2. Sessions (score average, per-day and per-experience aggregates)
3. Pre and post surveys (per-field means, daily happiness)
4. Presentation shaping (recent feedback, recent emotional comparison)

Every function here is pure and total: a malformed row lowers its own
contribution and never aborts the computation.
"""

from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Optional, Sequence

from gamesurvey.schemas.records import GameSession, Player, PostSurvey, PreSurvey, SurveySnapshot
from gamesurvey.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_GENDER = "unspecified"
DEFAULT_EXPERIENCE = "beginner"
UNKNOWN_EXPERIENCE = "unspecified"
DEFAULT_NAME = "Anonymous"

AGE_GROUPS = ("<18", "18-25", "26-35", "36+")

PRE_AVERAGE_FIELDS = ("stress", "happiness", "energy")
POST_AVERAGE_FIELDS = ("stress", "happiness", "fun", "satisfaction", "energy", "difficulty")


@dataclass
class StatisticsOptions:
    """Knobs for date bucketing and output caps"""

    tz: Optional[tzinfo] = None  # None buckets in the process timezone
    feedback_limit: int = 5
    emotional_limit: int = 20


def round_half_up(value: float, places: int = 0) -> Decimal:
    """Round like a dashboard would display it (halves away from zero)"""
    exponent = Decimal(1).scaleb(-places)
    return Decimal(value).quantize(exponent, rounding=ROUND_HALF_UP)


def round_int(value: float) -> int:
    return int(round_half_up(value))


def format_2dp(value: float) -> str:
    return str(round_half_up(value, 2))


def localize(moment: datetime, tz: Optional[tzinfo]) -> datetime:
    # Naive values are taken as process-local time
    return moment.astimezone(tz)


def day_key(moment: Optional[datetime], tz: Optional[tzinfo]) -> Optional[str]:
    if moment is None:
        return None
    return localize(moment, tz).strftime("%Y-%m-%d")


@dataclass
class RunningMean:
    total: float = 0
    count: int = 0

    def add(self, value: float) -> None:
        self.total += value
        self.count += 1

    def mean(self) -> float:
        return self.total / self.count if self.count else 0


@dataclass
class DayBucket:
    score: RunningMean = field(default_factory=RunningMean)
    happiness: RunningMean = field(default_factory=RunningMean)


# ==================== Demographics ====================


def name_index(players: Iterable[Player]) -> Dict[str, str]:
    """playerId -> display name"""
    return {p.player_id: p.name or DEFAULT_NAME for p in players}


def experience_index(players: Iterable[Player]) -> Dict[str, str]:
    """playerId -> self-reported experience tier"""
    return {p.player_id: p.game_experience or DEFAULT_EXPERIENCE for p in players}


def age_group(age: Optional[float]) -> Optional[str]:
    if age is None:
        return None
    if age < 18:
        return "<18"
    if age <= 25:
        return "18-25"
    if age <= 35:
        return "26-35"
    return "36+"


@dataclass
class Demographics:
    total_players: int = 0
    gender: Dict[str, int] = field(default_factory=dict)
    age_groups: Dict[str, int] = field(default_factory=lambda: dict.fromkeys(AGE_GROUPS, 0))
    experience_by_player: Dict[str, str] = field(default_factory=dict)
    name_by_player: Dict[str, str] = field(default_factory=dict)


def aggregate_demographics(players: Sequence[Player]) -> Demographics:
    """Count players by gender and age bucket; ages that don't parse are skipped."""
    result = Demographics(total_players=len(players))
    for player in players:
        gender = player.gender or DEFAULT_GENDER
        result.gender[gender] = result.gender.get(gender, 0) + 1

        bucket = age_group(player.age)
        if bucket is not None:
            result.age_groups[bucket] += 1

    result.experience_by_player = experience_index(players)
    result.name_by_player = name_index(players)
    return result


# ==================== Sessions ====================


@dataclass
class SessionAggregate:
    total_sessions: int = 0
    average_score: int = 0
    daily: Dict[str, DayBucket] = field(default_factory=dict)
    experience: Dict[str, RunningMean] = field(default_factory=dict)

    def experience_performance(self) -> List[Dict[str, Any]]:
        return [
            {"name": name, "score": round_int(bucket.mean())}
            for name, bucket in self.experience.items()
        ]

    def daily_trends(self) -> List[Dict[str, Any]]:
        trends = []
        for date in sorted(self.daily):
            bucket = self.daily[date]
            trends.append(
                {
                    "date": date,
                    "sessions": bucket.score.count,
                    "avgScore": round_int(bucket.score.mean()),
                    "avgHappiness": (
                        float(round_half_up(bucket.happiness.mean(), 2))
                        if bucket.happiness.count
                        else 0
                    ),
                }
            )
        return trends


def aggregate_sessions(
    sessions: Sequence[GameSession],
    experience_by_player: Dict[str, str],
    tz: Optional[tzinfo] = None,
) -> SessionAggregate:
    """
    Aggregate session scores overall, by day and by experience tier.

    Sessions without a numeric score count toward ``total_sessions`` only.
    Sessions without a start time are left out of the daily buckets.
    """
    result = SessionAggregate(total_sessions=len(sessions))
    overall = RunningMean()

    for session in sessions:
        score = session.score
        if score is None:
            continue
        overall.add(score)

        date = day_key(session.start_time, tz)
        if date is not None:
            result.daily.setdefault(date, DayBucket()).score.add(score)

        tier = experience_by_player.get(session.player_id, UNKNOWN_EXPERIENCE)
        result.experience.setdefault(tier, RunningMean()).add(score)

    result.average_score = round_int(overall.mean()) if overall.count else 0
    return result


# ==================== Surveys ====================


def survey_means(records: Sequence[Any], fields: Sequence[str]) -> Dict[str, float]:
    """
    Per-field means over every row.

    A missing value adds 0 but the row still counts in the denominator, so
    blanks pull the mean toward zero.
    """
    if not records:
        return {}
    totals = dict.fromkeys(fields, 0.0)
    for record in records:
        for name in fields:
            value = getattr(record, name)
            if value:
                totals[name] += value
    count = len(records)
    return {name: totals[name] / count for name in fields}


def record_daily_happiness(
    post_surveys: Sequence[PostSurvey], daily: Dict[str, DayBucket], tz: Optional[tzinfo] = None
) -> None:
    """Add post-survey happiness to days that already have scored sessions."""
    for survey in post_surveys:
        date = day_key(survey.timestamp, tz)
        if date in daily and survey.happiness is not None:
            daily[date].happiness.add(survey.happiness)


def recent_feedback(
    post_surveys: Sequence[PostSurvey],
    name_by_player: Dict[str, str],
    limit: int = 5,
    tz: Optional[tzinfo] = None,
) -> List[Dict[str, Any]]:
    """Newest non-blank comments, newest first."""
    feedback: List[Dict[str, Any]] = []
    for survey in reversed(post_surveys):
        if len(feedback) >= limit:
            break
        comment = survey.comments.strip()
        if not comment:
            continue
        feedback.append(
            {
                "player": survey.player_id,
                "name": name_by_player.get(survey.player_id) or DEFAULT_NAME,
                "comment": survey.comments,
                "date": (
                    localize(survey.timestamp, tz).strftime("%d/%m %H:%M")
                    if survey.timestamp
                    else ""
                ),
            }
        )
    return feedback


def recent_emotional_comparison(
    post_surveys: Sequence[PostSurvey],
    name_by_player: Dict[str, str],
    limit: int = 20,
    tz: Optional[tzinfo] = None,
) -> List[Dict[str, Any]]:
    """Last ``limit`` post surveys' stress/happiness/energy, oldest first."""
    entries = []
    for survey in list(reversed(post_surveys))[:limit]:
        name = name_by_player.get(survey.player_id) or DEFAULT_NAME
        if survey.timestamp:
            name = f"{name} ({localize(survey.timestamp, tz).strftime('%H:%M')})"
        entries.append(
            {
                "name": name,
                "stress": survey.stress or 0,
                "happiness": survey.happiness or 0,
                "energy": survey.energy or 0,
            }
        )
    entries.reverse()
    return entries


# ==================== Pipeline ====================


def get_statistics(
    snapshot: SurveySnapshot, options: Optional[StatisticsOptions] = None
) -> Dict[str, Any]:
    """
    Compute the dashboard statistics for a workbook snapshot.

    Args:
        snapshot: Players, surveys and sessions read at the start of the request
        options: Timezone and output caps

    Returns:
        JSON-serializable statistics dictionary
    """
    options = options or StatisticsOptions()

    demographics = aggregate_demographics(snapshot.players)
    sessions = aggregate_sessions(
        snapshot.sessions, demographics.experience_by_player, options.tz
    )

    pre_means = survey_means(snapshot.pre_surveys, PRE_AVERAGE_FIELDS)
    post_means = survey_means(snapshot.post_surveys, POST_AVERAGE_FIELDS)
    record_daily_happiness(snapshot.post_surveys, sessions.daily, options.tz)

    stats = {
        "totalPlayers": demographics.total_players,
        "totalSessions": sessions.total_sessions,
        "completedSurveys": len(snapshot.post_surveys),
        "averageScore": sessions.average_score,
        "averageScores": {
            "preGame": {k: format_2dp(v) for k, v in pre_means.items()},
            "postGame": {k: format_2dp(v) for k, v in post_means.items()},
        },
        "demographics": {
            "gender": demographics.gender,
            "ageGroups": demographics.age_groups,
        },
        "experiencePerformance": sessions.experience_performance(),
        "dailyTrends": sessions.daily_trends(),
        "recentFeedback": recent_feedback(
            snapshot.post_surveys,
            demographics.name_by_player,
            options.feedback_limit,
            options.tz,
        ),
        "recentEmotionalComparison": recent_emotional_comparison(
            snapshot.post_surveys,
            demographics.name_by_player,
            options.emotional_limit,
            options.tz,
        ),
    }

    logger.debug(
        f"Statistics computed: {stats['totalPlayers']} players, "
        f"{stats['totalSessions']} sessions, {stats['completedSurveys']} post surveys"
    )
    return stats
