"""
Fake survey data for demos and dashboard testing.

Each fake player gets a pre-game survey, a scored session and a post-game
survey sharing one session id, so every player shows up as a matched pair.
Post-game values lean positive (stress down, happiness and energy up) but keep
some noise.

Usage:
    python -m gamesurvey.utils.fake_data --count 15
    python -m gamesurvey.utils.fake_data --clear
"""

import argparse
import random
from datetime import timedelta
from typing import Dict, Optional

from gamesurvey.db.repository import SurveyRepository
from gamesurvey.errors import StoreError
from gamesurvey.schemas.records import GameSession, Player, PostSurvey, PreSurvey
from gamesurvey.utils.logger import get_logger

logger = get_logger(__name__)

FIRST_NAMES = [
    "Somchai", "Somying", "Wichai", "Napaporn", "Prasert", "Malee", "Thanakorn",
    "Piya", "Arunee", "Kitti", "Chanida", "Wanna", "Siri", "Panu", "Supachai",
]
LAST_NAMES = [
    "Jaidee", "Meesuk", "Deengam", "Sawangjit", "Rungrueang", "Mankong",
    "Suksom", "Charoensuk", "Thongdee", "Srisuk", "Boonma", "Yimyam",
]
GENDERS = ["male", "female", "male", "female", "unspecified"]
EXPERIENCE = ["beginner", "beginner", "intermediate", "intermediate", "expert", "never played"]
FAVORITES = ["Shooting", "Environment", "Music", "Challenge", "Graphics", "Scoring", "Pace"]
MOODS = ["Refreshed", "Ready", "A bit excited", "Normal", "Tired but keen", "Slightly worried"]
COMMENTS = [
    "Really fun, want to play again",
    "Good challenge, loved the shooting",
    "First time playing, pretty good",
    "Would like more levels",
    "Great music and atmosphere",
    "A bit hard but still fun",
    "",
    "",
    "",
]


def clamp_rating(value: float) -> int:
    return int(min(10, max(1, round(value))))


def random_age(rng: random.Random) -> int:
    """Ages weighted toward 18-25"""
    r = rng.random()
    if r < 0.10:
        return rng.randint(15, 17)
    if r < 0.60:
        return rng.randint(18, 25)
    if r < 0.85:
        return rng.randint(26, 35)
    return rng.randint(36, 50)


def pre_values(rng: random.Random) -> Dict[str, int]:
    return {
        "stress": clamp_rating(rng.uniform(4.0, 8.5)),
        "happiness": clamp_rating(rng.uniform(3.0, 7.0)),
        "energy": clamp_rating(rng.uniform(3.5, 7.5)),
        "motivation": clamp_rating(rng.uniform(4.0, 9.0)),
        "anxiety": clamp_rating(rng.uniform(3.5, 8.0)),
        "expectation": clamp_rating(rng.uniform(5.0, 9.0)),
    }


def post_values(pre: Dict[str, int], rng: random.Random) -> Dict[str, int]:
    """Each metric improves 80% of the time, otherwise drifts slightly."""

    def shift(value: int, low: float, high: float, lower_is_better: bool) -> int:
        if rng.random() < 0.80:
            delta = rng.uniform(low, high) + rng.uniform(-0.5, 0.5)
        else:
            delta = -rng.uniform(0, 1.5) + rng.uniform(-0.3, 0.3)
        if lower_is_better:
            return clamp_rating(value - abs(delta))
        return clamp_rating(value + delta)

    return {
        "stress": shift(pre["stress"], 1.0, 3.5, True),
        "happiness": shift(pre["happiness"], 0.5, 3.5, False),
        "energy": shift(pre["energy"], 0.5, 2.5, False),
        "fun": clamp_rating(rng.uniform(5.5, 9.5)),
        "satisfaction": clamp_rating(rng.uniform(5.0, 9.0)),
        "difficulty": clamp_rating(rng.uniform(3.5, 8.5)),
        "overall": clamp_rating(rng.uniform(6.0, 9.5)),
    }


def game_score(post: Dict[str, int], rng: random.Random) -> int:
    """500-2000, with a small bonus for a good mood"""
    bonus = round((post["happiness"] - post["stress"]) * rng.uniform(0, 25))
    return min(2000, max(500, rng.randint(500, 2000) + bonus))


def seed_fake_data(
    repository: SurveyRepository, count: int = 15, rng: Optional[random.Random] = None
) -> int:
    """
    Append ``count`` fake players with their surveys and sessions.

    Timestamps are spread over the last two weeks.

    Returns:
        Number of players fully created
    """
    rng = rng or random.Random()
    ids = repository.ids
    sheets = repository.sheets
    workbook = repository.workbook
    repository.setup_sheets()

    logger.info(f"=== Seeding {count} fake players ===")
    created = 0
    for i in range(count):
        try:
            player_id = ids.new_player_id()
            session_id = ids.new_session_id()

            now = repository.clock()
            registered = now - timedelta(days=rng.randint(0, 14), hours=rng.randint(0, 23))
            pre_time = registered + timedelta(minutes=rng.randint(5, 30))
            start = pre_time + timedelta(minutes=rng.randint(2, 10))
            minutes_played = rng.randint(10, 45)
            end = start + timedelta(minutes=minutes_played)
            post_time = end + timedelta(minutes=rng.randint(1, 5))

            name = f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}"
            pre = pre_values(rng)
            post = post_values(pre, rng)
            score = game_score(post, rng)

            player = Player(
                player_id=player_id,
                name=name,
                age=random_age(rng),
                gender=rng.choice(GENDERS),
                game_experience=rng.choice(EXPERIENCE),
                registered_at=registered,
                last_active=registered,
            )
            workbook.append_row(sheets.players, player.to_row())

            pre_survey = PreSurvey(
                survey_id=ids.new_survey_id("pre"),
                player_id=player_id,
                session_id=session_id,
                timestamp=pre_time,
                stress=pre["stress"],
                happiness=pre["happiness"],
                energy=pre["energy"],
                motivation=pre["motivation"],
                anxiety=pre["anxiety"],
                mood_description=rng.choice(MOODS),
                expectation_score=pre["expectation"],
            )
            workbook.append_row(sheets.pre_survey, pre_survey.to_row())

            session = GameSession(
                session_id=session_id,
                player_id=player_id,
                start_time=start,
                end_time=end,
                duration=f"{minutes_played} min",
                game_level=str(rng.randint(1, 5)),
                score=score,
                completed=True,
                notes="Fake data seed",
            )
            workbook.append_row(sheets.sessions, session.to_row())

            post_survey = PostSurvey(
                survey_id=ids.new_survey_id("post"),
                player_id=player_id,
                session_id=session_id,
                timestamp=post_time,
                stress=post["stress"],
                happiness=post["happiness"],
                fun=post["fun"],
                satisfaction=post["satisfaction"],
                energy=post["energy"],
                difficulty=post["difficulty"],
                will_play_again="yes" if rng.random() < 0.75 else "not sure",
                favorite_aspect=rng.choice(FAVORITES),
                overall_rating=post["overall"],
                comments=rng.choice(COMMENTS),
            )
            workbook.append_row(sheets.post_survey, post_survey.to_row())

            created += 1
            logger.info(
                f"[{i + 1}/{count}] {name} | stress: {pre['stress']}->{post['stress']}"
                f" | happy: {pre['happiness']}->{post['happiness']} | score: {score}"
            )
        except StoreError as e:
            logger.error(f"Error seeding player {i + 1}: {e}")

    logger.info(f"=== Done: {created}/{count} players seeded ===")
    return created


def main() -> None:
    from gamesurvey.config import settings
    from gamesurvey.db.manager import WorkbookManager
    from gamesurvey.utils.logger import setup_logging

    parser = argparse.ArgumentParser(description="Seed or clear the survey workbook")
    parser.add_argument("--count", type=int, default=15, help="Number of fake players")
    parser.add_argument("--clear", action="store_true", help="Delete all data rows instead")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    args = parser.parse_args()

    setup_logging(level="INFO")
    repository = SurveyRepository(
        WorkbookManager(settings.database_path), settings.sheet_names()
    )
    if args.clear:
        cleared = repository.clear_all()
        print(f"Cleared {len(cleared)} sheets")
        return
    seed_fake_data(repository, args.count, random.Random(args.seed))


if __name__ == "__main__":
    main()
