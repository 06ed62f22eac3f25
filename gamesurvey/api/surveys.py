"""
Survey submission actions.

A post-game survey submission is two explicit steps: store the survey, then,
when the payload carries a score or level, record a score session for it. Once
the survey is stored the submission succeeds even if the later steps fail.
"""

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from gamesurvey.db.repository import SurveyRepository
from gamesurvey.engine.pairing import compare_session
from gamesurvey.errors import StoreError
from gamesurvey.schemas.records import PostSurvey, PreSurvey, Text
from gamesurvey.utils.logger import get_logger

logger = get_logger(__name__)

Rating = Optional[Union[int, float, str]]

AUTO_SCORE_NOTE = "Recorded automatically from post-game survey"


class SurveyRequest(BaseModel):
    """Fields shared by both surveys"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    player_id: Text = Field(default="")
    session_id: Text = Field(default="")
    player_name: Text = Field(default="")
    age: Rating = Field(default=None)
    gender: Text = Field(default="")
    stress_level: Rating = Field(default=None, description="1-10")
    happiness_level: Rating = Field(default=None, description="1-10")
    energy_level: Rating = Field(default=None, description="1-10")
    comments: Text = Field(default="")


class PreSurveyRequest(SurveyRequest):
    """Pre-game survey payload"""

    motivation_level: Rating = Field(default=None, description="1-10")
    anxiety_level: Rating = Field(default=None, description="1-10")
    mood_description: Text = Field(default="")
    expectation_score: Rating = Field(default=None)

    def to_record(self) -> PreSurvey:
        return PreSurvey(
            player_id=self.player_id,
            session_id=self.session_id,
            stress=self.stress_level,
            happiness=self.happiness_level,
            energy=self.energy_level,
            motivation=self.motivation_level,
            anxiety=self.anxiety_level,
            mood_description=self.mood_description,
            expectation_score=self.expectation_score,
            comments=self.comments,
        )


class PostSurveyRequest(SurveyRequest):
    """Post-game survey payload, optionally carrying the game result"""

    fun_level: Rating = Field(default=None, description="1-10")
    satisfaction_level: Rating = Field(default=None, description="1-10")
    difficulty_rating: Rating = Field(default=None, description="1-10")
    will_play_again: Text = Field(default="")
    favorite_aspect: Text = Field(default="")
    improvement_suggestions: Text = Field(default="")
    overall_rating: Rating = Field(default=None)
    score: Rating = Field(default=None)
    level: Optional[Union[int, float, str]] = Field(default=None)

    def to_record(self) -> PostSurvey:
        return PostSurvey(
            player_id=self.player_id,
            session_id=self.session_id,
            stress=self.stress_level,
            happiness=self.happiness_level,
            fun=self.fun_level,
            satisfaction=self.satisfaction_level,
            energy=self.energy_level,
            difficulty=self.difficulty_rating,
            will_play_again=self.will_play_again,
            favorite_aspect=self.favorite_aspect,
            improvement_suggestions=self.improvement_suggestions,
            overall_rating=self.overall_rating,
            comments=self.comments,
        )


def touch_player(repository: SurveyRepository, request: SurveyRequest) -> None:
    """Upsert the submitting player; a failure here doesn't block the survey."""
    try:
        repository.upsert_player(
            request.player_id, request.player_name, request.age, request.gender
        )
    except StoreError as e:
        logger.error(f"Upsert player {request.player_id} failed: {e}")


def submit_pre_survey(
    repository: SurveyRepository, request: PreSurveyRequest
) -> Dict[str, Any]:
    touch_player(repository, request)
    survey = repository.add_pre_survey(request.to_record())
    return {
        "success": True,
        "surveyId": survey.survey_id,
        "message": "Pre-game survey submitted successfully",
    }


def submit_post_survey(
    repository: SurveyRepository, request: PostSurveyRequest
) -> Dict[str, Any]:
    touch_player(repository, request)
    survey = repository.add_post_survey(request.to_record())

    # The survey is already stored; score and comparison failures are only logged.
    if request.score is not None or request.level is not None:
        try:
            repository.record_score(
                player_id=request.player_id,
                session_id=request.session_id or survey.survey_id,
                score=request.score,
                level=request.level,
                notes=AUTO_SCORE_NOTE,
            )
        except StoreError as e:
            logger.error(f"Score for survey {survey.survey_id} not recorded: {e}")

    try:
        comparison = compare_session(
            request.session_id, repository.pre_surveys(), repository.post_surveys()
        )
    except StoreError as e:
        logger.error(f"Comparison for session {request.session_id!r} failed: {e}")
        comparison = None
    return {
        "success": True,
        "surveyId": survey.survey_id,
        "comparison": comparison,
        "message": "Post-game survey submitted successfully",
    }
