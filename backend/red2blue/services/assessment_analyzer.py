import logging
from typing import Any

from pydantic import ValidationError

from red2blue.coaching.adapter import CoachingAdapter, coaching_adapter
from red2blue.errors import InvalidInputError
from red2blue.models.assessment import AssessmentSubmitRequest
from red2blue.services.store import CoachingStore, store

LOGGER = logging.getLogger(__name__)

PRIOR_ASSESSMENTS_FOR_ANALYSIS = 3


class AssessmentAnalyzer:
    def __init__(self, store: CoachingStore, adapter: CoachingAdapter) -> None:
        self.store = store
        self.adapter = adapter

    def submit_assessment(self, user_id: Any, scores: dict[str, Any]) -> dict:
        """Persist a four-area assessment, then analyze it.

        The write happens first; the analysis always resolves (model or
        fallback) so a failed model call never loses the assessment.
        """
        try:
            request = AssessmentSubmitRequest.model_validate({**scores, "userId": user_id})
        except ValidationError as exc:
            raise InvalidInputError(_validation_message(exc)) from exc

        assessment = self.store.create_assessment(
            user_id=request.userId,
            intensity_score=request.intensityScore,
            decision_making_score=request.decisionMakingScore,
            diversions_score=request.diversionsScore,
            execution_score=request.executionScore,
        )

        previous = [
            item
            for item in self.store.get_user_assessments(request.userId)
            if item["id"] != assessment["id"]
        ][:PRIOR_ASSESSMENTS_FOR_ANALYSIS]

        analysis = self.adapter.analyze_assessment_results(
            request.intensityScore,
            request.decisionMakingScore,
            request.diversionsScore,
            request.executionScore,
            previous,
        )
        LOGGER.info(
            "Assessment %s stored for user=%s total=%s state=%s",
            assessment["id"],
            request.userId,
            assessment["totalScore"],
            analysis.overallState,
        )
        return {"assessment": assessment, "analysis": analysis}


def _validation_message(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        problems.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "Invalid assessment: " + "; ".join(problems)


assessment_analyzer = AssessmentAnalyzer(store, coaching_adapter)
