from __future__ import annotations

import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from red2blue.coaching.heuristics import (
    fallback_assessment_analysis,
    fallback_coaching_response,
    fallback_plan,
)
from red2blue.coaching.prompts import (
    COACH_SYSTEM_PROMPT,
    build_analysis_prompt,
    build_coaching_prompt,
    build_plan_prompt,
)
from red2blue.coaching.providers import LLMProvider, build_provider
from red2blue.config import get_settings
from red2blue.errors import ExternalServiceError
from red2blue.models.assessment import AssessmentAnalysis
from red2blue.models.chat import CoachingResponse
from red2blue.models.progress import PersonalizedPlan

LOGGER = logging.getLogger(__name__)

MAX_CONTEXT_MESSAGES = 10
HEURISTIC_PROVIDER = "heuristic_fallback"
_UNSET = object()
_JSON_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")


class CoachingAdapter:
    """Turns golfer messages and scores into structured coaching.

    Every public method always returns a usable result: provider failures,
    timeouts and malformed model output are logged and replaced by the
    deterministic heuristics.
    """

    def __init__(self, provider: LLMProvider | None | object = _UNSET) -> None:
        self._provider = provider

    @property
    def provider(self) -> LLMProvider | None:
        if self._provider is _UNSET:
            self._provider = build_provider()
        return self._provider  # type: ignore[return-value]

    def get_coaching_response(
        self,
        message: str,
        history: list[dict[str, Any]] | None,
        context: dict[str, Any] | None = None,
    ) -> CoachingResponse:
        provider = self.provider
        if provider is not None:
            try:
                raw = provider.generate(
                    build_coaching_prompt(message, context),
                    _prepare_history(history),
                    system_prompt=COACH_SYSTEM_PROMPT,
                    temperature=0.7,
                    json_mode=True,
                    max_tokens=800,
                )
                payload = _extract_json(raw)
                payload["provider"] = provider.name
                return CoachingResponse.model_validate(payload)
            except ExternalServiceError as exc:
                LOGGER.warning("Coaching call to %s failed: %s", exc.provider, exc.message)
            except (ValueError, ValidationError) as exc:
                LOGGER.warning("Coaching output from %s was unusable: %s", provider.name, exc)

        return CoachingResponse(**fallback_coaching_response(message), provider=HEURISTIC_PROVIDER)

    def analyze_assessment_results(
        self,
        intensity_score: int,
        decision_making_score: int,
        diversions_score: int,
        execution_score: int,
        previous_assessments: list[dict[str, Any]] | None = None,
    ) -> AssessmentAnalysis:
        provider = self.provider
        if provider is not None:
            try:
                raw = provider.generate(
                    build_analysis_prompt(
                        intensity_score,
                        decision_making_score,
                        diversions_score,
                        execution_score,
                        previous_assessments,
                    ),
                    None,
                    system_prompt=COACH_SYSTEM_PROMPT,
                    temperature=0.3,
                    json_mode=True,
                )
                payload = _extract_json(raw)
                payload["provider"] = provider.name
                return AssessmentAnalysis.model_validate(payload)
            except ExternalServiceError as exc:
                LOGGER.warning("Assessment analysis call to %s failed: %s", exc.provider, exc.message)
            except (ValueError, ValidationError) as exc:
                LOGGER.warning("Assessment analysis from %s was unusable: %s", provider.name, exc)

        settings = get_settings()
        fallback = fallback_assessment_analysis(
            {
                "intensityScore": intensity_score,
                "decisionMakingScore": decision_making_score,
                "diversionsScore": diversions_score,
                "executionScore": execution_score,
            },
            previous_assessments,
            blue_head_threshold=settings.blue_head_threshold,
            transitional_threshold=settings.transitional_threshold,
        )
        return AssessmentAnalysis(**fallback, provider=HEURISTIC_PROVIDER)

    def generate_personalized_plan(
        self,
        assessments: list[dict[str, Any]],
        progress: list[dict[str, Any]],
        goals: list[str] | None = None,
    ) -> PersonalizedPlan:
        provider = self.provider
        if provider is not None:
            try:
                raw = provider.generate(
                    build_plan_prompt(assessments, progress, goals),
                    None,
                    system_prompt=COACH_SYSTEM_PROMPT,
                    temperature=0.4,
                    json_mode=True,
                )
                payload = _extract_json(raw)
                payload["provider"] = provider.name
                return PersonalizedPlan.model_validate(payload)
            except ExternalServiceError as exc:
                LOGGER.warning("Plan generation call to %s failed: %s", exc.provider, exc.message)
            except (ValueError, ValidationError) as exc:
                LOGGER.warning("Plan from %s was unusable: %s", provider.name, exc)

        return PersonalizedPlan(**fallback_plan(assessments, goals), provider=HEURISTIC_PROVIDER)


coaching_adapter = CoachingAdapter()


def _prepare_history(history: list[dict[str, Any]] | None) -> list[dict[str, str]]:
    prepared = []
    for entry in list(history or [])[-MAX_CONTEXT_MESSAGES:]:
        role = str(entry.get("role", ""))
        if role not in {"user", "assistant"}:
            continue
        prepared.append({"role": role, "content": str(entry.get("content", ""))})
    return prepared


def _extract_json(text: str) -> dict[str, Any]:
    candidate = (text or "").strip()
    if candidate.startswith("```"):
        candidate = candidate.strip("`").strip()
        if candidate.lower().startswith("json"):
            candidate = candidate[4:].strip()
    try:
        payload = json.loads(candidate)
    except json.JSONDecodeError:
        match = _JSON_OBJECT_PATTERN.search(candidate)
        if match is None:
            raise ValueError("Model output contained no JSON object")
        payload = json.loads(match.group(0))
    if not isinstance(payload, dict):
        raise ValueError("Model output was not a JSON object")
    return payload
