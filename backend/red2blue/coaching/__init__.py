from red2blue.coaching.adapter import CoachingAdapter, coaching_adapter
from red2blue.coaching.heuristics import (
    ASSESSMENT_AREAS,
    classify_overall_state,
    fallback_assessment_analysis,
    fallback_coaching_response,
)
from red2blue.coaching.providers import GeminiProvider, LLMProvider, OpenAIProvider, build_provider

__all__ = [
    "ASSESSMENT_AREAS",
    "CoachingAdapter",
    "GeminiProvider",
    "LLMProvider",
    "OpenAIProvider",
    "build_provider",
    "classify_overall_state",
    "coaching_adapter",
    "fallback_assessment_analysis",
    "fallback_coaching_response",
]
