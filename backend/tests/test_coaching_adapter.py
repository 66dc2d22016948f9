import json
import os
import unittest
from unittest.mock import patch

from helpers import StubProvider

from red2blue.coaching.adapter import CoachingAdapter
from red2blue.coaching.heuristics import classify_overall_state
from red2blue.coaching.providers import OpenAIProvider, build_provider
from red2blue.errors import ExternalServiceError

VALID_REPLY = {
    "message": "Slow everything down and breathe before the putt.",
    "suggestions": ["Five cycles of box breathing"],
    "redHeadIndicators": ["racing thoughts"],
    "blueHeadTechniques": ["Box breathing"],
    "urgencyLevel": "medium",
}


class CoachingResponseTests(unittest.TestCase):
    def test_provider_failure_returns_fallback(self) -> None:
        provider = StubProvider(error=ExternalServiceError("timed out", provider="stub"))
        response = CoachingAdapter(provider).get_coaching_response("I keep choking on short putts", [], {})
        self.assertTrue(response.message.strip())
        self.assertTrue(response.suggestions)
        self.assertTrue(response.blueHeadTechniques)
        self.assertIn(response.urgencyLevel, {"low", "medium"})
        self.assertEqual(response.provider, "heuristic_fallback")

    def test_missing_provider_uses_topic_fallback(self) -> None:
        response = CoachingAdapter(None).get_coaching_response("Explain control circles", [], None)
        self.assertIn("Control Circles", response.message)
        self.assertEqual(response.provider, "heuristic_fallback")

    def test_fenced_json_is_extracted(self) -> None:
        provider = StubProvider(reply="Here you go:\n```json\n" + json.dumps(VALID_REPLY) + "\n```")
        response = CoachingAdapter(provider).get_coaching_response("help", [], None)
        self.assertEqual(response.message, VALID_REPLY["message"])
        self.assertEqual(response.urgencyLevel, "medium")
        self.assertEqual(response.provider, "stub")

    def test_invalid_shape_returns_fallback(self) -> None:
        provider = StubProvider(reply=json.dumps({**VALID_REPLY, "urgencyLevel": "extreme"}))
        response = CoachingAdapter(provider).get_coaching_response("I feel nervous", [], None)
        self.assertEqual(response.provider, "heuristic_fallback")

    def test_unparseable_output_returns_fallback(self) -> None:
        provider = StubProvider(reply="I am not JSON at all")
        response = CoachingAdapter(provider).get_coaching_response("breathing tips?", [], None)
        self.assertEqual(response.provider, "heuristic_fallback")
        self.assertIn("Box breathing", response.blueHeadTechniques)

    def test_history_is_bounded_to_last_ten_entries(self) -> None:
        history = [
            {"role": "user" if index % 2 == 0 else "assistant", "content": f"message {index}"}
            for index in range(25)
        ]
        provider = StubProvider(reply=json.dumps(VALID_REPLY))
        CoachingAdapter(provider).get_coaching_response("next", history, None)
        forwarded = provider.calls[0]["prior_messages"]
        self.assertEqual(len(forwarded), 10)
        self.assertEqual(forwarded[-1]["content"], "message 24")
        self.assertTrue(provider.calls[0]["json_mode"])


class AssessmentAnalysisTests(unittest.TestCase):
    def setUp(self) -> None:
        self.adapter = CoachingAdapter(None)

    def test_high_scores_are_blue_head(self) -> None:
        analysis = self.adapter.analyze_assessment_results(80, 80, 80, 80, [])
        self.assertEqual(analysis.overallState, "blue_head")
        self.assertTrue(analysis.nextSteps)

    def test_low_scores_are_red_head(self) -> None:
        analysis = self.adapter.analyze_assessment_results(40, 40, 40, 40, [])
        self.assertEqual(analysis.overallState, "red_head")
        self.assertTrue(analysis.opportunities)

    def test_threshold_boundaries(self) -> None:
        self.assertEqual(classify_overall_state(300), "blue_head")
        self.assertEqual(classify_overall_state(299), "transitional")
        self.assertEqual(classify_overall_state(200), "transitional")
        self.assertEqual(classify_overall_state(199), "red_head")

    @patch.dict(os.environ, {"RED2BLUE_BLUE_HEAD_THRESHOLD": "350"})
    def test_thresholds_come_from_configuration(self) -> None:
        analysis = self.adapter.analyze_assessment_results(80, 80, 80, 80, [])
        self.assertEqual(analysis.overallState, "transitional")

    def test_provider_failure_falls_back_to_thresholds(self) -> None:
        provider = StubProvider(error=ExternalServiceError("quota", provider="stub"))
        analysis = CoachingAdapter(provider).analyze_assessment_results(70, 70, 70, 70, [])
        self.assertEqual(analysis.overallState, "transitional")
        self.assertEqual(analysis.provider, "heuristic_fallback")

    def test_comparison_with_previous_assessment(self) -> None:
        analysis = self.adapter.analyze_assessment_results(60, 60, 60, 60, [{"totalScore": 200}])
        self.assertTrue(any("up 40 points" in insight for insight in analysis.insights))


class PlanTests(unittest.TestCase):
    def test_fallback_plan_targets_weakest_areas(self) -> None:
        assessments = [
            {"intensityScore": 45, "decisionMakingScore": 80, "diversionsScore": 52, "executionScore": 90}
        ]
        plan = CoachingAdapter(None).generate_personalized_plan(assessments, [], ["Break 80"])
        self.assertEqual(plan.focusAreas, ["Intensity", "Diversions"])
        self.assertEqual(len(plan.weeklyPlan), 7)
        self.assertEqual(len(plan.milestones), 4)
        self.assertIn("Break 80", plan.milestones[-1]["goal"])


class ProviderSelectionTests(unittest.TestCase):
    @patch.dict(os.environ, {"RED2BLUE_LLM_PROVIDER": "none", "OPENAI_API_KEY": "sk-test"})
    def test_none_disables_models(self) -> None:
        self.assertIsNone(build_provider())

    @patch.dict(os.environ, {"RED2BLUE_LLM_PROVIDER": "auto", "OPENAI_API_KEY": "sk-test"})
    def test_auto_prefers_configured_openai_key(self) -> None:
        self.assertIsInstance(build_provider(), OpenAIProvider)

    @patch.dict(os.environ, {"RED2BLUE_LLM_PROVIDER": "gemini"}, clear=True)
    def test_missing_key_disables_models(self) -> None:
        self.assertIsNone(build_provider())

    def test_openai_errors_become_external_service_errors(self) -> None:
        class BrokenCompletions:
            def create(self, **kwargs):
                raise TimeoutError("read timed out")

        class BrokenClient:
            class chat:
                completions = BrokenCompletions()

        provider = OpenAIProvider(api_key="sk-test", client=BrokenClient())
        with self.assertRaises(ExternalServiceError) as caught:
            provider.generate("hello")
        self.assertEqual(caught.exception.provider, "openai")


if __name__ == "__main__":
    unittest.main()
