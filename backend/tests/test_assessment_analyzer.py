import unittest
from unittest.mock import MagicMock

from helpers import add_assessment, new_user

from red2blue.coaching.adapter import CoachingAdapter
from red2blue.errors import InvalidInputError
from red2blue.models.assessment import AssessmentAnalysis
from red2blue.services.assessment_analyzer import AssessmentAnalyzer
from red2blue.services.store import store


def _scores(intensity, decision_making, diversions, execution) -> dict:
    return {
        "intensityScore": intensity,
        "decisionMakingScore": decision_making,
        "diversionsScore": diversions,
        "executionScore": execution,
    }


class AssessmentAnalyzerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.user = new_user()
        self.analyzer = AssessmentAnalyzer(store, CoachingAdapter(None))

    def test_strong_scores_are_blue_head(self) -> None:
        result = self.analyzer.submit_assessment(self.user["id"], _scores(80, 80, 80, 80))
        self.assertEqual(result["assessment"]["totalScore"], 320)
        self.assertEqual(result["analysis"].overallState, "blue_head")

    def test_weak_scores_are_red_head(self) -> None:
        result = self.analyzer.submit_assessment(self.user["id"], _scores(40, 40, 40, 40))
        self.assertEqual(result["assessment"]["totalScore"], 160)
        self.assertEqual(result["analysis"].overallState, "red_head")

    def test_invalid_scores_are_rejected(self) -> None:
        for scores in (
            _scores(101, 50, 50, 50),
            _scores(-1, 50, 50, 50),
            _scores("lots", 50, 50, 50),
            _scores("80", 50, 50, 50),
            _scores(50, True, 50, 50),
            _scores(50, 50, 80.0, 50),
            {"intensityScore": 50, "decisionMakingScore": 50, "diversionsScore": 50},
        ):
            with self.subTest(scores=scores):
                with self.assertRaises(InvalidInputError):
                    self.analyzer.submit_assessment(self.user["id"], scores)
        self.assertIsNone(store.get_latest_assessment(self.user["id"]))

    def test_prior_assessments_exclude_the_new_one(self) -> None:
        older = [add_assessment(self.user["id"], 50 + index, 50, 50, 50) for index in range(4)]
        adapter = MagicMock()
        adapter.analyze_assessment_results.return_value = AssessmentAnalysis()
        result = AssessmentAnalyzer(store, adapter).submit_assessment(self.user["id"], _scores(70, 70, 70, 70))

        previous = adapter.analyze_assessment_results.call_args.args[4]
        self.assertEqual(len(previous), 3)
        self.assertNotIn(result["assessment"]["id"], [item["id"] for item in previous])
        self.assertEqual(previous[0]["id"], older[-1]["id"])

    def test_failed_analysis_keeps_the_assessment(self) -> None:
        adapter = MagicMock()
        adapter.analyze_assessment_results.side_effect = RuntimeError("analysis crashed")
        with self.assertRaises(RuntimeError):
            AssessmentAnalyzer(store, adapter).submit_assessment(self.user["id"], _scores(65, 65, 65, 65))
        self.assertEqual(store.get_latest_assessment(self.user["id"])["totalScore"], 260)


if __name__ == "__main__":
    unittest.main()
