"""Personalized recommendations built from a golfer's chats, scores and engagement.

Each pass (chat, assessment, engagement) looks at one slice of the golfer's
history and emits zero or more drafts. Drafts are ranked by priority then
confidence, the top ten are stored with an expiry, and the top five stored
records are returned.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

from red2blue.coaching.heuristics import ASSESSMENT_AREAS
from red2blue.errors import InvalidInputError, NotFoundError, Red2BlueError
from red2blue.services.store import CoachingStore, store

LOGGER = logging.getLogger(__name__)

STORED_LIMIT = 10
RETURNED_LIMIT = 5
CHAT_SESSIONS_SCANNED = 3
MOMENTUM_MIN_GAIN = 5
ENGAGEMENT_DROP_RATIO = 0.7
POSITIVE_FEEDBACK = 4

PRACTICE_REQUEST_KEYWORDS = ("practice", "technique", "exercise", "drill", "routine", "how do i", "help me")
STRESS_KEYWORDS = ("nervous", "anxious", "pressure", "stress", "worried", "tight", "tense")
EXTRACTABLE_TECHNIQUES = ("breathing", "visualization", "pre-shot routine", "focus point")

AREA_ACTION_STEPS = {
    "Intensity": [
        "Practice daily 10-minute breathing exercises",
        "Use visualization before each practice session",
        "Implement progressive muscle relaxation",
        "Track intensity levels throughout the day",
    ],
    "Decision Making": [
        "Practice the STOP-THINK-ACT method",
        "Review course strategy before each round",
        "Analyze successful and poor decisions post-round",
        "Use decision trees for complex situations",
    ],
    "Diversions": [
        "Practice single-point focus exercises",
        "Use the 'parking lot' technique for distracting thoughts",
        "Develop consistent refocusing rituals",
        "Practice in distracting environments",
    ],
    "Execution": [
        "Break down swing into checkpoints",
        "Practice commitment to shot selection",
        "Use positive self-talk during execution",
        "Develop post-shot routines regardless of outcome",
    ],
}


class IntentClassifier(ABC):
    """Detects coaching intents in a golfer's free-text message."""

    @abstractmethod
    def is_practice_request(self, text: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def is_stress_signal(self, text: str) -> bool:
        raise NotImplementedError


class KeywordIntentClassifier(IntentClassifier):
    def __init__(
        self,
        practice_keywords: tuple[str, ...] = PRACTICE_REQUEST_KEYWORDS,
        stress_keywords: tuple[str, ...] = STRESS_KEYWORDS,
    ) -> None:
        self.practice_keywords = practice_keywords
        self.stress_keywords = stress_keywords

    def is_practice_request(self, text: str) -> bool:
        return _contains_any(text, self.practice_keywords)

    def is_stress_signal(self, text: str) -> bool:
        return _contains_any(text, self.stress_keywords)


@dataclass
class RecommendationDraft:
    recommendation_type: str
    priority: int
    confidence_score: int
    expires_in_days: int
    title: str
    description: str
    reasoning: str
    expected_outcome: str
    personalized_message: str
    action_steps: list[str] = field(default_factory=list)
    related_chat_messages: list[dict] = field(default_factory=list)
    follow_up_questions: list[str] = field(default_factory=list)

    def to_store_payload(self, now: datetime) -> dict[str, Any]:
        return {
            "recommendationType": self.recommendation_type,
            "priority": self.priority,
            "confidenceScore": self.confidence_score,
            "reasoning": self.reasoning,
            "personalizedMessage": self.personalized_message,
            "expectedOutcome": self.expected_outcome,
            "recommendationData": {
                "title": self.title,
                "description": self.description,
                "actionSteps": list(self.action_steps),
                "relatedChatMessages": list(self.related_chat_messages),
                "followUpQuestions": list(self.follow_up_questions),
            },
            "expiresAt": now + timedelta(days=self.expires_in_days),
        }


@dataclass
class RecommendationContext:
    user: dict
    assessments: list[dict] = field(default_factory=list)
    chat_sessions: list[dict] = field(default_factory=list)
    engagement_metrics: list[dict] = field(default_factory=list)
    coaching_profile: dict | None = None


class RecommendationEngine:
    def __init__(self, store: CoachingStore, classifier: IntentClassifier | None = None) -> None:
        self.store = store
        self.classifier = classifier or KeywordIntentClassifier()

    def generate_personalized_recommendations(self, user_id: int) -> list[dict]:
        context = self.build_context(user_id)

        drafts: list[RecommendationDraft] = []
        drafts.extend(self._chat_pass(context))
        drafts.extend(self._assessment_pass(context))
        drafts.extend(self._engagement_pass(context))

        # sorted() is stable, so equal (priority, confidence) keep pass order.
        ranked = sorted(drafts, key=lambda draft: (-draft.priority, -draft.confidence_score))
        if not ranked:
            LOGGER.info("No recommendations generated for user=%s", user_id)
            return []

        now = datetime.now(timezone.utc)
        stored = self.store.create_ai_recommendations(
            int(user_id),
            [draft.to_store_payload(now) for draft in ranked[:STORED_LIMIT]],
        )
        LOGGER.info("Stored %d recommendations for user=%s", len(stored), user_id)
        return stored[:RETURNED_LIMIT]

    def build_context(self, user_id: int) -> RecommendationContext:
        user = self.store.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")

        return RecommendationContext(
            user=user,
            assessments=self._load("assessments", user_id, lambda: self.store.get_user_assessments(user_id, limit=5), []),
            chat_sessions=self._load("chat sessions", user_id, lambda: self.store.get_user_chat_sessions(user_id, limit=10), []),
            engagement_metrics=self._load(
                "engagement metrics", user_id, lambda: self.store.get_user_engagement_metrics(user_id, days=30), []
            ),
            coaching_profile=self._load("coaching profile", user_id, lambda: self.store.get_coaching_profile(user_id), None),
        )

    def track_recommendation_effectiveness(
        self,
        recommendation_id: int,
        feedback: Any,
        comments: str | None = None,
        effectiveness_measure: int | None = None,
    ) -> dict:
        if isinstance(feedback, bool) or not isinstance(feedback, int) or not 1 <= feedback <= 5:
            raise InvalidInputError("Feedback must be an integer from 1 to 5")

        recommendation = self.store.update_recommendation_feedback(recommendation_id, feedback, comments)
        if effectiveness_measure is not None:
            recommendation = self.store.mark_recommendation_applied(recommendation_id, effectiveness_measure)

        if feedback >= POSITIVE_FEEDBACK:
            self.store.create_coaching_insight(
                user_id=recommendation["userId"],
                insight_type="improvement",
                category="recommendation_success",
                title="Effective Recommendation Strategy",
                description=(
                    f"User responded positively ({feedback}/5) to "
                    f"{recommendation['recommendationType']} recommendation"
                ),
                data_points={"feedback": feedback, "comments": comments, "recommendationId": recommendation["id"]},
                actionable_steps=["Replicate similar recommendation patterns", "Build on successful strategies"],
                impact="significant",
                timeframe="immediate",
            )
        return recommendation

    def _load(self, label: str, user_id: int, loader: Callable[[], Any], empty: Any) -> Any:
        try:
            return loader()
        except Red2BlueError as exc:
            LOGGER.warning("Skipping %s for user=%s: %s", label, user_id, exc.message)
            return empty

    def _chat_pass(self, context: RecommendationContext) -> list[RecommendationDraft]:
        drafts: list[RecommendationDraft] = []
        username = context.user.get("username", "there")

        for session in context.chat_sessions[:CHAT_SESSIONS_SCANNED]:
            messages = session.get("messages")
            if not isinstance(messages, list):
                continue
            user_messages = [entry for entry in messages if entry.get("role") == "user"]
            assistant_messages = [entry for entry in messages if entry.get("role") == "assistant"]

            for index, user_message in enumerate(user_messages):
                text = str(user_message.get("content", ""))
                reply = assistant_messages[index] if index < len(assistant_messages) else None

                if reply is not None and self.classifier.is_practice_request(text):
                    technique = _extract_technique(str(reply.get("content", "")))
                    drafts.append(
                        RecommendationDraft(
                            recommendation_type="chat_followup",
                            priority=8,
                            confidence_score=85,
                            expires_in_days=7,
                            title="Follow-up on Practice Recommendation",
                            description=f"Check progress on the technique we discussed: {technique}",
                            reasoning=(
                                "User received specific practice recommendations but has not reported "
                                "on their implementation"
                            ),
                            expected_outcome="Better understanding of technique effectiveness and areas for refinement",
                            personalized_message=(
                                f"Hi {username}, how did the {technique} practice go? "
                                "I'd love to hear about your experience."
                            ),
                            action_steps=[
                                "Ask about practice frequency and consistency",
                                "Assess effectiveness of the recommended technique",
                                "Identify any challenges or obstacles",
                                "Adjust technique or provide alternatives if needed",
                            ],
                            related_chat_messages=[_chat_excerpt(user_message), _chat_excerpt(reply)],
                            follow_up_questions=[
                                "How many times did you practice this technique?",
                                "What situations did you use it in?",
                                "What worked well and what was challenging?",
                                "How did it affect your performance?",
                            ],
                        )
                    )

                if self.classifier.is_stress_signal(text):
                    drafts.append(
                        RecommendationDraft(
                            recommendation_type="technique",
                            priority=9,
                            confidence_score=90,
                            expires_in_days=14,
                            title="Personalized Stress Management Strategy",
                            description="Based on your recent discussions about pressure situations, here's a targeted approach",
                            reasoning="User has mentioned specific stress triggers in recent conversations",
                            expected_outcome="Improved ability to manage pressure and maintain focus during critical moments",
                            personalized_message=(
                                "I noticed you've been discussing pressure situations. "
                                "Let's build a specific strategy for your stress triggers."
                            ),
                            action_steps=[
                                "Practice box breathing daily",
                                "Implement your pre-shot routine consistently",
                                "Use positive self-talk during pressure moments",
                                "Track stress levels and recovery patterns",
                            ],
                            related_chat_messages=[_chat_excerpt(user_message)],
                        )
                    )
        return drafts

    def _assessment_pass(self, context: RecommendationContext) -> list[RecommendationDraft]:
        if not context.assessments:
            return []
        latest = context.assessments[0]
        previous = context.assessments[1] if len(context.assessments) > 1 else None
        drafts: list[RecommendationDraft] = []

        weakest_name, weakest_score = _weakest_area(latest)
        area = weakest_name.lower()
        drafts.append(
            RecommendationDraft(
                recommendation_type="technique",
                priority=10,
                confidence_score=95,
                expires_in_days=21,
                title=f"Targeted {weakest_name} Improvement Plan",
                description=f"Personalized strategy to boost your {area} from {weakest_score}/100",
                reasoning=f"Your {area} score of {weakest_score} indicates this is your primary area for growth",
                expected_outcome=f"15-20 point improvement in {area} within 2-3 weeks",
                personalized_message=(
                    f"Let's focus on strengthening your {area}. "
                    "I have a specific plan tailored to your current level."
                ),
                action_steps=list(AREA_ACTION_STEPS[weakest_name]),
            )
        )

        if previous is not None:
            improving_name, gain = _best_improvement(latest, previous)
            if gain > MOMENTUM_MIN_GAIN:
                area = improving_name.lower()
                drafts.append(
                    RecommendationDraft(
                        recommendation_type="routine",
                        priority=7,
                        confidence_score=80,
                        expires_in_days=14,
                        title=f"Maintain Momentum in {improving_name}",
                        description=f"You've improved {gain} points, so let's keep this progress going",
                        reasoning=f"Positive trend detected in {area} scores",
                        expected_outcome=f"Sustained improvement and confidence building in {area}",
                        personalized_message=f"Great progress on {area}! Here's how to maintain this momentum.",
                        action_steps=[
                            "Continue current successful practices",
                            "Gradually increase difficulty level",
                            "Track progress weekly",
                            "Celebrate small wins",
                        ],
                    )
                )
        return drafts

    def _engagement_pass(self, context: RecommendationContext) -> list[RecommendationDraft]:
        metrics = context.engagement_metrics
        if not metrics:
            return []
        scores = [int(metric.get("engagementScore") or 0) for metric in metrics]
        average = sum(scores) / len(scores)
        if scores[0] >= average * ENGAGEMENT_DROP_RATIO:
            return []
        return [
            RecommendationDraft(
                recommendation_type="scenario",
                priority=6,
                confidence_score=75,
                expires_in_days=10,
                title="Re-engagement Strategy",
                description="Let's get you back on track with some engaging practice scenarios",
                reasoning="Recent engagement has dropped below your usual level",
                expected_outcome="Renewed motivation and consistent practice habits",
                personalized_message=(
                    "I've noticed you might need a fresh approach. "
                    "Here are some engaging activities to reignite your passion."
                ),
                action_steps=[
                    "Try shorter, focused practice sessions",
                    "Set small, achievable daily goals",
                    "Mix up routine with new scenarios",
                    "Connect with community challenges",
                ],
            )
        ]


def _contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    normalized = (text or "").lower()
    return any(keyword in normalized for keyword in keywords)


def _extract_technique(content: str) -> str:
    normalized = content.lower()
    for technique in EXTRACTABLE_TECHNIQUES:
        if technique in normalized:
            return technique
    return "the suggested technique"


def _chat_excerpt(message: dict) -> dict:
    return {
        "role": message.get("role"),
        "content": message.get("content"),
        "timestamp": message.get("timestamp"),
    }


def _weakest_area(assessment: dict) -> tuple[str, int]:
    weakest_name, weakest_key = ASSESSMENT_AREAS[0]
    weakest_score = int(assessment[weakest_key])
    for name, key in ASSESSMENT_AREAS[1:]:
        if int(assessment[key]) < weakest_score:
            weakest_name, weakest_score = name, int(assessment[key])
    return weakest_name, weakest_score


def _best_improvement(current: dict, previous: dict) -> tuple[str, int]:
    best_name, best_gain = None, None
    for name, key in ASSESSMENT_AREAS:
        gain = int(current[key]) - int(previous[key])
        if best_gain is None or gain > best_gain:
            best_name, best_gain = name, gain
    return best_name, best_gain


recommendation_engine = RecommendationEngine(store)
