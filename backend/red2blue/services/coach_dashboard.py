from red2blue.coaching.heuristics import ASSESSMENT_AREAS
from red2blue.errors import NotFoundError
from red2blue.services.store import CoachingStore, store

HIGH_RISK_AVERAGE = 60
MEDIUM_RISK_AVERAGE = 75
TREND_THRESHOLD = 5
HISTORY_POINTS = 10
ADVICE_THRESHOLD = 70

AREA_ADVICE = {
    "intensityScore": "Focus on intensity management techniques - practice breathing exercises",
    "decisionMakingScore": "Work on decision-making clarity - use visualization drills",
    "diversionsScore": "Improve focus and attention - practice the 3-2-1 focus reset",
    "executionScore": "Build execution confidence - work on pre-shot routine consistency",
}
STRONG_PERFORMANCE_ADVICE = "Continue current training program - performance is strong"


def risk_level(assessment: dict | None) -> str:
    if assessment is None:
        return "low"
    average = sum(int(assessment[key]) for _, key in ASSESSMENT_AREAS) / len(ASSESSMENT_AREAS)
    if average < HIGH_RISK_AVERAGE:
        return "high"
    if average < MEDIUM_RISK_AVERAGE:
        return "medium"
    return "low"


def score_trend(assessments: list[dict]) -> dict:
    if len(assessments) < 2:
        return {"direction": "stable", "change": 0}
    change = int(assessments[0]["totalScore"]) - int(assessments[1]["totalScore"])
    if change > TREND_THRESHOLD:
        direction = "improving"
    elif change < -TREND_THRESHOLD:
        direction = "declining"
    else:
        direction = "stable"
    return {"direction": direction, "change": change}


class CoachDashboard:
    def __init__(self, store: CoachingStore) -> None:
        self.store = store

    def list_student_summaries(self) -> list[dict]:
        summaries = []
        for user in self.store.list_users():
            if user["role"] != "student":
                continue
            assessments = self.store.get_user_assessments(user["id"])
            latest = assessments[0] if assessments else None
            summaries.append(
                {
                    "id": user["id"],
                    "username": user["username"],
                    "email": user["email"],
                    "lastAssessment": latest,
                    "assessmentCount": len(assessments),
                    "lastActivity": latest["createdAt"] if latest else user["createdAt"],
                    "riskLevel": risk_level(latest),
                    "trends": score_trend(assessments),
                }
            )
        return summaries

    def get_student_detail(self, user_id: int) -> dict:
        if self.store.get_user(user_id) is None:
            raise NotFoundError("User not found")

        assessments = self.store.get_user_assessments(user_id)
        history = [
            {
                "date": item["createdAt"],
                "totalScore": item["totalScore"],
                "intensity": item["intensityScore"],
                "decisionMaking": item["decisionMakingScore"],
                "diversions": item["diversionsScore"],
                "execution": item["executionScore"],
            }
            for item in reversed(assessments[:HISTORY_POINTS])
        ]

        routines = self.store.get_user_pre_shot_routines(user_id)
        sessions = self.store.get_user_chat_sessions(user_id, limit=1)
        progress = self.store.get_user_progress(user_id, days=30)
        xcheck = self.store.get_latest_mental_skills_xcheck(user_id)
        circle = self.store.get_latest_control_circle(user_id)
        tool_usage = [
            {"name": "Pre-Shot Routine", "lastUsed": routines[0]["createdAt"] if routines else None},
            {"name": "Coaching Chat", "lastUsed": sessions[0]["updatedAt"] if sessions else None},
            {"name": "Progress Log", "lastUsed": progress[0]["date"] if progress else None},
            {"name": "Mental Skills X-Check", "lastUsed": xcheck["createdAt"] if xcheck else None},
            {"name": "Control Circles", "lastUsed": circle["createdAt"] if circle else None},
        ]

        advice = []
        if assessments:
            latest = assessments[0]
            advice = [
                AREA_ADVICE[key] for _, key in ASSESSMENT_AREAS if int(latest[key]) < ADVICE_THRESHOLD
            ]

        return {
            "userId": int(user_id),
            "assessmentHistory": history,
            "toolUsage": tool_usage,
            "recommendations": advice or [STRONG_PERFORMANCE_ADVICE],
        }


coach_dashboard = CoachDashboard(store)
