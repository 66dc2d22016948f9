"""Deterministic coaching used whenever the language model is unavailable."""
from typing import Any

# Assessment areas in their canonical order; ties between areas resolve to the earlier one.
ASSESSMENT_AREAS = (
    ("Intensity", "intensityScore"),
    ("Decision Making", "decisionMakingScore"),
    ("Diversions", "diversionsScore"),
    ("Execution", "executionScore"),
)

AREA_TECHNIQUES = {
    "Intensity": "Box breathing",
    "Decision Making": "Control circles",
    "Diversions": "3-2-1 focus reset",
    "Execution": "25-second pre-shot routine",
}

AREA_NEXT_STEPS = {
    "Intensity": "Practice five cycles of box breathing before every practice session",
    "Decision Making": "Sort each worry into your control circles before the round",
    "Diversions": "Use the 3-2-1 focus reset whenever your attention drifts",
    "Execution": "Run the full 25-second pre-shot routine on every range ball",
}

_TOPIC_RESPONSES: tuple[tuple[tuple[str, ...], dict[str, Any]], ...] = (
    (
        ("control circle",),
        {
            "message": (
                "Control Circles help you decide where your energy goes. The inner circle holds what you fully "
                "control: breathing, attitude, effort and routine. The middle circle holds what you influence, "
                "like strategy and practice quality. The outer circle holds what you cannot control, like weather, "
                "playing partners and results. When stress builds, ask whether the thought is in your circles. "
                "If not, let it go and return to your next shot."
            ),
            "suggestions": [
                "List what sits in each circle before your next round",
                "Use box breathing when you catch yourself worrying about outer-circle things",
                "Anchor your attention in your pre-shot routine",
            ],
            "redHeadIndicators": ["worrying about uncontrollable factors"],
            "blueHeadTechniques": ["Control circles", "Focus redirection"],
            "urgencyLevel": "medium",
        },
    ),
    (
        ("breathing", "breath"),
        {
            "message": (
                "Box breathing is your instant reset from Red Head to Blue Head. Breathe in for 4 counts, hold "
                "for 4, breathe out for 4 and hold for 4. Do at least five cycles. Use it before key shots, after "
                "mistakes, or whenever you feel tension building."
            ),
            "suggestions": [
                "Practice five cycles of box breathing right now",
                "Build it into your pre-shot routine",
                "Practice daily so it becomes automatic under pressure",
            ],
            "redHeadIndicators": ["physical tension", "feeling rushed"],
            "blueHeadTechniques": ["Box breathing", "Controlled breathing patterns"],
            "urgencyLevel": "low",
        },
    ),
    (
        ("nervous", "anxi", "pressure"),
        {
            "message": (
                "Feeling nervous before a big moment is normal and shows you care. The goal is not to remove the "
                "nerves but to channel that energy into focus. Start with box breathing to settle your system, "
                "then lean on your pre-shot routine so you have a clear process to follow. Focus on the process, "
                "not the outcome."
            ),
            "suggestions": [
                "Start with five cycles of box breathing",
                "Commit to your process rather than the score",
                "Use your 25-second pre-shot routine on every shot",
            ],
            "redHeadIndicators": ["pre-round anxiety", "overthinking outcomes"],
            "blueHeadTechniques": ["Box breathing", "Process focus", "Routine consistency"],
            "urgencyLevel": "medium",
        },
    ),
    (
        ("mistake", "error", "mess up", "bad shot"),
        {
            "message": (
                "Mistakes are part of golf, and your response decides the next shot. Take a breath and acknowledge "
                "the mistake without judgment. Ask what you can learn instead of why it happened. Then use a reset "
                "routine and bring your attention back with the mantra: this shot, right now."
            ),
            "suggestions": [
                "Practice the 'file it and move on' reset",
                "Use box breathing after mistakes to settle your nervous system",
                "Create a physical reset such as re-gripping your glove",
            ],
            "redHeadIndicators": ["dwelling on past mistakes", "negative self-talk"],
            "blueHeadTechniques": ["Mistake recovery process", "Present moment focus"],
            "urgencyLevel": "medium",
        },
    ),
)

_GENERAL_RESPONSE: dict[str, Any] = {
    "message": (
        "I'm here to help you shift from Red Head to Blue Head. The foundation is simple: breathing for instant "
        "calm, routines for consistency, and focusing only on what you can control. Can you tell me more about "
        "what's causing stress in your game right now?"
    ),
    "suggestions": ["Take a deep breath", "Focus on your process", "Remember your strengths"],
    "redHeadIndicators": [],
    "blueHeadTechniques": ["Box breathing", "3-2-1 focus reset"],
    "urgencyLevel": "low",
}


def fallback_coaching_response(message: str) -> dict[str, Any]:
    normalized = (message or "").lower()
    for keywords, response in _TOPIC_RESPONSES:
        if any(keyword in normalized for keyword in keywords):
            return _copy_response(response)
    return _copy_response(_GENERAL_RESPONSE)


def classify_overall_state(total_score: int, blue_head_threshold: int = 300, transitional_threshold: int = 200) -> str:
    if total_score >= blue_head_threshold:
        return "blue_head"
    if total_score >= transitional_threshold:
        return "transitional"
    return "red_head"


def fallback_assessment_analysis(
    scores: dict[str, int],
    previous_assessments: list[dict] | None = None,
    *,
    blue_head_threshold: int = 300,
    transitional_threshold: int = 200,
) -> dict[str, Any]:
    total = sum(int(scores[key]) for _, key in ASSESSMENT_AREAS)
    state = classify_overall_state(total, blue_head_threshold, transitional_threshold)
    ranked = sorted(ASSESSMENT_AREAS, key=lambda area: int(scores[area[1]]))

    strengths = [f"Strong {name.lower()} ({scores[key]}/100)" for name, key in ASSESSMENT_AREAS if scores[key] >= 75]
    if not strengths:
        best_name, best_key = ranked[-1]
        strengths = [f"Relative strength in {best_name.lower()} ({scores[best_key]}/100)"]

    opportunities = [f"Build {name.lower()} ({scores[key]}/100)" for name, key in ranked if scores[key] < 60]
    if not opportunities:
        weakest_name, weakest_key = ranked[0]
        opportunities = [f"Sharpen {weakest_name.lower()} ({scores[weakest_key]}/100)"]

    focus_names = [name for name, key in ranked[:2]]
    insights = [_state_insight(state, total)]
    if previous_assessments:
        previous_total = int(previous_assessments[0].get("totalScore", total))
        change = total - previous_total
        if change > 0:
            insights.append(f"Total score is up {change} points since your last assessment")
        elif change < 0:
            insights.append(f"Total score is down {abs(change)} points since your last assessment")
        else:
            insights.append("Total score is unchanged since your last assessment")

    return {
        "overallState": state,
        "strengths": strengths,
        "opportunities": opportunities,
        "recommendedTechniques": [AREA_TECHNIQUES[name] for name in focus_names],
        "insights": insights,
        "nextSteps": [AREA_NEXT_STEPS[name] for name in focus_names],
    }


def fallback_plan(assessments: list[dict], goals: list[str] | None = None) -> dict[str, Any]:
    if assessments:
        latest = assessments[0]
        ranked = sorted(ASSESSMENT_AREAS, key=lambda area: int(latest.get(area[1], 0)))
        focus_names = [name for name, _ in ranked[:2]]
    else:
        focus_names = ["Intensity", "Diversions"]

    days = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
    weekly_plan = []
    for index, day in enumerate(days):
        area = focus_names[index % len(focus_names)]
        weekly_plan.append({"day": day, "focus": area, "activity": AREA_NEXT_STEPS[area]})

    milestones = [
        {"week": week, "goal": f"Use {AREA_TECHNIQUES[focus_names[(week - 1) % len(focus_names)]].lower()} in every practice"}
        for week in range(1, 5)
    ]
    if goals:
        milestones[-1] = {"week": 4, "goal": f"Progress toward: {goals[0]}"}

    return {
        "weeklyPlan": weekly_plan,
        "focusAreas": focus_names,
        "techniques": list(dict.fromkeys([AREA_TECHNIQUES[name] for name in focus_names] + ["Box breathing"])),
        "milestones": milestones,
    }


def _state_insight(state: str, total: int) -> str:
    if state == "blue_head":
        return f"A total of {total}/400 shows a mostly Blue Head game; protect it with consistent routines"
    if state == "transitional":
        return f"A total of {total}/400 shows you moving between Red Head and Blue Head under pressure"
    return f"A total of {total}/400 shows Red Head patterns are costing you shots right now"


def _copy_response(response: dict[str, Any]) -> dict[str, Any]:
    return {key: list(value) if isinstance(value, list) else value for key, value in response.items()}
