import json
from typing import Any

COACH_SYSTEM_PROMPT = """
You are Flo, a Red2Blue mental performance coach for golfers.
Help the golfer move from Red Head (stressed, reactive, distracted) to Blue Head
(calm, focused, present) using the Red2Blue toolkit:
- Box breathing: in 4, hold 4, out 4, hold 4, five cycles.
- 25-second pre-shot routine: physical ritual, visualize, align and commit, practice swing, execute.
- Control circles: invest energy only in what you control (breathing, attitude, routine)
  and what you influence (strategy, practice), never in what you cannot control.
- 3-2-1 focus reset: three things you see, two you hear, one you feel.
Use simple, encouraging language and always give practical next steps.
""".strip()

COACHING_USER_PROMPT_TEMPLATE = """
Golfer message:
{message}

Latest assessment scores:
{assessment_json}

Recent progress entries:
{progress_json}

Respond with JSON only, using keys:
- message: direct coaching answer (3-6 sentences)
- suggestions: array of 2-3 specific actions
- redHeadIndicators: array of stress signs noticed in the message
- blueHeadTechniques: array of Red2Blue techniques that fit the situation
- urgencyLevel: "low", "medium" or "high"
""".strip()

ANALYSIS_PROMPT_TEMPLATE = """
Analyze these Red2Blue mental skills assessment results for a golfer:

Intensity Management: {intensity}/100
Decision Making: {decision_making}/100
Focus & Diversions: {diversions}/100
Execution: {execution}/100
Total: {total}/400

Previous assessments:
{previous_json}

Return JSON with keys:
- overallState: "red_head", "blue_head" or "transitional"
- strengths, opportunities, recommendedTechniques, insights, nextSteps: arrays of short strings
Keep it practical, golf-specific and in simple language.
""".strip()

PLAN_PROMPT_TEMPLATE = """
Create a personalized Red2Blue improvement plan for a golfer based on:

Assessment history:
{assessments_json}

Progress data:
{progress_json}

Goals:
{goals_json}

Return JSON with keys:
- weeklyPlan: array of 7 objects {{"day", "focus", "activity"}}
- focusAreas: priority areas for improvement
- techniques: recommended techniques in priority order
- milestones: array of objects {{"week", "goal"}} for the next 4 weeks
""".strip()


def build_coaching_prompt(message: str, context: dict[str, Any] | None) -> str:
    context = context or {}
    return COACHING_USER_PROMPT_TEMPLATE.format(
        message=message.strip(),
        assessment_json=json.dumps(context.get("latestAssessment"), default=str),
        progress_json=json.dumps(context.get("recentProgress") or [], default=str),
    )


def build_analysis_prompt(
    intensity: int,
    decision_making: int,
    diversions: int,
    execution: int,
    previous_assessments: list[dict] | None,
) -> str:
    return ANALYSIS_PROMPT_TEMPLATE.format(
        intensity=intensity,
        decision_making=decision_making,
        diversions=diversions,
        execution=execution,
        total=intensity + decision_making + diversions + execution,
        previous_json=json.dumps(previous_assessments or [], default=str),
    )


def build_plan_prompt(assessments: list[dict], progress: list[dict], goals: list[str] | None) -> str:
    return PLAN_PROMPT_TEMPLATE.format(
        assessments_json=json.dumps(assessments, default=str),
        progress_json=json.dumps(progress, default=str),
        goals_json=json.dumps(goals or []),
    )
