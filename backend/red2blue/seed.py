import logging

from red2blue.services.store import CoachingStore

LOGGER = logging.getLogger(__name__)

DEFAULT_TECHNIQUES = (
    {
        "name": "Box Breathing",
        "category": "breathing",
        "description": "A simple 4-4-4-4 breathing pattern that settles your nervous system between shots.",
        "instructions": "Breathe in for 4 counts, hold for 4, breathe out for 4, hold for 4. Repeat five cycles.",
        "duration": 60,
        "difficulty": "beginner",
    },
    {
        "name": "3-2-1 Focus Reset",
        "category": "focus",
        "description": "Brings attention back to the present when your mind drifts to results or mistakes.",
        "instructions": "Name three things you see, two things you hear and one thing you feel.",
        "duration": 30,
        "difficulty": "beginner",
    },
    {
        "name": "Pressure Valve",
        "category": "emotional",
        "description": "Releases built-up tension after a bad hole so it does not carry into the next shot.",
        "instructions": "Squeeze your grip hard for 5 seconds, exhale slowly while releasing, then shake out your hands.",
        "duration": 45,
        "difficulty": "intermediate",
    },
    {
        "name": "Performance Anchor",
        "category": "confidence",
        "description": "Links a physical cue to a memory of your best golf so you can recall that state on demand.",
        "instructions": (
            "Recall a shot you struck perfectly, relive it in detail, and press your thumb and finger "
            "together at the peak of the feeling. Repeat until the cue brings the feeling back."
        ),
        "duration": 120,
        "difficulty": "advanced",
    },
)

DEFAULT_SCENARIOS = (
    {
        "title": "First Tee Nerves",
        "description": "You are on the first tee of a competition with a group watching.",
        "pressure_level": "medium",
        "category": "tournament",
        "red_head_triggers": ["people watching", "fear of a bad start", "rushing"],
        "blue_head_techniques": ["Box Breathing", "25-second pre-shot routine"],
    },
    {
        "title": "Short Putt to Win",
        "description": "A four-foot putt on the final green decides the match.",
        "pressure_level": "high",
        "category": "putting",
        "red_head_triggers": ["thinking about the result", "tight grip", "fast heartbeat"],
        "blue_head_techniques": ["Box Breathing", "Performance Anchor", "3-2-1 Focus Reset"],
    },
    {
        "title": "Recovering After a Double Bogey",
        "description": "You just made a double bogey and walk to the next tee frustrated.",
        "pressure_level": "low",
        "category": "recovery",
        "red_head_triggers": ["replaying the mistake", "negative self-talk"],
        "blue_head_techniques": ["Pressure Valve", "3-2-1 Focus Reset"],
    },
)


def seed_catalog(store: CoachingStore) -> None:
    """Insert the default techniques and scenarios into an empty catalog."""
    if not store.list_techniques():
        for technique in DEFAULT_TECHNIQUES:
            store.create_technique(**technique)
        LOGGER.info("Seeded %d default techniques", len(DEFAULT_TECHNIQUES))
    if not store.list_scenarios():
        for scenario in DEFAULT_SCENARIOS:
            store.create_scenario(**scenario)
        LOGGER.info("Seeded %d default scenarios", len(DEFAULT_SCENARIOS))
