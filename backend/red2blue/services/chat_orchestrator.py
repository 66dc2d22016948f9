import logging
from datetime import datetime, timezone

from red2blue.coaching.adapter import CoachingAdapter, coaching_adapter
from red2blue.errors import NotFoundError
from red2blue.services.store import CoachingStore, store

LOGGER = logging.getLogger(__name__)

CONTEXT_PROGRESS_DAYS = 7

TECHNIQUE_KEYWORDS = ("breathing", "visualization", "routine", "focus", "technique")
SCENARIO_KEYWORDS = ("situation", "when you", "if you", "during", "pressure moment")

TECHNIQUE_FOLLOW_UPS = (
    "How has the practice been going with the technique I suggested?",
    "Have you noticed any improvements in your performance?",
    "What challenges have you encountered while practicing?",
)
SCENARIO_FOLLOW_UPS = (
    "Have you experienced a similar situation since we talked?",
    "How did you handle it using what we discussed?",
    "What would you like to work on next?",
)


class ChatOrchestrator:
    """Runs one coaching turn against a persisted chat session."""

    def __init__(self, store: CoachingStore, adapter: CoachingAdapter) -> None:
        self.store = store
        self.adapter = adapter

    def handle_chat_turn(self, user_id: int, message: str, session_id: int | None = None) -> dict:
        if session_id is not None:
            session = self.store.get_chat_session(session_id)
            # Another user's session is reported exactly like a missing one.
            if session is None or int(session["userId"]) != int(user_id):
                raise NotFoundError("Chat session not found")
        else:
            session = None

        context = {
            "latestAssessment": self.store.get_latest_assessment(user_id),
            "recentProgress": self.store.get_user_progress(user_id, days=CONTEXT_PROGRESS_DAYS),
        }
        history = session["messages"] if session is not None else []

        # Resolved (model or fallback) before anything is written.
        response = self.adapter.get_coaching_response(message, history, context)

        if session is None:
            session = self.store.create_chat_session(user_id)

        now = datetime.now(timezone.utc)
        structured = response.model_dump()
        updated = self.store.append_chat_messages(
            session["id"],
            [
                {"role": "user", "content": message, "timestamp": now},
                {
                    "role": "assistant",
                    "content": response.message,
                    "timestamp": now,
                    "metadata": {key: value for key, value in structured.items() if key != "message"},
                },
            ],
        )
        LOGGER.info(
            "Chat turn stored session=%s user=%s provider=%s",
            updated["id"],
            user_id,
            response.provider,
        )
        return {"session": updated, "response": response}

    def generate_chat_follow_up(self, session_id: int) -> list[str]:
        session = self.store.get_chat_session(session_id)
        if session is None:
            return []

        last_assistant = next(
            (entry for entry in reversed(session["messages"]) if entry.get("role") == "assistant"),
            None,
        )
        if last_assistant is None:
            return []

        content = str(last_assistant.get("content", "")).lower()
        questions: list[str] = []
        if any(keyword in content for keyword in TECHNIQUE_KEYWORDS):
            questions.extend(TECHNIQUE_FOLLOW_UPS)
        if any(keyword in content for keyword in SCENARIO_KEYWORDS):
            questions.extend(SCENARIO_FOLLOW_UPS)
        return questions


chat_orchestrator = ChatOrchestrator(store, coaching_adapter)
