import logging

from red2blue.errors import Red2BlueError
from red2blue.services.store import store

LOGGER = logging.getLogger(__name__)


def track_engagement(
    user_id: int,
    *,
    chat_messages: int = 0,
    techniques_practiced: int = 0,
    assessments_completed: int = 0,
    session_minutes: int = 0,
) -> None:
    """Bump today's engagement counters; bookkeeping never fails the calling request."""
    try:
        store.record_engagement(
            user_id,
            chat_messages=chat_messages,
            techniques_practiced=techniques_practiced,
            assessments_completed=assessments_completed,
            session_minutes=session_minutes,
        )
    except Red2BlueError as exc:
        LOGGER.warning("Engagement tracking failed for user=%s: %s", user_id, exc.message)
