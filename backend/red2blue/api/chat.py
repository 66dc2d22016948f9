from fastapi import APIRouter, Depends, HTTPException, Query, status

from red2blue.api.security import ensure_can_access, get_current_user
from red2blue.errors import NotFoundError
from red2blue.models.chat import (
    ChatFollowUpResponse,
    ChatMessagesPage,
    ChatRequest,
    ChatSessionRecord,
    ChatTurnResponse,
)
from red2blue.services.chat_orchestrator import chat_orchestrator
from red2blue.services.engagement import track_engagement
from red2blue.services.store import store

router = APIRouter(prefix="/chat", tags=["Chat"])


@router.post("", response_model=ChatTurnResponse)
def chat(payload: ChatRequest) -> ChatTurnResponse:
    try:
        result = chat_orchestrator.handle_chat_turn(payload.userId, payload.message, payload.sessionId)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message) from exc
    track_engagement(payload.userId, chat_messages=1)
    return ChatTurnResponse(
        session=ChatSessionRecord(**result["session"]),
        response=result["response"],
    )


@router.get("/sessions/{userId}", response_model=list[ChatSessionRecord])
def get_user_chat_sessions(userId: int) -> list[ChatSessionRecord]:
    return [ChatSessionRecord(**session) for session in store.get_user_chat_sessions(userId)]


@router.get("/sessions/{sessionId}/messages", response_model=ChatMessagesPage)
def get_chat_messages(
    sessionId: int,
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
) -> ChatMessagesPage:
    session = store.get_chat_session(sessionId)
    if session is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Chat session not found")
    messages = session["messages"]
    return ChatMessagesPage(
        sessionId=sessionId,
        total=len(messages),
        offset=offset,
        messages=messages[offset : offset + limit],
    )


@router.get("/{sessionId}/followup", response_model=ChatFollowUpResponse)
def get_chat_follow_up(sessionId: int, current_user: dict = Depends(get_current_user)) -> ChatFollowUpResponse:
    session = store.get_chat_session(sessionId)
    if session is not None:
        ensure_can_access(current_user, session["userId"])
    return ChatFollowUpResponse(followUpQuestions=chat_orchestrator.generate_chat_follow_up(sessionId))
