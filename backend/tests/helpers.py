from uuid import uuid4

from red2blue.coaching.providers import LLMProvider
from red2blue.services.store import store


def new_user(role: str = "student", password: str = "swing-easy-42") -> dict:
    user = store.create_user(username=f"golfer-{uuid4().hex[:10]}", password=password)
    if role != "student":
        user = store.update_user(user["id"], {"role": role})
    return user


def add_assessment(user_id: int, intensity: int, decision_making: int, diversions: int, execution: int) -> dict:
    return store.create_assessment(
        user_id=user_id,
        intensity_score=intensity,
        decision_making_score=decision_making,
        diversions_score=diversions,
        execution_score=execution,
    )


class StubProvider(LLMProvider):
    """Records every call and replays a canned reply or error."""

    name = "stub"

    def __init__(self, reply: str = "", error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: list[dict] = []

    def generate(self, prompt, prior_messages=None, **kwargs) -> str:
        self.calls.append({"prompt": prompt, "prior_messages": list(prior_messages or []), **kwargs})
        if self.error is not None:
            raise self.error
        return self.reply
