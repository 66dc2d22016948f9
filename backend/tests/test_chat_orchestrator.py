import unittest
from unittest.mock import MagicMock

from helpers import StubProvider, add_assessment, new_user

from red2blue.coaching.adapter import CoachingAdapter
from red2blue.errors import ExternalServiceError, NotFoundError
from red2blue.services.chat_orchestrator import ChatOrchestrator
from red2blue.services.store import store


class ChatTurnTests(unittest.TestCase):
    def setUp(self) -> None:
        self.user = new_user()
        self.orchestrator = ChatOrchestrator(store, CoachingAdapter(None))

    def test_turn_without_session_creates_one_with_two_messages(self) -> None:
        result = self.orchestrator.handle_chat_turn(self.user["id"], "How do I stay calm on the first tee?")
        messages = result["session"]["messages"]
        self.assertEqual(len(messages), 2)
        self.assertEqual(messages[0]["role"], "user")
        self.assertEqual(messages[0]["content"], "How do I stay calm on the first tee?")
        self.assertEqual(messages[1]["role"], "assistant")
        self.assertEqual(messages[1]["content"], result["response"].message)
        self.assertIn("suggestions", messages[1]["metadata"])

    def test_each_turn_appends_exactly_two_messages_in_order(self) -> None:
        first = self.orchestrator.handle_chat_turn(self.user["id"], "I get nervous over putts")
        session_id = first["session"]["id"]
        second = self.orchestrator.handle_chat_turn(self.user["id"], "What about after a mistake?", session_id)

        self.assertEqual(second["session"]["id"], session_id)
        messages = second["session"]["messages"]
        self.assertEqual(len(messages), 4)
        self.assertEqual([entry["role"] for entry in messages[-2:]], ["user", "assistant"])
        self.assertEqual(messages[-2]["content"], "What about after a mistake?")
        self.assertEqual(store.get_chat_session(session_id)["messages"], messages)

    def test_unknown_session_raises_and_creates_nothing(self) -> None:
        before = len(store.get_user_chat_sessions(self.user["id"]))
        with self.assertRaises(NotFoundError):
            self.orchestrator.handle_chat_turn(self.user["id"], "hello", 987654)
        self.assertEqual(len(store.get_user_chat_sessions(self.user["id"])), before)

    def test_other_users_session_is_not_found_and_untouched(self) -> None:
        owned = self.orchestrator.handle_chat_turn(self.user["id"], "hi")
        intruder = new_user()
        adapter = MagicMock(wraps=CoachingAdapter(None))
        with self.assertRaises(NotFoundError):
            ChatOrchestrator(store, adapter).handle_chat_turn(intruder["id"], "let me in", owned["session"]["id"])
        adapter.get_coaching_response.assert_not_called()
        messages = store.get_chat_session(owned["session"]["id"])["messages"]
        self.assertEqual([entry["content"] for entry in messages if entry["role"] == "user"], ["hi"])
        self.assertEqual(store.get_user_chat_sessions(intruder["id"]), [])

    def test_model_outage_still_stores_a_reply(self) -> None:
        provider = StubProvider(error=ExternalServiceError("connection reset", provider="stub"))
        orchestrator = ChatOrchestrator(store, CoachingAdapter(provider))
        result = orchestrator.handle_chat_turn(self.user["id"], "Any breathing drills?")
        self.assertEqual(result["response"].provider, "heuristic_fallback")
        self.assertEqual(len(result["session"]["messages"]), 2)

    def test_context_includes_latest_assessment(self) -> None:
        add_assessment(self.user["id"], 55, 60, 65, 70)
        adapter = MagicMock(wraps=CoachingAdapter(None))
        ChatOrchestrator(store, adapter).handle_chat_turn(self.user["id"], "hi")
        _, _, context = adapter.get_coaching_response.call_args.args
        self.assertEqual(context["latestAssessment"]["totalScore"], 250)
        self.assertEqual(context["recentProgress"], [])

    def test_adapter_failure_writes_nothing(self) -> None:
        adapter = MagicMock()
        adapter.get_coaching_response.side_effect = RuntimeError("boom")
        with self.assertRaises(RuntimeError):
            ChatOrchestrator(store, adapter).handle_chat_turn(self.user["id"], "hi")
        self.assertEqual(store.get_user_chat_sessions(self.user["id"]), [])


class ChatFollowUpTests(unittest.TestCase):
    def setUp(self) -> None:
        self.user = new_user()
        self.orchestrator = ChatOrchestrator(store, CoachingAdapter(None))

    def test_technique_reply_yields_practice_questions(self) -> None:
        session = store.create_chat_session(self.user["id"])
        store.append_chat_messages(
            session["id"],
            [
                {"role": "user", "content": "help"},
                {"role": "assistant", "content": "Try box breathing before each shot."},
            ],
        )
        questions = self.orchestrator.generate_chat_follow_up(session["id"])
        self.assertIn("How has the practice been going with the technique I suggested?", questions)
        self.assertEqual(len(questions), 3)

    def test_missing_session_yields_no_questions(self) -> None:
        self.assertEqual(self.orchestrator.generate_chat_follow_up(987654), [])


if __name__ == "__main__":
    unittest.main()
