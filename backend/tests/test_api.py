import unittest
from uuid import uuid4

from fastapi.testclient import TestClient
from helpers import add_assessment, new_user

from red2blue.main import app
from red2blue.services.store import store

PASSWORD = "swing-easy-42"


def _auth_headers(client: TestClient, user: dict) -> dict[str, str]:
    response = client.post("/api/auth/login", json={"login": user["username"], "password": PASSWORD})
    return {"Authorization": f"Bearer {response.json()['accessToken']}"}


class AuthApiTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = TestClient(app)

    def test_register_login_and_me(self) -> None:
        username = f"golfer-{uuid4().hex[:10]}"
        registered = self.client.post(
            "/api/auth/register",
            json={"username": username, "password": PASSWORD, "email": f"{username}@example.com"},
        )
        self.assertEqual(registered.status_code, 201)
        self.assertEqual(registered.json()["user"]["role"], "student")

        logged_in = self.client.post("/api/auth/login", json={"login": f"{username}@example.com", "password": PASSWORD})
        self.assertEqual(logged_in.status_code, 200)
        token = logged_in.json()["accessToken"]

        me = self.client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.json()["username"], username)

    def test_duplicate_registration_is_rejected(self) -> None:
        user = new_user()
        response = self.client.post("/api/auth/register", json={"username": user["username"], "password": PASSWORD})
        self.assertEqual(response.status_code, 400)

    def test_wrong_password_is_unauthorized(self) -> None:
        user = new_user()
        response = self.client.post("/api/auth/login", json={"login": user["username"], "password": "not-my-pass"})
        self.assertEqual(response.status_code, 401)

    def test_me_requires_token(self) -> None:
        self.assertEqual(self.client.get("/api/auth/me").status_code, 401)


class AssessmentApiTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = TestClient(app)
        self.user = new_user()

    def test_latest_assessment_missing_is_404(self) -> None:
        response = self.client.get(f"/api/assessments/latest/{self.user['id']}")
        self.assertEqual(response.status_code, 404)

    def test_submit_and_read_back(self) -> None:
        response = self.client.post(
            "/api/assessments",
            json={
                "userId": self.user["id"],
                "intensityScore": 80,
                "decisionMakingScore": 80,
                "diversionsScore": 80,
                "executionScore": 80,
            },
        )
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["assessment"]["totalScore"], 320)
        self.assertEqual(body["analysis"]["overallState"], "blue_head")

        latest = self.client.get(f"/api/assessments/latest/{self.user['id']}")
        self.assertEqual(latest.json()["id"], body["assessment"]["id"])
        metrics = store.get_user_engagement_metrics(self.user["id"])
        self.assertEqual(metrics[0]["assessmentsCompleted"], 1)

    def test_string_bool_and_float_scores_are_400(self) -> None:
        response = self.client.post(
            "/api/assessments",
            json={
                "userId": self.user["id"],
                "intensityScore": "80",
                "decisionMakingScore": True,
                "diversionsScore": 80.0,
                "executionScore": 80,
            },
        )
        self.assertEqual(response.status_code, 400)
        self.assertIsNone(store.get_latest_assessment(self.user["id"]))

    def test_invalid_scores_are_400(self) -> None:
        response = self.client.post(
            "/api/assessments",
            json={"userId": self.user["id"], "intensityScore": 80, "decisionMakingScore": "high"},
        )
        self.assertEqual(response.status_code, 400)


class ChatApiTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = TestClient(app)
        self.user = new_user()

    def test_chat_turn_returns_session_and_response(self) -> None:
        response = self.client.post("/api/chat", json={"userId": self.user["id"], "message": "I feel pressure on the tee"})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(len(body["session"]["messages"]), 2)
        self.assertTrue(body["response"]["blueHeadTechniques"])

        sessions = self.client.get(f"/api/chat/sessions/{self.user['id']}").json()
        self.assertEqual(sessions[0]["id"], body["session"]["id"])

        page = self.client.get(f"/api/chat/sessions/{body['session']['id']}/messages", params={"limit": 1})
        self.assertEqual(page.json()["total"], 2)
        self.assertEqual(page.json()["messages"][0]["role"], "user")

    def test_unknown_session_is_404_and_creates_nothing(self) -> None:
        response = self.client.post(
            "/api/chat",
            json={"userId": self.user["id"], "message": "hello", "sessionId": 987654},
        )
        self.assertEqual(response.status_code, 404)
        self.assertEqual(store.get_user_chat_sessions(self.user["id"]), [])

    def test_other_users_session_is_404_and_unchanged(self) -> None:
        owned = self.client.post("/api/chat", json={"userId": self.user["id"], "message": "hi"}).json()
        intruder = new_user()
        response = self.client.post(
            "/api/chat",
            json={"userId": intruder["id"], "message": "intruder", "sessionId": owned["session"]["id"]},
        )
        self.assertEqual(response.status_code, 404)
        messages = store.get_chat_session(owned["session"]["id"])["messages"]
        self.assertEqual([entry["content"] for entry in messages if entry["role"] == "user"], ["hi"])

    def test_sessions_are_listed_by_most_recent_activity(self) -> None:
        older = self.client.post("/api/chat", json={"userId": self.user["id"], "message": "first round"}).json()
        newer = self.client.post("/api/chat", json={"userId": self.user["id"], "message": "second round"}).json()
        listed = [item["id"] for item in self.client.get(f"/api/chat/sessions/{self.user['id']}").json()]
        self.assertEqual(listed, [newer["session"]["id"], older["session"]["id"]])

        self.client.post(
            "/api/chat",
            json={"userId": self.user["id"], "message": "back to the first", "sessionId": older["session"]["id"]},
        )
        listed = [item["id"] for item in self.client.get(f"/api/chat/sessions/{self.user['id']}").json()]
        self.assertEqual(listed, [older["session"]["id"], newer["session"]["id"]])

    def test_missing_message_is_400(self) -> None:
        response = self.client.post("/api/chat", json={"userId": self.user["id"]})
        self.assertEqual(response.status_code, 400)


class CatalogApiTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = TestClient(app)

    def test_seeded_techniques_filter_by_category(self) -> None:
        names = [item["name"] for item in self.client.get("/api/techniques").json()]
        self.assertIn("Box Breathing", names)
        breathing = self.client.get("/api/techniques", params={"category": "breathing"}).json()
        self.assertTrue(all(item["category"] == "breathing" for item in breathing))

    def test_scenarios_filter_by_pressure_level(self) -> None:
        high = self.client.get("/api/scenarios", params={"pressureLevel": "high"}).json()
        self.assertTrue(high)
        self.assertTrue(all(item["pressureLevel"] == "high" for item in high))

    def test_active_routine_round_trip(self) -> None:
        user = new_user()
        self.assertEqual(self.client.get(f"/api/pre-shot-routines/active/{user['id']}").status_code, 404)
        created = self.client.post(
            "/api/pre-shot-routines",
            json={"userId": user["id"], "name": "Match play", "steps": [{"name": "Breathe", "duration": 10}]},
        )
        self.assertEqual(created.status_code, 201)
        active = self.client.get(f"/api/pre-shot-routines/active/{user['id']}")
        self.assertEqual(active.json()["id"], created.json()["id"])

    def test_routine_patch_updates_steps(self) -> None:
        user = new_user()
        created = self.client.post(
            "/api/pre-shot-routines",
            json={"userId": user["id"], "name": "Driver", "steps": [{"name": "Pick a target", "duration": 5}]},
        ).json()
        response = self.client.patch(
            f"/api/pre-shot-routines/{created['id']}",
            json={
                "name": "Driver v2",
                "steps": [{"name": "Pick a target", "duration": 5}, {"name": "Breathe", "duration": 7}],
            },
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["name"], "Driver v2")
        self.assertEqual(response.json()["totalDuration"], 12)

    def test_routine_patch_of_missing_routine_is_404(self) -> None:
        response = self.client.patch("/api/pre-shot-routines/987654", json={"name": "Ghost"})
        self.assertEqual(response.status_code, 404)


class ProgressApiTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = TestClient(app)
        self.user = new_user()

    def test_practice_minutes_feed_engagement(self) -> None:
        response = self.client.post(
            "/api/progress",
            json={
                "userId": self.user["id"],
                "overallScore": 70,
                "techniquesUsed": ["Box Breathing"],
                "practiceMinutes": 15,
            },
        )
        self.assertEqual(response.status_code, 201)
        metric = store.get_user_engagement_metrics(self.user["id"])[0]
        self.assertEqual(metric["techniquesPracticed"], 1)
        self.assertEqual(metric["sessionDurationMinutes"], 15)
        self.assertEqual(metric["engagementScore"], 10 + 15)


class MentalSkillsToolsApiTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = TestClient(app)
        self.user = new_user()

    def test_xcheck_create_latest_and_history(self) -> None:
        self.assertEqual(self.client.get(f"/api/mental-skills-xcheck/latest/{self.user['id']}").status_code, 404)
        payload = {
            "userId": self.user["id"],
            "intensityScores": [75, 80, 85],
            "decisionMakingScores": [70, 75, 80],
            "diversionsScores": [65, 70, 75],
            "executionScores": [80, 85, 90],
            "context": "Saturday medal",
            "whatDidWell": "Committed to every club",
        }
        first = self.client.post("/api/mental-skills-xcheck", json=payload)
        self.assertEqual(first.status_code, 201)
        self.assertIsNone(first.json()["actionPlan"])
        second = self.client.post("/api/mental-skills-xcheck", json={**payload, "actionPlan": "Reset after bogeys"})

        latest = self.client.get(f"/api/mental-skills-xcheck/latest/{self.user['id']}").json()
        self.assertEqual(latest["id"], second.json()["id"])
        history = self.client.get(f"/api/mental-skills-xcheck/{self.user['id']}").json()
        self.assertEqual([item["id"] for item in history], [second.json()["id"], first.json()["id"]])

    def test_xcheck_score_out_of_range_is_400(self) -> None:
        response = self.client.post(
            "/api/mental-skills-xcheck",
            json={
                "userId": self.user["id"],
                "intensityScores": [120],
                "decisionMakingScores": [70],
                "diversionsScores": [70],
                "executionScores": [70],
            },
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.client.get(f"/api/mental-skills-xcheck/{self.user['id']}").json(), [])

    def test_control_circle_create_latest_and_history(self) -> None:
        self.assertEqual(self.client.get(f"/api/control-circles/latest/{self.user['id']}").status_code, 404)
        first = self.client.post(
            "/api/control-circles",
            json={
                "userId": self.user["id"],
                "context": "Slow group ahead",
                "cantControl": ["Pace of play"],
                "canInfluence": ["Conversation with marker"],
                "canControl": ["My tempo", "My breathing"],
            },
        )
        self.assertEqual(first.status_code, 201)
        self.assertIsNone(first.json()["reflections"])
        second = self.client.post(
            "/api/control-circles",
            json={"userId": self.user["id"], "reflections": "Let the weather go", "cantControl": ["Rain"]},
        )

        latest = self.client.get(f"/api/control-circles/latest/{self.user['id']}").json()
        self.assertEqual(latest["id"], second.json()["id"])
        self.assertEqual(latest["canControl"], [])
        history = self.client.get(f"/api/control-circles/{self.user['id']}").json()
        self.assertEqual([item["id"] for item in history], [second.json()["id"], first.json()["id"]])


class RecommendationApiTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = TestClient(app)
        self.user = new_user()
        self.headers = _auth_headers(self.client, self.user)

    def test_requires_authentication(self) -> None:
        self.assertEqual(self.client.get(f"/api/recommendations/{self.user['id']}").status_code, 401)

    def test_students_cannot_read_other_students(self) -> None:
        other = new_user()
        response = self.client.get(f"/api/recommendations/{other['id']}", headers=self.headers)
        self.assertEqual(response.status_code, 403)

    def test_generate_feedback_and_insights(self) -> None:
        add_assessment(self.user["id"], 45, 70, 70, 70)
        generated = self.client.get(f"/api/recommendations/{self.user['id']}", headers=self.headers)
        self.assertEqual(generated.status_code, 200)
        recommendation = generated.json()["recommendations"][0]

        feedback = self.client.post(
            f"/api/recommendations/{recommendation['id']}/feedback",
            json={"feedback": 5, "comments": "Really helped"},
            headers=self.headers,
        )
        self.assertEqual(feedback.status_code, 200)

        insights = self.client.get(f"/api/insights/{self.user['id']}", headers=self.headers).json()["insights"]
        self.assertEqual(len(insights), 1)
        acknowledged = self.client.post(f"/api/insights/{insights[0]['id']}/acknowledge", headers=self.headers)
        self.assertTrue(acknowledged.json()["isAcknowledged"])

    def test_invalid_feedback_is_400(self) -> None:
        add_assessment(self.user["id"], 45, 70, 70, 70)
        recommendation = self.client.get(
            f"/api/recommendations/{self.user['id']}", headers=self.headers
        ).json()["recommendations"][0]
        response = self.client.post(
            f"/api/recommendations/{recommendation['id']}/feedback",
            json={"feedback": 9},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 400)

    def test_coaching_profile_upsert(self) -> None:
        empty = self.client.get(f"/api/coaching-profile/{self.user['id']}", headers=self.headers)
        self.assertIsNone(empty.json()["profile"])
        saved = self.client.post(
            f"/api/coaching-profile/{self.user['id']}",
            json={"preferredStyle": "direct", "goals": ["Break 80"]},
            headers=self.headers,
        )
        self.assertEqual(saved.json()["profile"]["goals"], ["Break 80"])


class CoachApiTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = TestClient(app)

    def test_students_cannot_open_coach_dashboard(self) -> None:
        student = new_user()
        response = self.client.get("/api/coach/students", headers=_auth_headers(self.client, student))
        self.assertEqual(response.status_code, 403)

    def test_coach_sees_risk_and_trend(self) -> None:
        coach = new_user(role="coach")
        student = new_user()
        add_assessment(student["id"], 60, 60, 60, 60)
        add_assessment(student["id"], 50, 50, 50, 50)

        response = self.client.get("/api/coach/students", headers=_auth_headers(self.client, coach))
        self.assertEqual(response.status_code, 200)
        summary = next(item for item in response.json() if item["id"] == student["id"])
        self.assertEqual(summary["riskLevel"], "high")
        self.assertEqual(summary["trends"], {"direction": "declining", "change": -40})

        detail = self.client.get(
            f"/api/coach/student-detail/{student['id']}", headers=_auth_headers(self.client, coach)
        ).json()
        self.assertEqual([point["totalScore"] for point in detail["assessmentHistory"]], [240, 200])
        self.assertEqual(len(detail["recommendations"]), 4)

    def test_admin_updates_subscription(self) -> None:
        admin = new_user(role="admin")
        student = new_user()
        response = self.client.patch(
            f"/api/admin/users/{student['id']}",
            json={"subscriptionTier": "premium", "isSubscribed": True},
            headers=_auth_headers(self.client, admin),
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["subscriptionTier"], "premium")
        self.assertTrue(store.get_user(student["id"])["isSubscribed"])


class HealthTests(unittest.TestCase):
    def test_health(self) -> None:
        self.assertEqual(TestClient(app).get("/health").json(), {"status": "ok"})


if __name__ == "__main__":
    unittest.main()
