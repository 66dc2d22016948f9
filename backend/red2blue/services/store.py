from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime, timedelta, timezone
from typing import Any

from sqlalchemy import and_, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from red2blue.db import SessionLocal
from red2blue.db_models import (
    AiRecommendationDB,
    AssessmentDB,
    ChatSessionDB,
    CoachingInsightDB,
    ControlCircleDB,
    MentalSkillsXCheckDB,
    PreShotRoutineDB,
    ScenarioDB,
    TechniqueDB,
    UserCoachingProfileDB,
    UserDB,
    UserEngagementMetricDB,
    UserProgressDB,
)
from red2blue.errors import InvalidInputError, NotFoundError, PersistenceError
from red2blue.services.auth_service import hash_password, verify_password

LOGGER = logging.getLogger(__name__)

USER_UPDATABLE_FIELDS = {
    "role": "role",
    "subscriptionTier": "subscription_tier",
    "isSubscribed": "is_subscribed",
    "bio": "bio",
    "golfHandicap": "golf_handicap",
    "dexterity": "dexterity",
    "email": "email",
}
PROFILE_UPDATABLE_FIELDS = {
    "preferredStyle": "preferred_style",
    "focusAreas": "focus_areas",
    "goals": "goals",
    "triggers": "triggers",
    "notes": "notes",
}
ROUTINE_UPDATABLE_FIELDS = {"name": "name", "steps": "steps", "isActive": "is_active"}

SESSION_LOCK_STRIPES = 64


@contextmanager
def _unit_of_work() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    except SQLAlchemyError as exc:
        db.rollback()
        LOGGER.exception("Database operation failed")
        raise PersistenceError("Database operation failed") from exc
    finally:
        db.close()


class CoachingStore:
    """Owns every persisted entity of the coaching service.

    Lookups for missing ids return ``None`` (or an empty list); mutations of
    missing ids raise :class:`NotFoundError`. Every method runs in its own
    short-lived database session and returns plain dicts.
    """

    def __init__(self) -> None:
        # Fixed pool; sessions share a lock when their ids collide modulo the stripe count.
        self._session_locks = tuple(threading.Lock() for _ in range(SESSION_LOCK_STRIPES))

    # Users

    def create_user(
        self,
        *,
        username: str,
        password: str,
        email: str | None = None,
        role: str = "student",
        subscription_tier: str = "free",
        is_subscribed: bool = False,
        bio: str | None = None,
        golf_handicap: float | None = None,
        dexterity: str | None = None,
    ) -> dict:
        normalized_username = username.strip()
        normalized_email = email.strip().lower() if email else None
        if self.get_user_by_username(normalized_username) is not None:
            raise InvalidInputError("Username already taken")
        if normalized_email and self.get_user_by_email(normalized_email) is not None:
            raise InvalidInputError("Email already registered")
        with _unit_of_work() as db:
            row = UserDB(
                username=normalized_username,
                email=normalized_email,
                password_hash=hash_password(password),
                role=role,
                subscription_tier=subscription_tier,
                is_subscribed=is_subscribed,
                bio=bio,
                golf_handicap=golf_handicap,
                dexterity=dexterity,
            )
            db.add(row)
            try:
                db.commit()
            except IntegrityError as exc:
                db.rollback()
                raise InvalidInputError("User already exists") from exc
            db.refresh(row)
            return self._user_to_dict(row)

    def authenticate_user(self, login: str, password: str) -> dict | None:
        normalized = login.strip()
        with _unit_of_work() as db:
            stmt = select(UserDB).where(
                or_(UserDB.username == normalized, UserDB.email == normalized.lower())
            )
            row = db.execute(stmt).scalars().first()
            if row is None or not verify_password(password, row.password_hash):
                return None
            return self._user_to_dict(row)

    def get_user(self, user_id: int) -> dict | None:
        with _unit_of_work() as db:
            row = db.get(UserDB, int(user_id))
            return self._user_to_dict(row) if row is not None else None

    def get_user_by_username(self, username: str) -> dict | None:
        with _unit_of_work() as db:
            row = db.execute(select(UserDB).where(UserDB.username == username.strip())).scalar_one_or_none()
            return self._user_to_dict(row) if row is not None else None

    def get_user_by_email(self, email: str) -> dict | None:
        with _unit_of_work() as db:
            row = db.execute(select(UserDB).where(UserDB.email == email.strip().lower())).scalar_one_or_none()
            return self._user_to_dict(row) if row is not None else None

    def update_user(self, user_id: int, updates: dict[str, Any]) -> dict:
        with _unit_of_work() as db:
            row = db.get(UserDB, int(user_id))
            if row is None:
                raise NotFoundError("User not found")
            for key, value in updates.items():
                column = USER_UPDATABLE_FIELDS.get(key)
                if column is None or value is None:
                    continue
                setattr(row, column, value)
            row.updated_at = datetime.now(timezone.utc)
            db.commit()
            db.refresh(row)
            return self._user_to_dict(row)

    def list_users(self) -> list[dict]:
        with _unit_of_work() as db:
            rows = db.execute(select(UserDB).order_by(UserDB.id)).scalars().all()
            return [self._user_to_dict(row) for row in rows]

    # Assessments

    def create_assessment(
        self,
        *,
        user_id: int,
        intensity_score: int,
        decision_making_score: int,
        diversions_score: int,
        execution_score: int,
    ) -> dict:
        total_score = intensity_score + decision_making_score + diversions_score + execution_score
        with _unit_of_work() as db:
            row = AssessmentDB(
                user_id=int(user_id),
                intensity_score=int(intensity_score),
                decision_making_score=int(decision_making_score),
                diversions_score=int(diversions_score),
                execution_score=int(execution_score),
                total_score=int(total_score),
            )
            db.add(row)
            db.commit()
            db.refresh(row)
            return self._assessment_to_dict(row)

    def get_latest_assessment(self, user_id: int) -> dict | None:
        assessments = self.get_user_assessments(user_id, limit=1)
        return assessments[0] if assessments else None

    def get_user_assessments(self, user_id: int, limit: int | None = None) -> list[dict]:
        with _unit_of_work() as db:
            stmt = (
                select(AssessmentDB)
                .where(AssessmentDB.user_id == int(user_id))
                .order_by(AssessmentDB.created_at.desc(), AssessmentDB.id.desc())
            )
            if limit is not None:
                stmt = stmt.limit(limit)
            rows = db.execute(stmt).scalars().all()
            return [self._assessment_to_dict(row) for row in rows]

    # Chat sessions

    def create_chat_session(self, user_id: int) -> dict:
        with _unit_of_work() as db:
            row = ChatSessionDB(user_id=int(user_id), messages_json=[])
            db.add(row)
            db.commit()
            db.refresh(row)
            return self._chat_session_to_dict(row)

    def get_chat_session(self, session_id: int) -> dict | None:
        with _unit_of_work() as db:
            row = db.get(ChatSessionDB, int(session_id))
            return self._chat_session_to_dict(row) if row is not None else None

    def get_user_chat_sessions(self, user_id: int, limit: int | None = None) -> list[dict]:
        with _unit_of_work() as db:
            stmt = (
                select(ChatSessionDB)
                .where(ChatSessionDB.user_id == int(user_id))
                .order_by(ChatSessionDB.updated_at.desc(), ChatSessionDB.id.desc())
            )
            if limit is not None:
                stmt = stmt.limit(limit)
            rows = db.execute(stmt).scalars().all()
            return [self._chat_session_to_dict(row) for row in rows]

    def append_chat_messages(self, session_id: int, new_messages: list[dict]) -> dict:
        """Append messages to a session in a single write.

        The row is re-read under a per-session lock so that concurrent turns
        on the same session never drop each other's messages.
        """
        with self._session_lock(int(session_id)):
            with _unit_of_work() as db:
                row = db.get(ChatSessionDB, int(session_id))
                if row is None:
                    raise NotFoundError("Chat session not found")
                messages = list(row.messages_json or [])
                messages.extend(_jsonify(message) for message in new_messages)
                row.messages_json = messages
                row.updated_at = datetime.now(timezone.utc)
                db.commit()
                db.refresh(row)
                return self._chat_session_to_dict(row)

    # Progress

    def create_user_progress(
        self,
        *,
        user_id: int,
        overall_score: int,
        red_head_instances: int = 0,
        blue_head_instances: int = 0,
        techniques_used: list[str] | None = None,
        progress_date: datetime | None = None,
    ) -> dict:
        with _unit_of_work() as db:
            row = UserProgressDB(
                user_id=int(user_id),
                date=_aware(progress_date) if progress_date else datetime.now(timezone.utc),
                overall_score=int(overall_score),
                red_head_instances=int(red_head_instances),
                blue_head_instances=int(blue_head_instances),
                techniques_used=list(techniques_used or []),
            )
            db.add(row)
            db.commit()
            db.refresh(row)
            return self._progress_to_dict(row)

    def get_user_progress(self, user_id: int, days: int = 7) -> list[dict]:
        since = datetime.now(timezone.utc) - timedelta(days=max(0, int(days)))
        with _unit_of_work() as db:
            stmt = (
                select(UserProgressDB)
                .where(UserProgressDB.user_id == int(user_id), UserProgressDB.date >= since)
                .order_by(UserProgressDB.date.desc(), UserProgressDB.id.desc())
            )
            rows = db.execute(stmt).scalars().all()
            return [self._progress_to_dict(row) for row in rows]

    # Technique and scenario catalogs

    def list_techniques(self) -> list[dict]:
        with _unit_of_work() as db:
            rows = db.execute(select(TechniqueDB).order_by(TechniqueDB.id)).scalars().all()
            return [self._technique_to_dict(row) for row in rows]

    def get_techniques_by_category(self, category: str) -> list[dict]:
        with _unit_of_work() as db:
            stmt = select(TechniqueDB).where(TechniqueDB.category == category).order_by(TechniqueDB.id)
            rows = db.execute(stmt).scalars().all()
            return [self._technique_to_dict(row) for row in rows]

    def create_technique(
        self,
        *,
        name: str,
        category: str,
        description: str,
        instructions: str,
        difficulty: str,
        duration: int | None = None,
    ) -> dict:
        with _unit_of_work() as db:
            row = TechniqueDB(
                name=name,
                category=category,
                description=description,
                instructions=instructions,
                difficulty=difficulty,
                duration=duration,
            )
            db.add(row)
            db.commit()
            db.refresh(row)
            return self._technique_to_dict(row)

    def list_scenarios(self) -> list[dict]:
        with _unit_of_work() as db:
            rows = db.execute(select(ScenarioDB).order_by(ScenarioDB.id)).scalars().all()
            return [self._scenario_to_dict(row) for row in rows]

    def get_scenarios_by_pressure_level(self, pressure_level: str) -> list[dict]:
        with _unit_of_work() as db:
            stmt = select(ScenarioDB).where(ScenarioDB.pressure_level == pressure_level).order_by(ScenarioDB.id)
            rows = db.execute(stmt).scalars().all()
            return [self._scenario_to_dict(row) for row in rows]

    def create_scenario(
        self,
        *,
        title: str,
        description: str,
        pressure_level: str,
        category: str,
        red_head_triggers: list[str] | None = None,
        blue_head_techniques: list[str] | None = None,
    ) -> dict:
        with _unit_of_work() as db:
            row = ScenarioDB(
                title=title,
                description=description,
                pressure_level=pressure_level,
                category=category,
                red_head_triggers=list(red_head_triggers or []),
                blue_head_techniques=list(blue_head_techniques or []),
            )
            db.add(row)
            db.commit()
            db.refresh(row)
            return self._scenario_to_dict(row)

    # Recommendations

    def create_ai_recommendations(self, user_id: int, recommendations: list[dict]) -> list[dict]:
        """Insert a batch of recommendations in one transaction, keeping order."""
        with _unit_of_work() as db:
            rows = [
                AiRecommendationDB(
                    user_id=int(user_id),
                    recommendation_type=item["recommendationType"],
                    priority=int(item["priority"]),
                    confidence_score=int(item["confidenceScore"]),
                    reasoning=item["reasoning"],
                    personalized_message=item["personalizedMessage"],
                    expected_outcome=item.get("expectedOutcome"),
                    recommendation_data=_jsonify(dict(item.get("recommendationData") or {})),
                    expires_at=item.get("expiresAt"),
                )
                for item in recommendations
            ]
            db.add_all(rows)
            db.commit()
            for row in rows:
                db.refresh(row)
            return [self._recommendation_to_dict(row) for row in rows]

    def get_ai_recommendation(self, recommendation_id: int) -> dict | None:
        with _unit_of_work() as db:
            row = db.get(AiRecommendationDB, int(recommendation_id))
            return self._recommendation_to_dict(row) if row is not None else None

    def get_user_recommendations(self, user_id: int, active: bool | None = None) -> list[dict]:
        now = datetime.now(timezone.utc)
        with _unit_of_work() as db:
            stmt = select(AiRecommendationDB).where(AiRecommendationDB.user_id == int(user_id))
            not_expired = or_(AiRecommendationDB.expires_at.is_(None), AiRecommendationDB.expires_at > now)
            if active is True:
                stmt = stmt.where(and_(AiRecommendationDB.is_active.is_(True), not_expired))
            elif active is False:
                stmt = stmt.where(or_(AiRecommendationDB.is_active.is_(False), ~not_expired))
            stmt = stmt.order_by(
                AiRecommendationDB.priority.desc(),
                AiRecommendationDB.confidence_score.desc(),
                AiRecommendationDB.created_at.desc(),
                AiRecommendationDB.id,
            )
            rows = db.execute(stmt).scalars().all()
            return [self._recommendation_to_dict(row) for row in rows]

    def update_recommendation_feedback(
        self,
        recommendation_id: int,
        feedback: int,
        comments: str | None = None,
    ) -> dict:
        with _unit_of_work() as db:
            row = db.get(AiRecommendationDB, int(recommendation_id))
            if row is None:
                raise NotFoundError("Recommendation not found")
            row.user_feedback = int(feedback)
            row.feedback_comments = comments
            db.commit()
            db.refresh(row)
            return self._recommendation_to_dict(row)

    def mark_recommendation_applied(self, recommendation_id: int, effectiveness_measure: int) -> dict:
        with _unit_of_work() as db:
            row = db.get(AiRecommendationDB, int(recommendation_id))
            if row is None:
                raise NotFoundError("Recommendation not found")
            row.effectiveness_measure = int(effectiveness_measure)
            row.applied_at = datetime.now(timezone.utc)
            db.commit()
            db.refresh(row)
            return self._recommendation_to_dict(row)

    # Insights

    def create_coaching_insight(
        self,
        *,
        user_id: int,
        insight_type: str,
        category: str,
        title: str,
        description: str,
        data_points: dict | None = None,
        actionable_steps: list[str] | None = None,
        impact: str | None = None,
        timeframe: str | None = None,
    ) -> dict:
        with _unit_of_work() as db:
            row = CoachingInsightDB(
                user_id=int(user_id),
                insight_type=insight_type,
                category=category,
                title=title,
                description=description,
                data_points=_jsonify(dict(data_points or {})),
                actionable_steps=list(actionable_steps or []),
                impact=impact,
                timeframe=timeframe,
            )
            db.add(row)
            db.commit()
            db.refresh(row)
            return self._insight_to_dict(row)

    def get_coaching_insight(self, insight_id: int) -> dict | None:
        with _unit_of_work() as db:
            row = db.get(CoachingInsightDB, int(insight_id))
            return self._insight_to_dict(row) if row is not None else None

    def get_user_insights(self, user_id: int, acknowledged: bool | None = None) -> list[dict]:
        with _unit_of_work() as db:
            stmt = select(CoachingInsightDB).where(CoachingInsightDB.user_id == int(user_id))
            if acknowledged is not None:
                stmt = stmt.where(CoachingInsightDB.is_acknowledged.is_(acknowledged))
            stmt = stmt.order_by(CoachingInsightDB.created_at.desc(), CoachingInsightDB.id.desc())
            rows = db.execute(stmt).scalars().all()
            return [self._insight_to_dict(row) for row in rows]

    def acknowledge_insight(self, insight_id: int) -> dict:
        with _unit_of_work() as db:
            row = db.get(CoachingInsightDB, int(insight_id))
            if row is None:
                raise NotFoundError("Insight not found")
            row.is_acknowledged = True
            db.commit()
            db.refresh(row)
            return self._insight_to_dict(row)

    # Coaching profiles

    def get_coaching_profile(self, user_id: int) -> dict | None:
        with _unit_of_work() as db:
            row = db.execute(
                select(UserCoachingProfileDB).where(UserCoachingProfileDB.user_id == int(user_id))
            ).scalar_one_or_none()
            return self._profile_to_dict(row) if row is not None else None

    def upsert_coaching_profile(self, user_id: int, updates: dict[str, Any]) -> dict:
        with _unit_of_work() as db:
            row = db.execute(
                select(UserCoachingProfileDB).where(UserCoachingProfileDB.user_id == int(user_id))
            ).scalar_one_or_none()
            if row is None:
                row = UserCoachingProfileDB(user_id=int(user_id), focus_areas=[], goals=[], triggers=[])
                db.add(row)
            for key, value in updates.items():
                column = PROFILE_UPDATABLE_FIELDS.get(key)
                if column is None or value is None:
                    continue
                setattr(row, column, value)
            row.updated_at = datetime.now(timezone.utc)
            db.commit()
            db.refresh(row)
            return self._profile_to_dict(row)

    # Engagement metrics

    def record_engagement(
        self,
        user_id: int,
        *,
        chat_messages: int = 0,
        techniques_practiced: int = 0,
        assessments_completed: int = 0,
        session_minutes: int = 0,
        on_date: date | None = None,
    ) -> dict:
        metric_date = on_date or datetime.now(timezone.utc).date()
        with _unit_of_work() as db:
            row = db.execute(
                select(UserEngagementMetricDB).where(
                    UserEngagementMetricDB.user_id == int(user_id),
                    UserEngagementMetricDB.date == metric_date,
                )
            ).scalar_one_or_none()
            if row is None:
                row = UserEngagementMetricDB(
                    user_id=int(user_id),
                    date=metric_date,
                    chat_messages=0,
                    techniques_practiced=0,
                    assessments_completed=0,
                    session_duration_minutes=0,
                )
                db.add(row)
            row.chat_messages += int(chat_messages)
            row.techniques_practiced += int(techniques_practiced)
            row.assessments_completed += int(assessments_completed)
            row.session_duration_minutes += int(session_minutes)
            row.engagement_score = compute_engagement_score(
                chat_messages=row.chat_messages,
                techniques_practiced=row.techniques_practiced,
                assessments_completed=row.assessments_completed,
                session_minutes=row.session_duration_minutes,
            )
            db.commit()
            db.refresh(row)
            return self._engagement_to_dict(row)

    def get_user_engagement_metrics(self, user_id: int, days: int = 30) -> list[dict]:
        since = datetime.now(timezone.utc).date() - timedelta(days=max(0, int(days)))
        with _unit_of_work() as db:
            stmt = (
                select(UserEngagementMetricDB)
                .where(UserEngagementMetricDB.user_id == int(user_id), UserEngagementMetricDB.date >= since)
                .order_by(UserEngagementMetricDB.date.desc())
            )
            rows = db.execute(stmt).scalars().all()
            return [self._engagement_to_dict(row) for row in rows]

    # Pre-shot routines

    def create_pre_shot_routine(
        self,
        *,
        user_id: int,
        name: str,
        steps: list[dict],
        is_active: bool = True,
    ) -> dict:
        with _unit_of_work() as db:
            if is_active:
                self._deactivate_routines(db, int(user_id))
            row = PreShotRoutineDB(
                user_id=int(user_id),
                name=name,
                steps=_jsonify(list(steps)),
                total_duration=sum(int(step.get("duration", 0)) for step in steps),
                is_active=bool(is_active),
            )
            db.add(row)
            db.commit()
            db.refresh(row)
            return self._routine_to_dict(row)

    def get_user_pre_shot_routines(self, user_id: int) -> list[dict]:
        with _unit_of_work() as db:
            stmt = (
                select(PreShotRoutineDB)
                .where(PreShotRoutineDB.user_id == int(user_id))
                .order_by(PreShotRoutineDB.created_at.desc(), PreShotRoutineDB.id.desc())
            )
            rows = db.execute(stmt).scalars().all()
            return [self._routine_to_dict(row) for row in rows]

    def get_active_pre_shot_routine(self, user_id: int) -> dict | None:
        for routine in self.get_user_pre_shot_routines(user_id):
            if routine["isActive"]:
                return routine
        return None

    def update_pre_shot_routine(self, routine_id: int, updates: dict[str, Any]) -> dict:
        with _unit_of_work() as db:
            row = db.get(PreShotRoutineDB, int(routine_id))
            if row is None:
                raise NotFoundError("Pre-shot routine not found")
            if updates.get("isActive"):
                self._deactivate_routines(db, row.user_id)
            for key, value in updates.items():
                column = ROUTINE_UPDATABLE_FIELDS.get(key)
                if column is None or value is None:
                    continue
                setattr(row, column, _jsonify(value))
            row.total_duration = sum(int(step.get("duration", 0)) for step in row.steps or [])
            db.commit()
            db.refresh(row)
            return self._routine_to_dict(row)

    # Mental skills x-checks and control circles

    def create_mental_skills_xcheck(
        self,
        *,
        user_id: int,
        intensity_scores: list[int],
        decision_making_scores: list[int],
        diversions_scores: list[int],
        execution_scores: list[int],
        context: str | None = None,
        what_did_well: str | None = None,
        what_could_do_better: str | None = None,
        action_plan: str | None = None,
    ) -> dict:
        with _unit_of_work() as db:
            row = MentalSkillsXCheckDB(
                user_id=int(user_id),
                intensity_scores=[int(score) for score in intensity_scores],
                decision_making_scores=[int(score) for score in decision_making_scores],
                diversions_scores=[int(score) for score in diversions_scores],
                execution_scores=[int(score) for score in execution_scores],
                context=context,
                what_did_well=what_did_well,
                what_could_do_better=what_could_do_better,
                action_plan=action_plan,
            )
            db.add(row)
            db.commit()
            db.refresh(row)
            return self._xcheck_to_dict(row)

    def get_user_mental_skills_xchecks(self, user_id: int, limit: int | None = None) -> list[dict]:
        with _unit_of_work() as db:
            stmt = (
                select(MentalSkillsXCheckDB)
                .where(MentalSkillsXCheckDB.user_id == int(user_id))
                .order_by(MentalSkillsXCheckDB.created_at.desc(), MentalSkillsXCheckDB.id.desc())
            )
            if limit is not None:
                stmt = stmt.limit(limit)
            rows = db.execute(stmt).scalars().all()
            return [self._xcheck_to_dict(row) for row in rows]

    def get_latest_mental_skills_xcheck(self, user_id: int) -> dict | None:
        xchecks = self.get_user_mental_skills_xchecks(user_id, limit=1)
        return xchecks[0] if xchecks else None

    def create_control_circle(
        self,
        *,
        user_id: int,
        cant_control: list[str],
        can_influence: list[str],
        can_control: list[str],
        context: str | None = None,
        reflections: str | None = None,
    ) -> dict:
        with _unit_of_work() as db:
            row = ControlCircleDB(
                user_id=int(user_id),
                context=context,
                reflections=reflections,
                cant_control=list(cant_control),
                can_influence=list(can_influence),
                can_control=list(can_control),
            )
            db.add(row)
            db.commit()
            db.refresh(row)
            return self._control_circle_to_dict(row)

    def get_user_control_circles(self, user_id: int, limit: int | None = None) -> list[dict]:
        with _unit_of_work() as db:
            stmt = (
                select(ControlCircleDB)
                .where(ControlCircleDB.user_id == int(user_id))
                .order_by(ControlCircleDB.created_at.desc(), ControlCircleDB.id.desc())
            )
            if limit is not None:
                stmt = stmt.limit(limit)
            rows = db.execute(stmt).scalars().all()
            return [self._control_circle_to_dict(row) for row in rows]

    def get_latest_control_circle(self, user_id: int) -> dict | None:
        circles = self.get_user_control_circles(user_id, limit=1)
        return circles[0] if circles else None

    # Internals

    def _session_lock(self, session_id: int) -> threading.Lock:
        return self._session_locks[session_id % SESSION_LOCK_STRIPES]

    @staticmethod
    def _deactivate_routines(db: Session, user_id: int) -> None:
        db.execute(
            update(PreShotRoutineDB)
            .where(PreShotRoutineDB.user_id == user_id, PreShotRoutineDB.is_active.is_(True))
            .values(is_active=False)
        )

    @staticmethod
    def _user_to_dict(row: UserDB) -> dict:
        return {
            "id": row.id,
            "username": row.username,
            "email": row.email,
            "role": row.role,
            "subscriptionTier": row.subscription_tier,
            "isSubscribed": bool(row.is_subscribed),
            "bio": row.bio,
            "golfHandicap": row.golf_handicap,
            "dexterity": row.dexterity,
            "createdAt": _aware(row.created_at),
            "updatedAt": _aware(row.updated_at),
        }

    @staticmethod
    def _assessment_to_dict(row: AssessmentDB) -> dict:
        return {
            "id": row.id,
            "userId": row.user_id,
            "intensityScore": row.intensity_score,
            "decisionMakingScore": row.decision_making_score,
            "diversionsScore": row.diversions_score,
            "executionScore": row.execution_score,
            "totalScore": row.total_score,
            "createdAt": _aware(row.created_at),
        }

    @staticmethod
    def _chat_session_to_dict(row: ChatSessionDB) -> dict:
        return {
            "id": row.id,
            "userId": row.user_id,
            "messages": list(row.messages_json or []),
            "createdAt": _aware(row.created_at),
            "updatedAt": _aware(row.updated_at),
        }

    @staticmethod
    def _progress_to_dict(row: UserProgressDB) -> dict:
        return {
            "id": row.id,
            "userId": row.user_id,
            "date": _aware(row.date),
            "overallScore": row.overall_score,
            "redHeadInstances": row.red_head_instances,
            "blueHeadInstances": row.blue_head_instances,
            "techniquesUsed": list(row.techniques_used or []),
        }

    @staticmethod
    def _technique_to_dict(row: TechniqueDB) -> dict:
        return {
            "id": row.id,
            "name": row.name,
            "category": row.category,
            "description": row.description,
            "instructions": row.instructions,
            "duration": row.duration,
            "difficulty": row.difficulty,
        }

    @staticmethod
    def _scenario_to_dict(row: ScenarioDB) -> dict:
        return {
            "id": row.id,
            "title": row.title,
            "description": row.description,
            "pressureLevel": row.pressure_level,
            "category": row.category,
            "redHeadTriggers": list(row.red_head_triggers or []),
            "blueHeadTechniques": list(row.blue_head_techniques or []),
        }

    @staticmethod
    def _recommendation_to_dict(row: AiRecommendationDB) -> dict:
        return {
            "id": row.id,
            "userId": row.user_id,
            "recommendationType": row.recommendation_type,
            "priority": row.priority,
            "confidenceScore": row.confidence_score,
            "reasoning": row.reasoning,
            "personalizedMessage": row.personalized_message,
            "expectedOutcome": row.expected_outcome,
            "recommendationData": dict(row.recommendation_data or {}),
            "isActive": bool(row.is_active),
            "userFeedback": row.user_feedback,
            "feedbackComments": row.feedback_comments,
            "effectivenessMeasure": row.effectiveness_measure,
            "appliedAt": _aware(row.applied_at),
            "expiresAt": _aware(row.expires_at),
            "createdAt": _aware(row.created_at),
        }

    @staticmethod
    def _insight_to_dict(row: CoachingInsightDB) -> dict:
        return {
            "id": row.id,
            "userId": row.user_id,
            "insightType": row.insight_type,
            "category": row.category,
            "title": row.title,
            "description": row.description,
            "dataPoints": dict(row.data_points or {}),
            "actionableSteps": list(row.actionable_steps or []),
            "impact": row.impact,
            "timeframe": row.timeframe,
            "isAcknowledged": bool(row.is_acknowledged),
            "createdAt": _aware(row.created_at),
        }

    @staticmethod
    def _profile_to_dict(row: UserCoachingProfileDB) -> dict:
        return {
            "id": row.id,
            "userId": row.user_id,
            "preferredStyle": row.preferred_style,
            "focusAreas": list(row.focus_areas or []),
            "goals": list(row.goals or []),
            "triggers": list(row.triggers or []),
            "notes": row.notes,
            "updatedAt": _aware(row.updated_at),
        }

    @staticmethod
    def _engagement_to_dict(row: UserEngagementMetricDB) -> dict:
        return {
            "id": row.id,
            "userId": row.user_id,
            "date": row.date,
            "chatMessages": row.chat_messages,
            "techniquesPracticed": row.techniques_practiced,
            "assessmentsCompleted": row.assessments_completed,
            "sessionDurationMinutes": row.session_duration_minutes,
            "engagementScore": row.engagement_score,
        }

    @staticmethod
    def _routine_to_dict(row: PreShotRoutineDB) -> dict:
        return {
            "id": row.id,
            "userId": row.user_id,
            "name": row.name,
            "steps": list(row.steps or []),
            "totalDuration": row.total_duration,
            "isActive": bool(row.is_active),
            "createdAt": _aware(row.created_at),
        }

    @staticmethod
    def _xcheck_to_dict(row: MentalSkillsXCheckDB) -> dict:
        return {
            "id": row.id,
            "userId": row.user_id,
            "intensityScores": list(row.intensity_scores or []),
            "decisionMakingScores": list(row.decision_making_scores or []),
            "diversionsScores": list(row.diversions_scores or []),
            "executionScores": list(row.execution_scores or []),
            "context": row.context,
            "whatDidWell": row.what_did_well,
            "whatCouldDoBetter": row.what_could_do_better,
            "actionPlan": row.action_plan,
            "createdAt": _aware(row.created_at),
        }

    @staticmethod
    def _control_circle_to_dict(row: ControlCircleDB) -> dict:
        return {
            "id": row.id,
            "userId": row.user_id,
            "context": row.context,
            "reflections": row.reflections,
            "cantControl": list(row.cant_control or []),
            "canInfluence": list(row.can_influence or []),
            "canControl": list(row.can_control or []),
            "createdAt": _aware(row.created_at),
        }


store = CoachingStore()


def compute_engagement_score(
    *,
    chat_messages: int,
    techniques_practiced: int,
    assessments_completed: int,
    session_minutes: int,
) -> int:
    raw = chat_messages * 5 + techniques_practiced * 10 + assessments_completed * 20 + session_minutes
    return max(0, min(100, int(raw)))


def _jsonify(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(key): _jsonify(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonify(item) for item in value]
    return value


def _aware(value: datetime | None) -> datetime | None:
    # SQLite hands back naive datetimes; everything is stored in UTC.
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
