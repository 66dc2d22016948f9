from datetime import date, datetime, timezone

from sqlalchemy import Boolean, Date, DateTime, Float, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from red2blue.db import Base


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class UserDB(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(16), default="student", nullable=False)
    subscription_tier: Mapped[str] = mapped_column(String(16), default="free", nullable=False)
    is_subscribed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    golf_handicap: Mapped[float | None] = mapped_column(Float, nullable=True)
    dexterity: Mapped[str | None] = mapped_column(String(16), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utc_now, onupdate=_utc_now, nullable=False)


class AssessmentDB(Base):
    __tablename__ = "assessments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, index=True, nullable=False)
    intensity_score: Mapped[int] = mapped_column(Integer, nullable=False)
    decision_making_score: Mapped[int] = mapped_column(Integer, nullable=False)
    diversions_score: Mapped[int] = mapped_column(Integer, nullable=False)
    execution_score: Mapped[int] = mapped_column(Integer, nullable=False)
    total_score: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utc_now, nullable=False)


class ChatSessionDB(Base):
    __tablename__ = "chat_sessions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, index=True, nullable=False)
    messages_json: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utc_now, onupdate=_utc_now, nullable=False)

    # Optimistic concurrency: a stale writer gets StaleDataError instead of overwriting.
    __mapper_args__ = {"version_id_col": version}


class UserProgressDB(Base):
    __tablename__ = "user_progress"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, index=True, nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    overall_score: Mapped[int] = mapped_column(Integer, nullable=False)
    red_head_instances: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    blue_head_instances: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    techniques_used: Mapped[list] = mapped_column(JSON, default=list, nullable=False)


class TechniqueDB(Base):
    __tablename__ = "techniques"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    category: Mapped[str] = mapped_column(String(32), index=True, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    instructions: Mapped[str] = mapped_column(Text, nullable=False)
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True)
    difficulty: Mapped[str] = mapped_column(String(16), nullable=False)


class ScenarioDB(Base):
    __tablename__ = "scenarios"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    pressure_level: Mapped[str] = mapped_column(String(16), index=True, nullable=False)
    category: Mapped[str] = mapped_column(String(32), nullable=False)
    red_head_triggers: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    blue_head_techniques: Mapped[list] = mapped_column(JSON, default=list, nullable=False)


class AiRecommendationDB(Base):
    __tablename__ = "ai_recommendations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, index=True, nullable=False)
    recommendation_type: Mapped[str] = mapped_column(String(32), nullable=False)
    priority: Mapped[int] = mapped_column(Integer, nullable=False)
    confidence_score: Mapped[int] = mapped_column(Integer, nullable=False)
    reasoning: Mapped[str] = mapped_column(Text, nullable=False)
    personalized_message: Mapped[str] = mapped_column(Text, nullable=False)
    expected_outcome: Mapped[str | None] = mapped_column(Text, nullable=True)
    recommendation_data: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    user_feedback: Mapped[int | None] = mapped_column(Integer, nullable=True)
    feedback_comments: Mapped[str | None] = mapped_column(Text, nullable=True)
    effectiveness_measure: Mapped[int | None] = mapped_column(Integer, nullable=True)
    applied_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utc_now, nullable=False)


class CoachingInsightDB(Base):
    __tablename__ = "coaching_insights"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, index=True, nullable=False)
    insight_type: Mapped[str] = mapped_column(String(32), nullable=False)
    category: Mapped[str] = mapped_column(String(64), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    data_points: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)
    actionable_steps: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    impact: Mapped[str | None] = mapped_column(String(32), nullable=True)
    timeframe: Mapped[str | None] = mapped_column(String(32), nullable=True)
    is_acknowledged: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utc_now, nullable=False)


class UserCoachingProfileDB(Base):
    __tablename__ = "user_coaching_profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, unique=True, nullable=False)
    preferred_style: Mapped[str | None] = mapped_column(String(64), nullable=True)
    focus_areas: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    goals: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    triggers: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utc_now, onupdate=_utc_now, nullable=False)


class UserEngagementMetricDB(Base):
    __tablename__ = "user_engagement_metrics"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_engagement_user_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, index=True, nullable=False)
    date: Mapped[date] = mapped_column(Date, nullable=False)
    chat_messages: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    techniques_practiced: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    assessments_completed: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    session_duration_minutes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    engagement_score: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


class PreShotRoutineDB(Base):
    __tablename__ = "pre_shot_routines"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    steps: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    total_duration: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utc_now, nullable=False)


class MentalSkillsXCheckDB(Base):
    __tablename__ = "mental_skills_xchecks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, index=True, nullable=False)
    intensity_scores: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    decision_making_scores: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    diversions_scores: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    execution_scores: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    context: Mapped[str | None] = mapped_column(Text, nullable=True)
    what_did_well: Mapped[str | None] = mapped_column(Text, nullable=True)
    what_could_do_better: Mapped[str | None] = mapped_column(Text, nullable=True)
    action_plan: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utc_now, nullable=False)


class ControlCircleDB(Base):
    __tablename__ = "control_circles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, index=True, nullable=False)
    context: Mapped[str | None] = mapped_column(Text, nullable=True)
    reflections: Mapped[str | None] = mapped_column(Text, nullable=True)
    cant_control: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    can_influence: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    can_control: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utc_now, nullable=False)
