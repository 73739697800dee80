from sqlalchemy import Column, Integer, String, Boolean, Float, ForeignKey, Text, UniqueConstraint
from database import Base
from datetime import datetime

# --- CORE MODELS ---

class UserORM(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, index=True)
    email = Column(String, unique=True, index=True)  # Always stored lowercase
    hashed_password = Column(String)
    name = Column(String)
    user_role = Column(String, index=True, default="athlete")  # athlete, trainer
    created_at = Column(String, default=lambda: datetime.utcnow().isoformat())
    updated_at = Column(String, nullable=True)
    settings = Column(String, nullable=True)  # JSON string (theme, notifications, video coaching)
    avatar_url = Column(String, nullable=True)

    # Subscription
    subscription_tier = Column(String, default="free")  # free, premium, pro
    subscription_status = Column(String, default="active")  # active, canceled, expired
    stripe_customer_id = Column(String, nullable=True)

    # Athlete profile
    fitness_level = Column(String, nullable=True)  # beginner, intermediate, advanced; unset for trainers
    fitness_goals = Column(Text, default="[]")  # JSON array of goal strings

    # Trainer profile
    specialty = Column(String, nullable=True)
    bio = Column(Text, nullable=True)
    experience_years = Column(Integer, nullable=True)
    certifications = Column(Text, nullable=True)  # JSON array
    hourly_rate = Column(Float, nullable=True)

# --- WORKOUT LIBRARY ---

class WorkoutProgramORM(Base):
    __tablename__ = "workout_programs"

    id = Column(String, primary_key=True, index=True)
    title = Column(String, index=True)
    description = Column(Text, nullable=True)
    trainer_id = Column(String, ForeignKey("users.id"), index=True)
    category = Column(String, index=True)  # strength, cardio, hiit, yoga, flexibility
    difficulty_level = Column(String)  # beginner, intermediate, advanced
    duration_weeks = Column(Integer, default=4)
    workouts_per_week = Column(Integer, default=3)
    equipment_needed = Column(Text, default="[]")  # JSON array
    price = Column(Float, default=0)
    is_active = Column(Boolean, default=True, index=True)
    created_at = Column(String, default=lambda: datetime.utcnow().isoformat())
    updated_at = Column(String, nullable=True)

class WorkoutORM(Base):
    __tablename__ = "workouts"

    id = Column(String, primary_key=True, index=True)
    program_id = Column(String, ForeignKey("workout_programs.id"), index=True)
    week_number = Column(Integer, default=1)
    day_number = Column(Integer, default=1)
    title = Column(String)
    description = Column(Text, nullable=True)

    # Store exercises as JSON string (Schema: list of dicts)
    exercises_json = Column(Text, default="[]")

    estimated_duration = Column(Integer, nullable=True)  # minutes
    created_at = Column(String, default=lambda: datetime.utcnow().isoformat())

# --- PROGRESS ---

class UserProgressORM(Base):
    """One row per completed workout. Never updated after insert."""
    __tablename__ = "user_progress"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("users.id"), index=True)
    workout_id = Column(String, nullable=True)
    program_id = Column(String, nullable=True, index=True)
    completed_at = Column(String, default=lambda: datetime.utcnow().isoformat(), index=True)
    exercises_completed = Column(Integer, default=0)
    total_exercises = Column(Integer, default=0)
    duration_minutes = Column(Integer, default=0)
    calories_burned = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)
    form_score = Column(Float, nullable=True)

class AIGeneratedWorkoutORM(Base):
    __tablename__ = "ai_generated_workouts"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("users.id"), index=True)
    trainer_id = Column(String, ForeignKey("users.id"), index=True, nullable=True)
    title = Column(String)
    description = Column(Text, nullable=True)
    goals = Column(Text, default="[]")  # JSON array
    fitness_level = Column(String)
    duration_minutes = Column(Integer)
    equipment_needed = Column(Text, default="[]")  # JSON array
    workout_structure = Column(Text)  # Generated document, stored verbatim as JSON
    generated_prompt = Column(Text, nullable=True)  # JSON of the goals that produced it
    is_custom = Column(Boolean, default=True)
    created_at = Column(String, default=lambda: datetime.utcnow().isoformat(), index=True)

class FormAnalysisORM(Base):
    __tablename__ = "form_analyses"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("users.id"), index=True)
    exercise_key = Column(String)
    overall_score = Column(Integer)
    corrections = Column(Text)  # JSON array
    good_points = Column(Text)  # JSON array
    suggestions = Column(Text)  # JSON array
    created_at = Column(String, default=lambda: datetime.utcnow().isoformat())

# --- TRAINER / CLIENT ---

class TrainerClientORM(Base):
    __tablename__ = "trainer_clients"
    __table_args__ = (UniqueConstraint("trainer_id", "client_id", name="uq_trainer_client"),)

    id = Column(String, primary_key=True, index=True)
    trainer_id = Column(String, ForeignKey("users.id"), index=True)
    client_id = Column(String, ForeignKey("users.id"), index=True)
    status = Column(String, default="active")  # active, inactive, pending
    created_at = Column(String, default=lambda: datetime.utcnow().isoformat())
