from pydantic import BaseModel, Field
from typing import List, Optional, Union

# --- AUTH / PROFILE ---
class SignUpRequest(BaseModel):
    email: str
    password: str
    name: str
    user_role: str = "athlete"  # athlete, trainer
    fitness_level: Optional[str] = "beginner"
    fitness_goals: List[str] = []
    # Trainer-only fields
    specialty: Optional[str] = None
    bio: Optional[str] = None
    experience_years: Optional[int] = None
    certifications: List[str] = []

class SignInRequest(BaseModel):
    email: str
    password: str

class UserProfile(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    user_role: str
    subscription_tier: str
    subscription_status: str
    created_at: Optional[str] = None
    fitness_level: Optional[str] = None
    fitness_goals: List[str] = []
    specialty: Optional[str] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    experience_years: Optional[int] = None
    certifications: List[str] = []
    hourly_rate: Optional[float] = None

class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserProfile

class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    user_role: Optional[str] = None
    bio: Optional[str] = None
    specialty: Optional[str] = None
    experience_years: Optional[int] = None
    fitness_level: Optional[str] = None
    fitness_goals: Optional[List[str]] = None
    certifications: Optional[List[str]] = None
    hourly_rate: Optional[float] = None
    avatar_url: Optional[str] = None

# --- SETTINGS ---
class ThemeUpdate(BaseModel):
    theme: str  # light, dark

class NotificationSettings(BaseModel):
    email_notifications: bool = True
    push_notifications: bool = True
    workout_reminders: bool = True
    progress_updates: bool = True
    marketing_emails: bool = False

# --- WORKOUT LIBRARY ---
class Exercise(BaseModel):
    name: str
    description: Optional[str] = None
    muscle_groups: List[str] = []
    equipment: Optional[str] = None
    sets: int = 3
    reps: Union[str, int] = "10"
    rest_time: int = 60
    form_tips: List[str] = []
    video_url: Optional[str] = None
    image_url: Optional[str] = None

class WorkoutCreate(BaseModel):
    week_number: int = 1
    day_number: int = 1
    title: str
    description: Optional[str] = None
    exercises: List[Exercise] = []
    estimated_duration: Optional[int] = None

class ProgramCreate(BaseModel):
    title: str
    description: Optional[str] = None
    category: str
    difficulty_level: str = "beginner"
    duration_weeks: int = 4
    workouts_per_week: int = 3
    equipment_needed: List[str] = []
    price: float = 0

# --- PROGRESS ---
class ProgressCreate(BaseModel):
    workout_id: Optional[str] = None
    program_id: Optional[str] = None
    exercises_completed: int = 0
    total_exercises: int = 0
    duration_minutes: int = 0
    calories_burned: Optional[int] = None
    notes: Optional[str] = None
    form_score: Optional[float] = None

# --- AI WORKOUTS ---
class WorkoutGoals(BaseModel):
    primary: str = ""
    secondary: List[str] = []
    timeAvailable: int = 30  # minutes
    fitnessLevel: str = "intermediate"  # beginner, intermediate, advanced
    equipment: List[str] = ["bodyweight"]
    targetMuscles: List[str] = []
    workoutType: str = "mixed"  # strength, cardio, hiit, flexibility, mixed

class GenerateWorkoutRequest(BaseModel):
    goals: WorkoutGoals
    userId: Optional[str] = None
    trainerId: Optional[str] = None

class WizardGoalsStep(BaseModel):
    primary: str
    workoutType: str = "mixed"
    secondary: List[str] = []
    clientId: Optional[str] = None  # Trainers only

class WizardConstraintsStep(BaseModel):
    equipment: List[str]
    timeAvailable: int = 30
    fitnessLevel: str = "intermediate"
    targetMuscles: List[str] = []

# --- CHAT ---
class ChatMessage(BaseModel):
    role: str  # user, assistant, system
    content: str

class ChatConfig(BaseModel):
    trainerPersonality: Optional[str] = None
    userContext: Optional[str] = None
    maxTokens: Optional[int] = None
    temperature: Optional[float] = None

class ChatRequest(BaseModel):
    messages: List[ChatMessage]
    config: ChatConfig = ChatConfig()

# --- VIDEO COACHING ---
class VideoApiKeyRequest(BaseModel):
    api_key: str

class ConversationConfig(BaseModel):
    replicaId: str
    conversationalContext: Optional[str] = None
    customGreeting: Optional[str] = None
    conversationName: Optional[str] = None

# --- FORM ANALYSIS ---
class FormAnalysisRequest(BaseModel):
    exercise: str = "squat"

# --- CLIENTS ---
class AddClientRequest(BaseModel):
    email: str

class ClientStatusUpdate(BaseModel):
    status: str  # active, inactive, pending

class ManageClientsRequest(BaseModel):
    action: str  # add, update, remove
    clientEmail: Optional[str] = None
    clientId: Optional[str] = None
    status: Optional[str] = None

# --- SUBSCRIPTIONS ---
class CheckoutRequest(BaseModel):
    priceId: str
    userId: Optional[str] = None

class SubscriptionUpdate(BaseModel):
    tier: str
    status: str

# --- SESSION PLAYER ---
class SessionCreate(BaseModel):
    workout_id: str

class SessionTick(BaseModel):
    seconds: int = Field(1, ge=1, le=3600)

class SessionSummary(BaseModel):
    message: str
    duration: int
    exercisesCompleted: int
    totalExercises: int
    estimatedCalories: int
