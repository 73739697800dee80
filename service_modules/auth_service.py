"""
Auth Service - handles sign up, sign in, profile updates and auth state events.
"""
from .base import (
    HTTPException, uuid, json, logging, datetime,
    get_db_session, UserORM, user_to_dict
)
from auth import verify_password, get_password_hash, create_access_token

logger = logging.getLogger("stheneco")

VALID_ROLES = ("athlete", "trainer")
VALID_LEVELS = ("beginner", "intermediate", "advanced")
MIN_PASSWORD_LENGTH = 6

# Auth state events
SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"
USER_UPDATED = "USER_UPDATED"

EDITABLE_FIELDS = (
    "name", "user_role", "bio", "specialty", "experience_years",
    "fitness_level", "fitness_goals", "certifications", "hourly_rate", "avatar_url"
)
JSON_FIELDS = ("fitness_goals", "certifications")


class AuthService:
    """Service for managing authentication, profiles and auth state listeners."""

    def __init__(self):
        self._listeners = []

    # --- AUTH STATE LISTENERS ---

    def on_auth_state_change(self, callback):
        """Register `callback(event, user_id)`. Returns a function that unsubscribes it."""
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _emit(self, event: str, user_id: str):
        logger.info(f"Auth state changed: {event} {user_id}")
        for listener in self._listeners[:]:
            try:
                listener(event, user_id)
            except Exception as e:
                logger.error(f"Auth listener failed on {event}: {e}")

    # --- SIGN UP / SIGN IN ---

    def sign_up(self, data: dict) -> dict:
        """Create a user and its profile. Trainer and athlete fields are mutually exclusive."""
        email = (data.get("email") or "").strip().lower()
        password = data.get("password") or ""
        role = data.get("user_role") or "athlete"

        if "@" not in email:
            raise HTTPException(status_code=400, detail="A valid email address is required")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise HTTPException(status_code=400, detail=f"Password should be at least {MIN_PASSWORD_LENGTH} characters")
        if role not in VALID_ROLES:
            raise HTTPException(status_code=400, detail=f"Invalid role: {role}")

        db = get_db_session()
        try:
            if db.query(UserORM).filter(UserORM.email == email).first():
                raise HTTPException(status_code=400, detail="Email already registered")

            user = UserORM(
                id=str(uuid.uuid4()),
                email=email,
                hashed_password=get_password_hash(password),
                name=data.get("name") or email.split("@")[0],
                user_role=role,
                subscription_tier="free",
                subscription_status="active",
                created_at=datetime.utcnow().isoformat()
            )

            if role == "trainer":
                user.specialty = data.get("specialty")
                user.bio = data.get("bio")
                user.experience_years = data.get("experience_years")
                user.certifications = json.dumps(data.get("certifications") or [])
                user.fitness_level = None
                user.fitness_goals = "[]"
            else:
                level = data.get("fitness_level") or "beginner"
                if level not in VALID_LEVELS:
                    raise HTTPException(status_code=400, detail=f"Invalid fitness level: {level}")
                user.fitness_level = level
                user.fitness_goals = json.dumps(data.get("fitness_goals") or [])

            db.add(user)
            db.commit()
            db.refresh(user)

            logger.info(f"Signed up {role} {user.id}")
            result = self._session_payload(user)
        except HTTPException:
            db.rollback()
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Sign up failed for {email}: {e}")
            raise HTTPException(status_code=500, detail=f"Sign up failed: {str(e)}")
        finally:
            db.close()

        self._emit(SIGNED_IN, result["user"]["id"])
        return result

    def sign_in(self, email: str, password: str) -> dict:
        db = get_db_session()
        try:
            user = db.query(UserORM).filter(UserORM.email == (email or "").strip().lower()).first()
            if not user or not verify_password(password, user.hashed_password):
                raise HTTPException(status_code=401, detail="Invalid email or password")
            result = self._session_payload(user)
        finally:
            db.close()

        self._emit(SIGNED_IN, result["user"]["id"])
        return result

    def sign_out(self, user_id: str) -> dict:
        self._emit(SIGNED_OUT, user_id)
        return {"status": "success"}

    def _session_payload(self, user: UserORM) -> dict:
        token = create_access_token({"sub": user.id, "role": user.user_role})
        return {"access_token": token, "token_type": "bearer", "user": user_to_dict(user)}

    # --- PROFILE ---

    def get_profile(self, user_id: str) -> dict:
        db = get_db_session()
        try:
            user = db.query(UserORM).filter(UserORM.id == user_id).first()
            if not user:
                raise HTTPException(status_code=404, detail="User profile not found")
            return user_to_dict(user)
        finally:
            db.close()

    def update_profile(self, user_id: str, updates: dict) -> dict:
        """Apply a partial update of the editable profile fields."""
        db = get_db_session()
        try:
            user = db.query(UserORM).filter(UserORM.id == user_id).first()
            if not user:
                raise HTTPException(status_code=404, detail="User profile not found")

            if "user_role" in updates and updates["user_role"] not in VALID_ROLES:
                raise HTTPException(status_code=400, detail=f"Invalid role: {updates['user_role']}")
            if "fitness_level" in updates and updates["fitness_level"] not in VALID_LEVELS:
                raise HTTPException(status_code=400, detail=f"Invalid fitness level: {updates['fitness_level']}")

            for field in EDITABLE_FIELDS:
                if field not in updates:
                    continue
                value = updates[field]
                if field in JSON_FIELDS:
                    value = json.dumps(value or [])
                setattr(user, field, value)

            user.updated_at = datetime.utcnow().isoformat()
            db.commit()
            db.refresh(user)
            result = user_to_dict(user)
        except HTTPException:
            db.rollback()
            raise
        except Exception as e:
            db.rollback()
            raise HTTPException(status_code=500, detail=f"Failed to update profile: {str(e)}")
        finally:
            db.close()

        self._emit(USER_UPDATED, user_id)
        return result


# Singleton instance
auth_service = AuthService()

def get_auth_service() -> AuthService:
    """Dependency injection helper."""
    return auth_service
