"""
Video Coach Service - per-user Tavus credentials and conversations.

The API key lives in the user's settings under "video". Test mode hands out a
demo room instead of calling Tavus. Signing out clears the key.
"""
from .base import (
    HTTPException, logging, datetime,
    get_db_session, UserORM, load_settings, save_settings
)
from .auth_service import auth_service, SIGNED_OUT
import os
import requests

logger = logging.getLogger("stheneco")

TAVUS_API_URL = os.environ.get("TAVUS_API_URL", "https://tavusapi.com/v2")
REQUEST_TIMEOUT = 15
DEMO_ROOM_URL = "https://demo.daily.co/hello"

INVALID_KEY_MESSAGE = "Invalid API key or authentication failed"
EXPIRED_KEY_MESSAGE = "Authentication expired. Please re-enter your API key."
CONVERSATION_FAILED_MESSAGE = (
    "Failed to create video conversation. Please check your Tavus API key or try test mode."
)

TRAINER_CONFIGS = {
    "carter": {
        "replicaId": "rca8a38779a8",
        "name": "Carter",
        "specialty": "Strength Training & Powerlifting",
        "defaultContext": (
            "Carter is a certified strength and conditioning specialist who has helped hundreds of people "
            "discover their strength potential. He competed in powerlifting for 5 years and now focuses on "
            "coaching others, with an emphasis on movement patterns and form correction."
        ),
        "defaultGreeting": (
            "Hey there! I'm Carter, your strength coach. I'm excited to help you build some serious "
            "strength today. What would you like to work on?"
        ),
    },
    "james": {
        "replicaId": "r92debe21318",
        "name": "James",
        "specialty": "Functional Fitness & Athletic Performance",
        "defaultContext": (
            "James is a certified functional movement screen specialist and performance coach who works "
            "with athletes and everyday people alike. He has a background in sports science and focuses on "
            "training that improves quality of life and athletic performance."
        ),
        "defaultGreeting": (
            "What's up! I'm James, your functional fitness coach. Ready to move better and perform at "
            "your best? Let's get moving!"
        ),
    },
    "anna": {
        "replicaId": "r6ae5b6efc9d",
        "name": "Anna",
        "specialty": "HIIT, Cardio & Weight Loss",
        "defaultContext": (
            "Anna is a certified personal trainer and group fitness instructor who specializes in "
            "high-energy workouts and weight management. She is an expert in HIIT programming and "
            "metabolic training."
        ),
        "defaultGreeting": (
            "Hey fitness warrior! I'm Anna, and I'm SO excited to help you crush your goals today. "
            "Are you ready to feel amazing and get your heart pumping?"
        ),
    },
}

DEFAULT_VIDEO_STATE = {"api_key": None, "is_authenticated": False, "use_test_mode": True}


def get_trainer_config(replica_id: str):
    """Find a trainer persona by replica id."""
    for key, config in TRAINER_CONFIGS.items():
        if config["replicaId"] == replica_id:
            return {"key": key, **config}
    return None


def _headers(api_key: str) -> dict:
    return {"Content-Type": "application/json", "x-api-key": api_key or ""}


def _conversation_from_response(data: dict) -> dict:
    return {
        "conversationId": data.get("conversation_id"),
        "conversationUrl": data.get("conversation_url"),
        "status": data.get("status") or "active",
    }


class VideoCoachService:
    """Service for the per-user video coaching credentials."""

    def __init__(self):
        self._restored = set()

    # --- STATE ---

    def _load_state(self, user_id: str) -> dict:
        db = get_db_session()
        try:
            user = db.query(UserORM).filter(UserORM.id == user_id).first()
            if not user:
                raise HTTPException(status_code=404, detail="User not found")
            return {**DEFAULT_VIDEO_STATE, **(load_settings(user).get("video") or {})}
        finally:
            db.close()

    def _save_state(self, user_id: str, state: dict):
        db = get_db_session()
        try:
            user = db.query(UserORM).filter(UserORM.id == user_id).first()
            if not user:
                raise HTTPException(status_code=404, detail="User not found")
            settings = load_settings(user)
            settings["video"] = state
            save_settings(user, settings)
            db.commit()
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            raise HTTPException(status_code=500, detail=f"Failed to save video settings: {str(e)}")
        finally:
            db.close()

    def _public_state(self, state: dict) -> dict:
        return {
            "has_api_key": bool(state.get("api_key")),
            "is_authenticated": state["is_authenticated"],
            "use_test_mode": state["use_test_mode"],
        }

    def _reset(self, user_id: str) -> dict:
        state = dict(DEFAULT_VIDEO_STATE)
        self._save_state(user_id, state)
        return state

    # --- AUTHENTICATION ---

    def test_authentication(self, api_key: str) -> bool:
        """Probe the replicas endpoint. Only a 401 or a network failure means invalid."""
        try:
            response = requests.get(f"{TAVUS_API_URL}/replicas", headers=_headers(api_key), timeout=REQUEST_TIMEOUT)
        except requests.RequestException as e:
            logger.error(f"Error testing Tavus authentication: {e}")
            return False

        if response.status_code == 401:
            return False
        if not response.ok:
            logger.warning(f"Tavus API returned non-2xx status: {response.status_code}")
        return True

    def authenticate(self, user_id: str, api_key: str) -> dict:
        api_key = (api_key or "").strip()
        if not api_key:
            raise HTTPException(status_code=400, detail="API key is required")

        if self.test_authentication(api_key):
            state = {"api_key": api_key, "is_authenticated": True, "use_test_mode": False}
            self._save_state(user_id, state)
            self._restored.add(user_id)
            logger.info(f"Video API key validated for user {user_id}")
            return {**self._public_state(state), "error": None}

        state = self._reset(user_id)
        return {**self._public_state(state), "error": INVALID_KEY_MESSAGE}

    def restore(self, user_id: str) -> dict:
        """Re-validate a stored key once per process, dropping it if it no longer works."""
        state = self._load_state(user_id)
        if user_id not in self._restored:
            self._restored.add(user_id)
            if state.get("api_key"):
                if self.test_authentication(state["api_key"]):
                    state["is_authenticated"] = True
                    self._save_state(user_id, state)
                else:
                    logger.info(f"Stored video API key for {user_id} is no longer valid")
                    state = self._reset(user_id)
        return self._public_state(state)

    def toggle_test_mode(self, user_id: str) -> dict:
        state = self._load_state(user_id)
        state["use_test_mode"] = not state["use_test_mode"]
        self._save_state(user_id, state)
        return self._public_state(state)

    def logout(self, user_id: str) -> dict:
        self._restored.discard(user_id)
        return self._public_state(self._reset(user_id))

    def _on_auth_event(self, event: str, user_id: str):
        if event == SIGNED_OUT:
            self.logout(user_id)

    # --- CONVERSATIONS ---

    def create_conversation(self, user_id: str, config: dict) -> dict:
        state = self._load_state(user_id)
        if state["use_test_mode"]:
            millis = int(datetime.utcnow().timestamp() * 1000)
            return {
                "conversationId": f"test_conversation_{millis}",
                "conversationUrl": DEMO_ROOM_URL,
                "status": "active",
                "test_mode": True,
            }

        body = {
            "replica_id": config.get("replicaId"),
            "conversation_name": config.get("conversationName")
                                 or f"Custom Fitness Chat {datetime.utcnow().strftime('%Y-%m-%d %H:%M:%S')}",
            "callback_url": os.environ.get("APP_URL", "http://localhost:9007") + "/api/video/webhook",
        }
        if config.get("conversationalContext"):
            body["conversational_context"] = config["conversationalContext"]
        if config.get("customGreeting"):
            body["custom_greeting"] = config["customGreeting"]

        try:
            response = requests.post(
                f"{TAVUS_API_URL}/conversations",
                headers=_headers(state["api_key"]),
                json=body,
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as e:
            logger.error(f"Error creating Tavus conversation: {e}")
            raise HTTPException(status_code=502, detail=CONVERSATION_FAILED_MESSAGE)

        if response.status_code == 401:
            logger.warning(f"Video API key rejected for user {user_id}, switching to test mode")
            self._reset(user_id)
            raise HTTPException(status_code=401, detail=EXPIRED_KEY_MESSAGE)
        if not response.ok:
            logger.error(f"Failed to create conversation: {response.status_code} {response.text[:200]}")
            raise HTTPException(status_code=502, detail=CONVERSATION_FAILED_MESSAGE)

        conversation = _conversation_from_response(response.json())
        logger.info(f"Created video conversation {conversation['conversationId']} for user {user_id}")
        return {**conversation, "test_mode": False}

    def end_conversation(self, user_id: str, conversation_id: str) -> dict:
        state = self._load_state(user_id)
        if state["use_test_mode"] or conversation_id.startswith("test_conversation_"):
            return {"status": "success"}
        try:
            response = requests.delete(
                f"{TAVUS_API_URL}/conversations/{conversation_id}",
                headers=_headers(state["api_key"]),
                timeout=REQUEST_TIMEOUT,
            )
            if not response.ok and response.status_code != 404:
                logger.warning(f"Failed to end conversation {conversation_id}: {response.status_code}")
        except requests.RequestException as e:
            logger.warning(f"Error ending conversation {conversation_id}: {e}")
        return {"status": "success"}

    def get_conversation(self, user_id: str, conversation_id: str):
        state = self._load_state(user_id)
        try:
            response = requests.get(
                f"{TAVUS_API_URL}/conversations/{conversation_id}",
                headers=_headers(state["api_key"]),
                timeout=REQUEST_TIMEOUT,
            )
            if response.ok:
                return _conversation_from_response(response.json())
        except requests.RequestException as e:
            logger.warning(f"Error fetching conversation {conversation_id}: {e}")
        return None


# Singleton instance
video_service = VideoCoachService()
auth_service.on_auth_state_change(video_service._on_auth_event)

def get_video_service() -> VideoCoachService:
    """Dependency injection helper."""
    return video_service
