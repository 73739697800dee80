"""
Chat Service - proxies coach chat to the LLM.

Every path returns a reply string; upstream failures become canned replies.
"""
from .base import logging
from . import openai_client
import json

logger = logging.getLogger("stheneco")

HISTORY_WINDOW = 5
DEFAULT_MAX_TOKENS = 150
DEFAULT_TEMPERATURE = 0.7
DEFAULT_PERSONALITY = "a helpful fitness coach"

NOT_CONFIGURED_REPLY = (
    "I'm here to help! OpenAI integration is not configured yet, but I can still assist you with "
    "general fitness guidance. For the best experience with personalized AI coaching, please "
    "configure the OpenAI API key in your server environment."
)
UPSTREAM_ERROR_REPLY = (
    "I'm having trouble connecting to my AI brain right now. Try asking me again, or consider "
    "starting a video call for live coaching!"
)
HICCUP_REPLY = (
    "I'm having a technical hiccup! Please try again, or start a video call for live coaching assistance."
)
EMPTY_REPLY = "I'm here to help with your fitness journey!"
DEFAULT_DESCRIPTION = "A personalized workout designed to help you reach your fitness goals."

# Checked in order; first keyword hit wins
FALLBACK_REPLIES = [
    (("workout", "exercise"),
     "I'd be happy to help you with your workout! For the best experience, make sure OpenAI is "
     "configured in your backend. In the meantime, you can generate AI workouts using our workout "
     "generator or start a video call for live coaching."),
    (("form", "technique"),
     "Form is crucial for effective and safe training! I recommend starting a video call where I can "
     "watch your technique in real-time and provide immediate feedback. You can also use our form "
     "analysis feature."),
    (("diet", "nutrition"),
     "Nutrition plays a huge role in fitness success! While I can provide general guidance, for "
     "detailed meal planning, consider our premium features or consult with a registered dietitian."),
    (("pain", "injury"),
     "If you're experiencing pain, please consult with a healthcare professional or physical "
     "therapist. I can help with general exercise modifications, but safety is always the top priority."),
]
DEFAULT_FALLBACK_REPLY = (
    "Thanks for your message! For the most personalized guidance, I recommend starting a video call "
    "where we can work together in real-time. You can also use our AI workout generator for custom "
    "training plans."
)


def build_system_message(personality: str = None) -> dict:
    return {
        "role": "system",
        "content": (
            f"You are {personality or DEFAULT_PERSONALITY}. You're knowledgeable about fitness, nutrition, "
            f"and exercise techniques. Keep responses concise (1-3 sentences), encouraging, and actionable. "
            f"Focus on safety and proper form. If someone asks about pain or injury, recommend consulting "
            f"a healthcare professional."
        ),
    }


class ChatService:
    """Service for coach chat completions."""

    def send_chat_message(self, messages: list, config: dict = None) -> str:
        config = config or {}
        try:
            api_key = openai_client.get_api_key()
            if not api_key:
                return NOT_CONFIGURED_REPLY

            payload = [build_system_message(config.get("trainerPersonality"))]
            payload += [{"role": m["role"], "content": m["content"]} for m in messages[-HISTORY_WINDOW:]]

            response = openai_client.chat_completion(
                api_key,
                payload,
                max_tokens=config.get("maxTokens") or DEFAULT_MAX_TOKENS,
                temperature=config.get("temperature") or DEFAULT_TEMPERATURE,
            )
            if not response.ok:
                logger.warning(f"OpenAI API error {response.status_code}: {response.text[:200]}")
                return UPSTREAM_ERROR_REPLY

            return openai_client.first_message_content(response.json()) or EMPTY_REPLY
        except Exception as e:
            logger.error(f"Error in chat completion: {e}")
            return HICCUP_REPLY

    def fallback_response(self, user_message: str) -> str:
        """Keyword-matched reply used when the chat backend cannot be reached at all."""
        lower = (user_message or "").lower()
        for keywords, reply in FALLBACK_REPLIES:
            if any(k in lower for k in keywords):
                return reply
        return DEFAULT_FALLBACK_REPLY

    def generate_workout_description(self, workout: dict) -> str:
        messages = [
            {
                "role": "system",
                "content": "You are a fitness expert. Create a motivating and informative description for a "
                           "workout based on the provided data. Keep it concise but inspiring.",
            },
            {"role": "user", "content": f"Create a description for this workout: {json.dumps(workout)}"},
        ]
        reply = self.send_chat_message(messages, {"maxTokens": 100, "temperature": 0.8})
        if reply in (NOT_CONFIGURED_REPLY, UPSTREAM_ERROR_REPLY, HICCUP_REPLY):
            return DEFAULT_DESCRIPTION
        return reply


# Singleton instance
chat_service = ChatService()

def get_chat_service() -> ChatService:
    """Dependency injection helper."""
    return chat_service
