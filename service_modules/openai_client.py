"""
Minimal OpenAI chat-completions client over REST.
"""
import os
import requests

OPENAI_API_URL = os.environ.get("OPENAI_API_URL", "https://api.openai.com/v1/chat/completions")
DEFAULT_MODEL = os.environ.get("OPENAI_MODEL", "gpt-3.5-turbo")
REQUEST_TIMEOUT = 30


def get_api_key():
    """Return the configured key, or None when it is missing or a placeholder."""
    api_key = os.environ.get("OPENAI_API_KEY")
    if not api_key or api_key.startswith("your_"):
        return None
    return api_key


def chat_completion(api_key: str, messages: list, max_tokens: int, temperature: float) -> requests.Response:
    """POST a chat completion. Callers inspect `response.ok` themselves."""
    return requests.post(
        OPENAI_API_URL,
        headers={
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        },
        json={
            "model": DEFAULT_MODEL,
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
        },
        timeout=REQUEST_TIMEOUT,
    )


def first_message_content(data: dict):
    """Extract choices[0].message.content, or None."""
    choices = data.get("choices") or []
    if not choices:
        return None
    return (choices[0].get("message") or {}).get("content")
