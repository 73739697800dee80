"""
Settings Service - theme preference and notification toggles stored on the user row.
"""
from .base import (
    HTTPException, logging,
    get_db_session, UserORM, load_settings, save_settings
)

logger = logging.getLogger("stheneco")

THEMES = ("light", "dark")
DEFAULT_THEME = "dark"

DEFAULT_NOTIFICATIONS = {
    "email_notifications": True,
    "push_notifications": True,
    "workout_reminders": True,
    "progress_updates": True,
    "marketing_emails": False,
}


class SettingsService:
    """Service for per-user application settings."""

    def _get_user(self, db, user_id: str) -> UserORM:
        user = db.query(UserORM).filter(UserORM.id == user_id).first()
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    def get_settings(self, user_id: str) -> dict:
        db = get_db_session()
        try:
            settings = load_settings(self._get_user(db, user_id))
            notifications = dict(DEFAULT_NOTIFICATIONS)
            notifications.update(settings.get("notifications") or {})
            return {
                "theme": settings.get("theme", DEFAULT_THEME),
                "notifications": notifications,
            }
        finally:
            db.close()

    def set_theme(self, user_id: str, theme: str) -> dict:
        if theme not in THEMES:
            raise HTTPException(status_code=400, detail=f"Invalid theme: {theme}")
        db = get_db_session()
        try:
            user = self._get_user(db, user_id)
            settings = load_settings(user)
            settings["theme"] = theme
            save_settings(user, settings)
            db.commit()
            return {"theme": theme}
        finally:
            db.close()

    def toggle_theme(self, user_id: str) -> dict:
        current = self.get_settings(user_id)["theme"]
        return self.set_theme(user_id, "light" if current == "dark" else "dark")

    def update_notifications(self, user_id: str, updates: dict) -> dict:
        db = get_db_session()
        try:
            user = self._get_user(db, user_id)
            settings = load_settings(user)
            notifications = dict(DEFAULT_NOTIFICATIONS)
            notifications.update(settings.get("notifications") or {})
            for key, value in updates.items():
                if key in DEFAULT_NOTIFICATIONS:
                    notifications[key] = bool(value)
            settings["notifications"] = notifications
            save_settings(user, settings)
            db.commit()
            return notifications
        finally:
            db.close()


# Singleton instance
settings_service = SettingsService()

def get_settings_service() -> SettingsService:
    """Dependency injection helper."""
    return settings_service
