"""
Profile Routes - the user's own profile and app settings (theme, notifications).
"""
from fastapi import APIRouter, Depends
from auth import get_current_user
from models import ProfileUpdate, ThemeUpdate, NotificationSettings
from models_orm import UserORM
from service_modules.auth_service import AuthService, get_auth_service
from service_modules.settings_service import SettingsService, get_settings_service

router = APIRouter()


@router.get("/api/profile")
async def get_profile(
    service: AuthService = Depends(get_auth_service),
    current_user: UserORM = Depends(get_current_user)
):
    return service.get_profile(current_user.id)


@router.put("/api/profile")
async def update_profile(
    updates: ProfileUpdate,
    service: AuthService = Depends(get_auth_service),
    current_user: UserORM = Depends(get_current_user)
):
    """Partial profile update; only fields sent in the body change."""
    return service.update_profile(current_user.id, updates.model_dump(exclude_unset=True))


@router.get("/api/settings")
async def get_settings(
    service: SettingsService = Depends(get_settings_service),
    current_user: UserORM = Depends(get_current_user)
):
    return service.get_settings(current_user.id)


@router.put("/api/settings/theme")
async def set_theme(
    data: ThemeUpdate,
    service: SettingsService = Depends(get_settings_service),
    current_user: UserORM = Depends(get_current_user)
):
    return service.set_theme(current_user.id, data.theme)


@router.post("/api/settings/theme/toggle")
async def toggle_theme(
    service: SettingsService = Depends(get_settings_service),
    current_user: UserORM = Depends(get_current_user)
):
    return service.toggle_theme(current_user.id)


@router.put("/api/settings/notifications")
async def update_notifications(
    data: NotificationSettings,
    service: SettingsService = Depends(get_settings_service),
    current_user: UserORM = Depends(get_current_user)
):
    return service.update_notifications(current_user.id, data.model_dump(exclude_unset=True))
