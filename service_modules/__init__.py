"""
Services package - one module per concern.

Each module exposes a service class, a singleton instance and a
`get_*_service` dependency helper for the routes.
"""
from .base import *
from .auth_service import AuthService, auth_service, get_auth_service
from .settings_service import SettingsService, settings_service, get_settings_service
from .workout_service import WorkoutService, workout_service, get_workout_service
from .progress_service import ProgressService, progress_service, get_progress_service
from .ai_workout_service import AIWorkoutService, ai_workout_service, get_ai_workout_service
from .generator_wizard import GeneratorWizardService, generator_wizard_service, get_generator_wizard_service
from .session_player import SessionPlayerService, session_player_service, get_session_player_service
from .form_analysis_service import FormAnalysisService, form_analysis_service, get_form_analysis_service
from .chat_service import ChatService, chat_service, get_chat_service
from .video_service import VideoCoachService, video_service, get_video_service
from .client_service import ClientService, client_service, get_client_service
from .subscription_service import SubscriptionService, subscription_service, get_subscription_service

__all__ = [
    'AuthService', 'auth_service', 'get_auth_service',
    'SettingsService', 'settings_service', 'get_settings_service',
    'WorkoutService', 'workout_service', 'get_workout_service',
    'ProgressService', 'progress_service', 'get_progress_service',
    'AIWorkoutService', 'ai_workout_service', 'get_ai_workout_service',
    'GeneratorWizardService', 'generator_wizard_service', 'get_generator_wizard_service',
    'SessionPlayerService', 'session_player_service', 'get_session_player_service',
    'FormAnalysisService', 'form_analysis_service', 'get_form_analysis_service',
    'ChatService', 'chat_service', 'get_chat_service',
    'VideoCoachService', 'video_service', 'get_video_service',
    'ClientService', 'client_service', 'get_client_service',
    'SubscriptionService', 'subscription_service', 'get_subscription_service',
]
