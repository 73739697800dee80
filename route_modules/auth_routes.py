"""
Auth Routes - sign up, sign in, sign out and the current session.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from auth import get_current_user, get_current_session, CurrentSession
from models import SignUpRequest, SignInRequest
from models_orm import UserORM
from service_modules.auth_service import AuthService, get_auth_service
from service_modules.base import user_to_dict

router = APIRouter()


def _token_response(result: dict) -> JSONResponse:
    response = JSONResponse(content=result)
    response.set_cookie(key="access_token", value=result["access_token"], httponly=True)
    return response


@router.post("/api/auth/signup")
async def sign_up(
    data: SignUpRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new athlete or trainer and sign them in."""
    return _token_response(service.sign_up(data.model_dump()))


@router.post("/api/auth/signin")
async def sign_in(
    data: SignInRequest,
    service: AuthService = Depends(get_auth_service)
):
    return _token_response(service.sign_in(data.email, data.password))


@router.post("/api/auth/signout")
async def sign_out(
    service: AuthService = Depends(get_auth_service),
    current_user: UserORM = Depends(get_current_user)
):
    response = JSONResponse(content=service.sign_out(current_user.id))
    response.delete_cookie("access_token")
    return response


@router.get("/api/auth/session")
async def get_session(session: CurrentSession = Depends(get_current_session)):
    """The signed-in user's profile with role and subscription flags."""
    return {
        "user": user_to_dict(session.user),
        "is_trainer": session.is_trainer(),
        "is_athlete": session.is_athlete(),
        "has_active_subscription": session.has_active_subscription(),
    }
