from fastapi import APIRouter, Depends

from api.user.user_controller import register_user, login_user
from api.user.user_schema import RegisterRequest, LoginRequest, UserResponse
from helpers.response_helper import ResponseEnvelope
from services.auth_service import AuthService
from utils.deps import get_auth_service

router = APIRouter(tags=["Authentication"])

# ─── Registration & Login ──────────────────────────────────────────────────────
@router.post(
    "/register",
    response_model=ResponseEnvelope
)
async def register(
    req: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """
    Create the user and send a login code to their email.
    """
    return await register_user(req, service)

@router.post(
    "/login",
    response_model=ResponseEnvelope[UserResponse]
)
async def login(
    req: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """
    Send a fresh login code to a registered email.
    """
    return await login_user(req, service)
