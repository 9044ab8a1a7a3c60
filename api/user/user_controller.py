from fastapi import Depends
from fastapi.responses import JSONResponse

from api.user.user_schema import RegisterRequest, LoginRequest
from helpers.response_helper import data_response, message_response
from services.auth_service import AuthService
from utils.deps import get_auth_service

# Controller functions for account operations.
# AuthError subclasses raised by the service are rendered by the app's
# exception handler.

# Step 1: register user and send OTP
async def register_user(
    req: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
) -> JSONResponse:
    """
    Creates the user and emails a login code.
    Registration returns no user data.
    """
    await service.register(req.email, req.full_name)
    return message_response("User created")

# Step 2: request a login code for an existing user
async def login_user(
    req: LoginRequest,
    service: AuthService = Depends(get_auth_service)
) -> JSONResponse:
    user = await service.login(req.email)
    return data_response(user.model_dump(mode="json"), "Check email for login code.")
