from fastapi import Depends
from fastapi.responses import JSONResponse

from api.otp.otp_schema import VerifyOtpRequest
from helpers.response_helper import data_response
from services.auth_service import AuthService
from utils.deps import get_auth_service


async def verify_otp_code(
    req: VerifyOtpRequest,
    service: AuthService = Depends(get_auth_service)
) -> JSONResponse:
    """
    Verifies the emailed code. No session token is issued yet.
    """
    await service.verify_otp(req.user_id, req.otp)
    return data_response("", "Login successful.")
