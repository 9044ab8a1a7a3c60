from fastapi import APIRouter, Depends

from api.otp.otp_controller import verify_otp_code
from api.otp.otp_schema import VerifyOtpRequest
from helpers.response_helper import ResponseEnvelope
from services.auth_service import AuthService
from utils.deps import get_auth_service

router = APIRouter(prefix="/otp", tags=["OTP"])


@router.post("/verify", response_model=ResponseEnvelope[str])
async def verify(
    req: VerifyOtpRequest,
    service: AuthService = Depends(get_auth_service)
):
    return await verify_otp_code(req, service)
