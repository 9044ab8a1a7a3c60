from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class OtpRecord(BaseModel):
    id: str
    user_id: str
    code: str
    expiry_time: datetime

    model_config = ConfigDict(from_attributes=True)


class VerifyOtpRequest(BaseModel):
    user_id: Optional[str] = Field(
        None, description="Id returned by the login call"
    )
    otp: Optional[str] = Field(
        None, description="6-digit code received by email"
    )
