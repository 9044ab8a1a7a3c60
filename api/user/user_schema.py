from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

# ----- Request Schemas -----
# Fields stay optional strings: the auth flow validates them itself so it can
# report every failing field at once.
class RegisterRequest(BaseModel):
    email: Optional[str] = Field(
        None,
        description="A valid email address"
    )
    full_name: Optional[str] = Field(
        None,
        description="Display name, at least 3 characters"
    )


class LoginRequest(BaseModel):
    email: Optional[str] = Field(
        None, description="Registered user email"
    )

# ----- Response Schema -----
class UserResponse(BaseModel):
    id: str
    email: str
    full_name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
