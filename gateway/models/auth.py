"""
Authentication models
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    """Login payload; missing fields are rejected as bad credentials"""
    email: Optional[str] = None
    password: Optional[str] = None


class LoginUser(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    email: str
    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")


class LoginResponse(BaseModel):
    token: str
    user: LoginUser
