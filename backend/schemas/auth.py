"""
Pydantic schemas for authentication endpoints.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320, examples=["staff@example.com"])
    password: str = Field(..., min_length=6, max_length=200)


class LoginData(BaseModel):
    user_id: str
    email: Optional[str] = None
    access_token: str = Field(..., description="Supabase Auth access token")
    local_token: Optional[str] = Field(
        None,
        description="Self-issued HS256 token (only when JWT_SECRET is configured)"
    )
    token_type: str = "bearer"


class LoginResponse(BaseModel):
    success: bool = True
    data: LoginData


class AuthMe(BaseModel):
    user_id: str = Field(..., description="User id (from the token's 'sub' claim)")
    email: Optional[str] = None
    scheme: Literal["supabase", "local"]


class AuthMeResponse(BaseModel):
    success: bool = True
    data: AuthMe
