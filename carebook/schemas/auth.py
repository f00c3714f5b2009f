from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional, List
from datetime import datetime

from ..core.security import UserRole

class UserRegister(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=7, description="Password must be at least 7 characters")
    role: UserRole

class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=7)

class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: UserRole

class UserDetailResponse(UserResponse):
    created_at: Optional[datetime] = None

class UserListResponse(BaseModel):
    users: List[UserDetailResponse]
    count: int

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse
