# schooldash/schemas/auth.py
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field

Role = Literal["admin", "teacher", "student", "parent"]


class User(BaseModel):
    id: int
    name: str
    email: str
    role: Role
    settings: Dict[str, Any] = Field(default_factory=dict)


class LoginResponse(BaseModel):
    user: User
    access_token: Optional[str] = None


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    password_confirmation: Optional[str] = None
    settings: Optional[Dict[str, Any]] = None
