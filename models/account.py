from enum import Enum
from typing import Optional

from .base import CamelModel


class Role(str, Enum):
    STUDENT = "student"
    ADMIN = "admin"


class Profile(CamelModel):
    id: str
    email: str
    name: str
    role: Role
    created_at: str


class SignupRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None


class AdminSignupRequest(SignupRequest):
    admin_secret: Optional[str] = None


class SignInRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None
