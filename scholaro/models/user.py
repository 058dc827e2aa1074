from enum import Enum

from pydantic import EmailStr, Field

from .base import CamelModel


class UserRole(str, Enum):
    ADMIN = "admin"
    USER = "user"


class UserCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=8, max_length=72)


class UserLogin(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class User(CamelModel):
    """Public projection of an account; never carries the password hash."""

    id: str
    name: str
    email: EmailStr
    role: UserRole = UserRole.USER


class RegisterResponse(CamelModel):
    message: str
    user: User


class Token(CamelModel):
    token: str
    token_type: str = "bearer"
    user: User
