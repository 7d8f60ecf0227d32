"""Schemas for account API requests/responses."""

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    username: str = Field(..., max_length=64)
    password: str = Field(..., max_length=256)
    confirm_password: str = Field(..., max_length=256)


class LoginRequest(BaseModel):
    username: str
    password: str
    remember: bool = Field(default=False, description="Store the credentials for next time")


class LoginResponse(BaseModel):
    token: str
    username: str


class RememberedResponse(BaseModel):
    """Remembered credentials used to prefill the login form."""

    username: str | None = None
    password: str | None = None


class AddUserRequest(BaseModel):
    username: str = Field(..., max_length=64)
    password: str = Field(..., max_length=256)


class PasswordRequest(BaseModel):
    password: str = Field(..., max_length=256)


class UserResponse(BaseModel):
    username: str
    active: bool


class UserListResponse(BaseModel):
    users: list[UserResponse]
    total: int


class MessageResponse(BaseModel):
    message: str
