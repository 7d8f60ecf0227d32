"""Account and user management API router."""

import logging

from fastapi import APIRouter, Depends, Header, HTTPException

from ..accounts import AccountError, AccountService, UserRecord
from ..accounts.schemas import (
    AddUserRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    PasswordRequest,
    RegisterRequest,
    RememberedResponse,
    UserListResponse,
    UserResponse,
)
from .deps import get_accounts, require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/accounts", tags=["accounts"])


def _user_response(user: UserRecord) -> UserResponse:
    return UserResponse(username=user.username, active=user.active)


def _reject(e: AccountError) -> HTTPException:
    logger.info(f"Account operation rejected: {e.message}")
    return HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/register", response_model=MessageResponse, status_code=201)
async def register(request: RegisterRequest, accounts: AccountService = Depends(get_accounts)):
    """Register a new account. It stays inactive until an administrator activates it."""
    try:
        await accounts.register(request.username, request.password, request.confirm_password)
    except AccountError as e:
        raise _reject(e)
    return MessageResponse(
        message="Registration successful! Please wait for an administrator to activate your account."
    )


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest, accounts: AccountService = Depends(get_accounts)):
    """Log in and receive a session token for the X-Session-Token header."""
    try:
        token = await accounts.login(request.username, request.password, request.remember)
    except AccountError as e:
        raise _reject(e)
    return LoginResponse(token=token, username=request.username)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    x_session_token: str | None = Header(default=None),
    accounts: AccountService = Depends(get_accounts),
):
    if x_session_token:
        accounts.logout(x_session_token)
    return MessageResponse(message="Logged out")


@router.get("/remembered", response_model=RememberedResponse)
async def get_remembered(accounts: AccountService = Depends(get_accounts)):
    """Credentials saved with "remember me", for prefilling the login form."""
    remembered = await accounts.remembered()
    if remembered is None:
        return RememberedResponse()
    return RememberedResponse(username=remembered.username, password=remembered.password)


@router.get("/users", response_model=UserListResponse)
async def list_users(
    _: str = Depends(require_admin),
    accounts: AccountService = Depends(get_accounts),
):
    users = [_user_response(u) for u in await accounts.list_users()]
    return UserListResponse(users=users, total=len(users))


@router.post("/users", response_model=UserResponse, status_code=201)
async def add_user(
    request: AddUserRequest,
    _: str = Depends(require_admin),
    accounts: AccountService = Depends(get_accounts),
):
    """Add an account on behalf of a user. It must still be activated."""
    try:
        user = await accounts.add_user(request.username, request.password)
    except AccountError as e:
        raise _reject(e)
    return _user_response(user)


@router.post("/users/{username}/toggle", response_model=UserResponse)
async def toggle_user(
    username: str,
    _: str = Depends(require_admin),
    accounts: AccountService = Depends(get_accounts),
):
    """Activate or deactivate an account."""
    try:
        user = await accounts.toggle_active(username)
    except AccountError as e:
        raise _reject(e)
    return _user_response(user)


@router.put("/users/{username}/password", response_model=MessageResponse)
async def set_password(
    username: str,
    request: PasswordRequest,
    _: str = Depends(require_admin),
    accounts: AccountService = Depends(get_accounts),
):
    try:
        await accounts.set_password(username, request.password)
    except AccountError as e:
        raise _reject(e)
    return MessageResponse(message=f"Password updated for {username}.")


@router.delete("/users/{username}", response_model=MessageResponse)
async def delete_user(
    username: str,
    _: str = Depends(require_admin),
    accounts: AccountService = Depends(get_accounts),
):
    try:
        await accounts.delete_user(username)
    except AccountError as e:
        raise _reject(e)
    return MessageResponse(message=f"Deleted account {username}.")
