"""Local accounts: repository, sessions and administration."""

from .base import ADMIN_USERNAME, RememberedLogin, UserRecord, UserRepository
from .memory import InMemoryUserRepository
from .service import AccountError, AccountService, SessionRegistry

__all__ = [
    "ADMIN_USERNAME",
    "AccountError",
    "AccountService",
    "InMemoryUserRepository",
    "RememberedLogin",
    "SessionRegistry",
    "UserRecord",
    "UserRepository",
]
