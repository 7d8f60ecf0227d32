"""Credential repository interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

ADMIN_USERNAME = "admin"


@dataclass
class UserRecord:
    """Stored account. Passwords are kept in plaintext."""

    username: str
    password: str
    active: bool = False


@dataclass
class RememberedLogin:
    username: str
    password: str


class UserRepository(ABC):
    """Storage for user records and the remembered login pair."""

    @abstractmethod
    async def get(self, username: str) -> UserRecord | None:
        ...

    @abstractmethod
    async def put(self, user: UserRecord) -> None:
        """Insert or replace a user record."""
        ...

    @abstractmethod
    async def delete(self, username: str) -> bool:
        """Delete a user; returns False if it did not exist."""
        ...

    @abstractmethod
    async def list(self) -> list[UserRecord]:
        ...

    @abstractmethod
    async def get_remembered(self) -> RememberedLogin | None:
        ...

    @abstractmethod
    async def set_remembered(self, login: RememberedLogin) -> None:
        ...

    @abstractmethod
    async def clear_remembered(self) -> None:
        ...
