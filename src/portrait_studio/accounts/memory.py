"""In-memory credential repository."""

from dataclasses import replace

from .base import RememberedLogin, UserRecord, UserRepository


class InMemoryUserRepository(UserRepository):
    """Dict-backed repository, used by tests and ephemeral deployments."""

    def __init__(self) -> None:
        self._users: dict[str, UserRecord] = {}
        self._remembered: RememberedLogin | None = None

    async def get(self, username: str) -> UserRecord | None:
        user = self._users.get(username)
        return replace(user) if user else None

    async def put(self, user: UserRecord) -> None:
        self._users[user.username] = replace(user)

    async def delete(self, username: str) -> bool:
        return self._users.pop(username, None) is not None

    async def list(self) -> list[UserRecord]:
        return [replace(user) for user in self._users.values()]

    async def get_remembered(self) -> RememberedLogin | None:
        return self._remembered

    async def set_remembered(self, login: RememberedLogin) -> None:
        self._remembered = login

    async def clear_remembered(self) -> None:
        self._remembered = None
