"""Account registration, login and administration."""

import logging
import secrets

from .base import ADMIN_USERNAME, RememberedLogin, UserRecord, UserRepository

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 5


class AccountError(Exception):
    """Account operation rejected; ``message`` is shown to the user."""

    status_code = 400

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class SessionRegistry:
    """Login sessions for the running process, keyed by opaque token."""

    def __init__(self) -> None:
        self._sessions: dict[str, str] = {}

    def open(self, username: str) -> str:
        token = secrets.token_urlsafe(24)
        self._sessions[token] = username
        return token

    def close(self, token: str) -> bool:
        return self._sessions.pop(token, None) is not None

    def close_user(self, username: str) -> None:
        for token in [t for t, u in self._sessions.items() if u == username]:
            del self._sessions[token]

    def lookup(self, token: str | None) -> str | None:
        if not token:
            return None
        return self._sessions.get(token)


class AccountService:
    """Account operations over an injected user repository."""

    def __init__(
        self,
        repository: UserRepository,
        admin_password: str = "12345",
        sessions: SessionRegistry | None = None,
    ) -> None:
        self.repository = repository
        self.admin_password = admin_password
        self.sessions = sessions or SessionRegistry()

    async def ensure_admin(self) -> None:
        """Seed the admin account if it is missing."""
        admin = await self.repository.get(ADMIN_USERNAME)
        if admin is None:
            await self.repository.put(
                UserRecord(username=ADMIN_USERNAME, password=self.admin_password, active=True)
            )
            logger.info("Seeded admin account")

    @staticmethod
    def _check_password(password: str, message: str = "Password must be at least 5 characters.") -> None:
        if len(password) < MIN_PASSWORD_LENGTH:
            raise AccountError(message)

    async def _create(self, username: str, password: str) -> UserRecord:
        if not username.strip():
            raise AccountError("Username must not be empty.")
        self._check_password(password)
        if await self.repository.get(username) is not None:
            raise AccountError("This account already exists.", status_code=409)

        user = UserRecord(username=username, password=password, active=False)
        await self.repository.put(user)
        return user

    async def register(self, username: str, password: str, confirm_password: str) -> UserRecord:
        """Self-service registration; the account waits for admin activation."""
        if password != confirm_password:
            raise AccountError("Password confirmation does not match.")
        user = await self._create(username, password)
        logger.info(f"Registered account {username} (inactive)")
        return user

    async def login(self, username: str, password: str, remember: bool = False) -> str:
        """Check credentials and open a session; returns the session token."""
        user = await self.repository.get(username)
        if user is None or user.password != password:
            raise AccountError("Incorrect username or password.", status_code=401)
        if not user.active:
            raise AccountError(
                "Your account has not been activated yet. Please contact the administrator.",
                status_code=403,
            )

        if remember:
            await self.repository.set_remembered(RememberedLogin(username, password))
        else:
            await self.repository.clear_remembered()

        logger.info(f"User {username} logged in")
        return self.sessions.open(username)

    def logout(self, token: str) -> None:
        self.sessions.close(token)

    async def remembered(self) -> RememberedLogin | None:
        return await self.repository.get_remembered()

    # Administration

    async def list_users(self) -> list[UserRecord]:
        return await self.repository.list()

    async def add_user(self, username: str, password: str) -> UserRecord:
        user = await self._create(username, password)
        logger.info(f"Admin added account {username}")
        return user

    async def _get_existing(self, username: str) -> UserRecord:
        user = await self.repository.get(username)
        if user is None:
            raise AccountError(f"Account {username} does not exist.", status_code=404)
        return user

    async def toggle_active(self, username: str) -> UserRecord:
        if username == ADMIN_USERNAME:
            raise AccountError("Cannot change the status of the administrator account.", status_code=403)
        user = await self._get_existing(username)
        user.active = not user.active
        await self.repository.put(user)
        if not user.active:
            self.sessions.close_user(username)
        logger.info(f"Account {username} {'activated' if user.active else 'deactivated'}")
        return user

    async def set_password(self, username: str, new_password: str) -> UserRecord:
        if username == ADMIN_USERNAME:
            raise AccountError("Cannot edit the administrator account.", status_code=403)
        self._check_password(new_password, "New password must be at least 5 characters.")
        user = await self._get_existing(username)
        user.password = new_password
        await self.repository.put(user)
        logger.info(f"Password updated for {username}")
        return user

    async def delete_user(self, username: str) -> None:
        if username == ADMIN_USERNAME:
            raise AccountError("Cannot delete the administrator account.", status_code=403)
        if not await self.repository.delete(username):
            raise AccountError(f"Account {username} does not exist.", status_code=404)
        self.sessions.close_user(username)
        logger.info(f"Deleted account {username}")
