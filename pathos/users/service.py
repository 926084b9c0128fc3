"""User service: accounts, credential checks, and profile fields."""

import asyncio
import logging
from uuid import uuid4

import aiosqlite
import bcrypt

from pathos.db.connection import Database
from pathos.errors import (
    EmailTakenError,
    UnauthorizedError,
    UsernameTakenError,
    UserNotFoundError,
)
from pathos.models import utc_now
from pathos.users.schemas import (
    LoginRequest,
    ProfileResponse,
    SignupRequest,
    UpdateProfileRequest,
)

logger = logging.getLogger(__name__)

DEFAULT_BCRYPT_ROUNDS = 12


def hash_password(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


class UserService:
    def __init__(self, db: Database, *, bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS) -> None:
        self._db = db
        self._rounds = bcrypt_rounds

    async def signup(self, request: SignupRequest) -> str:
        """Create an account and return its user_id. Name is filled in during onboarding."""
        existing = await self._db.fetchone(
            "SELECT 1 FROM users WHERE username = ?", (request.username,)
        )
        if existing is not None:
            raise UsernameTakenError(request.username)

        if request.email:
            taken = await self._db.fetchone(
                "SELECT 1 FROM users WHERE email = ?", (request.email,)
            )
            if taken is not None:
                raise EmailTakenError(request.email)

        # bcrypt is deliberately slow; keep it off the event loop
        password_hash = await asyncio.to_thread(hash_password, request.password, self._rounds)

        user_id = str(uuid4())
        now = utc_now()
        try:
            await self._db.execute(
                """
                INSERT INTO users
                    (user_id, username, email, password_hash, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (user_id, request.username, request.email or None, password_hash, now, now),
            )
        except aiosqlite.IntegrityError as e:
            # Lost a race with a concurrent signup
            if "users.email" in str(e):
                raise EmailTakenError(request.email) from e
            raise UsernameTakenError(request.username) from e

        logger.info("Created user %s", user_id)
        return user_id

    async def verify_credentials(self, request: LoginRequest) -> ProfileResponse:
        """Check a username/password pair. Any mismatch is the same 401."""
        row = await self._db.fetchone(
            "SELECT * FROM users WHERE username = ?", (request.username,)
        )
        if row is None:
            raise UnauthorizedError("Invalid username or password")

        ok = await asyncio.to_thread(verify_password, request.password, row["password_hash"])
        if not ok:
            raise UnauthorizedError("Invalid username or password")
        return self._profile_from_row(row)

    async def user_exists(self, user_id: str) -> bool:
        row = await self._db.fetchone("SELECT 1 FROM users WHERE user_id = ?", (user_id,))
        return row is not None

    async def get_profile(self, user_id: str) -> ProfileResponse:
        row = await self._db.fetchone("SELECT * FROM users WHERE user_id = ?", (user_id,))
        if row is None:
            raise UserNotFoundError(user_id)
        return self._profile_from_row(row)

    async def update_profile(
        self, user_id: str, request: UpdateProfileRequest,
    ) -> ProfileResponse:
        await self._db.execute(
            "UPDATE users SET name = ?, location = ?, privacy = ?, updated_at = ? WHERE user_id = ?",
            (request.name, request.location, request.privacy, utc_now(), user_id),
        )
        return await self.get_profile(user_id)

    @staticmethod
    def _profile_from_row(row: dict) -> ProfileResponse:
        return ProfileResponse(
            user_id=row["user_id"],
            username=row["username"],
            email=row["email"],
            name=row["name"],
            location=row["location"],
            privacy=row["privacy"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
