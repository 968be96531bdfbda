"""User service — the credential store.

Learn: Service layer separates business logic from HTTP routing.
API routes call services, services call the database. Routes never
touch password hashes; they ask the service to verify a password.
"""

import uuid
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pressroom.auth.password import BCRYPT_ROUNDS, hash_password, verify_password
from pressroom.db.models import Role, User

logger = structlog.get_logger(__name__)


class EmailAlreadyRegistered(Exception):
    """Raised when the unique email index rejects a new user."""


class UserService:
    """Lookup, creation and password checks for user accounts."""

    def __init__(self, db: AsyncSession, bcrypt_rounds: int = BCRYPT_ROUNDS):
        self.db = db
        self.bcrypt_rounds = bcrypt_rounds

    async def find_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def find_by_id(self, user_id: uuid.UUID | str) -> Optional[User]:
        if isinstance(user_id, str):
            try:
                user_id = uuid.UUID(user_id)
            except ValueError:
                return None
        return await self.db.get(User, user_id)

    async def create(
        self,
        firstname: str,
        lastname: str,
        email: str,
        password: str,
        role: Role = Role.USER,
    ) -> User:
        """Persist a new user with a hashed password and derived fullname.

        Raises EmailAlreadyRegistered if the email is taken.
        """
        user = User(
            firstname=firstname,
            lastname=lastname,
            fullname=f"{firstname} {lastname}",
            email=email,
            password_hash=hash_password(password, rounds=self.bcrypt_rounds),
            role=role.value,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise EmailAlreadyRegistered(email) from e
        await self.db.refresh(user)
        logger.info("user_created", user_id=str(user.id), role=user.role)
        return user

    def verify_password(self, user: User, password: str) -> bool:
        return verify_password(password, user.password_hash)

    async def set_role(self, email: str, role: Role) -> Optional[User]:
        """Change a user's role. Returns None if no such user."""
        user = await self.find_by_email(email)
        if user is None:
            return None
        user.role = role.value
        await self.db.commit()
        logger.info("user_role_changed", user_id=str(user.id), role=role.value)
        return user
