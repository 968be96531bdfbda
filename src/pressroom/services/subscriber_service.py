"""Subscriber service — mailing-list storage."""

import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pressroom.db.models import Subscriber


class AlreadySubscribed(Exception):
    """Raised when an email is already on the list."""


class SubscriberService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_email(self, email: str) -> Optional[Subscriber]:
        result = await self.db.execute(
            select(Subscriber).where(Subscriber.email == email)
        )
        return result.scalars().first()

    async def find_by_id(self, subscriber_id: uuid.UUID) -> Optional[Subscriber]:
        return await self.db.get(Subscriber, subscriber_id)

    async def list_all(self) -> list[Subscriber]:
        result = await self.db.execute(
            select(Subscriber).order_by(Subscriber.created_at.desc())
        )
        return list(result.scalars().all())

    async def create(self, email: str) -> Subscriber:
        """Add an email to the list.

        The lookup catches the common case; the unique index catches the
        race between two concurrent subscribes.
        """
        if await self.find_by_email(email):
            raise AlreadySubscribed(email)
        subscriber = Subscriber(email=email)
        self.db.add(subscriber)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise AlreadySubscribed(email) from e
        await self.db.refresh(subscriber)
        return subscriber

    async def delete(self, subscriber: Subscriber) -> None:
        await self.db.delete(subscriber)
        await self.db.commit()
