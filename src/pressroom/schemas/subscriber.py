"""Pydantic schemas for the mailing list."""

import uuid
from datetime import datetime
from typing import Optional

from pressroom.schemas.auth import CamelModel


class SubscribeRequest(CamelModel):
    email: Optional[str] = None


class SubscriberRead(CamelModel):
    id: uuid.UUID
    email: str
    created_at: datetime


class SubscriberData(CamelModel):
    subscriber: SubscriberRead
