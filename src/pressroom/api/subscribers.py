"""Mailing-list API routes.

Learn: Subscribing is open; listing and removing subscribers sit behind
require_admin. The welcome email goes out through BackgroundTasks after
the 201 is written, so a slow or broken SMTP server never fails the
subscribe call.
"""

import uuid

import structlog
from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pressroom.auth.dependencies import get_email_sender, require_admin
from pressroom.db.engine import get_db
from pressroom.errors import (
    ErrorKind,
    InternalError,
    NotFoundError,
    ValidationError,
)
from pressroom.schemas.auth import Envelope
from pressroom.schemas.subscriber import (
    SubscribeRequest,
    SubscriberData,
    SubscriberRead,
)
from pressroom.services.email_service import EmailSender
from pressroom.services.subscriber_service import AlreadySubscribed, SubscriberService

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/subscribers")


def _svc(db: AsyncSession = Depends(get_db)) -> SubscriberService:
    return SubscriberService(db)


@router.post("", response_model=Envelope[SubscriberData], status_code=201)
async def subscribe(
    body: SubscribeRequest,
    background: BackgroundTasks,
    svc: SubscriberService = Depends(_svc),
    mailer: EmailSender = Depends(get_email_sender),
):
    if not body.email:
        raise ValidationError("Email is required")

    try:
        subscriber = await svc.create(body.email)
    except AlreadySubscribed:
        raise ValidationError("Already subscribed", kind=ErrorKind.CONFLICT)
    except SQLAlchemyError as e:
        raise InternalError("Subscription failed") from e

    background.add_task(mailer.send_welcome, subscriber.email)
    logger.info("subscriber_added", subscriber_id=str(subscriber.id))
    return Envelope[SubscriberData](
        message="Subscribed successfully",
        data=SubscriberData(subscriber=SubscriberRead.model_validate(subscriber)),
    )


@router.get(
    "",
    response_model=Envelope[list[SubscriberRead]],
    dependencies=[Depends(require_admin)],
)
async def list_subscribers(svc: SubscriberService = Depends(_svc)):
    subscribers = await svc.list_all()
    return Envelope[list[SubscriberRead]](
        message=f"{len(subscribers)} subscribers",
        data=[SubscriberRead.model_validate(s) for s in subscribers],
    )


@router.delete(
    "/{subscriber_id}",
    response_model=Envelope[SubscriberData],
    dependencies=[Depends(require_admin)],
)
async def remove_subscriber(
    subscriber_id: uuid.UUID,
    svc: SubscriberService = Depends(_svc),
):
    """Remove a subscriber from the list."""
    subscriber = await svc.find_by_id(subscriber_id)
    if subscriber is None:
        raise NotFoundError("Subscriber not found")

    removed = SubscriberRead.model_validate(subscriber)
    try:
        await svc.delete(subscriber)
    except SQLAlchemyError as e:
        raise InternalError("Error removing subscriber") from e

    logger.info("subscriber_removed", subscriber_id=str(subscriber_id))
    return Envelope[SubscriberData](
        message="Subscriber removed successfully",
        data=SubscriberData(subscriber=removed),
    )
