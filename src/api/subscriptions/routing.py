import logging

from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from api.auth.models import UserPublic
from api.auth.utils import get_current_user
from api.db.models import Subscription, User
from api.db.session import get_session
from api.db.toggle import toggle_subscription
from api.errors import NotFound, api_response
from api.utils import parse_id

# Set up logging
logger = logging.getLogger("subscriptions")

router = APIRouter()


def _get_user_or_404(db_session: Session, user_id: str, label: str) -> User:
    user = db_session.get(User, user_id)
    if user is None:
        logger.warning(f"{label} not found: {user_id}")
        raise NotFound(f"{label} not found")
    return user


@router.post("/c/{channel_id}")
def toggle_channel_subscription(
    channel_id: str,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Subscribe to a channel, or unsubscribe if already subscribed.
    """
    channel_id = parse_id(channel_id, "channel ID")
    if channel_id != current_user.id:
        _get_user_or_404(db_session, channel_id, "Channel")

    subscribed = toggle_subscription(db_session, current_user.id, channel_id)
    message = "Subscribed to channel" if subscribed else "Unsubscribed from channel"
    return api_response({"subscribed": subscribed, "channel_id": channel_id}, message)


@router.get("/c/{channel_id}")
def get_channel_subscribers(
    channel_id: str,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Public profiles of everyone subscribed to the channel.
    """
    channel_id = parse_id(channel_id, "channel ID")
    _get_user_or_404(db_session, channel_id, "Channel")

    subscribers = db_session.exec(
        select(User)
        .join(Subscription, Subscription.subscriber_id == User.id)
        .where(Subscription.channel_id == channel_id)
        .order_by(Subscription.created_at.desc())
    ).all()
    return api_response(
        [UserPublic.model_validate(u) for u in subscribers],
        "Subscribers fetched successfully",
    )


@router.get("/u/{subscriber_id}")
def get_subscribed_channels(
    subscriber_id: str,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Public profiles of the channels a user is subscribed to.
    """
    subscriber_id = parse_id(subscriber_id, "subscriber ID")
    _get_user_or_404(db_session, subscriber_id, "Subscriber")

    channels = db_session.exec(
        select(User)
        .join(Subscription, Subscription.channel_id == User.id)
        .where(Subscription.subscriber_id == subscriber_id)
        .order_by(Subscription.created_at.desc())
    ).all()
    return api_response(
        [UserPublic.model_validate(u) for u in channels],
        "Subscribed channels fetched successfully",
    )
