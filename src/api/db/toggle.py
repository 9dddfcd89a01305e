"""Insert-or-delete primitive behind likes and subscriptions.

The relation tables carry unique constraints on (target, user), so the
toggle never needs a read-then-write: it deletes the matching row, and only
when nothing was deleted does it insert one. If a concurrent request inserts
the same row first, the insert trips the constraint and the relation is
reported as present, which is the state the caller asked for.
"""
import logging
from typing import Type

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, SQLModel

from api.db.models import Like, Subscription
from api.errors import InvalidArgument
from api.utils import parse_id

logger = logging.getLogger("toggle")

LIKE_TARGETS = {
    "video": "video_id",
    "comment": "comment_id",
    "tweet": "tweet_id",
}


def toggle_relation(db: Session, model: Type[SQLModel], **match) -> bool:
    """Remove the ``model`` row matching ``match`` or create it.

    Returns True when the relation exists after the call.
    """
    conditions = [getattr(model, column) == value for column, value in match.items()]
    result = db.exec(delete(model).where(*conditions))
    if result.rowcount:
        db.commit()
        return False

    db.add(model(**match))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info(f"Concurrent insert won for {model.__name__} {match}")
    return True


def toggle_like(db: Session, target_kind: str, target_id: str, user_id: str) -> bool:
    column = LIKE_TARGETS.get(target_kind)
    if column is None:
        raise ValueError(f"Unknown like target kind: {target_kind!r}")
    target_id = parse_id(target_id, f"{target_kind} ID")
    liked = toggle_relation(db, Like, **{column: target_id, "liked_by": user_id})
    logger.info(f"User {user_id} {'liked' if liked else 'unliked'} {target_kind} {target_id}")
    return liked


def toggle_subscription(db: Session, subscriber_id: str, channel_id: str) -> bool:
    channel_id = parse_id(channel_id, "channel ID")
    if channel_id == subscriber_id:
        raise InvalidArgument("You cannot subscribe to your own channel")
    subscribed = toggle_relation(
        db, Subscription, subscriber_id=subscriber_id, channel_id=channel_id
    )
    logger.info(
        f"User {subscriber_id} {'subscribed to' if subscribed else 'unsubscribed from'} "
        f"channel {channel_id}"
    )
    return subscribed
