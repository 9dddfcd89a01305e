import logging

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlmodel import Session, select

from api.auth.utils import get_current_user
from api.db.models import Like, Subscription, User, Video
from api.db.session import get_session
from api.errors import api_response
from api.videos.models import VideoRead

# Set up logging
logger = logging.getLogger("dashboard")

router = APIRouter()


def channel_stats(db_session: Session, owner_id: str) -> dict:
    """Aggregate counters for one channel, each from its own query."""
    total_videos = db_session.exec(
        select(func.count()).select_from(Video).where(Video.owner_id == owner_id)
    ).one()

    total_views = db_session.exec(
        select(func.coalesce(func.sum(Video.views), 0)).where(Video.owner_id == owner_id)
    ).one()

    total_subscribers = db_session.exec(
        select(func.count()).select_from(Subscription).where(Subscription.channel_id == owner_id)
    ).one()

    total_likes = db_session.exec(
        select(func.count(Like.id))
        .join(Video, Like.video_id == Video.id)
        .where(Video.owner_id == owner_id)
    ).one()

    return {
        "total_videos": int(total_videos),
        "total_views": int(total_views),
        "total_subscribers": int(total_subscribers),
        "total_likes": int(total_likes),
    }


@router.get("/stats")
def get_channel_stats(
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Channel statistics for the caller: videos, views, subscribers and likes.
    Recomputed on every request.
    """
    stats = channel_stats(db_session, current_user.id)
    logger.info(f"Channel stats for user {current_user.id}: {stats}")
    return api_response(stats, "Channel statistics fetched successfully")


@router.get("/videos")
def get_channel_videos(
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    All of the caller's videos, published or not, newest first.
    """
    videos = db_session.exec(
        select(Video).where(Video.owner_id == current_user.id).order_by(Video.created_at.desc())
    ).all()
    logger.info(f"Found {len(videos)} videos for channel {current_user.id}")
    return api_response(
        [VideoRead.model_validate(v) for v in videos],
        "Channel videos fetched successfully",
    )
