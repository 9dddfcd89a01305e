import logging

from fastapi import APIRouter, Depends
from sqlalchemy import or_
from sqlmodel import Session, select

from api.auth.utils import get_current_user
from api.db.models import Like, User, Video
from api.db.session import get_session
from api.db.toggle import toggle_like
from api.errors import api_response
from api.videos.models import VideoRead

# Set up logging
logger = logging.getLogger("likes")

router = APIRouter()


def _toggle_response(liked: bool, target_kind: str) -> dict:
    message = f"Liked {target_kind}" if liked else f"Unliked {target_kind}"
    return api_response({"liked": liked}, message)


@router.post("/toggle/v/{video_id}")
def toggle_video_like(
    video_id: str,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Like a video, or remove the like if the caller already liked it.
    """
    liked = toggle_like(db_session, "video", video_id, current_user.id)
    return _toggle_response(liked, "video")


@router.post("/toggle/c/{comment_id}")
def toggle_comment_like(
    comment_id: str,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    liked = toggle_like(db_session, "comment", comment_id, current_user.id)
    return _toggle_response(liked, "comment")


@router.post("/toggle/t/{tweet_id}")
def toggle_tweet_like(
    tweet_id: str,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    liked = toggle_like(db_session, "tweet", tweet_id, current_user.id)
    return _toggle_response(liked, "tweet")


@router.get("/videos")
def get_liked_videos(
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Videos the caller has liked, most recently liked first.
    Likes pointing at deleted videos drop out through the join.
    """
    videos = db_session.exec(
        select(Video)
        .join(Like, Like.video_id == Video.id)
        .where(
            Like.liked_by == current_user.id,
            or_(Video.is_published == True, Video.owner_id == current_user.id),  # noqa: E712
        )
        .order_by(Like.created_at.desc())
    ).all()
    logger.info(f"User {current_user.id} has {len(videos)} liked videos")
    return api_response(
        [VideoRead.model_validate(v) for v in videos],
        "Liked videos fetched successfully",
    )
