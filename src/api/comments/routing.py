import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import func
from sqlmodel import Session, select

from api.auth.models import UserPublic
from api.auth.utils import get_current_user, require_owner
from api.db.cascade import delete_comment_dependents
from api.db.models import Comment, User, Video, utc_now
from api.db.session import get_session
from api.errors import NotFound, api_response
from api.utils import DEFAULT_PAGE_SIZE, clamp_pagination, page_payload, parse_id

from .models import CommentCreate, CommentRead, CommentWithOwner

# Set up logging
logger = logging.getLogger("comments")

router = APIRouter()


def _get_video_or_404(db_session: Session, video_id: str, current_user: User) -> Video:
    video = db_session.get(Video, video_id)
    if video is None or (not video.is_published and video.owner_id != current_user.id):
        logger.warning(f"Video not found: {video_id}")
        raise NotFound("Video not found")
    return video


@router.get("/{video_id}")
def get_video_comments(
    video_id: str,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Get comments for a video, newest first, each with its author's public profile.
    """
    video_id = parse_id(video_id, "video ID")
    _get_video_or_404(db_session, video_id, current_user)
    page, limit = clamp_pagination(page, limit)

    total = db_session.exec(
        select(func.count())
        .select_from(Comment)
        .join(User, Comment.owner_id == User.id)
        .where(Comment.video_id == video_id)
    ).one()
    rows = db_session.exec(
        select(Comment, User)
        .join(User, Comment.owner_id == User.id)
        .where(Comment.video_id == video_id)
        .order_by(Comment.created_at.desc(), Comment.id)
        .offset((page - 1) * limit)
        .limit(limit)
    ).all()

    items = [
        CommentWithOwner(
            **CommentRead.model_validate(comment).model_dump(),
            owner=UserPublic.model_validate(owner),
        )
        for comment, owner in rows
    ]
    return api_response(page_payload(items, total, page, limit), "Comments fetched successfully")


@router.post("/{video_id}", status_code=status.HTTP_201_CREATED)
def add_comment(
    video_id: str,
    payload: CommentCreate,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Create a comment on a video.
    """
    video_id = parse_id(video_id, "video ID")
    _get_video_or_404(db_session, video_id, current_user)

    comment = Comment(content=payload.content, video_id=video_id, owner_id=current_user.id)
    db_session.add(comment)
    db_session.commit()
    db_session.refresh(comment)

    logger.info(f"User {current_user.id} commented on video {video_id}")
    return api_response(CommentRead.model_validate(comment), "Comment added successfully")


@router.patch("/c/{comment_id}")
def update_comment(
    comment_id: str,
    payload: CommentCreate,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Update a comment (only by the comment author).
    """
    comment_id = parse_id(comment_id, "comment ID")
    comment = require_owner(db_session, Comment, comment_id, current_user, "Comment", "update")

    comment.content = payload.content
    comment.updated_at = utc_now()
    db_session.add(comment)
    db_session.commit()
    db_session.refresh(comment)

    logger.info(f"User {current_user.id} updated comment {comment_id}")
    return api_response(CommentRead.model_validate(comment), "Comment updated successfully")


@router.delete("/c/{comment_id}")
def delete_comment(
    comment_id: str,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Delete a comment and the likes on it (only by the comment author).
    """
    comment_id = parse_id(comment_id, "comment ID")
    comment = require_owner(db_session, Comment, comment_id, current_user, "Comment", "delete")

    delete_comment_dependents(db_session, comment)
    db_session.delete(comment)
    db_session.commit()

    logger.info(f"User {current_user.id} deleted comment {comment_id}")
    return api_response({"id": comment_id}, "Comment deleted successfully")
