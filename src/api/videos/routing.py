import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy import func, or_, update
from sqlmodel import Session, select

from api.auth.models import UserPublic
from api.auth.utils import get_current_user, require_owner
from api.db.cascade import delete_video_dependents
from api.db.models import Like, User, Video, utc_now
from api.db.session import get_session
from api.errors import InvalidArgument, NotFound, api_response
from api.media.storage import (
    MediaStorage,
    check_upload,
    discard_on_error,
    get_media_storage,
    store_upload,
)
from api.utils import DEFAULT_PAGE_SIZE, clamp_pagination, page_payload, parse_id

from .models import SORT_FIELDS, SORT_TYPES, VideoDetail, VideoRead

# Set up logging
logger = logging.getLogger("videos")

router = APIRouter()

TITLE_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 5000


def _like_pattern(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _clean_title(title: str) -> str:
    title = title.strip()
    if not title:
        raise InvalidArgument("Video title cannot be empty")
    if len(title) > TITLE_MAX_LENGTH:
        raise InvalidArgument(f"Video title too long (max {TITLE_MAX_LENGTH} characters)")
    return title


def _clean_description(description: str) -> str:
    description = description.strip()
    if len(description) > DESCRIPTION_MAX_LENGTH:
        raise InvalidArgument(f"Description too long (max {DESCRIPTION_MAX_LENGTH} characters)")
    return description


@router.get("/")
def get_all_videos(
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    query: str = "",
    user_id: Optional[str] = None,
    sort_by: str = "created_at",
    sort_type: str = "desc",
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    List videos with pagination, free-text search, owner filter and sorting.
    - Query params: page, limit, query (title/description, case-insensitive),
      user_id, sort_by (created_at|updated_at|title|views|duration), sort_type (asc|desc)
    - Only published videos are returned, plus the caller's own drafts.
    """
    page, limit = clamp_pagination(page, limit)
    sort_column = SORT_FIELDS.get(sort_by)
    if sort_column is None:
        raise InvalidArgument(f"Invalid sort_by: must be one of {', '.join(SORT_FIELDS)}")
    sort_type = sort_type.lower()
    if sort_type not in SORT_TYPES:
        raise InvalidArgument("Invalid sort_type: must be 'asc' or 'desc'")

    conditions = [or_(Video.is_published == True, Video.owner_id == current_user.id)]  # noqa: E712
    if query.strip():
        pattern = _like_pattern(query.strip())
        conditions.append(
            or_(
                Video.title.ilike(pattern, escape="\\"),
                Video.description.ilike(pattern, escape="\\"),
            )
        )
    if user_id:
        conditions.append(Video.owner_id == parse_id(user_id, "user ID"))

    total = db_session.exec(select(func.count()).select_from(Video).where(*conditions)).one()
    order = sort_column.desc() if sort_type == "desc" else sort_column.asc()
    videos = db_session.exec(
        select(Video)
        .where(*conditions)
        .order_by(order, Video.id)
        .offset((page - 1) * limit)
        .limit(limit)
    ).all()

    logger.info(f"Listed {len(videos)} of {total} videos for user {current_user.id}")
    return api_response(
        page_payload([VideoRead.model_validate(v) for v in videos], total, page, limit),
        "Videos fetched successfully",
    )


@router.post("/", status_code=status.HTTP_201_CREATED)
def publish_video(
    title: str = Form(...),
    description: str = Form(""),
    duration: float = Form(0, ge=0),
    video_file: Optional[UploadFile] = File(None),
    thumbnail: Optional[UploadFile] = File(None),
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
    storage: MediaStorage = Depends(get_media_storage),
):
    """
    Publish a new video. Both media files are uploaded to object storage
    before the row is written.
    """
    title = _clean_title(title)
    description = _clean_description(description)
    if video_file is None or thumbnail is None or not video_file.filename or not thumbnail.filename:
        raise InvalidArgument("Video file and thumbnail are required")

    check_upload(video_file, "video", "Video file")
    check_upload(thumbnail, "image", "Thumbnail")

    # Objects already in the bucket are removed if a later upload or the commit fails
    with discard_on_error(storage) as uploaded:
        uploaded.append(store_upload(storage, video_file, "video", "Video file"))
        uploaded.append(store_upload(storage, thumbnail, "image", "Thumbnail"))
        video_url, thumbnail_url = uploaded

        video = Video(
            title=title,
            description=description,
            video_file=video_url,
            thumbnail=thumbnail_url,
            duration=duration,
            owner_id=current_user.id,
        )
        db_session.add(video)
        db_session.commit()
    db_session.refresh(video)

    logger.info(f"User {current_user.id} published video {video.id}")
    return api_response(VideoRead.model_validate(video), "Video published successfully")


@router.get("/{video_id}")
def get_video_by_id(
    video_id: str,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Get a video with its owner's public profile. Each fetch counts as a view.
    """
    video_id = parse_id(video_id, "video ID")
    video = db_session.get(Video, video_id)
    if video is None or (not video.is_published and video.owner_id != current_user.id):
        logger.warning(f"Video not found: {video_id}")
        raise NotFound("Video not found")

    db_session.exec(update(Video).where(Video.id == video_id).values(views=Video.views + 1))
    db_session.commit()
    db_session.refresh(video)

    owner = db_session.get(User, video.owner_id)
    likes_count = db_session.exec(
        select(func.count()).select_from(Like).where(Like.video_id == video_id)
    ).one()
    is_liked = db_session.exec(
        select(Like.id).where(Like.video_id == video_id, Like.liked_by == current_user.id)
    ).first() is not None

    detail = VideoDetail(
        **VideoRead.model_validate(video).model_dump(),
        owner=UserPublic.model_validate(owner) if owner else None,
        likes_count=likes_count,
        is_liked=is_liked,
    )
    return api_response(detail, "Video fetched successfully")


@router.patch("/{video_id}")
def update_video(
    video_id: str,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    thumbnail: Optional[UploadFile] = File(None),
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
    storage: MediaStorage = Depends(get_media_storage),
):
    """
    Update title, description and/or thumbnail (only by the video owner).
    Omitted or blank text fields keep their current value.
    """
    video_id = parse_id(video_id, "video ID")
    video = require_owner(db_session, Video, video_id, current_user, "Video", "update")

    if title is not None and title.strip():
        video.title = _clean_title(title)
    if description is not None and description.strip():
        video.description = _clean_description(description)
    with discard_on_error(storage) as uploaded:
        if thumbnail is not None and thumbnail.filename:
            uploaded.append(store_upload(storage, thumbnail, "image", "Thumbnail"))
            video.thumbnail = uploaded[0]

        video.updated_at = utc_now()
        db_session.add(video)
        db_session.commit()
    db_session.refresh(video)

    logger.info(f"User {current_user.id} updated video {video_id}")
    return api_response(VideoRead.model_validate(video), "Video updated successfully")


@router.delete("/{video_id}")
def delete_video(
    video_id: str,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Delete a video together with its comments, likes and playlist entries.
    """
    video_id = parse_id(video_id, "video ID")
    video = require_owner(db_session, Video, video_id, current_user, "Video", "delete")

    delete_video_dependents(db_session, video)
    db_session.delete(video)
    db_session.commit()

    logger.info(f"User {current_user.id} deleted video {video_id}")
    return api_response({"id": video_id}, "Video deleted successfully")


@router.patch("/toggle/publish/{video_id}")
def toggle_publish_status(
    video_id: str,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    video_id = parse_id(video_id, "video ID")
    video = require_owner(db_session, Video, video_id, current_user, "Video", "update")

    video.is_published = not video.is_published
    video.updated_at = utc_now()
    db_session.add(video)
    db_session.commit()
    db_session.refresh(video)

    state = "published" if video.is_published else "unpublished"
    logger.info(f"User {current_user.id} toggled video {video_id} to {state}")
    return api_response(
        VideoRead.model_validate(video),
        f"Video publish status toggled to {state}",
    )
