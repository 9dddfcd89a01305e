import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import and_, delete, func, or_
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from api.auth.utils import get_current_user, require_owner
from api.db.models import Playlist, PlaylistItem, User, Video, utc_now
from api.db.session import get_session
from api.errors import InvalidArgument, NotFound, api_response
from api.utils import parse_id
from api.videos.models import VideoRead

from .models import PlaylistCreate, PlaylistDetail, PlaylistRead, PlaylistUpdate

# Set up logging
logger = logging.getLogger("playlists")

router = APIRouter()


def _visible_to(current_user: User):
    return or_(Video.is_published == True, Video.owner_id == current_user.id)  # noqa: E712


def _playlist_detail(db_session: Session, playlist: Playlist, current_user: User) -> PlaylistDetail:
    videos = db_session.exec(
        select(Video)
        .join(PlaylistItem, PlaylistItem.video_id == Video.id)
        .where(PlaylistItem.playlist_id == playlist.id, _visible_to(current_user))
        .order_by(PlaylistItem.position, PlaylistItem.added_at)
    ).all()
    return PlaylistDetail(
        **PlaylistRead.model_validate(playlist).model_dump(exclude={"video_count"}),
        video_count=len(videos),
        videos=[VideoRead.model_validate(v) for v in videos],
    )


def append_to_playlist(db_session: Session, playlist: Playlist, video_id: str) -> bool:
    """Append ``video_id`` at the end of ``playlist``.

    Returns False when the unique constraint reports the video is already
    there (a concurrent request added it first).
    """
    max_position = db_session.exec(
        select(func.max(PlaylistItem.position)).where(PlaylistItem.playlist_id == playlist.id)
    ).first() or 0
    db_session.add(
        PlaylistItem(playlist_id=playlist.id, video_id=video_id, position=max_position + 1)
    )
    playlist.updated_at = utc_now()
    db_session.add(playlist)
    try:
        db_session.commit()
    except IntegrityError:
        db_session.rollback()
        db_session.refresh(playlist)
        return False
    db_session.refresh(playlist)
    return True


# Playlist CRUD Endpoints
@router.post("/", status_code=status.HTTP_201_CREATED)
def create_playlist(
    payload: PlaylistCreate,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Create a new, empty playlist.
    """
    playlist = Playlist(
        owner_id=current_user.id,
        name=payload.name,
        description=payload.description,
    )
    db_session.add(playlist)
    db_session.commit()
    db_session.refresh(playlist)

    logger.info(f"User {current_user.id} created playlist '{playlist.name}'")
    return api_response(PlaylistRead.model_validate(playlist), "Playlist created successfully")


@router.get("/user/{user_id}")
def get_user_playlists(
    user_id: str,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Get all playlists owned by a user, most recently updated first.
    video_count only counts videos the caller can see, as the detail view does.
    """
    user_id = parse_id(user_id, "user ID")
    if db_session.get(User, user_id) is None:
        raise NotFound("User not found")

    rows = db_session.exec(
        select(Playlist, func.count(Video.id))
        .outerjoin(PlaylistItem, PlaylistItem.playlist_id == Playlist.id)
        .outerjoin(Video, and_(Video.id == PlaylistItem.video_id, _visible_to(current_user)))
        .where(Playlist.owner_id == user_id)
        .group_by(Playlist.id)
        .order_by(Playlist.updated_at.desc())
    ).all()

    playlists = [
        PlaylistRead(
            **PlaylistRead.model_validate(playlist).model_dump(exclude={"video_count"}),
            video_count=item_count,
        )
        for playlist, item_count in rows
    ]
    return api_response(playlists, "Playlists fetched successfully")


@router.get("/{playlist_id}")
def get_playlist_by_id(
    playlist_id: str,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Get a playlist including its videos in playlist order.
    """
    playlist_id = parse_id(playlist_id, "playlist ID")
    playlist = db_session.get(Playlist, playlist_id)
    if not playlist:
        logger.warning(f"Playlist not found: {playlist_id}")
        raise NotFound("Playlist not found")

    return api_response(
        _playlist_detail(db_session, playlist, current_user),
        "Playlist fetched successfully",
    )


@router.patch("/{playlist_id}")
def update_playlist(
    playlist_id: str,
    payload: PlaylistUpdate,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Update playlist name and/or description.
    """
    playlist_id = parse_id(playlist_id, "playlist ID")
    playlist = require_owner(db_session, Playlist, playlist_id, current_user, "Playlist", "update")

    if payload.name is None and payload.description is None:
        raise InvalidArgument("Provide a name or a description to update")
    if payload.name is not None:
        playlist.name = payload.name
    if payload.description is not None:
        playlist.description = payload.description.strip()

    playlist.updated_at = utc_now()
    db_session.add(playlist)
    db_session.commit()
    db_session.refresh(playlist)

    logger.info(f"User {current_user.id} updated playlist {playlist_id}")
    return api_response(
        _playlist_detail(db_session, playlist, current_user),
        "Playlist updated successfully",
    )


@router.delete("/{playlist_id}")
def delete_playlist(
    playlist_id: str,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Delete a playlist and all its items.
    """
    playlist_id = parse_id(playlist_id, "playlist ID")
    playlist = require_owner(db_session, Playlist, playlist_id, current_user, "Playlist", "delete")

    # Delete playlist items first (due to foreign key constraint)
    db_session.exec(delete(PlaylistItem).where(PlaylistItem.playlist_id == playlist_id))
    db_session.delete(playlist)
    db_session.commit()

    logger.info(f"User {current_user.id} deleted playlist {playlist_id}")
    return api_response({"id": playlist_id}, "Playlist deleted successfully")


# Playlist Item Management
@router.patch("/add/{video_id}/{playlist_id}")
def add_video_to_playlist(
    video_id: str,
    playlist_id: str,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Append a video to a playlist. Adding a video that is already there is a no-op.
    """
    video_id = parse_id(video_id, "video ID")
    playlist_id = parse_id(playlist_id, "playlist ID")
    playlist = require_owner(db_session, Playlist, playlist_id, current_user, "Playlist", "modify")

    video = db_session.get(Video, video_id)
    if video is None or (not video.is_published and video.owner_id != current_user.id):
        raise NotFound("Video not found")

    existing_item = db_session.exec(
        select(PlaylistItem).where(
            PlaylistItem.playlist_id == playlist_id,
            PlaylistItem.video_id == video_id,
        )
    ).first()

    added = existing_item is None and append_to_playlist(db_session, playlist, video_id)
    if added:
        logger.info(f"User {current_user.id} added video {video_id} to playlist {playlist_id}")

    message = "Video added to playlist" if added else "Video already in playlist"
    return api_response(_playlist_detail(db_session, playlist, current_user), message)


@router.patch("/remove/{video_id}/{playlist_id}")
def remove_video_from_playlist(
    video_id: str,
    playlist_id: str,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Remove a video from a playlist.
    """
    video_id = parse_id(video_id, "video ID")
    playlist_id = parse_id(playlist_id, "playlist ID")
    playlist = require_owner(db_session, Playlist, playlist_id, current_user, "Playlist", "modify")

    result = db_session.exec(
        delete(PlaylistItem).where(
            PlaylistItem.playlist_id == playlist_id,
            PlaylistItem.video_id == video_id,
        )
    )
    if not result.rowcount:
        raise NotFound("Video is not in this playlist")

    playlist.updated_at = utc_now()
    db_session.add(playlist)
    db_session.commit()
    db_session.refresh(playlist)

    logger.info(f"User {current_user.id} removed video {video_id} from playlist {playlist_id}")
    return api_response(
        _playlist_detail(db_session, playlist, current_user),
        "Video removed from playlist",
    )
