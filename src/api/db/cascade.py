"""Dependent-row cleanup run in the same transaction as a parent delete.

Nothing here commits; the caller deletes the parent and commits once.
"""
from sqlalchemy import delete
from sqlmodel import Session, select

from api.db.models import Comment, Like, PlaylistItem, Video, Tweet


def delete_comment_dependents(db: Session, comment: Comment) -> None:
    db.exec(delete(Like).where(Like.comment_id == comment.id))


def delete_tweet_dependents(db: Session, tweet: Tweet) -> None:
    db.exec(delete(Like).where(Like.tweet_id == tweet.id))


def delete_video_dependents(db: Session, video: Video) -> None:
    comment_ids = select(Comment.id).where(Comment.video_id == video.id)
    db.exec(delete(Like).where(Like.comment_id.in_(comment_ids)))
    db.exec(delete(Like).where(Like.video_id == video.id))
    db.exec(delete(Comment).where(Comment.video_id == video.id))
    db.exec(delete(PlaylistItem).where(PlaylistItem.video_id == video.id))
