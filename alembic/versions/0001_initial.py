"""initial tables

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 00:00:00
"""

from alembic import op
import sqlalchemy as sa
import sqlmodel

# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _id_column(name: str = "id", *args, **kwargs) -> sa.Column:
    return sa.Column(name, sqlmodel.sql.sqltypes.AutoString(length=36), *args, **kwargs)


def upgrade() -> None:
    op.create_table(
        "user",
        _id_column(primary_key=True),
        sa.Column("username", sqlmodel.sql.sqltypes.AutoString(length=50), nullable=False),
        sa.Column("email", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column("full_name", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column("hashed_password", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_user_username", "user", ["username"], unique=True)
    op.create_index("ix_user_email", "user", ["email"], unique=True)

    op.create_table(
        "video",
        _id_column(primary_key=True),
        sa.Column("title", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column("description", sqlmodel.sql.sqltypes.AutoString(length=5000), nullable=False),
        sa.Column("video_file", sqlmodel.sql.sqltypes.AutoString(length=1024), nullable=False),
        sa.Column("thumbnail", sqlmodel.sql.sqltypes.AutoString(length=1024), nullable=False),
        sa.Column("duration", sa.Float(), nullable=False),
        _id_column("owner_id", sa.ForeignKey("user.id"), nullable=False),
        sa.Column("is_published", sa.Boolean(), nullable=False),
        sa.Column("views", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_video_title", "video", ["title"])
    op.create_index("ix_video_owner_id", "video", ["owner_id"])
    op.create_index("ix_video_created_at", "video", ["created_at"])

    op.create_table(
        "comment",
        _id_column(primary_key=True),
        sa.Column("content", sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=False),
        _id_column("video_id", sa.ForeignKey("video.id"), nullable=False),
        _id_column("owner_id", sa.ForeignKey("user.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_comment_video_id", "comment", ["video_id"])
    op.create_index("ix_comment_owner_id", "comment", ["owner_id"])
    op.create_index("ix_comment_created_at", "comment", ["created_at"])

    op.create_table(
        "tweet",
        _id_column(primary_key=True),
        sa.Column("content", sqlmodel.sql.sqltypes.AutoString(length=280), nullable=False),
        _id_column("owner_id", sa.ForeignKey("user.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_tweet_owner_id", "tweet", ["owner_id"])
    op.create_index("ix_tweet_created_at", "tweet", ["created_at"])

    op.create_table(
        "likes",
        _id_column(primary_key=True),
        _id_column("video_id", nullable=True),
        _id_column("comment_id", nullable=True),
        _id_column("tweet_id", nullable=True),
        _id_column("liked_by", sa.ForeignKey("user.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("video_id", "liked_by", name="uq_like_video_user"),
        sa.UniqueConstraint("comment_id", "liked_by", name="uq_like_comment_user"),
        sa.UniqueConstraint("tweet_id", "liked_by", name="uq_like_tweet_user"),
        sa.CheckConstraint(
            "(CASE WHEN video_id IS NULL THEN 0 ELSE 1 END"
            " + CASE WHEN comment_id IS NULL THEN 0 ELSE 1 END"
            " + CASE WHEN tweet_id IS NULL THEN 0 ELSE 1 END) = 1",
            name="ck_like_single_target",
        ),
    )
    op.create_index("ix_likes_video_id", "likes", ["video_id"])
    op.create_index("ix_likes_comment_id", "likes", ["comment_id"])
    op.create_index("ix_likes_tweet_id", "likes", ["tweet_id"])
    op.create_index("ix_likes_liked_by", "likes", ["liked_by"])

    op.create_table(
        "playlist",
        _id_column(primary_key=True),
        _id_column("owner_id", sa.ForeignKey("user.id"), nullable=False),
        sa.Column("name", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column("description", sqlmodel.sql.sqltypes.AutoString(length=500), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_playlist_owner_id", "playlist", ["owner_id"])

    op.create_table(
        "playlistitem",
        _id_column(primary_key=True),
        _id_column("playlist_id", sa.ForeignKey("playlist.id"), nullable=False),
        _id_column("video_id", sa.ForeignKey("video.id"), nullable=False),
        sa.Column("added_at", sa.DateTime(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.UniqueConstraint("playlist_id", "video_id", name="uq_playlistitem_video"),
    )
    op.create_index("ix_playlistitem_playlist_id", "playlistitem", ["playlist_id"])
    op.create_index("ix_playlistitem_video_id", "playlistitem", ["video_id"])

    op.create_table(
        "subscription",
        _id_column(primary_key=True),
        _id_column("subscriber_id", sa.ForeignKey("user.id"), nullable=False),
        _id_column("channel_id", sa.ForeignKey("user.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("subscriber_id", "channel_id", name="uq_subscription_pair"),
        sa.CheckConstraint("subscriber_id <> channel_id", name="ck_subscription_not_self"),
    )
    op.create_index("ix_subscription_subscriber_id", "subscription", ["subscriber_id"])
    op.create_index("ix_subscription_channel_id", "subscription", ["channel_id"])


def downgrade() -> None:
    for table in ("subscription", "playlistitem", "playlist", "likes", "tweet", "comment", "video", "user"):
        op.drop_table(table)
