"""Initial schema for AthLinked

Revision ID: 20260101_000000
Revises: None
Create Date: 2026-01-01 00:00:00.000000

This is the initial migration that creates every table of the AthLinked
service:
- Accounts (users, refresh tokens)
- Profile sections (academic, achievements, athletic performance, clubs,
  character and leadership, health, video media, social handles)
- Network (follows, connection requests, connections)
- Clips (clips, comments, likes, saved clips)
- Messaging (conversations, participants, messages, read receipts)
- Notifications and favorite athletes

Revision format: YYYYMMDD_HHMMSS_description

"""

from typing import List, Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20260101_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SECTION_TABLES = (
    "academic_backgrounds",
    "achievements",
    "athletic_performance",
    "competition_clubs",
    "character_leadership",
    "health_readiness",
    "video_media",
    "social_handles",
)


def _section_columns(table: str) -> List[sa.schema.SchemaItem]:
    """Columns and constraints shared by every profile section table."""
    return [
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.Index(f"ix_{table}_user_id", "user_id"),
        sa.Index(f"ix_{table}_created_at", "created_at"),
    ]


def upgrade() -> None:
    """Create all tables."""

    # Create users table
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("username", sa.String(50), nullable=True),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("user_type", sa.String(20), nullable=False),
        sa.Column("parent_email", sa.String(255), nullable=True),
        sa.Column("full_name", sa.String(255), nullable=True),
        sa.Column("profile_url", sa.String(), nullable=True),
        sa.Column("cover_url", sa.String(), nullable=True),
        sa.Column("bio", sa.String(), nullable=True),
        sa.Column("education", sa.String(), nullable=True),
        sa.Column("city", sa.String(255), nullable=True),
        sa.Column("primary_sport", sa.String(100), nullable=True),
        sa.Column("sports_played", sa.JSON(), nullable=True),
        sa.Column("dob", sa.Date(), nullable=True),
        sa.Column("is_featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("followers", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("following", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_users_email", "email", unique=True),
        sa.Index("ix_users_username", "username", unique=True),
        sa.Index("ix_users_is_featured", "is_featured"),
        sa.Index("ix_users_created_at", "created_at"),
    )

    # Create refresh_tokens table
    op.create_table(
        "refresh_tokens",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("token", sa.String(255), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("revoked_at", sa.DateTime(), nullable=True),
        sa.Column("device_info", sa.String(), nullable=True),
        sa.Column("ip_address", sa.String(64), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.Index("ix_refresh_tokens_user_id", "user_id"),
        sa.Index("ix_refresh_tokens_token", "token", unique=True),
        sa.Index("ix_refresh_tokens_expires_at", "expires_at"),
    )

    # Create profile section tables
    op.create_table(
        "academic_backgrounds",
        *_section_columns("academic_backgrounds"),
        sa.Column("school", sa.String(255), nullable=False),
        sa.Column("degree", sa.String(255), nullable=True),
        sa.Column("qualification", sa.String(255), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("degree_pdf", sa.String(), nullable=True),
        sa.Column("academic_gpa", sa.String(20), nullable=True),
        sa.Column("sat_act_score", sa.String(20), nullable=True),
        sa.Column("academic_honors", sa.String(), nullable=True),
        sa.Column("college_eligibility_status", sa.String(100), nullable=True),
        sa.Column("graduation_year", sa.String(10), nullable=True),
        sa.Column("primary_state_region", sa.String(100), nullable=True),
        sa.Column("preferred_college_regions", sa.String(), nullable=True),
        sa.Column("willingness_to_relocate", sa.String(20), nullable=True),
        sa.Column("gender", sa.String(20), nullable=True),
    )

    op.create_table(
        "achievements",
        *_section_columns("achievements"),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("organization", sa.String(255), nullable=True),
        sa.Column("date_awarded", sa.Date(), nullable=True),
        sa.Column("sport", sa.String(100), nullable=True),
        sa.Column("position_event", sa.String(255), nullable=True),
        sa.Column("achievement_type", sa.String(100), nullable=True),
        sa.Column("level", sa.String(100), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("media_pdf", sa.String(), nullable=True),
    )

    op.create_table(
        "athletic_performance",
        *_section_columns("athletic_performance"),
        sa.Column("height", sa.String(20), nullable=True),
        sa.Column("weight", sa.String(20), nullable=True),
        sa.Column("sport", sa.String(100), nullable=True),
        sa.Column("athlete_handedness", sa.String(20), nullable=True),
        sa.Column("dominant_side_or_foot", sa.String(20), nullable=True),
        sa.Column("jersey_number", sa.String(10), nullable=True),
        sa.Column("training_hours_per_week", sa.String(10), nullable=True),
        sa.Column("multi_sport_athlete", sa.String(10), nullable=True),
        sa.Column("coach_verified_profile", sa.String(10), nullable=True),
        sa.Column("hand", sa.String(20), nullable=True),
        sa.Column("arm", sa.String(20), nullable=True),
        sa.Index("ix_athletic_performance_sport", "sport"),
    )

    op.create_table(
        "competition_clubs",
        *_section_columns("competition_clubs"),
        sa.Column("club_or_travel_team_name", sa.String(255), nullable=False),
        sa.Column("team_level", sa.String(100), nullable=True),
        sa.Column("league_or_organization_name", sa.String(255), nullable=True),
        sa.Column("tournament_participation", sa.String(), nullable=True),
    )

    op.create_table(
        "character_leadership",
        *_section_columns("character_leadership"),
        sa.Column("team_captain", sa.String(10), nullable=True),
        sa.Column("leadership_roles", sa.String(), nullable=True),
        sa.Column("languages_spoken", sa.JSON(), nullable=True),
        sa.Column("community_service", sa.String(), nullable=True),
    )

    op.create_table(
        "health_readiness",
        *_section_columns("health_readiness"),
        sa.Column("injury_history", sa.String(), nullable=True),
        sa.Column("resting_heart_rate", sa.String(20), nullable=True),
        sa.Column("endurance_metric", sa.String(100), nullable=True),
    )

    op.create_table(
        "video_media",
        *_section_columns("video_media"),
        sa.Column("highlight_video_link", sa.String(), nullable=True),
        sa.Column("video_status", sa.String(50), nullable=True),
        sa.Column("verified_media_profile", sa.String(255), nullable=True),
    )

    op.create_table(
        "social_handles",
        *_section_columns("social_handles"),
        sa.Column("platform", sa.String(50), nullable=False),
        sa.Column("url", sa.String(500), nullable=False),
    )

    # Create user_follows table
    op.create_table(
        "user_follows",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("follower_id", sa.Uuid(), nullable=False),
        sa.Column("following_id", sa.Uuid(), nullable=False),
        sa.Column("follower_username", sa.String(255), nullable=True),
        sa.Column("following_username", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["follower_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["following_id"], ["users.id"]),
        sa.UniqueConstraint("follower_id", "following_id", name="uq_user_follows_pair"),
        sa.Index("ix_user_follows_follower_id", "follower_id"),
        sa.Index("ix_user_follows_following_id", "following_id"),
        sa.Index("ix_user_follows_created_at", "created_at"),
    )

    # Create connection_requests table
    op.create_table(
        "connection_requests",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("requester_id", sa.Uuid(), nullable=False),
        sa.Column("receiver_id", sa.Uuid(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["requester_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["receiver_id"], ["users.id"]),
        sa.UniqueConstraint("requester_id", "receiver_id", name="uq_connection_requests_pair"),
        sa.Index("ix_connection_requests_requester_id", "requester_id"),
        sa.Index("ix_connection_requests_receiver_id", "receiver_id"),
        sa.Index("ix_connection_requests_created_at", "created_at"),
    )

    # Create user_connections table
    op.create_table(
        "user_connections",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id_1", sa.Uuid(), nullable=False),
        sa.Column("user_id_2", sa.Uuid(), nullable=False),
        sa.Column("full_name_1", sa.String(255), nullable=True),
        sa.Column("full_name_2", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id_1"], ["users.id"]),
        sa.ForeignKeyConstraint(["user_id_2"], ["users.id"]),
        sa.UniqueConstraint("user_id_1", "user_id_2", name="uq_user_connections_pair"),
        sa.CheckConstraint("user_id_1 < user_id_2", name="ck_user_connections_order"),
        sa.Index("ix_user_connections_user_id_1", "user_id_1"),
        sa.Index("ix_user_connections_user_id_2", "user_id_2"),
    )

    # Create clips table
    op.create_table(
        "clips",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("username", sa.String(255), nullable=False),
        sa.Column("user_profile_url", sa.String(), nullable=True),
        sa.Column("video_url", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("like_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("comment_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.Index("ix_clips_user_id", "user_id"),
        sa.Index("ix_clips_created_at", "created_at"),
    )

    # Create clip_comments table
    op.create_table(
        "clip_comments",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("clip_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("comment", sa.String(), nullable=False),
        sa.Column("parent_comment_id", sa.Uuid(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["clip_id"], ["clips.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["parent_comment_id"], ["clip_comments.id"]),
        sa.Index("ix_clip_comments_clip_id", "clip_id"),
        sa.Index("ix_clip_comments_user_id", "user_id"),
        sa.Index("ix_clip_comments_parent_comment_id", "parent_comment_id"),
        sa.Index("ix_clip_comments_created_at", "created_at"),
    )

    # Create clip_likes table
    op.create_table(
        "clip_likes",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("clip_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["clip_id"], ["clips.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.UniqueConstraint("clip_id", "user_id", name="uq_clip_likes_pair"),
        sa.Index("ix_clip_likes_clip_id", "clip_id"),
        sa.Index("ix_clip_likes_user_id", "user_id"),
    )

    # Create saved_clips table
    op.create_table(
        "saved_clips",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("clip_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["clip_id"], ["clips.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.UniqueConstraint("clip_id", "user_id", name="uq_saved_clips_pair"),
        sa.Index("ix_saved_clips_clip_id", "clip_id"),
        sa.Index("ix_saved_clips_user_id", "user_id"),
        sa.Index("ix_saved_clips_created_at", "created_at"),
    )

    # Create conversations table
    op.create_table(
        "conversations",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("pair_key", sa.String(80), nullable=False),
        sa.Column("last_message", sa.String(), nullable=True),
        sa.Column("last_message_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_conversations_pair_key", "pair_key", unique=True),
        sa.Index("ix_conversations_last_message_at", "last_message_at"),
        sa.Index("ix_conversations_created_at", "created_at"),
    )

    # Create conversation_participants table
    op.create_table(
        "conversation_participants",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("conversation_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("user_name", sa.String(255), nullable=False),
        sa.Column("unread_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["conversation_id"], ["conversations.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.UniqueConstraint("conversation_id", "user_id", name="uq_conversation_participants_pair"),
        sa.Index("ix_conversation_participants_conversation_id", "conversation_id"),
        sa.Index("ix_conversation_participants_user_id", "user_id"),
    )

    # Create messages table
    op.create_table(
        "messages",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("conversation_id", sa.Uuid(), nullable=False),
        sa.Column("sender_id", sa.Uuid(), nullable=False),
        sa.Column("sender_name", sa.String(255), nullable=False),
        sa.Column("message", sa.String(), nullable=False, server_default=""),
        sa.Column("media_url", sa.String(), nullable=True),
        sa.Column("message_type", sa.String(20), nullable=False, server_default="text"),
        sa.Column("post_data", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["conversation_id"], ["conversations.id"]),
        sa.ForeignKeyConstraint(["sender_id"], ["users.id"]),
        sa.Index("ix_messages_conversation_id", "conversation_id"),
        sa.Index("ix_messages_sender_id", "sender_id"),
        sa.Index("ix_messages_created_at", "created_at"),
    )

    # Create message_reads table
    op.create_table(
        "message_reads",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("message_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("read_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["message_id"], ["messages.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.UniqueConstraint("message_id", "user_id", name="uq_message_reads_pair"),
        sa.Index("ix_message_reads_message_id", "message_id"),
        sa.Index("ix_message_reads_user_id", "user_id"),
    )

    # Create notifications table
    op.create_table(
        "notifications",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("recipient_user_id", sa.Uuid(), nullable=False),
        sa.Column("actor_user_id", sa.Uuid(), nullable=True),
        sa.Column("actor_full_name", sa.String(255), nullable=False),
        sa.Column("type", sa.String(30), nullable=False),
        sa.Column("entity_type", sa.String(20), nullable=False),
        sa.Column("entity_id", sa.Uuid(), nullable=False),
        sa.Column("message", sa.String(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["recipient_user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["actor_user_id"], ["users.id"]),
        sa.Index("ix_notifications_recipient_user_id", "recipient_user_id"),
        sa.Index("ix_notifications_is_read", "is_read"),
        sa.Index("ix_notifications_created_at", "created_at"),
    )

    # Create favorite_athletes table
    op.create_table(
        "favorite_athletes",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("coach_id", sa.Uuid(), nullable=False),
        sa.Column("athlete_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["coach_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["athlete_id"], ["users.id"]),
        sa.UniqueConstraint("coach_id", "athlete_id", name="uq_favorite_athletes_pair"),
        sa.Index("ix_favorite_athletes_coach_id", "coach_id"),
        sa.Index("ix_favorite_athletes_athlete_id", "athlete_id"),
        sa.Index("ix_favorite_athletes_created_at", "created_at"),
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("favorite_athletes")
    op.drop_table("notifications")
    op.drop_table("message_reads")
    op.drop_table("messages")
    op.drop_table("conversation_participants")
    op.drop_table("conversations")
    op.drop_table("saved_clips")
    op.drop_table("clip_likes")
    op.drop_table("clip_comments")
    op.drop_table("clips")
    op.drop_table("user_connections")
    op.drop_table("connection_requests")
    op.drop_table("user_follows")
    for table in reversed(SECTION_TABLES):
        op.drop_table(table)
    op.drop_table("refresh_tokens")
    op.drop_table("users")
