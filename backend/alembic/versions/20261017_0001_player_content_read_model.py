"""player content read model

Revision ID: 20261017_0001
Revises:
Create Date: 2026-10-17 09:00:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "20261017_0001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "tenants",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("emergency_content_type", sa.String(length=16), nullable=True),
        sa.Column("emergency_content_id", sa.Uuid(), nullable=True),
        sa.Column("emergency_started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("emergency_duration_minutes", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint(
            "emergency_content_type IS NULL"
            " OR emergency_content_type IN ('scene','layout','playlist','media')",
            name="ck_tenants_emergency_content_type",
        ),
        sa.CheckConstraint(
            "emergency_duration_minutes IS NULL OR emergency_duration_minutes > 0",
            name="ck_tenants_emergency_duration",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "media_assets",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("tenant_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("type", sa.String(length=32), nullable=False),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("thumbnail_url", sa.Text(), nullable=True),
        sa.Column("duration", sa.Float(), nullable=True),
        sa.Column("width", sa.Integer(), nullable=True),
        sa.Column("height", sa.Integer(), nullable=True),
        sa.Column("config_json", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "playlists",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("tenant_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("default_duration", sa.Integer(), nullable=True),
        sa.Column("transition_effect", sa.String(length=32), nullable=True),
        sa.Column("shuffle", sa.Boolean(), nullable=True),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "playlist_items",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("playlist_id", sa.Uuid(), nullable=False),
        sa.Column("position", sa.Integer(), server_default="0", nullable=False),
        sa.Column("item_type", sa.String(length=32), server_default="media", nullable=False),
        sa.Column("item_id", sa.Uuid(), nullable=True),
        sa.Column("duration", sa.Float(), nullable=True),
        sa.ForeignKeyConstraint(["playlist_id"], ["playlists.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["item_id"], ["media_assets.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_playlist_items_playlist_position",
        "playlist_items",
        ["playlist_id", "position"],
    )

    op.create_table(
        "layouts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("tenant_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "layout_zones",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("layout_id", sa.Uuid(), nullable=False),
        sa.Column("zone_name", sa.String(length=128), nullable=False),
        sa.Column("x_percent", sa.Float(), nullable=False),
        sa.Column("y_percent", sa.Float(), nullable=False),
        sa.Column("width_percent", sa.Float(), nullable=False),
        sa.Column("height_percent", sa.Float(), nullable=False),
        sa.Column("z_index", sa.Integer(), server_default="0", nullable=False),
        sa.Column("assigned_playlist_id", sa.Uuid(), nullable=True),
        sa.Column("assigned_media_id", sa.Uuid(), nullable=True),
        sa.ForeignKeyConstraint(["layout_id"], ["layouts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["assigned_playlist_id"], ["playlists.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["assigned_media_id"], ["media_assets.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_layout_zones_layout_id", "layout_zones", ["layout_id"])

    op.create_table(
        "scene_language_groups",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("tenant_id", sa.Uuid(), nullable=False),
        sa.Column("default_language", sa.String(length=16), server_default="en", nullable=False),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "scenes",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("tenant_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("layout_id", sa.Uuid(), nullable=True),
        sa.Column("primary_playlist_id", sa.Uuid(), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column("language_group_id", sa.Uuid(), nullable=True),
        sa.Column("language_code", sa.String(length=16), server_default="en", nullable=False),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["layout_id"], ["layouts.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["primary_playlist_id"], ["playlists.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(
            ["language_group_id"],
            ["scene_language_groups.id"],
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "language_group_id",
            "language_code",
            name="uq_scenes_language_group_language",
        ),
    )
    op.create_index("ix_scenes_tenant_id", "scenes", ["tenant_id"])
    op.create_index("ix_scenes_language_group_id", "scenes", ["language_group_id"])

    op.create_table(
        "schedules",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("tenant_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "schedule_entries",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("schedule_id", sa.Uuid(), nullable=False),
        sa.Column("target_type", sa.String(length=16), nullable=False),
        sa.Column("target_id", sa.Uuid(), nullable=True),
        sa.Column("content_type", sa.String(length=16), nullable=True),
        sa.Column("content_id", sa.Uuid(), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column("priority", sa.Integer(), server_default="0", nullable=False),
        sa.Column("days_of_week", postgresql.ARRAY(sa.SmallInteger()), nullable=True),
        sa.Column("start_time", sa.Time(), nullable=True),
        sa.Column("end_time", sa.Time(), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.CheckConstraint(
            "target_type IN ('scene','playlist','layout','media','screen','screen_group','all')",
            name="ck_schedule_entries_target_type",
        ),
        sa.CheckConstraint(
            "content_type IS NULL OR content_type IN ('playlist','layout','media')",
            name="ck_schedule_entries_content_type",
        ),
        sa.ForeignKeyConstraint(["schedule_id"], ["schedules.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_schedule_entries_schedule_id", "schedule_entries", ["schedule_id"])

    op.create_table(
        "screen_groups",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("tenant_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("active_scene_id", sa.Uuid(), nullable=True),
        sa.Column("assigned_schedule_id", sa.Uuid(), nullable=True),
        sa.Column("display_language", sa.String(length=16), nullable=True),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["active_scene_id"], ["scenes.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["assigned_schedule_id"], ["schedules.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_screen_groups_tenant_id", "screen_groups", ["tenant_id"])
    op.create_index("ix_screen_groups_assigned_schedule_id", "screen_groups", ["assigned_schedule_id"])

    op.create_table(
        "tv_devices",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("tenant_id", sa.Uuid(), nullable=False),
        sa.Column("device_name", sa.String(length=255), nullable=False),
        sa.Column("screen_group_id", sa.Uuid(), nullable=True),
        sa.Column("location_id", sa.Uuid(), nullable=True),
        sa.Column("timezone", sa.String(length=64), nullable=True),
        sa.Column("display_language", sa.String(length=16), nullable=True),
        sa.Column("active_scene_id", sa.Uuid(), nullable=True),
        sa.Column("assigned_schedule_id", sa.Uuid(), nullable=True),
        sa.Column("assigned_layout_id", sa.Uuid(), nullable=True),
        sa.Column("assigned_playlist_id", sa.Uuid(), nullable=True),
        sa.Column("last_seen", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_online", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["screen_group_id"], ["screen_groups.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["active_scene_id"], ["scenes.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["assigned_schedule_id"], ["schedules.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["assigned_layout_id"], ["layouts.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["assigned_playlist_id"], ["playlists.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_tv_devices_tenant_id", "tv_devices", ["tenant_id"])
    op.create_index("ix_tv_devices_screen_group_id", "tv_devices", ["screen_group_id"])
    op.create_index("ix_tv_devices_location_id", "tv_devices", ["location_id"])

    op.create_table(
        "campaigns",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("tenant_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("status", sa.String(length=16), server_default="draft", nullable=False),
        sa.Column("start_at", sa.DateTime(timezone=False), nullable=True),
        sa.Column("end_at", sa.DateTime(timezone=False), nullable=True),
        sa.Column("priority", sa.Integer(), server_default="0", nullable=False),
        sa.CheckConstraint(
            "status IN ('draft','scheduled','active','completed','paused')",
            name="ck_campaigns_status",
        ),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_campaigns_tenant_status", "campaigns", ["tenant_id", "status"])

    op.create_table(
        "campaign_targets",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("campaign_id", sa.Uuid(), nullable=False),
        sa.Column("target_type", sa.String(length=16), nullable=False),
        sa.Column("target_id", sa.Uuid(), nullable=True),
        sa.CheckConstraint(
            "target_type IN ('screen','screen_group','location','all')",
            name="ck_campaign_targets_target_type",
        ),
        sa.CheckConstraint(
            "(target_type = 'all') = (target_id IS NULL)",
            name="ck_campaign_targets_target_id",
        ),
        sa.ForeignKeyConstraint(["campaign_id"], ["campaigns.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_campaign_targets_campaign_id", "campaign_targets", ["campaign_id"])

    op.create_table(
        "campaign_contents",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("campaign_id", sa.Uuid(), nullable=False),
        sa.Column("content_type", sa.String(length=16), nullable=False),
        sa.Column("content_id", sa.Uuid(), nullable=False),
        sa.Column("weight", sa.Integer(), server_default="1", nullable=True),
        sa.Column("position", sa.Integer(), server_default="0", nullable=False),
        sa.CheckConstraint(
            "content_type IN ('playlist','layout','media')",
            name="ck_campaign_contents_content_type",
        ),
        sa.ForeignKeyConstraint(["campaign_id"], ["campaigns.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_campaign_contents_campaign_id", "campaign_contents", ["campaign_id"])


def downgrade() -> None:
    op.drop_index("ix_campaign_contents_campaign_id", table_name="campaign_contents")
    op.drop_table("campaign_contents")
    op.drop_index("ix_campaign_targets_campaign_id", table_name="campaign_targets")
    op.drop_table("campaign_targets")
    op.drop_index("ix_campaigns_tenant_status", table_name="campaigns")
    op.drop_table("campaigns")
    op.drop_index("ix_tv_devices_location_id", table_name="tv_devices")
    op.drop_index("ix_tv_devices_screen_group_id", table_name="tv_devices")
    op.drop_index("ix_tv_devices_tenant_id", table_name="tv_devices")
    op.drop_table("tv_devices")
    op.drop_index("ix_screen_groups_assigned_schedule_id", table_name="screen_groups")
    op.drop_index("ix_screen_groups_tenant_id", table_name="screen_groups")
    op.drop_table("screen_groups")
    op.drop_index("ix_schedule_entries_schedule_id", table_name="schedule_entries")
    op.drop_table("schedule_entries")
    op.drop_table("schedules")
    op.drop_index("ix_scenes_language_group_id", table_name="scenes")
    op.drop_index("ix_scenes_tenant_id", table_name="scenes")
    op.drop_table("scenes")
    op.drop_table("scene_language_groups")
    op.drop_index("ix_layout_zones_layout_id", table_name="layout_zones")
    op.drop_table("layout_zones")
    op.drop_table("layouts")
    op.drop_index("ix_playlist_items_playlist_position", table_name="playlist_items")
    op.drop_table("playlist_items")
    op.drop_table("playlists")
    op.drop_table("media_assets")
    op.drop_table("tenants")
