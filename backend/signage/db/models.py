import uuid
from datetime import date, datetime, time

from sqlalchemy import (
    ARRAY,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    SmallInteger,
    String,
    Text,
    Time,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from signage.db.base import Base


class Tenant(Base):
    __tablename__ = "tenants"
    __table_args__ = (
        CheckConstraint(
            "emergency_content_type IS NULL"
            " OR emergency_content_type IN ('scene','layout','playlist','media')",
            name="ck_tenants_emergency_content_type",
        ),
        CheckConstraint(
            "emergency_duration_minutes IS NULL OR emergency_duration_minutes > 0",
            name="ck_tenants_emergency_duration",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    emergency_content_type: Mapped[str | None] = mapped_column(String(16), nullable=True)
    emergency_content_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    emergency_started_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    emergency_duration_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


class ScreenGroup(Base):
    __tablename__ = "screen_groups"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    active_scene_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("scenes.id", ondelete="SET NULL"),
        nullable=True,
    )
    assigned_schedule_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("schedules.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    display_language: Mapped[str | None] = mapped_column(String(16), nullable=True)

    devices: Mapped[list["TvDevice"]] = relationship(back_populates="screen_group")


class TvDevice(Base):
    __tablename__ = "tv_devices"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    device_name: Mapped[str] = mapped_column(String(255), nullable=False)
    screen_group_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("screen_groups.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    location_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True, index=True)
    timezone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    display_language: Mapped[str | None] = mapped_column(String(16), nullable=True)
    active_scene_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("scenes.id", ondelete="SET NULL"),
        nullable=True,
    )
    assigned_schedule_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("schedules.id", ondelete="SET NULL"),
        nullable=True,
    )
    assigned_layout_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("layouts.id", ondelete="SET NULL"),
        nullable=True,
    )
    assigned_playlist_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("playlists.id", ondelete="SET NULL"),
        nullable=True,
    )
    last_seen: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    is_online: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default="false",
    )

    screen_group: Mapped["ScreenGroup | None"] = relationship(back_populates="devices")


class SceneLanguageGroup(Base):
    __tablename__ = "scene_language_groups"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
    )
    default_language: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default="en",
        server_default="en",
    )


class Scene(Base):
    __tablename__ = "scenes"
    __table_args__ = (
        UniqueConstraint(
            "language_group_id",
            "language_code",
            name="uq_scenes_language_group_language",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    layout_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("layouts.id", ondelete="SET NULL"),
        nullable=True,
    )
    primary_playlist_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("playlists.id", ondelete="SET NULL"),
        nullable=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default="true",
    )
    language_group_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("scene_language_groups.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    language_code: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default="en",
        server_default="en",
    )


class MediaAsset(Base):
    __tablename__ = "media_assets"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    thumbnail_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    duration: Mapped[float | None] = mapped_column(Float, nullable=True)
    width: Mapped[int | None] = mapped_column(Integer, nullable=True)
    height: Mapped[int | None] = mapped_column(Integer, nullable=True)
    config_json: Mapped[dict | None] = mapped_column(JSONB, nullable=True)


class Playlist(Base):
    __tablename__ = "playlists"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    default_duration: Mapped[int | None] = mapped_column(Integer, nullable=True)
    transition_effect: Mapped[str | None] = mapped_column(String(32), nullable=True)
    shuffle: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    items: Mapped[list["PlaylistItem"]] = relationship(
        back_populates="playlist",
        cascade="all, delete-orphan",
        order_by="PlaylistItem.position",
    )


class PlaylistItem(Base):
    __tablename__ = "playlist_items"
    __table_args__ = (
        Index("ix_playlist_items_playlist_position", "playlist_id", "position"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    playlist_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("playlists.id", ondelete="CASCADE"),
        nullable=False,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    item_type: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default="media",
        server_default="media",
    )
    item_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("media_assets.id", ondelete="SET NULL"),
        nullable=True,
    )
    duration: Mapped[float | None] = mapped_column(Float, nullable=True)

    playlist: Mapped["Playlist"] = relationship(back_populates="items")
    media: Mapped["MediaAsset | None"] = relationship()


class Layout(Base):
    __tablename__ = "layouts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    zones: Mapped[list["LayoutZone"]] = relationship(
        back_populates="layout",
        cascade="all, delete-orphan",
        order_by="LayoutZone.z_index",
    )


class LayoutZone(Base):
    __tablename__ = "layout_zones"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    layout_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("layouts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    zone_name: Mapped[str] = mapped_column(String(128), nullable=False)
    x_percent: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    y_percent: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    width_percent: Mapped[float] = mapped_column(Float, nullable=False, default=100.0)
    height_percent: Mapped[float] = mapped_column(Float, nullable=False, default=100.0)
    z_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    assigned_playlist_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("playlists.id", ondelete="SET NULL"),
        nullable=True,
    )
    assigned_media_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("media_assets.id", ondelete="SET NULL"),
        nullable=True,
    )

    layout: Mapped["Layout"] = relationship(back_populates="zones")


class Schedule(Base):
    __tablename__ = "schedules"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default="true",
    )

    entries: Mapped[list["ScheduleEntry"]] = relationship(
        back_populates="schedule",
        cascade="all, delete-orphan",
    )


class ScheduleEntry(Base):
    __tablename__ = "schedule_entries"
    __table_args__ = (
        CheckConstraint(
            "target_type IN ('scene','playlist','layout','media','screen','screen_group','all')",
            name="ck_schedule_entries_target_type",
        ),
        CheckConstraint(
            "content_type IS NULL OR content_type IN ('playlist','layout','media')",
            name="ck_schedule_entries_content_type",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    schedule_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("schedules.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    target_type: Mapped[str] = mapped_column(String(16), nullable=False)
    target_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    content_type: Mapped[str | None] = mapped_column(String(16), nullable=True)
    content_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default="true",
    )
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    days_of_week: Mapped[list[int] | None] = mapped_column(ARRAY(SmallInteger), nullable=True)
    start_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    end_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    schedule: Mapped["Schedule"] = relationship(back_populates="entries")


class Campaign(Base):
    __tablename__ = "campaigns"
    __table_args__ = (
        CheckConstraint(
            "status IN ('draft','scheduled','active','completed','paused')",
            name="ck_campaigns_status",
        ),
        Index("ix_campaigns_tenant_status", "tenant_id", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default="draft",
        server_default="draft",
    )
    # Wall-clock bounds, evaluated in each screen's own timezone.
    start_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
    end_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")

    targets: Mapped[list["CampaignTarget"]] = relationship(
        back_populates="campaign",
        cascade="all, delete-orphan",
    )
    contents: Mapped[list["CampaignContent"]] = relationship(
        back_populates="campaign",
        cascade="all, delete-orphan",
        order_by="CampaignContent.position",
    )


class CampaignTarget(Base):
    __tablename__ = "campaign_targets"
    __table_args__ = (
        CheckConstraint(
            "target_type IN ('screen','screen_group','location','all')",
            name="ck_campaign_targets_target_type",
        ),
        CheckConstraint(
            "(target_type = 'all') = (target_id IS NULL)",
            name="ck_campaign_targets_target_id",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    campaign_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("campaigns.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    target_type: Mapped[str] = mapped_column(String(16), nullable=False)
    target_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)

    campaign: Mapped["Campaign"] = relationship(back_populates="targets")


class CampaignContent(Base):
    __tablename__ = "campaign_contents"
    __table_args__ = (
        CheckConstraint(
            "content_type IN ('playlist','layout','media')",
            name="ck_campaign_contents_content_type",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    campaign_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("campaigns.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    content_type: Mapped[str] = mapped_column(String(16), nullable=False)
    content_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    weight: Mapped[int | None] = mapped_column(Integer, nullable=True, default=1, server_default="1")
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")

    campaign: Mapped["Campaign"] = relationship(back_populates="contents")
