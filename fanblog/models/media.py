"""Uploaded media table."""

from datetime import datetime
from typing import cast

from sqlalchemy import DateTime, Index
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, SQLModel, String

from fanblog.models.blog import utcnow
from fanblog.schemas.enums import AppType, UploadedFrom


class MediaDB(SQLModel, table=True):
    __tablename__ = cast("declared_attr[str]", "media")

    __table_args__ = (Index("ix_media_app_type_file_name", "app_type", "file_name"),)

    id: int | None = Field(default=None, primary_key=True)
    file_name: str = Field(sa_column=Column(String(256), nullable=False))
    title: str | None = Field(default=None, sa_column=Column(String(256)))
    uploaded_on: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    width: int = Field(default=0, nullable=False)
    height: int = Field(default=0, nullable=False)
    resize_count: int = Field(default=0, nullable=False)
    content_type: str = Field(sa_column=Column(String(64), nullable=False))
    length: int = Field(default=0, nullable=False)
    app_type: str = Field(default=AppType.BLOG, sa_column=Column(String(16), nullable=False))
    uploaded_from: str = Field(
        default=UploadedFrom.BROWSER,
        sa_column=Column(String(16), nullable=False),
    )
    user_id: int = Field(default=0, nullable=False)


class MetaDB(SQLModel, table=True):
    """Key/value settings rows, e.g. ``blogsettings.defaultcategoryid``."""

    __tablename__ = cast("declared_attr[str]", "meta")

    id: int | None = Field(default=None, primary_key=True)
    key: str = Field(sa_column=Column(String(256), unique=True, nullable=False, index=True))
    value: str = Field(sa_column=Column(String(4000), nullable=False))
