"""
Catalog data models
"""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ItemType(str, Enum):
    """Item type, fixed at creation"""

    NOTE = "note"
    LINK = "link"
    DOCUMENT = "document"
    VIDEO = "video"

    @property
    def uses_url(self) -> bool:
        return self in (ItemType.LINK, ItemType.VIDEO)


def _normalize_tags(value: Any) -> list[str]:
    """Accept a list or a comma-separated string of tags"""
    if value is None:
        return []
    if isinstance(value, str):
        raw = value.split(",")
    elif isinstance(value, list | tuple):
        raw = [str(tag) for tag in value if tag is not None]
    else:
        raise ValueError("tags must be a list or a comma-separated string")
    return [tag.strip() for tag in raw if tag.strip()]


class Item(BaseModel):
    """A stored content record as returned by the remote store"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    id: str = Field(alias="_id", description="Remote identifier")
    title: str = ""
    type: ItemType
    tags: list[str] = Field(default_factory=list)
    content: str | None = None
    url: str | None = None
    file_path: str | None = Field(default=None, alias="filePath")
    category_sub: str | None = Field(default=None, alias="categorySub")
    created_at: datetime | None = Field(default=None, alias="createdAt")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> str:
        if v is None or v == "":
            raise ValueError("item identifier is required")
        return str(v)

    @field_validator("title", mode="before")
    @classmethod
    def coerce_title(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, v: Any) -> list[str]:
        return _normalize_tags(v)

    @property
    def payload(self) -> str | None:
        """The type-specific payload; other payload fields are ignored"""
        if self.type is ItemType.NOTE:
            return self.content
        if self.type.uses_url:
            return self.url
        return self.file_path


class ItemDraft(BaseModel):
    """Payload for creating an item"""

    title: str
    type: ItemType = ItemType.NOTE
    tags: list[str] = Field(default_factory=list)
    content: str | None = None
    url: str | None = None
    file: Path | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, v: Any) -> list[str]:
        return _normalize_tags(v)

    def fields(self) -> dict[str, Any]:
        """Plain fields relevant to the draft's type"""
        return _type_fields(
            self.type, self.title, self.tags, self.content, self.url
        )


class ItemPatch(BaseModel):
    """Partial payload for updating an item"""

    title: str | None = None
    type: ItemType | None = None
    tags: list[str] | None = None
    content: str | None = None
    url: str | None = None
    file: Path | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, v: Any) -> list[str] | None:
        if v is None:
            return None
        return _normalize_tags(v)

    @property
    def degrades_to_json(self) -> bool:
        """A document edit without a new file is sent as plain JSON"""
        return self.type is ItemType.DOCUMENT and self.file is None

    def fields(self) -> dict[str, Any]:
        return _type_fields(
            self.type, self.title, self.tags, self.content, self.url
        )


def _type_fields(
    item_type: ItemType | None,
    title: str | None,
    tags: list[str] | None,
    content: str | None,
    url: str | None,
) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    if title is not None:
        fields["title"] = title
    if item_type is not None:
        fields["type"] = item_type.value
    if tags is not None:
        fields["tags"] = tags
    if content is not None and item_type in (None, ItemType.NOTE):
        fields["content"] = content
    if url is not None and (item_type is None or item_type.uses_url):
        fields["url"] = url
    return fields


def resolve_file_url(value: str | None, api_base: str) -> str | None:
    """Turn a stored file reference into an absolute URL"""
    if not value:
        return None
    if value.lower().startswith(("http://", "https://")):
        return value
    base = api_base.rstrip("/")
    if not base:
        return value
    return f"{base}/{value.lstrip('/')}"
