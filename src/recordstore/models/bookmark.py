"""Bookmark records: a titled link filed under a category, unique by URL."""

from pydantic import BaseModel, ConfigDict, Field

from recordstore.models.base import RecordModel


class BookmarkSchema(BaseModel):
    model_config = ConfigDict(extra="allow")

    Id: int = Field(default=0, ge=0, description="Assigned by the repository")
    Title: str = Field(..., min_length=1, pattern=r"^\s*\S", description="Display title")
    Url: str = Field(..., pattern=r"^https?://\S+$", description="Absolute http(s) URL")
    Category: str = Field(..., min_length=1, description="Grouping label")


class BookmarkModel(RecordModel):
    type_name = "Bookmark"
    schema = BookmarkSchema
    key = "Url"
