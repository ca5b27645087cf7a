"""Boundary schemas for Google Reader API payloads returned by FreshRSS.

Every field is optional: FreshRSS omits keys freely and the mapper applies
its own defaults.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="ignore")


class Link(_Lenient):
    href: str = ""


class Origin(_Lenient):
    title: str | None = None
    stream_id: str | None = Field(default=None, alias="streamId")


class Annotation(_Lenient):
    id: str | None = None


class Content(_Lenient):
    content: str = ""


class FreshRSSItem(_Lenient):
    """A single item from ``stream/contents`` or ``stream/items/contents``."""

    id: str = ""
    title: str | None = None
    published: int | float | None = None
    alternate: list[Link] = Field(default_factory=list)
    canonical: list[Link] = Field(default_factory=list)
    origin: Origin | None = None
    categories: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    annotations: list[Annotation] = Field(default_factory=list)
    summary: Content | None = None
    content: Content | None = None

    @field_validator("alternate", "canonical", "categories", "tags", "annotations", mode="before")
    @classmethod
    def null_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def html(self) -> str:
        if self.summary and self.summary.content:
            return self.summary.content
        if self.content and self.content.content:
            return self.content.content
        return ""


class StreamContents(_Lenient):
    items: list[FreshRSSItem] = Field(default_factory=list)
    continuation: str | None = None

    @field_validator("items", mode="before")
    @classmethod
    def null_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class FreshRSSTag(_Lenient):
    id: str
    type: str | None = None
    count: int | None = None


class TagList(_Lenient):
    tags: list[FreshRSSTag] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def null_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value
