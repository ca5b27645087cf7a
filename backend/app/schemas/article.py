"""Article schemas for API request/response validation."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Verdict(BaseModel):
    """AI verdict attached to an article by the enrichment pipeline."""

    model_config = ConfigDict(extra="allow")

    type: str = ""
    score: int | float = 0
    importance: str | None = None

    @field_validator("score", mode="before")
    @classmethod
    def missing_score_is_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("type", mode="before")
    @classmethod
    def missing_type_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class Article(BaseModel):
    """Article as served to the UI.

    Field names follow the JSON the front end has always consumed, hence the
    camelCase aliases next to the snake_case attributes.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    title: str = ""
    link: str = ""
    source_name: str = Field(default="", alias="sourceName")
    published: str = ""
    created_at: str | None = None
    n8n_processing_date: str | None = None
    category: str = ""
    briefing_section: str = Field(default="", alias="briefingSection")
    keywords: list[str] = Field(default_factory=list)
    verdict: Verdict | None = None
    summary: str = ""
    tldr: str = ""
    highlights: str = ""
    critiques: str = ""
    market_take: str = Field(default="", alias="marketTake")
    tags: list[str] = Field(default_factory=list)

    @property
    def score(self) -> int | float:
        return self.verdict.score if self.verdict else 0


class Tag(BaseModel):
    """A FreshRSS folder or user label."""

    id: str
    label: str
    count: int | None = None


class AvailableFilters(BaseModel):
    categories: list[Tag]
    tags: list[Tag]


class StreamResponse(BaseModel):
    articles: list[Article]
    continuation: str | None = None


class ArticleContent(BaseModel):
    title: str
    content: str
    source: str


class ArticleStateUpdate(BaseModel):
    """Body of ``POST /articles/state``.

    With only ``articleIds`` the request reads states; any of the other
    fields turns it into an update.
    """

    model_config = ConfigDict(populate_by_name=True)

    article_id: str | None = Field(default=None, alias="articleId")
    article_ids: list[str] | None = Field(default=None, alias="articleIds")
    action: str | None = None
    is_adding: bool | None = Field(default=None, alias="isAdding")
    tags_to_add: list[str] = Field(default_factory=list, alias="tagsToAdd")
    tags_to_remove: list[str] = Field(default_factory=list, alias="tagsToRemove")

    @property
    def ids(self) -> list[str]:
        if self.article_ids:
            return self.article_ids
        return [self.article_id] if self.article_id else []

    @property
    def is_update(self) -> bool:
        return bool(
            self.action
            or self.is_adding is not None
            or self.tags_to_add
            or self.tags_to_remove
        )


GroupedArticles = dict[str, list[Article]]


def dump_grouped(groups: GroupedArticles) -> dict[str, list[dict[str, Any]]]:
    return {
        section: [article.model_dump(by_alias=True) for article in articles]
        for section, articles in groups.items()
    }
