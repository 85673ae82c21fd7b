"""
Data models for the live-stream discovery pipeline.
"""
import re
from dataclasses import dataclass, field
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
YOUTUBE_CHANNEL_URL = "https://www.youtube.com/channel/{channel_id}"


@dataclass
class RawDiscoveredStream:
    """A live stream entry pulled out of a search results page."""
    video_id: str
    title: str
    channel_title: str
    channel_id: str
    thumbnail_url: str
    viewer_count_raw: Optional[str] = None
    published_at: Optional[str] = None


@dataclass
class DetectedCategory:
    """A category match for one stream. Score is priority-scaled."""
    category_id: str
    score: float


class CategoryRule(BaseModel):
    """Administrator-defined category matcher.

    `include` patterns are OR-combined and at least one must match;
    any matching `exclude` pattern vetoes the rule.
    """
    id: str
    name: str
    include: list[str] = Field(default_factory=list)
    exclude: list[str] = Field(default_factory=list)
    priority: int = 1
    enabled: bool = True

    model_config = ConfigDict(frozen=True)

    @field_validator("include", "exclude")
    @classmethod
    def _check_patterns(cls, patterns: list[str]) -> list[str]:
        for pattern in patterns:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"Invalid pattern {pattern!r}: {e}") from e
        return patterns


class DetectedCategoryRecord(BaseModel):
    category_id: str = Field(serialization_alias="categoryId")
    score: float


class LiveStreamRecord(BaseModel):
    """JSON shape handed to the API / presentation layer."""
    id: str
    name: str
    platform: str = "youtube"
    thumbnail_url: str = Field(serialization_alias="thumbnailUrl")
    channel_url: str = Field(serialization_alias="channelUrl")
    stream_url: str = Field(serialization_alias="streamUrl")
    title: str
    viewer_count: Optional[int] = Field(default=None, serialization_alias="viewerCount")
    started_at: Optional[str] = Field(default=None, serialization_alias="startedAt")
    detected_categories: list[DetectedCategoryRecord] = Field(
        default_factory=list, serialization_alias="detectedCategories"
    )
    primary_category_id: Optional[str] = Field(
        default=None, serialization_alias="primaryCategoryId"
    )


@dataclass
class LiveStream:
    """A discovered stream after viewer-count parsing and classification."""
    video_id: str
    title: str
    channel_title: str
    channel_id: str
    thumbnail_url: str
    viewer_count_raw: Optional[str] = None
    published_at: Optional[str] = None
    viewer_count: Optional[int] = None
    detected_categories: list[DetectedCategory] = field(default_factory=list)
    primary_category_id: Optional[str] = None

    @property
    def stream_url(self) -> str:
        return YOUTUBE_WATCH_URL.format(video_id=self.video_id)

    @property
    def channel_url(self) -> str:
        if self.channel_id:
            return YOUTUBE_CHANNEL_URL.format(channel_id=self.channel_id)
        return self.stream_url

    @property
    def record_id(self) -> str:
        return f"youtube-{self.channel_id or 'unknown'}-{self.video_id}"

    def to_record(self) -> LiveStreamRecord:
        return LiveStreamRecord(
            id=self.record_id,
            name=self.channel_title or "Unknown Channel",
            thumbnail_url=self.thumbnail_url,
            channel_url=self.channel_url,
            stream_url=self.stream_url,
            title=self.title or "Untitled Live Stream",
            viewer_count=self.viewer_count,
            started_at=self.published_at,
            detected_categories=[
                DetectedCategoryRecord(category_id=d.category_id, score=d.score)
                for d in self.detected_categories
            ],
            primary_category_id=self.primary_category_id,
        )
