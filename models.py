# models.py
from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

THUMBNAIL_URL_TEMPLATE = "https://i.ytimg.com/vi/{video_id}/hqdefault.jpg"

@dataclass(frozen=True)
class VideoSummary:
    """A single search result as returned by the search provider."""
    video_id: str
    title: str
    channel: str
    views: str
    published: str
    duration: str
    thumbnail: str

@dataclass(frozen=True)
class ChannelInfo:
    name: str = ""
    subscribers: str = ""
    url: str = ""

@dataclass(frozen=True)
class VideoStats:
    views: str = ""
    likes: str = ""
    date: str = ""

@dataclass(frozen=True)
class VideoDetail:
    """Richer metadata fetched for one chosen search result."""
    video_id: str
    title: str
    channel: ChannelInfo = field(default_factory=ChannelInfo)
    stats: VideoStats = field(default_factory=VideoStats)
    tags: Tuple[str, ...] = ()
    description: str = ""

    @property
    def thumbnail_url(self) -> str:
        return THUMBNAIL_URL_TEMPLATE.format(video_id=self.video_id)

@dataclass(frozen=True)
class ContentPackage:
    """The four generated sections plus the raw response they were parsed from."""
    seo_title: str
    description: str
    keywords: str
    veo_script: str
    raw: str

    SECTIONS = ("title", "description", "keywords", "script")

    def section(self, name: str) -> str:
        """Returns the text of a section by its short name."""
        return {
            "title": self.seo_title,
            "description": self.description,
            "keywords": self.keywords,
            "script": self.veo_script,
        }[name]

# --- Session state: exactly one of these is current at a time ---

@dataclass(frozen=True)
class SearchState:
    query: str = ""
    loading: bool = False
    error: Optional[str] = None

@dataclass(frozen=True)
class ResultsState:
    query: str
    results: Tuple[VideoSummary, ...] = ()
    analyzing_id: Optional[str] = None
    error: Optional[str] = None

@dataclass(frozen=True)
class AnalysisState:
    query: str
    results: Tuple[VideoSummary, ...]
    detail: VideoDetail
    package: ContentPackage

SessionState = Union[SearchState, ResultsState, AnalysisState]
